"""
Host enqueue interface: where the loader sends each resolved asset.
"""
from typing import List, Optional, Protocol


class AssetSink(Protocol):
    def enqueue_script(
        self,
        handle: str,
        url: str,
        dependencies: List[str],
        version: Optional[str],
        in_footer: bool,
    ) -> None:
        ...

    def register_style(
        self,
        handle: str,
        url: str,
        dependencies: List[str],
        version: Optional[str],
    ) -> None:
        ...

    def enqueue_style(self, handle: str) -> None:
        ...
