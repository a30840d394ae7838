from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class EnqueuedAsset(BaseModel):
    """A script or stylesheet handed to a host sink."""
    kind: Literal["script", "style"]
    handle: str
    url: str
    dependencies: List[str] = Field(default_factory=list)
    version: Optional[str] = None
    in_footer: bool = True
