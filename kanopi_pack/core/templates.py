"""
Jinja2 rendering of enqueued assets.
"""
import logging
from typing import Any, Dict, List, Optional, Set

from fastapi.templating import Jinja2Templates
from jinja2 import Environment
from markupsafe import Markup

from ..schemas.enqueue import EnqueuedAsset
from ..services.hooks import FRONTEND_PHASE, HookScheduler, default_scheduler

logger = logging.getLogger(__name__)

_environment = Environment(autoescape=True)

SCRIPT_TAG = _environment.from_string(
    '<script id="{{ handle }}-js" src="{{ url }}"></script>'
)
STYLE_TAG = _environment.from_string(
    '<link rel="stylesheet" id="{{ handle }}-css" href="{{ url }}" media="all" />'
)


def versioned_url(url: str, version: Optional[str]) -> str:
    if not version:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}ver={version}"


class AssetTagCollector:
    """
    Collects enqueued scripts and styles for one page render.

    Each handle is only enqueued once. Handles registered as external
    (CDN libraries and the like) are pulled in when an enqueued asset
    depends on them.
    """

    def __init__(self):
        self.scripts: Dict[str, EnqueuedAsset] = {}
        self.styles: Dict[str, EnqueuedAsset] = {}
        self._registered_styles: Dict[str, EnqueuedAsset] = {}
        self._external_scripts: Dict[str, EnqueuedAsset] = {}

    def enqueue_script(
        self,
        handle: str,
        url: str,
        dependencies: List[str],
        version: Optional[str] = None,
        in_footer: bool = True,
    ) -> None:
        if handle in self.scripts:
            return
        self.scripts[handle] = EnqueuedAsset(
            kind="script",
            handle=handle,
            url=url,
            dependencies=list(dependencies),
            version=version,
            in_footer=in_footer,
        )

    def register_style(
        self,
        handle: str,
        url: str,
        dependencies: List[str],
        version: Optional[str] = None,
    ) -> None:
        if handle in self._registered_styles:
            return
        self._registered_styles[handle] = EnqueuedAsset(
            kind="style",
            handle=handle,
            url=url,
            dependencies=list(dependencies),
            version=version,
        )

    def enqueue_style(self, handle: str) -> None:
        asset = self._registered_styles.get(handle)
        if asset is None:
            logger.warning(f"Style {handle} must be registered before it is enqueued")
            return
        self.styles.setdefault(handle, asset)

    def move_scripts_to_head(self, handles: List[str]) -> None:
        """Render already enqueued scripts in the head instead of the footer."""
        for handle in handles:
            asset = self.scripts.get(handle)
            if asset is not None:
                asset.in_footer = False

    def register_external_script(
        self,
        handle: str,
        url: str,
        dependencies: Optional[List[str]] = None,
        version: Optional[str] = None,
        in_footer: bool = True,
    ) -> None:
        self._external_scripts[handle] = EnqueuedAsset(
            kind="script",
            handle=handle,
            url=url,
            dependencies=list(dependencies or []),
            version=version,
            in_footer=in_footer,
        )

    def register_external_style(
        self,
        handle: str,
        url: str,
        dependencies: Optional[List[str]] = None,
        version: Optional[str] = None,
    ) -> None:
        self.register_style(handle, url, dependencies or [], version)

    def _dependency_order(
        self, queue: Dict[str, EnqueuedAsset], known: Dict[str, EnqueuedAsset]
    ) -> List[EnqueuedAsset]:
        """Order assets so each follows its dependencies, keeping enqueue order otherwise."""
        ordered: List[EnqueuedAsset] = []
        visited: Set[str] = set()

        def visit(handle: str) -> None:
            if handle in visited:
                return
            asset = queue.get(handle) or known.get(handle)
            if asset is None:
                logger.debug(f"Skipping unknown dependency {handle}")
                return
            visited.add(handle)
            for dependency in asset.dependencies:
                visit(dependency)
            ordered.append(asset)

        for handle in queue:
            visit(handle)
        return ordered

    def ordered_scripts(self) -> List[EnqueuedAsset]:
        return self._dependency_order(self.scripts, self._external_scripts)

    def ordered_styles(self) -> List[EnqueuedAsset]:
        return self._dependency_order(self.styles, self._registered_styles)

    def _head_script_handles(self, ordered: List[EnqueuedAsset]) -> Set[str]:
        # Dependencies of a head script move to the head with it
        by_handle = {asset.handle: asset for asset in ordered}
        head: Set[str] = set()
        pending = [asset.handle for asset in ordered if not asset.in_footer]
        while pending:
            handle = pending.pop()
            if handle in head or handle not in by_handle:
                continue
            head.add(handle)
            pending.extend(by_handle[handle].dependencies)
        return head

    def render_head(self) -> Markup:
        """Stylesheet links followed by head scripts."""
        scripts = self.ordered_scripts()
        head = self._head_script_handles(scripts)
        tags = [
            STYLE_TAG.render(handle=asset.handle, url=versioned_url(asset.url, asset.version))
            for asset in self.ordered_styles()
        ]
        tags.extend(
            SCRIPT_TAG.render(handle=asset.handle, url=versioned_url(asset.url, asset.version))
            for asset in scripts
            if asset.handle in head
        )
        return Markup("\n".join(tags))

    def render_footer(self) -> Markup:
        scripts = self.ordered_scripts()
        head = self._head_script_handles(scripts)
        return Markup(
            "\n".join(
                SCRIPT_TAG.render(handle=asset.handle, url=versioned_url(asset.url, asset.version))
                for asset in scripts
                if asset.handle not in head
            )
        )


def collect_phase_assets(
    phase: str = FRONTEND_PHASE, scheduler: Optional[HookScheduler] = None
) -> AssetTagCollector:
    """Fire a hook phase into a fresh collector and return it."""
    collector = AssetTagCollector()
    (scheduler or default_scheduler).do_action(phase, collector)
    return collector


def install_asset_globals(templates: Any, registry: Any = None) -> None:
    """
    Add asset helpers to a Jinja2Templates instance or a Jinja2 Environment.

    Template usage:
        {{ asset_head(assets) }}
        {{ asset_footer(assets) }}
        <img src="{{ static_asset_url('logo.svg') }}">
    """
    if registry is None:
        from ..services.registry import instances as registry

    environment = getattr(templates, "env", templates)

    def static_asset_url(file_path: str, instance: str = "theme") -> str:
        asset_registry = registry.instance(instance)
        if asset_registry is None:
            return ""
        return asset_registry.static_asset_url(file_path) or ""

    environment.globals["static_asset_url"] = static_asset_url
    environment.globals["asset_head"] = lambda collector: collector.render_head()
    environment.globals["asset_footer"] = lambda collector: collector.render_footer()


def create_templates_instance(directory: str) -> Jinja2Templates:
    """Create a Jinja2Templates instance with the asset helpers installed."""
    templates = Jinja2Templates(directory=directory, autoescape=True)
    install_asset_globals(templates)
    return templates
