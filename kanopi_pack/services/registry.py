"""
Named asset registries for a host application.

A process may run several independently configured loaders, e.g. one for the
site theme and one per plugin. Each is kept under a name in `instances`:

    from kanopi_pack.services.registry import instances

    registry = instances.register(LoaderConfiguration(manifest_path="/assets/dist/manifest.json"))

    def register_assets(registry, sink):
        loader = registry.asset_loader
        loader.register_vendor_script("vendor")
        loader.register_application("app")
        registry.enqueue_assets(sink)

    registry.register_frontend_scripts(register_assets)
"""
import logging
from importlib import metadata
from typing import Callable, Dict, List, Optional

from ..core.assets import AssetLoader
from ..core.config import settings
from ..core.exceptions import ConfigurationError, InstanceLookupError
from .hooks import EDITOR_PHASE, FRONTEND_PHASE, HookScheduler, default_scheduler
from ..core.sink import AssetSink
from ..schemas.configuration import LoaderConfiguration

logger = logging.getLogger(__name__)

DEFAULT_INSTANCE_NAME = "theme"

RegistrationCallback = Callable[["AssetRegistry", AssetSink], None]


def read_project_version(distribution: str) -> str:
    """Installed version of a distribution, or "DEV" when it is not installed."""
    try:
        version = metadata.version(distribution)
    except metadata.PackageNotFoundError:
        return "DEV"
    return version or "DEV"


class AssetRegistry:
    """Binds one asset loader to the host's hook phases."""

    def __init__(
        self,
        configuration: LoaderConfiguration,
        production_url: Optional[str] = None,
        development_url: Optional[str] = None,
        scheduler: Optional[HookScheduler] = None,
        production_file_path: Optional[str] = None,
    ):
        self.production_url = production_url or settings.KANOPI_PRODUCTION_ASSET_URL
        self.development_url = development_url or settings.KANOPI_DEVELOPMENT_ASSET_URL
        self.scheduler = scheduler or default_scheduler
        self.priority_frontend = settings.KANOPI_DEFAULT_PRIORITY
        self.priority_block_editor = settings.KANOPI_DEFAULT_PRIORITY

        # Production manifests are read from disk, not through the public URL
        file_path = production_file_path or settings.KANOPI_PRODUCTION_FILE_PATH
        if not configuration.production_file_path and file_path:
            configuration = configuration.with_overrides(production_file_path=file_path)
        self.configuration = configuration

        self._loader = self._register_loader()

    def _register_loader(self) -> Optional[AssetLoader]:
        try:
            return AssetLoader(self.production_url, self.development_url, self.configuration)
        except ConfigurationError as e:
            logger.error(f"Kanopi Pack: asset loader not created, no assets will load: {e}")
            return None

    @property
    def asset_loader(self) -> Optional[AssetLoader]:
        return self._loader

    def static_asset_url(self, file_path: str) -> Optional[str]:
        if self._loader is None:
            return None
        return self._loader.static_assets_url(file_path)

    def enqueue_assets(self, sink: AssetSink) -> List[str]:
        """
        Run the loader's enqueue pass into the sink.

        Development styles arrive as footer scripts; with
        `development_styles_in_head` set they are moved to the head when the
        sink supports it.
        """
        if self._loader is None:
            return []

        handles = self._loader.enqueue_all(sink)
        if (
            self._loader.in_development_mode()
            and self.configuration.development_styles_in_head
            and hasattr(sink, "move_scripts_to_head")
        ):
            sink.move_scripts_to_head(self._loader.style_handles())
        return handles

    def _schedule(self, phase: str, callback: RegistrationCallback, priority: int) -> None:
        def run(sink: AssetSink) -> None:
            callback(self, sink)

        self.scheduler.add_action(phase, run, priority)

    def register_frontend_scripts(self, callback: RegistrationCallback) -> None:
        """Run `callback(registry, sink)` when the host renders a front-end page."""
        self._schedule(FRONTEND_PHASE, callback, self.priority_frontend)

    def register_block_editor_scripts(self, callback: RegistrationCallback) -> None:
        """Run `callback(registry, sink)` when the host loads editor assets."""
        self._schedule(EDITOR_PHASE, callback, self.priority_block_editor)

    def update_block_editor_priority(self, priority: int) -> "AssetRegistry":
        self.priority_block_editor = priority if priority > 0 else 10
        return self

    def update_frontend_priority(self, priority: int) -> "AssetRegistry":
        self.priority_frontend = priority if priority > 0 else 10
        return self


class InstanceRegistry:
    """
    Name -> AssetRegistry store where the first registration under a name wins.

    The module-level `instances` object is created once at import and lives
    for the whole process.
    """

    def __init__(self):
        self._instances: Dict[str, AssetRegistry] = {}

    def register(
        self,
        configuration: LoaderConfiguration,
        name: str = DEFAULT_INSTANCE_NAME,
        production_url: Optional[str] = None,
        development_url: Optional[str] = None,
        scheduler: Optional[HookScheduler] = None,
        production_file_path: Optional[str] = None,
    ) -> AssetRegistry:
        if name not in self._instances:
            self._instances[name] = AssetRegistry(
                configuration,
                production_url,
                development_url,
                scheduler,
                production_file_path,
            )
        return self._instances[name]

    def require(self, name: str = DEFAULT_INSTANCE_NAME) -> AssetRegistry:
        try:
            return self._instances[name]
        except KeyError:
            raise InstanceLookupError(
                f"Kanopi Pack: Cannot find registry {name}, "
                "please ensure it is registered first using register(...)"
            ) from None

    def instance(self, name: str = DEFAULT_INSTANCE_NAME) -> Optional[AssetRegistry]:
        try:
            return self.require(name)
        except InstanceLookupError as e:
            logger.error(str(e))
            return None

    def names(self) -> List[str]:
        return list(self._instances)

    def __contains__(self, name: str) -> bool:
        return name in self._instances

    def clear(self) -> None:
        self._instances.clear()


instances = InstanceRegistry()
