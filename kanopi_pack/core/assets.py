"""
Asset resolution for bundler delivered scripts and stylesheets.

 - Switches between production built assets and a development server origin
 - Never uses development mode on a production domain
 - Only bundler generated assets belong here, enqueue anything else directly

Usage:
    loader = AssetLoader("https://example.com", os.getenv("DEV_URL"), configuration)
    loader.register_vendor_script("vendor")
    loader.register_application("app", ["jquery"])
    loader.enqueue_all(sink)

Registering the same entry point again replaces its dependencies.
"""
import logging
import re
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

import logfire

from ..schemas.configuration import LoaderConfiguration
from .exceptions import ConfigurationError, ManifestFormatError, ManifestLoadError
from .manifest import load_manifest
from .sink import AssetSink

logger = logging.getLogger(__name__)

HOST_PATTERN = re.compile(r"^(?:https?://)?([^/]+)", re.IGNORECASE)


def extract_host(url: str) -> Optional[str]:
    """Return the lower-cased host (and port, if any) of a URL, scheme optional."""
    match = HOST_PATTERN.match(url.strip())
    return match.group(1).lower() if match else None


def is_production_environment(
    base_url: str,
    development_url: Optional[str],
    production_domains: FrozenSet[str],
) -> bool:
    """Production when there is no development URL or the base URL is on a production domain."""
    if not development_url or not development_url.strip():
        return True
    return extract_host(base_url) in production_domains


class AssetLoader:
    """Resolves entry point URLs and emits them in a stable dependency order."""

    def __init__(
        self,
        base_url: str,
        development_url: Optional[str] = None,
        configuration: Optional[LoaderConfiguration] = None,
    ):
        if not base_url or not base_url.strip():
            raise ConfigurationError("Base URL required for asset registration")

        self.base_url = base_url.strip()
        self.development_url = (development_url or "").strip() or None
        self.configuration = configuration or LoaderConfiguration()
        self.use_production = is_production_environment(
            self.base_url, self.development_url, self.configuration.production_domains
        )

        # Entry name -> declared dependency handles, in registration order
        self.vendor_scripts: Dict[str, List[str]] = {}
        self.vendor_styles: Dict[str, List[str]] = {}
        self.runtime_scripts: Dict[str, List[str]] = {}
        self.scripts: Dict[str, List[str]] = {}
        self.styles: Dict[str, List[str]] = {}

        self.asset_manifest = self._load_asset_manifest()

    @property
    def active_base_url(self) -> str:
        return self.base_url if self.use_production else self.development_url

    def in_development_mode(self) -> bool:
        return not self.use_production

    def manifest_source(self) -> Optional[str]:
        """
        Location of the manifest, or None when no manifest is configured.

        Production reads from the file path root when one is configured, the
        URL root only serves the assets.
        """
        manifest_path = self.configuration.manifest_path
        if not manifest_path:
            return None

        file_root = self.configuration.production_file_path
        if self.use_production and file_root:
            return file_root + manifest_path
        return self.active_base_url + manifest_path

    def _load_asset_manifest(self) -> Optional[Dict[str, Any]]:
        source = self.manifest_source()
        if source is None:
            return None

        try:
            return load_manifest(source)
        except ManifestLoadError as e:
            logger.warning(f"Asset manifest unavailable, using conventional paths: {e}")
            return None

    def prefixed_handle(self, entry: str) -> str:
        return self.configuration.handle_prefix + entry

    def select_variant(self, variants: List[Any]) -> Any:
        """Production uses the last chunk variant, development the first."""
        if not variants:
            raise ManifestFormatError("Manifest entry lists no file variants")
        return variants[-1] if self.use_production else variants[0]

    def manifest_entry_path(self, entry: str, file_type: str) -> Optional[str]:
        """
        Find the manifest path for an entry and file type.

        Returns:
            The manifest path, or None when the manifest, entry or file type is missing

        Raises:
            ManifestFormatError: If the file type maps to an empty list
        """
        if not self.asset_manifest:
            return None

        manifest_entry = self.asset_manifest.get(entry)
        if not isinstance(manifest_entry, dict):
            return None

        entry_path = manifest_entry.get(file_type)
        if isinstance(entry_path, list):
            entry_path = self.select_variant(entry_path)

        return entry_path if isinstance(entry_path, str) and entry_path else None

    def resolve_entry_url(
        self, base: str, path: str, entry: str, file_type: str
    ) -> str:
        """
        Read an entry's URL from the manifest, falling back to the conventional path.

        Args:
            base: Active base URL
            path: Conventional path for the file type, e.g. /assets/dist/js/
            entry: Entry point name
            file_type: Either "js" or "css"

        Returns:
            The final asset URL
        """
        conventional_url = f"{base}{path}{entry}.{file_type}"

        try:
            entry_path = self.manifest_entry_path(entry, file_type)
        except ManifestFormatError as e:
            logger.debug(f"Manifest entry {entry}.{file_type} ignored: {e}")
            return conventional_url

        if entry_path is None:
            return conventional_url
        if entry_path.startswith(base):
            return entry_path

        # Manifest values may already be namespaced by file type
        suffix = f"{file_type}/"
        entry_slug = path[: -len(suffix)] if path.endswith(suffix) else path
        if entry_slug.endswith("/") and entry_path.startswith("/"):
            entry_slug = entry_slug[:-1]
        return f"{base}{entry_slug}{entry_path}"

    def style_handles(self) -> List[str]:
        """Handles of vendor and application style entries, in registration order."""
        return [self.prefixed_handle(entry) for entry in [*self.vendor_styles, *self.styles]]

    def static_assets_url(self, file_path: str) -> str:
        """URL of a static (non-bundled) asset, never read from the manifest."""
        return self.active_base_url + self.configuration.static_path + file_path

    @staticmethod
    def register_dependencies(
        target: Dict[str, List[str]], entry: str, dependencies: Optional[Iterable[str]]
    ) -> None:
        entry = entry.strip().lower()
        if entry:
            target[entry] = list(dependencies or [])

    def register_script(self, entry: str, dependencies: Optional[Iterable[str]] = None) -> None:
        self.register_dependencies(self.scripts, entry, dependencies)

    def register_style(self, entry: str, dependencies: Optional[Iterable[str]] = None) -> None:
        self.register_dependencies(self.styles, entry, dependencies)

    def register_runtime_script(self, entry: str, dependencies: Optional[Iterable[str]] = None) -> None:
        self.register_dependencies(self.runtime_scripts, entry, dependencies)

    def register_vendor_script(self, entry: str, dependencies: Optional[Iterable[str]] = None) -> None:
        self.register_dependencies(self.vendor_scripts, entry, dependencies)

    def register_vendor_style(self, entry: str, dependencies: Optional[Iterable[str]] = None) -> None:
        self.register_dependencies(self.vendor_styles, entry, dependencies)

    def register_application(self, entry: str, dependencies: Optional[Iterable[str]] = None) -> None:
        """Register an application entry: script and style in production, script only in development."""
        dependencies = list(dependencies or [])
        self.register_script(entry, dependencies)
        if self.use_production:
            self.register_style(entry, dependencies)

    def register_vendor_application(self, entry: str, dependencies: Optional[Iterable[str]] = None) -> None:
        """Register a vendor entry: script and style in production, script only in development."""
        dependencies = list(dependencies or [])
        self.register_vendor_script(entry, dependencies)
        if self.use_production:
            self.register_vendor_style(entry, dependencies)

    def _chain(self, dependencies: List[str], last_chain: str) -> List[str]:
        return [*dependencies, last_chain] if last_chain else list(dependencies)

    def _enqueue_chained_script(
        self,
        sink: AssetSink,
        base: str,
        entry: str,
        dependencies: List[str],
        last_chain: str,
    ) -> str:
        handle = self.prefixed_handle(entry)
        sink.enqueue_script(
            handle,
            self.resolve_entry_url(base, self.configuration.script_path, entry, "js"),
            self._chain(dependencies, last_chain),
            self.configuration.version,
            True,
        )
        return handle

    def _enqueue_chained_style(
        self,
        sink: AssetSink,
        base: str,
        entry: str,
        dependencies: List[str],
        last_chain: str,
    ) -> str:
        # Development servers deliver styles through scripts
        if not self.use_production:
            return self._enqueue_chained_script(sink, base, entry, dependencies, last_chain)

        handle = self.prefixed_handle(entry)
        sink.register_style(
            handle,
            self.resolve_entry_url(base, self.configuration.style_path, entry, "css"),
            self._chain(dependencies, last_chain),
            self.configuration.version,
        )
        sink.enqueue_style(handle)
        return handle

    def enqueue_all(self, sink: AssetSink) -> List[str]:
        """
        Send every registered asset to the sink in load order.

        Vendor and runtime scripts chain sequentially; application scripts and
        styles each depend only on the end of their chain.

        Returns:
            Handles in the order they were emitted
        """
        base = self.active_base_url
        emitted: List[str] = []

        with logfire.span("kanopi_pack.enqueue_assets", production=self.use_production):
            last_script = ""
            for entry, dependencies in self.vendor_scripts.items():
                last_script = self._enqueue_chained_script(sink, base, entry, dependencies, last_script)
                emitted.append(last_script)

            for entry, dependencies in self.runtime_scripts.items():
                last_script = self._enqueue_chained_script(sink, base, entry, dependencies, last_script)
                emitted.append(last_script)

            last_style = last_script if self.in_development_mode() else ""
            for entry, dependencies in self.vendor_styles.items():
                last_style = self._enqueue_chained_style(sink, base, entry, dependencies, last_style)
                emitted.append(last_style)

            for entry, dependencies in self.scripts.items():
                emitted.append(
                    self._enqueue_chained_script(sink, base, entry, dependencies, last_script)
                )

            for entry, dependencies in self.styles.items():
                emitted.append(
                    self._enqueue_chained_style(sink, base, entry, dependencies, last_style)
                )

        logger.debug(f"Enqueued {len(emitted)} assets from {base}")
        return emitted
