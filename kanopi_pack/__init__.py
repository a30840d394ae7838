"""
Kanopi Pack - bundler asset loading for Python web applications

Usage:
    from kanopi_pack import AssetLoader, LoaderConfiguration
    loader = AssetLoader("https://example.com", "https://localhost:4400", LoaderConfiguration())
"""

from .core.assets import AssetLoader, extract_host, is_production_environment
from .core.exceptions import (
    ConfigurationError,
    InstanceLookupError,
    KanopiPackError,
    ManifestFormatError,
    ManifestLoadError,
)
from .services.hooks import EDITOR_PHASE, FRONTEND_PHASE, HookScheduler
from .core.templates import AssetTagCollector, collect_phase_assets, install_asset_globals
from .schemas.configuration import LoaderConfiguration
from .services.registry import AssetRegistry, InstanceRegistry, instances, read_project_version
from .version import __version__

__all__ = [
    "AssetLoader",
    "AssetRegistry",
    "AssetTagCollector",
    "ConfigurationError",
    "EDITOR_PHASE",
    "FRONTEND_PHASE",
    "HookScheduler",
    "InstanceLookupError",
    "InstanceRegistry",
    "KanopiPackError",
    "LoaderConfiguration",
    "ManifestFormatError",
    "ManifestLoadError",
    "collect_phase_assets",
    "extract_host",
    "install_asset_globals",
    "instances",
    "is_production_environment",
    "read_project_version",
    "__version__",
]
