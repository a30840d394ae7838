"""
Error kinds raised while building and using asset loaders.
"""


class KanopiPackError(Exception):
    """Base class for all asset loader errors."""


class ConfigurationError(KanopiPackError):
    """The loader cannot be constructed, e.g. the production base URL is blank."""


class ManifestLoadError(KanopiPackError):
    """The manifest could not be fetched, read or parsed.

    Always recovered inside the loader by treating the manifest as absent.
    """


class ManifestFormatError(KanopiPackError):
    """A manifest entry holds an empty list where a variant must be selected."""


class InstanceLookupError(KanopiPackError, LookupError):
    """A named registry instance was requested before it was registered."""
