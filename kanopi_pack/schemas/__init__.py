from .configuration import LoaderConfiguration
from .enqueue import EnqueuedAsset

__all__ = ["LoaderConfiguration", "EnqueuedAsset"]
