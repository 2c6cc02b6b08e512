"""buildcache — tar-based build cache stored in blob storage."""

from buildcache.version import __version__

__all__ = ["__version__"]
