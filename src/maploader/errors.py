"""Exception hierarchy for maploader."""


class MappingLoaderError(Exception):
    """Base class for all maploader errors."""


class InvalidChain(MappingLoaderError):
    """A resolver returned a malformed chain of load actions."""


class ChainIdentifierMismatch(MappingLoaderError):
    """A chain does not cover the identifier it was resolved for."""


class CacheWriteFailed(MappingLoaderError):
    """A cache directory or file could not be written."""


class PurgeFailed(MappingLoaderError):
    """An existing cache file could not be deleted."""


class DuplicateFragment(MappingLoaderError):
    """A virtual fragment name is already registered."""


class FragmentNotFound(MappingLoaderError):
    """A virtual fragment was opened that is not (or no longer) registered."""


class InvalidReference(MappingLoaderError):
    """A virtual source reference URL could not be parsed."""


class CacheNotConfigured(MappingLoaderError):
    """Caching was requested but no cache location is configured."""


class CacheReadFailed(MappingLoaderError):
    """A cache entry exists but could not be read."""
