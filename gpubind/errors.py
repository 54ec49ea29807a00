class GpuBindError(Exception):
    """Base class for every error raised while resolving GPU bind paths."""


class ProviderError(GpuBindError):
    """A candidate provider could not produce a candidate list."""


class ToolNotFound(ProviderError):
    """The vendor helper tool is not on the search path."""


class ToolExecError(ProviderError):
    """The vendor helper tool exists but could not be run successfully."""


class ManifestOpenError(ProviderError):
    """The fallback manifest file could not be opened or read."""


class CacheListError(GpuBindError):
    """Listing the dynamic linker cache failed."""


class ReferenceArchError(GpuBindError):
    """The machine type of the running executable could not be read."""


class CandidateOpenError(GpuBindError):
    """A candidate library is missing or is not an ELF object."""
