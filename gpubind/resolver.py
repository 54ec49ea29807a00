import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Sequence

from gpubind import command, elf, ldcache
from gpubind.config import ResolutionConfig
from gpubind.errors import CandidateOpenError, ProviderError
from gpubind.providers import CandidateProvider, Vendor, is_library

LOG = logging.getLogger(__name__)


@dataclass
class Resolution:
    """Host paths to bind into a container, in the order they were found."""

    libraries: list[str] = field(default_factory=list)
    binaries: list[str] = field(default_factory=list)


def candidates(providers: Sequence[CandidateProvider]) -> list[str]:
    """Return the names of the first provider that succeeds.

    A failing provider is only logged and the next one is tried; the error
    of the last provider is raised if none of them succeed."""
    error: Optional[ProviderError] = None
    for provider in providers:
        try:
            names = provider.candidates()
        except ProviderError as e:
            LOG.info("%s returned: %s", provider, e)
            error = e
            continue
        LOG.debug("Using %d candidates from %s", len(names), provider)
        return names
    if error is None:
        raise ValueError("No candidate providers were given")
    raise error


def resolve(
    candidates: Sequence[str],
    ld_cache: Dict[str, str],
    machine: Any,
    search_path: Optional[str] = None,
    machine_of: Callable[[str], Any] = elf.machine_type,
) -> Resolution:
    """Turn candidate names into library and binary paths.

    Library candidates are matched as a prefix of the names in the linker
    cache, so libcuda.so picks up libcuda.so.1. A cache entry is only
    accepted when its ELF machine equals machine. Other candidates are
    looked up as executables on search_path.

    Args:
        candidates: names produced by a candidate provider
        ld_cache: mapping of library path to library name
        machine: the machine type libraries must be built for
        search_path: PATH used to find binaries, None uses the process PATH
        machine_of: reads the machine type of a library
    """
    resolution = Resolution()
    # libraries are tracked by cache name, binaries by path
    seen_libraries: set[str] = set()
    seen_binaries: set[str] = set()

    for candidate in candidates:
        if is_library(candidate):
            for lib_path, lib_name in ld_cache.items():
                if not lib_name.startswith(candidate):
                    continue
                if lib_name in seen_libraries:
                    continue
                try:
                    lib_machine = machine_of(lib_path)
                except CandidateOpenError as e:
                    LOG.debug("Ignoring library %s: %s", lib_name, e)
                    continue
                # a library for another machine does not use up its name,
                # a later entry of the same name may still match
                if lib_machine != machine:
                    continue
                seen_libraries.add(lib_name)
                resolution.libraries.append(lib_path)
        else:
            binary = command.which(candidate, search_path)
            if binary is None:
                continue
            if binary not in seen_binaries:
                seen_binaries.add(binary)
                resolution.binaries.append(binary)

    return resolution


def paths(vendor: Vendor, config: ResolutionConfig) -> Resolution:
    """Find the libraries and binaries of a GPU vendor to bind into a container.

    The helper tool of the vendor is asked first, the manifest file in
    config.conf_dir is the fallback. config.search_path only applies to
    this call; the environment of the process is left untouched.

    Raises:
        ManifestOpenError: neither the helper tool nor the manifest worked
        CacheListError: the linker cache could not be listed
        ReferenceArchError: the machine type of config.self_exe is unknown
    """
    names = candidates(vendor.providers(config))
    cache = ldcache.ld_cache(config.ldconfig, config.search_path, config.timeout)
    machine = elf.self_machine_type(config.self_exe)
    resolution = resolve(names, cache, machine, config.search_path)
    LOG.info(
        "Resolved %d libraries and %d binaries for %s",
        len(resolution.libraries),
        len(resolution.binaries),
        vendor.name,
    )
    return resolution
