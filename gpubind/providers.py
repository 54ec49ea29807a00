"""Sources of candidate library and binary names.

Every vendor is described by a `Vendor` value; the providers themselves
know nothing about a particular vendor.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

import sh  # type: ignore

from gpubind import command
from gpubind.config import ResolutionConfig
from gpubind.errors import ManifestOpenError, ToolExecError, ToolNotFound

LOG = logging.getLogger(__name__)

# Anything containing this marker is a shared library, everything else a binary
SHARED_OBJECT = ".so"


def is_library(name: str) -> bool:
    return SHARED_OBJECT in name


class CandidateProvider(Protocol):
    def candidates(self) -> list[str]:
        """Return the candidate names, raising a ProviderError on failure."""
        ...


def parse_tool_output(output: str) -> list[str]:
    """Turn the listing of a vendor helper tool into candidate names.

    Libraries are reduced to their file name and added a second time
    truncated after the ".so" so that any version of them matches, e.g.
    /usr/lib64/libcuda.so.535.54 yields libcuda.so.535.54 and libcuda.so.
    Binaries keep their full path. The result may contain duplicates.
    """
    names: list[str] = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        if is_library(line):
            file_name = os.path.basename(line)
            head, marker, _ = file_name.partition(SHARED_OBJECT)
            names.append(file_name)
            names.append(head + marker)
        else:
            names.append(line)
    return names


def parse_manifest(lines: Iterable[str]) -> list[str]:
    """Keep every line that is neither blank nor a # comment."""
    names: list[str] = []
    for line in lines:
        line = line.strip()
        if line and not line.startswith("#"):
            names.append(line)
    return names


@dataclass
class HelperToolProvider:
    """Ask a vendor helper tool such as nvidia-container-cli for its files."""

    tool: str
    args: tuple[str, ...]
    search_path: Optional[str] = None
    timeout: Optional[float] = None

    def candidates(self) -> list[str]:
        try:
            tool_cmd = command.command(self.tool, self.search_path)
        except sh.CommandNotFound as e:
            raise ToolNotFound(f"could not find {self.tool}") from e
        try:
            output = command.run(
                tool_cmd,
                *self.args,
                search_path=self.search_path,
                timeout=self.timeout,
            )
        except command.ERRORS as e:
            raise ToolExecError(
                f"could not execute {self.tool} {' '.join(self.args)}: {e}"
            ) from e
        return parse_tool_output(output)

    def __str__(self) -> str:
        return self.tool


@dataclass
class ManifestProvider:
    """Read candidate names from a manifest file such as nvliblist.conf."""

    conf_dir: str
    file_name: str

    @property
    def path(self) -> str:
        return os.path.join(self.conf_dir, self.file_name)

    def candidates(self) -> list[str]:
        path = self.path
        try:
            with open(path, encoding="utf-8", errors="surrogateescape") as f:
                return parse_manifest(f)
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestOpenError(f"could not read {path}: {e}") from e

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class Vendor:
    """Everything that differs between GPU vendors.

    Attributes:
        name: short name used on the command line
        tool: helper tool that lists the driver files
        tool_args: arguments asking the tool for binaries and libraries
        manifest: fallback manifest file name inside the config directory
        device_glob: device nodes including the GPUs themselves
        control_device_glob: device nodes without the numbered GPUs
    """

    name: str
    tool: str
    tool_args: tuple[str, ...]
    manifest: str
    device_glob: str
    control_device_glob: str

    def providers(self, config: ResolutionConfig) -> list[CandidateProvider]:
        """Providers in the order they should be tried."""
        return [
            HelperToolProvider(
                self.tool, self.tool_args, config.search_path, config.timeout
            ),
            ManifestProvider(config.conf_dir, config.manifest or self.manifest),
        ]


NVIDIA = Vendor(
    name="nvidia",
    tool="nvidia-container-cli",
    tool_args=("list", "--binaries", "--ipcs", "--libraries"),
    manifest="nvliblist.conf",
    device_glob="/dev/nvidia*",
    control_device_glob="/dev/nvidia[!0-9]*",
)

ROCM = Vendor(
    name="rocm",
    tool="rocm-container-cli",
    tool_args=("list", "--binaries", "--libraries"),
    manifest="rocmliblist.conf",
    device_glob="/dev/dri/card*",
    control_device_glob="/dev/dri/card[!0-9]*",
)

VENDORS = {v.name: v for v in (NVIDIA, ROCM)}


def vendor(name: str) -> Vendor:
    """Look up a vendor by its (case insensitive) name."""
    try:
        return VENDORS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"{name} is not a valid vendor")
