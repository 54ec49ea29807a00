from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from gpubind import elf

DEFAULT_CONF_DIR = "/etc/gpubind"


@dataclass
class ResolutionConfig:
    """Inputs for a single resolution of GPU bind paths.

    Attributes:
        conf_dir: directory holding the fallback manifest files
        search_path: PATH used for every executable lookup of the call,
            None uses the PATH of the current process
        manifest: manifest file name, None uses the vendor default
        ldconfig: name or path of the ldconfig executable
        self_exe: executable whose machine type libraries must match
        timeout: seconds to wait for each external command, None waits forever
    """

    conf_dir: str = DEFAULT_CONF_DIR
    search_path: Optional[str] = None
    manifest: Optional[str] = None
    ldconfig: str = "ldconfig"
    self_exe: str = elf.SELF_EXE
    timeout: Optional[float] = None

    @classmethod
    def from_env(
        cls: type[ResolutionConfig], environ: Mapping[str, str] = os.environ
    ) -> ResolutionConfig:
        """Build a configuration from GPUBIND_* environment variables."""
        timeout = environ.get("GPUBIND_TIMEOUT")
        try:
            timeout_seconds = float(timeout) if timeout else None
        except ValueError:
            raise ValueError(f"{timeout} is not a valid GPUBIND_TIMEOUT")
        return cls(
            conf_dir=environ.get("GPUBIND_CONF_DIR", DEFAULT_CONF_DIR),
            search_path=environ.get("GPUBIND_PATH") or None,
            ldconfig=environ.get("GPUBIND_LDCONFIG", "ldconfig"),
            timeout=timeout_seconds,
        )
