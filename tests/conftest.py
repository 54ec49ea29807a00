import os
import sys
from pathlib import Path
from typing import Callable

import pytest

# Path of a real ELF file built for the machine running the tests
NATIVE_ELF = os.path.realpath(sys.executable)

requires_linux = pytest.mark.skipif(
    not sys.platform.startswith("linux"), reason="needs /proc and ELF binaries"
)


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "bin"
    directory.mkdir()
    return directory


@pytest.fixture
def conf_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "etc"
    directory.mkdir()
    return directory


@pytest.fixture
def executable(bin_dir: Path) -> Callable[..., str]:
    """Write a /bin/sh script into bin_dir.

    The scripts may run with PATH set to bin_dir only, so they should
    stick to shell builtins such as printf and exit."""

    def make(name: str, body: str = "exit 0") -> str:
        path = bin_dir / name
        path.write_text(f"#!/bin/sh\n{body}\n")
        path.chmod(0o755)
        return str(path)

    return make


def printf_lines(*lines: str) -> str:
    """Shell snippet printing each line with printf"""
    quoted = " ".join(f"'{line}'" for line in lines)
    return f"printf '%s\\n' {quoted}"
