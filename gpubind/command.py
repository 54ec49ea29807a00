"""Helpers to find and run external commands with an explicit search path.

The search path is never written to ``os.environ``; it is handed to the
lookup and, when set, to the child process as its ``PATH``.
"""
import os
from typing import Any, Dict, Optional

import sh  # type: ignore

# Everything sh may raise when a command cannot be started or fails
ERRORS = (
    sh.ErrorReturnCode,
    sh.TimeoutException,
    sh.ForkException,
    OSError,
    UnicodeDecodeError,
)


def split_search_path(search_path: Optional[str]) -> Optional[list[str]]:
    """Split a PATH style string into directories.

    None means "use the PATH of the current process"."""
    if not search_path:
        return None
    return [directory for directory in search_path.split(os.pathsep) if directory]


def which(name: str, search_path: Optional[str] = None) -> Optional[str]:
    """Absolute path of an executable, or None if it cannot be found.

    Names containing a slash are checked directly, like a shell would."""
    try:
        return str(command(name, search_path))
    except sh.CommandNotFound:
        return None


def command(name: str, search_path: Optional[str] = None) -> sh.Command:
    """Locate an executable, raising sh.CommandNotFound if it is missing."""
    return sh.Command(name, search_paths=split_search_path(search_path))


def run(
    cmd: sh.Command,
    *args: str,
    search_path: Optional[str] = None,
    timeout: Optional[float] = None,
) -> str:
    """Run a command and return its standard output.

    Bytes that are not valid UTF-8 are kept as surrogate escapes rather
    than failing the whole command.

    Args:
        cmd: the command to run
        args: arguments for the command
        search_path: PATH handed to the child process, if set
        timeout: seconds to wait before the command is killed
    """
    kwargs: Dict[str, Any] = {"_decode_errors": "surrogateescape"}
    if search_path:
        kwargs["_env"] = {**os.environ, "PATH": search_path}
    if timeout is not None:
        kwargs["_timeout"] = timeout
    return str(cmd(*args, **kwargs))
