import logging
import re
from collections import OrderedDict
from typing import Dict, Optional

import sh  # type: ignore

from gpubind import command
from gpubind.errors import CacheListError

LOG = logging.getLogger(__name__)

# sample ldconfig -p output:
#   libnvidia-ml.so.1 (libc6,x86-64) => /usr/lib64/nvidia/libnvidia-ml.so.1
LD_CACHE_LINE = re.compile(r"^(.*)\s*\(.*\)\s*=>\s*(.*)$")


def parse(output: str) -> Dict[str, str]:
    """Parse the output of `ldconfig -p` into a mapping of library path to name.

    Lines that do not look like a cache entry, such as the
    "N libs found in cache" header, are skipped."""
    result: Dict[str, str] = OrderedDict()
    for line in output.splitlines():
        m = LD_CACHE_LINE.match(line)
        if not m:
            continue
        name, path = m.group(1).strip(), m.group(2).strip()
        result[path] = name
    return result


def ld_cache(
    ldconfig: str = "ldconfig",
    search_path: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Dict[str, str]:
    """List the dynamic linker cache of the host.

    Args:
        ldconfig: name or path of the ldconfig executable
        search_path: PATH used to find ldconfig, defaults to the process PATH
        timeout: seconds to wait for ldconfig, None waits forever

    Raises:
        CacheListError: ldconfig is missing or did not run successfully
    """
    try:
        ldconfig_cmd = command.command(ldconfig, search_path)
    except sh.CommandNotFound as e:
        raise CacheListError(f"could not find {ldconfig}") from e
    try:
        output = command.run(
            ldconfig_cmd, "-p", search_path=search_path, timeout=timeout
        )
    except command.ERRORS as e:
        raise CacheListError(f"could not execute {ldconfig} -p: {e}") from e
    cache = parse(output)
    LOG.debug("Found %d entries in the linker cache", len(cache))
    return cache
