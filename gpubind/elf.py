import logging

# pyright: reportMissingModuleSource=false
import lief.ELF

from gpubind import lief_ext
from gpubind.errors import CandidateOpenError, ReferenceArchError

LOG = logging.getLogger(__name__)

# The image of the running interpreter, used as the reference machine.
SELF_EXE = "/proc/self/exe"


def machine_type(path: str) -> lief.ELF.ARCH:
    """Read the machine type from the ELF header of a file.

    Args:
        path: the ELF file to inspect

    Raises:
        CandidateOpenError: the file cannot be opened or is not ELF
    """
    return lief_ext.Binary(path).header.machine_type


def self_machine_type(path: str = SELF_EXE) -> lief.ELF.ARCH:
    """Machine type of the running process.

    Libraries are only compatible with us if they were built for this machine.
    """
    try:
        machine = machine_type(path)
    except CandidateOpenError as e:
        raise ReferenceArchError(f"could not read machine type of {path}: {e}") from e
    LOG.debug("Reference machine type is %s (%s)", machine, path)
    return machine
