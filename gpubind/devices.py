import glob
import logging

from gpubind.providers import Vendor

LOG = logging.getLogger(__name__)


def devices(vendor: Vendor, with_gpu: bool = False) -> list[str]:
    """List the device nodes of a vendor present on the host.

    Without with_gpu only the control devices (e.g. /dev/nvidiactl) are
    returned, the numbered GPU nodes are left out."""
    pattern = vendor.device_glob if with_gpu else vendor.control_device_glob
    found = sorted(glob.glob(pattern))
    LOG.debug("Found %d %s devices matching %s", len(found), vendor.name, pattern)
    return found
