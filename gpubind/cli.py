import argparse
import json
import logging
import sys
from dataclasses import dataclass
from typing import Optional, TextIO

from gpubind import devices, providers, resolver
from gpubind.config import ResolutionConfig
from gpubind.errors import GpuBindError

LOG = logging.getLogger(__name__)


@dataclass
class ProgramArguments:
    vendor: providers.Vendor = providers.NVIDIA
    conf_dir: Optional[str] = None
    path: Optional[str] = None
    manifest: Optional[str] = None
    ldconfig: Optional[str] = None
    timeout: Optional[float] = None
    devices: bool = False
    with_gpu: bool = False
    json: bool = False
    verbose: bool = False
    quiet: bool = False


def vendor_type(name: str) -> providers.Vendor:
    """Convert a vendor name into its Vendor description"""
    try:
        return providers.vendor(name)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def make_config(program_args: ProgramArguments) -> ResolutionConfig:
    """Environment defaults overridden by whatever was given on the command line"""
    config = ResolutionConfig.from_env()
    if program_args.conf_dir is not None:
        config.conf_dir = program_args.conf_dir
    if program_args.path is not None:
        config.search_path = program_args.path
    if program_args.manifest is not None:
        config.manifest = program_args.manifest
    if program_args.ldconfig is not None:
        config.ldconfig = program_args.ldconfig
    if program_args.timeout is not None:
        config.timeout = program_args.timeout
    return config


def start(args: list[str] = sys.argv[1:], stdout: TextIO = sys.stdout) -> None:
    """
    Start the main CLI

    Args:
        args: the command line arguments to parse
        stdout: where the resolved paths are written to
    """
    parser = argparse.ArgumentParser(
        prog="gpubind",
        description="List the host GPU libraries and binaries to bind into a container",
    )
    parser.add_argument(
        "vendor",
        type=vendor_type,
        metavar="VENDOR",
        help=f"The GPU vendor, one of: {', '.join(providers.VENDORS)}",
    )
    parser.add_argument(
        "--conf-dir",
        help="Directory holding the fallback manifest file",
    )
    parser.add_argument(
        "--path",
        help="Search path used to find the helper tool, ldconfig and binaries",
    )
    parser.add_argument(
        "--manifest",
        help="Name of the fallback manifest file inside the config directory",
    )
    parser.add_argument("--ldconfig", help="The ldconfig executable to use")
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds to wait for each external command",
    )
    parser.add_argument(
        "--devices",
        action=argparse.BooleanOptionalAction,
        help="Also list the device nodes of the vendor",
    )
    parser.add_argument(
        "--with-gpu",
        action=argparse.BooleanOptionalAction,
        help="Include the GPU device nodes themselves, not only control devices",
    )
    parser.add_argument(
        "--json",
        action=argparse.BooleanOptionalAction,
        help="Print the result as a JSON object",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true")
    verbosity.add_argument("-q", "--quiet", action="store_true")

    program_args: ProgramArguments = parser.parse_args(
        args, namespace=ProgramArguments()
    )

    # Setup the logging config
    level = logging.INFO
    if program_args.verbose:
        level = logging.DEBUG
    elif program_args.quiet:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s [%(filename)s:%(lineno)d] %(message)s",
    )

    try:
        config = make_config(program_args)
    except ValueError as e:
        sys.exit(str(e))

    try:
        resolution = resolver.paths(program_args.vendor, config)
    except GpuBindError as e:
        LOG.warning("GPU support disabled: %s", e)
        sys.exit(f"Could not resolve {program_args.vendor.name} paths: {e}")

    device_paths: list[str] = []
    if program_args.devices:
        device_paths = devices.devices(program_args.vendor, program_args.with_gpu)

    if program_args.json:
        output = {
            "libraries": resolution.libraries,
            "binaries": resolution.binaries,
        }
        if program_args.devices:
            output["devices"] = device_paths
        json.dump(output, stdout, indent=2)
        stdout.write("\n")
    else:
        for path in resolution.libraries + resolution.binaries + device_paths:
            stdout.write(f"{path}\n")
