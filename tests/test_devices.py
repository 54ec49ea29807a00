import dataclasses
from pathlib import Path

from gpubind import devices, providers


def test_devices(tmp_path: Path) -> None:
    for name in ["nvidia0", "nvidia1", "nvidiactl", "nvidia-uvm", "null"]:
        (tmp_path / name).touch()
    vendor = dataclasses.replace(
        providers.NVIDIA,
        device_glob=f"{tmp_path}/nvidia*",
        control_device_glob=f"{tmp_path}/nvidia[!0-9]*",
    )

    assert devices.devices(vendor) == [
        f"{tmp_path}/nvidia-uvm",
        f"{tmp_path}/nvidiactl",
    ]
    assert devices.devices(vendor, with_gpu=True) == [
        f"{tmp_path}/nvidia-uvm",
        f"{tmp_path}/nvidia0",
        f"{tmp_path}/nvidia1",
        f"{tmp_path}/nvidiactl",
    ]


def test_no_devices(tmp_path: Path) -> None:
    vendor = dataclasses.replace(
        providers.ROCM,
        device_glob=f"{tmp_path}/card*",
        control_device_glob=f"{tmp_path}/card[!0-9]*",
    )
    assert devices.devices(vendor, with_gpu=True) == []
