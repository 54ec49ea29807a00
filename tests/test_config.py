import pytest

from gpubind import elf
from gpubind.config import DEFAULT_CONF_DIR, ResolutionConfig


def test_defaults() -> None:
    config = ResolutionConfig.from_env({})
    assert config == ResolutionConfig()
    assert config.conf_dir == DEFAULT_CONF_DIR
    assert config.search_path is None
    assert config.ldconfig == "ldconfig"
    assert config.self_exe == elf.SELF_EXE
    assert config.timeout is None


def test_from_env() -> None:
    config = ResolutionConfig.from_env(
        {
            "GPUBIND_CONF_DIR": "/usr/local/etc/gpubind",
            "GPUBIND_PATH": "/usr/sbin:/usr/bin",
            "GPUBIND_LDCONFIG": "/sbin/ldconfig",
            "GPUBIND_TIMEOUT": "2.5",
        }
    )
    assert config.conf_dir == "/usr/local/etc/gpubind"
    assert config.search_path == "/usr/sbin:/usr/bin"
    assert config.ldconfig == "/sbin/ldconfig"
    assert config.timeout == 2.5


def test_empty_path_means_process_path() -> None:
    assert ResolutionConfig.from_env({"GPUBIND_PATH": ""}).search_path is None


def test_bad_timeout() -> None:
    with pytest.raises(ValueError):
        ResolutionConfig.from_env({"GPUBIND_TIMEOUT": "soon"})
