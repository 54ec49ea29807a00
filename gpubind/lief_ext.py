# pyright: strict
import os.path
from typing import TYPE_CHECKING, Any, Optional

# ELF.pyi has no matching py file since it's a c extension
# pyright: reportMissingModuleSource=false
# https://github.com/microsoft/pyright/issues/5950
import lief
import lief.ELF

from gpubind.errors import CandidateOpenError

# Let's make sure type checking works for this proxy class
# https://stackoverflow.com/questions/71365594/how-to-make-a-proxy-object-with-typing-as-underlying-object-in-python
if TYPE_CHECKING:
    base = lief.ELF.Binary
else:
    base = object


def header_only_config() -> lief.ELF.ParserConfig:
    """Parser settings that skip everything but the headers and sections.

    Driver libraries are large and only their machine type is needed."""
    config = lief.ELF.ParserConfig()
    config.parse_relocations = False
    config.parse_dyn_symbols = False
    config.parse_symtab_symbols = False
    config.parse_symbol_versions = False
    config.parse_notes = False
    config.parse_overlay = False
    return config


class Binary(base):
    """Proxy the lief.ELF.Binary object to add a path attribute.

    The file is parsed eagerly: lief reads it and closes it again before
    the constructor returns, so an instance never holds a file descriptor.

    Raises:
        CandidateOpenError: the file does not exist or is not an ELF object
    """

    def __init__(self, path: str):
        self.path = path
        if not os.path.isfile(path):
            raise CandidateOpenError(f"could not open {path}: no such file")
        try:
            if not Binary.is_elf(path):
                raise CandidateOpenError(f"could not open {path}: not an ELF file")
            self.__binary: Optional[lief.ELF.Binary] = lief.ELF.parse(  # pyright: ignore
                path, header_only_config()
            )
        except UnicodeEncodeError as e:
            # undecodable bytes from the linker cache survive as surrogates
            raise CandidateOpenError(f"could not open {path!r}: {e}") from e
        if self.__binary is None:
            raise CandidateOpenError(f"could not parse ELF file {path}")

    if not TYPE_CHECKING:

        def __getattr__(self, attr: str) -> Any:
            return getattr(self.__binary, attr)

    @staticmethod
    def is_elf(path: str) -> bool:
        return lief.is_elf(path)
