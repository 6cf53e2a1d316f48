"""ELF executable headers."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar, List

ELF_MAGIC = 0x464C457F  # "\x7FELF" little endian

ELF_PROG_LOAD = 1

ELF_PROG_FLAG_EXEC = 1
ELF_PROG_FLAG_WRITE = 2
ELF_PROG_FLAG_READ = 4

_ELFHDR = struct.Struct("<I12sHHIIIIIHHHHHH")
_PROGHDR = struct.Struct("<8I")


class ElfFormatError(ValueError):
    """Data is not a well-formed ELF file."""


@dataclass
class ElfHeader:
    """ELF file header."""

    magic: int = ELF_MAGIC
    elf: bytes = bytes(12)
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = 0
    phentsize: int = 0
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    SIZE: ClassVar[int] = _ELFHDR.size

    def pack(self) -> bytes:
        return _ELFHDR.pack(
            self.magic,
            self.elf,
            self.type,
            self.machine,
            self.version,
            self.entry,
            self.phoff,
            self.shoff,
            self.flags,
            self.ehsize,
            self.phentsize,
            self.phnum,
            self.shentsize,
            self.shnum,
            self.shstrndx,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "ElfHeader":
        if len(data) < _ELFHDR.size:
            raise ElfFormatError("truncated ELF header")
        header = cls(*_ELFHDR.unpack_from(data))
        if header.magic != ELF_MAGIC:
            raise ElfFormatError(f"bad ELF magic {header.magic:#x}")
        return header


@dataclass
class ProgHeader:
    """ELF program section header."""

    type: int = 0
    offset: int = 0
    va: int = 0
    pa: int = 0
    filesz: int = 0
    memsz: int = 0
    flags: int = 0
    align: int = 0

    SIZE: ClassVar[int] = _PROGHDR.size

    def pack(self) -> bytes:
        return _PROGHDR.pack(
            self.type,
            self.offset,
            self.va,
            self.pa,
            self.filesz,
            self.memsz,
            self.flags,
            self.align,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "ProgHeader":
        if len(data) < _PROGHDR.size:
            raise ElfFormatError("truncated program header")
        return cls(*_PROGHDR.unpack_from(data))

    def is_loadable(self) -> bool:
        return self.type == ELF_PROG_LOAD


def program_headers(data: bytes) -> List[ProgHeader]:
    """Parse the file header and return its program headers in order."""
    header = ElfHeader.unpack(data)
    result = []
    for index in range(header.phnum):
        start = header.phoff + index * _PROGHDR.size
        end = start + _PROGHDR.size
        if end > len(data):
            raise ElfFormatError(f"program header {index} lies past end of data")
        result.append(ProgHeader.unpack(data[start:end]))
    return result