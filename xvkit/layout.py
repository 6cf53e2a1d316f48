"""On-disk file system layout: superblock, inodes and directory entries."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import ClassVar, List

# File system geometry.
ROOTINO = 1  # root i-number
BSIZE = 512  # block size
NDIRECT = 12
NINDIRECT = BSIZE // 4
MAXFILE = NDIRECT + NINDIRECT
DIRSIZ = 14

# System parameters.
NPROC = 64
KSTACKSIZE = 4096
NCPU = 8
NOFILE = 16
NFILE = 100
NBUF = 10
NINODE = 50
NDEV = 10
ROOTDEV = 1
USERTOP = 0xA0000
PHYSTOP = 0x1000000
MAXARG = 32


class OpenFlag(IntFlag):
    """Flags accepted by open."""

    RDONLY = 0x000
    WRONLY = 0x001
    RDWR = 0x002
    CREATE = 0x200


class FileType(IntEnum):
    """Kinds of inode."""

    DIR = 1
    FILE = 2
    DEV = 3


_SUPERBLOCK = struct.Struct("<3I")
_DINODE = struct.Struct(f"<4hI{NDIRECT + 1}I")
_DIRENT = struct.Struct(f"<H{DIRSIZ}s")

DINODE_SIZE = _DINODE.size
DIRENT_SIZE = _DIRENT.size
IPB = BSIZE // DINODE_SIZE  # inodes per block
BPB = BSIZE * 8  # bitmap bits per block


def _require(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise ValueError(f"{what} needs {size} bytes, got {len(data)}")


@dataclass
class Superblock:
    """File system super block."""

    size: int = 0
    nblocks: int = 0
    ninodes: int = 0

    SIZE: ClassVar[int] = _SUPERBLOCK.size

    def pack(self) -> bytes:
        return _SUPERBLOCK.pack(self.size, self.nblocks, self.ninodes)

    @classmethod
    def unpack(cls, data: bytes) -> "Superblock":
        _require(data, _SUPERBLOCK.size, "superblock")
        return cls(*_SUPERBLOCK.unpack_from(data))


@dataclass
class DInode:
    """On-disk inode."""

    type: int = 0
    major: int = 0
    minor: int = 0
    nlink: int = 0
    size: int = 0
    addrs: List[int] = field(default_factory=lambda: [0] * (NDIRECT + 1))

    SIZE: ClassVar[int] = _DINODE.size

    def pack(self) -> bytes:
        if len(self.addrs) != NDIRECT + 1:
            raise ValueError(f"an inode holds exactly {NDIRECT + 1} addresses")
        return _DINODE.pack(
            self.type, self.major, self.minor, self.nlink, self.size, *self.addrs
        )

    @classmethod
    def unpack(cls, data: bytes) -> "DInode":
        _require(data, _DINODE.size, "inode")
        type_, major, minor, nlink, size, *addrs = _DINODE.unpack_from(data)
        return cls(type_, major, minor, nlink, size, list(addrs))


@dataclass
class Dirent:
    """Directory entry; names longer than DIRSIZ bytes are truncated."""

    inum: int = 0
    name: str = ""

    SIZE: ClassVar[int] = _DIRENT.size

    def pack(self) -> bytes:
        raw = self.name.encode("utf-8", "surrogateescape")[:DIRSIZ]
        return _DIRENT.pack(self.inum, raw)

    @classmethod
    def unpack(cls, data: bytes) -> "Dirent":
        _require(data, _DIRENT.size, "directory entry")
        inum, raw = _DIRENT.unpack_from(data)
        name = raw.split(b"\0", 1)[0].decode("utf-8", "surrogateescape")
        return cls(inum, name)


def iblock(inum: int) -> int:
    """Block that holds inode ``inum``."""
    return inum // IPB + 2


def bblock(b: int, ninodes: int) -> int:
    """Bitmap block that holds the bit for block ``b``."""
    return b // BPB + ninodes // IPB + 3