"""Build a file system image from a host directory tree."""

from __future__ import annotations

import os
import struct
import sys
from typing import BinaryIO, Optional, TextIO

from xvkit.layout import (
    BSIZE,
    DINODE_SIZE,
    IPB,
    MAXFILE,
    NDIRECT,
    NINDIRECT,
    ROOTINO,
    DInode,
    Dirent,
    FileType,
    Superblock,
    iblock,
)

DEFAULT_NBLOCKS = 995
DEFAULT_NINODES = 200
DEFAULT_SIZE = 1024

_INDIRECT = struct.Struct(f"<{NINDIRECT}I")


class ImageBuilder:
    """Writes sectors, inodes and directories into an image file."""

    def __init__(self, path, out: Optional[TextIO] = None) -> None:
        self._file: BinaryIO = open(path, "w+b")
        self._out = out
        self.ninodes = 0
        self.bitblocks = 0
        self.usedblocks = 0
        self.freeblock = 0
        self.freeinode = 1

    def __enter__(self) -> "ImageBuilder":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _print(self, text: str) -> None:
        print(text, file=self._out if self._out is not None else sys.stdout)

    def format(self, nblocks: int, ninodes: int, size: int) -> None:
        """Zero the whole image and write the super block."""
        self.bitblocks = size // (BSIZE * 8) + 1
        self.usedblocks = ninodes // IPB + 3 + self.bitblocks
        self.freeblock = self.usedblocks
        self.ninodes = ninodes
        self._print(
            f"used {self.usedblocks} (bit {self.bitblocks} ninode {ninodes // IPB + 1})"
            f" free {self.freeblock} total {nblocks + self.usedblocks}"
        )
        if nblocks + self.usedblocks != size:
            raise ValueError(
                f"{nblocks} data blocks plus {self.usedblocks} used blocks"
                f" do not make {size}"
            )
        zeroes = bytes(BSIZE)
        for sec in range(size):
            self.write_sector(sec, zeroes)
        self.write_sector(1, Superblock(size, nblocks, ninodes).pack())

    def write_sector(self, sec: int, data: bytes) -> None:
        """Write one sector, zero-padding short data."""
        if len(data) > BSIZE:
            raise ValueError(f"sector data is {len(data)} bytes, more than {BSIZE}")
        self._file.seek(sec * BSIZE)
        self._file.write(bytes(data).ljust(BSIZE, b"\0"))

    def read_sector(self, sec: int) -> bytes:
        self._file.seek(sec * BSIZE)
        data = self._file.read(BSIZE)
        if len(data) != BSIZE:
            raise OSError(f"short read at sector {sec}")
        return data

    def read_inode(self, inum: int) -> DInode:
        block = self.read_sector(iblock(inum))
        start = (inum % IPB) * DINODE_SIZE
        return DInode.unpack(block[start : start + DINODE_SIZE])

    def write_inode(self, inum: int, inode: DInode) -> None:
        bn = iblock(inum)
        block = bytearray(self.read_sector(bn))
        start = (inum % IPB) * DINODE_SIZE
        block[start : start + DINODE_SIZE] = inode.pack()
        self.write_sector(bn, bytes(block))

    def ialloc(self, type: int) -> int:
        """Allocate the next inode with one link and return its number."""
        inum = self.freeinode
        self.freeinode += 1
        self.write_inode(inum, DInode(type=int(type), nlink=1, size=0))
        return inum

    def _take_block(self) -> int:
        block = self.freeblock
        self.freeblock += 1
        self.usedblocks += 1
        return block

    def iappend(self, inum: int, data: bytes) -> None:
        """Append bytes to an inode, allocating blocks as needed."""
        data = bytes(data)
        din = self.read_inode(inum)
        off = din.size
        pos = 0
        while pos < len(data):
            fbn = off // BSIZE
            if fbn >= MAXFILE:
                raise ValueError(f"inode {inum} would exceed {MAXFILE} blocks")
            if fbn < NDIRECT:
                if din.addrs[fbn] == 0:
                    din.addrs[fbn] = self._take_block()
                block_no = din.addrs[fbn]
            else:
                if din.addrs[NDIRECT] == 0:
                    din.addrs[NDIRECT] = self._take_block()
                indirect = list(_INDIRECT.unpack(self.read_sector(din.addrs[NDIRECT])))
                if indirect[fbn - NDIRECT] == 0:
                    indirect[fbn - NDIRECT] = self._take_block()
                    self.write_sector(din.addrs[NDIRECT], _INDIRECT.pack(*indirect))
                block_no = indirect[fbn - NDIRECT]
            n1 = min(len(data) - pos, (fbn + 1) * BSIZE - off)
            block = bytearray(self.read_sector(block_no))
            start = off - fbn * BSIZE
            block[start : start + n1] = data[pos : pos + n1]
            self.write_sector(block_no, bytes(block))
            pos += n1
            off += n1
        din.size = off
        self.write_inode(inum, din)

    def add_dir(self, path, cur_inode: int, parent_inode: int) -> None:
        """Fill directory inode ``cur_inode`` from host directory ``path``.

        Entries are added in name order. With ``path`` None only "." and
        ".." are written.
        """
        self.iappend(cur_inode, Dirent(cur_inode, ".").pack())
        self.iappend(cur_inode, Dirent(parent_inode, "..").pack())
        if path is None:
            return
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda e: e.name)
        for entry in entries:
            self._print(entry.name)
            if entry.is_dir():
                child = self.ialloc(FileType.DIR)
                self.add_dir(entry.path, child, cur_inode)
            else:
                child = self.ialloc(FileType.FILE)
                with open(entry.path, "rb") as src:
                    for chunk in iter(lambda: src.read(BSIZE), b""):
                        self.iappend(child, chunk)
            self.iappend(cur_inode, Dirent(child, entry.name).pack())
        din = self.read_inode(cur_inode)
        din.size = (din.size // BSIZE + 1) * BSIZE
        self.write_inode(cur_inode, din)

    def balloc(self, used: int) -> None:
        """Mark the first ``used`` blocks as allocated in the bitmap."""
        self._print(f"balloc: first {used} blocks have been allocated")
        if used >= BSIZE * 8:
            raise ValueError(f"{used} blocks do not fit in one bitmap block")
        bitmap = bytearray(BSIZE)
        for i in range(used):
            bitmap[i // 8] |= 1 << (i % 8)
        sector = self.ninodes // IPB + 3
        self._print(f"balloc: write bitmap block at sector {sector}")
        self.write_sector(sector, bytes(bitmap))

    def close(self) -> None:
        self._file.close()


def build_image(image_path, root_dir) -> None:
    """Write a complete image whose root holds the contents of ``root_dir``."""
    with ImageBuilder(image_path) as builder:
        builder.format(DEFAULT_NBLOCKS, DEFAULT_NINODES, DEFAULT_SIZE)
        root = builder.ialloc(FileType.DIR)
        if root != ROOTINO:
            raise RuntimeError(f"root inode is {root}, expected {ROOTINO}")
        directory = root_dir if root_dir is not None and os.path.isdir(root_dir) else None
        builder.add_dir(directory, root, root)
        builder.balloc(builder.usedblocks)


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("Usage: mkfs fs.img files...", file=sys.stderr)
        return 1
    try:
        build_image(args[0], args[1] if len(args) > 1 else None)
    except (OSError, ValueError) as exc:
        print(f"mkfs: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())