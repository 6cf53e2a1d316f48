"""List files with their type, inode number and size."""

from __future__ import annotations

import os
import stat as statmod
import sys
from typing import Optional, TextIO

from xvkit.layout import DIRSIZ, FileType

_BUFSIZE = 512


def fmtname(path: str) -> str:
    """Last path component, blank-padded to DIRSIZ characters."""
    name = path.rsplit("/", 1)[-1]
    if len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def _file_type(mode: int) -> FileType:
    if statmod.S_ISDIR(mode):
        return FileType.DIR
    if statmod.S_ISREG(mode):
        return FileType.FILE
    return FileType.DEV


def _line(path: str, st: os.stat_result) -> str:
    return f"{fmtname(path)} {int(_file_type(st.st_mode))} {st.st_ino} {st.st_size}\n"


def ls(path: str, out: Optional[TextIO] = None) -> None:
    """List ``path``; for a directory, list each of its entries."""
    out = sys.stdout if out is None else out
    try:
        st = os.stat(path)
    except OSError:
        sys.stderr.write(f"ls: cannot open {path}\n")
        return
    kind = _file_type(st.st_mode)
    if kind == FileType.FILE:
        out.write(_line(path, st))
    elif kind == FileType.DIR:
        if len(path) + 1 + DIRSIZ + 1 > _BUFSIZE:
            out.write("ls: path too long\n")
            return
        try:
            names = sorted(os.listdir(path))
        except OSError:
            sys.stderr.write(f"ls: cannot open {path}\n")
            return
        for name in [".", ".."] + names:
            entry = f"{path}/{name}"
            try:
                entry_st = os.stat(entry)
            except OSError:
                out.write(f"ls: cannot stat {entry}\n")
                continue
            out.write(_line(entry, entry_st))


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    for path in args or ["."]:
        ls(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())