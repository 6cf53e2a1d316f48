"""Tools for a small teaching Unix: disk image builder, on-disk and kernel structures, and user utilities."""

__version__ = "0.1.0"

__all__ = [
    "abi",
    "cat",
    "echo",
    "elf",
    "grep",
    "layout",
    "ls",
    "mkfs",
    "mmu",
    "printf",
    "sh",
    "ulib",
    "umalloc",
    "wc",
]