"""System call numbers and trap vectors."""

from __future__ import annotations

from enum import IntEnum


class Syscall(IntEnum):
    FORK = 1
    EXIT = 2
    WAIT = 3
    PIPE = 4
    WRITE = 5
    READ = 6
    CLOSE = 7
    KILL = 8
    EXEC = 9
    OPEN = 10
    MKNOD = 11
    UNLINK = 12
    FSTAT = 13
    LINK = 14
    MKDIR = 15
    CHDIR = 16
    DUP = 17
    GETPID = 18
    SBRK = 19
    SLEEP = 20
    UPTIME = 21
    MPROTECT = 22
    MUNPROTECT = 23
    DUMP_ALLOCATED = 24


class Trap(IntEnum):
    DIVIDE = 0
    DEBUG = 1
    NMI = 2
    BRKPT = 3
    OFLOW = 4
    BOUND = 5
    ILLOP = 6
    DEVICE = 7
    DBLFLT = 8
    TSS = 10
    SEGNP = 11
    STACK = 12
    GPFLT = 13
    PGFLT = 14
    FPERR = 16
    ALIGN = 17
    MCHK = 18
    SIMDERR = 19
    IRQ0 = 32
    SYSCALL = 64
    DEFAULT = 500


class Irq(IntEnum):
    TIMER = 0
    KBD = 1
    COM1 = 4
    IDE = 14
    ERROR = 19
    SPURIOUS = 31

    @property
    def vector(self) -> int:
        """Interrupt vector this line is delivered on."""
        return Trap.IRQ0 + self.value


def syscall_name(number: int) -> str:
    """Lower-case name of a system call number."""
    try:
        return Syscall(number).name.lower()
    except ValueError:
        raise ValueError(f"unknown system call {number}") from None


def trap_name(number: int) -> str:
    """Lower-case name of a trap number."""
    try:
        return Trap(number).name.lower()
    except ValueError:
        raise ValueError(f"unknown trap {number}") from None