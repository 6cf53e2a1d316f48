"""x86 memory management unit definitions and descriptor encoding."""

from __future__ import annotations

import struct
from dataclasses import dataclass, fields
from typing import ClassVar, Sequence, Tuple

_MASK32 = 0xFFFFFFFF

# Eflags register
FL_CF = 0x00000001
FL_PF = 0x00000004
FL_AF = 0x00000010
FL_ZF = 0x00000040
FL_SF = 0x00000080
FL_TF = 0x00000100
FL_IF = 0x00000200
FL_DF = 0x00000400
FL_OF = 0x00000800
FL_IOPL_MASK = 0x00003000
FL_IOPL_0 = 0x00000000
FL_IOPL_1 = 0x00001000
FL_IOPL_2 = 0x00002000
FL_IOPL_3 = 0x00003000
FL_NT = 0x00004000
FL_RF = 0x00010000
FL_VM = 0x00020000
FL_AC = 0x00040000
FL_VIF = 0x00080000
FL_VIP = 0x00100000
FL_ID = 0x00200000

# Control register flags
CR0_PE = 0x00000001
CR0_MP = 0x00000002
CR0_EM = 0x00000004
CR0_TS = 0x00000008
CR0_ET = 0x00000010
CR0_NE = 0x00000020
CR0_WP = 0x00010000
CR0_AM = 0x00040000
CR0_NW = 0x20000000
CR0_CD = 0x40000000
CR0_PG = 0x80000000

DPL_USER = 0x3

# Application segment type bits
STA_X = 0x8
STA_E = 0x4
STA_C = 0x4
STA_W = 0x2
STA_R = 0x2
STA_A = 0x1

# System segment type bits
STS_T16A = 0x1
STS_LDT = 0x2
STS_T16B = 0x3
STS_CG16 = 0x4
STS_TG = 0x5
STS_IG16 = 0x6
STS_TG16 = 0x7
STS_T32A = 0x9
STS_T32B = 0xB
STS_CG32 = 0xC
STS_IG32 = 0xE
STS_TG32 = 0xF

# Paging
NPDENTRIES = 1024
NPTENTRIES = 1024
PGSIZE = 4096
PGSHIFT = 12
PTXSHIFT = 12
PDXSHIFT = 22

PTE_P = 0x001
PTE_W = 0x002
PTE_U = 0x004
PTE_PWT = 0x008
PTE_PCD = 0x010
PTE_A = 0x020
PTE_D = 0x040
PTE_PS = 0x080
PTE_MBZ = 0x180


def pdx(la: int) -> int:
    """Page directory index of a linear address."""
    return ((la & _MASK32) >> PDXSHIFT) & 0x3FF


def ptx(la: int) -> int:
    """Page table index of a linear address."""
    return ((la & _MASK32) >> PTXSHIFT) & 0x3FF


def pgaddr(d: int, t: int, o: int) -> int:
    """Build a linear address from directory index, table index and offset."""
    return (d << PDXSHIFT | t << PTXSHIFT | o) & _MASK32


def pgroundup(sz: int) -> int:
    return (sz + PGSIZE - 1) & ~(PGSIZE - 1) & _MASK32


def pgrounddown(a: int) -> int:
    return a & ~(PGSIZE - 1) & _MASK32


def pte_addr(pte: int) -> int:
    """Physical address held in a page table or directory entry."""
    return pte & ~0xFFF & _MASK32


def _pack_bits(obj, layout: Sequence[Tuple[str, int]]) -> bytes:
    value = 0
    shift = 0
    for name, width in layout:
        value |= (getattr(obj, name) & ((1 << width) - 1)) << shift
        shift += width
    return value.to_bytes(8, "little")


def _unpack_bits(data: bytes, layout: Sequence[Tuple[str, int]]) -> dict:
    if len(data) < 8:
        raise ValueError(f"descriptor needs 8 bytes, got {len(data)}")
    value = int.from_bytes(data[:8], "little")
    out = {}
    for name, width in layout:
        out[name] = value & ((1 << width) - 1)
        value >>= width
    return out


@dataclass
class SegDesc:
    """Segment descriptor."""

    lim_15_0: int = 0
    base_15_0: int = 0
    base_23_16: int = 0
    type: int = 0
    s: int = 0
    dpl: int = 0
    p: int = 0
    lim_19_16: int = 0
    avl: int = 0
    rsv1: int = 0
    db: int = 0
    g: int = 0
    base_31_24: int = 0

    LAYOUT: ClassVar[Tuple[Tuple[str, int], ...]] = (
        ("lim_15_0", 16),
        ("base_15_0", 16),
        ("base_23_16", 8),
        ("type", 4),
        ("s", 1),
        ("dpl", 2),
        ("p", 1),
        ("lim_19_16", 4),
        ("avl", 1),
        ("rsv1", 1),
        ("db", 1),
        ("g", 1),
        ("base_31_24", 8),
    )

    @classmethod
    def normal(cls, type: int, base: int, lim: int, dpl: int) -> "SegDesc":
        """A 32-bit segment whose limit is counted in 4K units."""
        base &= _MASK32
        lim &= _MASK32
        return cls(
            (lim >> 12) & 0xFFFF,
            base & 0xFFFF,
            (base >> 16) & 0xFF,
            type & 0xF,
            1,
            dpl & 0x3,
            1,
            (lim >> 28) & 0xF,
            0,
            0,
            1,
            1,
            base >> 24,
        )

    @classmethod
    def small16(cls, type: int, base: int, lim: int, dpl: int) -> "SegDesc":
        """A segment with byte granularity, as used for the task state."""
        base &= _MASK32
        lim &= _MASK32
        return cls(
            lim & 0xFFFF,
            base & 0xFFFF,
            (base >> 16) & 0xFF,
            type & 0xF,
            1,
            dpl & 0x3,
            1,
            (lim >> 16) & 0xF,
            0,
            0,
            1,
            0,
            base >> 24,
        )

    def pack(self) -> bytes:
        return _pack_bits(self, self.LAYOUT)

    @classmethod
    def unpack(cls, data: bytes) -> "SegDesc":
        return cls(**_unpack_bits(data, cls.LAYOUT))


@dataclass
class GateDesc:
    """Interrupt or trap gate descriptor."""

    off_15_0: int = 0
    cs: int = 0
    args: int = 0
    rsv1: int = 0
    type: int = 0
    s: int = 0
    dpl: int = 0
    p: int = 0
    off_31_16: int = 0

    LAYOUT: ClassVar[Tuple[Tuple[str, int], ...]] = (
        ("off_15_0", 16),
        ("cs", 16),
        ("args", 5),
        ("rsv1", 3),
        ("type", 4),
        ("s", 1),
        ("dpl", 2),
        ("p", 1),
        ("off_31_16", 16),
    )

    @classmethod
    def make(cls, istrap: bool, sel: int, off: int, dpl: int) -> "GateDesc":
        """A present gate; trap gates leave interrupts enabled."""
        off &= _MASK32
        return cls(
            off_15_0=off & 0xFFFF,
            cs=sel & 0xFFFF,
            args=0,
            rsv1=0,
            type=STS_TG32 if istrap else STS_IG32,
            s=0,
            dpl=dpl & 0x3,
            p=1,
            off_31_16=off >> 16,
        )

    def pack(self) -> bytes:
        return _pack_bits(self, self.LAYOUT)

    @classmethod
    def unpack(cls, data: bytes) -> "GateDesc":
        return cls(**_unpack_bits(data, cls.LAYOUT))


def seg_asm(type: int, base: int, lim: int) -> bytes:
    """Bytes of a present, ring-0, 32-bit, 4K-granular segment descriptor."""
    base &= _MASK32
    lim &= _MASK32
    return struct.pack(
        "<HHBBBB",
        (lim >> 12) & 0xFFFF,
        base & 0xFFFF,
        (base >> 16) & 0xFF,
        (0x90 | type) & 0xFF,
        0xC0 | ((lim >> 28) & 0xF),
        (base >> 24) & 0xFF,
    )


assert {f.name for f in fields(SegDesc)} == {n for n, _ in SegDesc.LAYOUT}
assert {f.name for f in fields(GateDesc)} == {n for n, _ in GateDesc.LAYOUT}