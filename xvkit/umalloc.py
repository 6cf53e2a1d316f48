"""First-fit free-list allocator over a simulated growable heap."""

from __future__ import annotations

from typing import Dict, List, Optional, Set, Tuple

from xvkit.layout import USERTOP

HEADER_SIZE = 8  # bytes in a block header; also the allocation unit
MIN_UNITS = 4096  # smallest number of units requested from the arena


class OutOfMemory(MemoryError):
    """The arena cannot grow any further."""


class Arena:
    """A contiguous address range grown and shrunk by ``sbrk``."""

    def __init__(self, start: int = 0, limit: int = USERTOP) -> None:
        if limit < start:
            raise ValueError("arena limit lies below its start")
        self.start = start
        self.limit = limit
        self.brk = start

    def sbrk(self, n: int) -> int:
        """Move the break by ``n`` bytes and return the old break."""
        new = self.brk + n
        if new < self.start or new > self.limit:
            raise OutOfMemory(f"cannot move break from {self.brk:#x} by {n}")
        old = self.brk
        self.brk = new
        return old


class Allocator:
    """Circular free list, kept in address order, with coalescing."""

    def __init__(self, arena: Optional[Arena] = None) -> None:
        self.arena = arena if arena is not None else Arena()
        self._base = self.arena.start - HEADER_SIZE
        # header address -> [next free header, size in units]
        self._blocks: Dict[int, List[int]] = {}
        self._freep: Optional[int] = None
        self._allocated: Set[int] = set()

    def _next(self, p: int) -> int:
        return self._blocks[p][0]

    def _release(self, bp: int) -> None:
        p = self._freep
        while not (p < bp < self._next(p)):
            nxt = self._next(p)
            if p >= nxt and (bp > p or bp < nxt):
                break
            p = nxt
        block = self._blocks[bp]
        prev = self._blocks[p]
        upper = prev[0]
        if bp + block[1] * HEADER_SIZE == upper:
            block[1] += self._blocks[upper][1]
            block[0] = self._blocks[upper][0]
            del self._blocks[upper]
        else:
            block[0] = upper
        if p + prev[1] * HEADER_SIZE == bp:
            prev[1] += block[1]
            prev[0] = block[0]
            del self._blocks[bp]
        else:
            prev[0] = bp
        self._freep = p

    def _morecore(self, nunits: int) -> int:
        nunits = max(nunits, MIN_UNITS)
        addr = self.arena.sbrk(nunits * HEADER_SIZE)
        self._blocks[addr] = [0, nunits]
        self._release(addr)
        return self._freep

    def malloc(self, nbytes: int) -> int:
        """Return the address of a new block of at least ``nbytes`` bytes."""
        if nbytes < 0:
            raise ValueError("cannot allocate a negative size")
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._freep is None:
            self._blocks[self._base] = [self._base, 0]
            self._freep = self._base
        prevp = self._freep
        p = self._next(prevp)
        while True:
            block = self._blocks[p]
            if block[1] >= nunits:
                if block[1] == nunits:
                    self._blocks[prevp][0] = block[0]
                else:
                    block[1] -= nunits
                    p += block[1] * HEADER_SIZE
                    self._blocks[p] = [0, nunits]
                self._freep = prevp
                self._allocated.add(p)
                return p + HEADER_SIZE
            if p == self._freep:
                p = self._morecore(nunits)
            prevp = p
            p = self._next(p)

    def free(self, addr: int) -> None:
        """Return a block obtained from ``malloc`` to the free list."""
        bp = addr - HEADER_SIZE
        if bp not in self._allocated:
            raise ValueError(f"{addr:#x} is not an allocated block")
        self._allocated.remove(bp)
        self._release(bp)

    def free_blocks(self) -> List[Tuple[int, int]]:
        """Free blocks as (header address, size in bytes), lowest first."""
        if self._freep is None:
            return []
        result = []
        p = self._next(self._base)
        while p != self._base:
            result.append((p, self._blocks[p][1] * HEADER_SIZE))
            p = self._next(p)
        return result