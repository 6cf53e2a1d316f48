import pytest

from xvkit.umalloc import HEADER_SIZE, Allocator, Arena, OutOfMemory


def test_arena_sbrk_returns_old_break():
    arena = Arena(start=0, limit=1 << 16)
    first = arena.sbrk(100)
    second = arena.sbrk(0)
    assert first == arena.start
    assert second == first + 100
    assert arena.brk == second


def test_arena_limit():
    arena = Arena(start=0, limit=4096)
    with pytest.raises(OutOfMemory):
        arena.sbrk(4097)
    with pytest.raises(OutOfMemory):
        arena.sbrk(-1)
    assert arena.brk == arena.start


def test_allocations_do_not_overlap():
    alloc = Allocator(Arena(start=0, limit=1 << 20))
    sizes = [1, 10, 100, 1000, 8, 7, 10001, 0, 64]
    spans = []
    for size in sizes:
        addr = alloc.malloc(size)
        assert addr % HEADER_SIZE == 0
        assert addr - HEADER_SIZE >= alloc.arena.start
        assert addr + size <= alloc.arena.brk
        spans.append((addr - HEADER_SIZE, addr + size))
    spans.sort()
    for (_, end), (start, _) in zip(spans, spans[1:]):
        assert end <= start


def test_free_all_coalesces():
    arena = Arena(start=0x1000, limit=1 << 20)
    alloc = Allocator(arena)
    addrs = [alloc.malloc(n) for n in (50, 300, 5000, 40000, 12)]
    for addr in addrs[::2] + addrs[1::2]:
        alloc.free(addr)
    assert alloc.free_blocks() == [(arena.start, arena.brk - arena.start)]


def test_free_list_accounts_for_heap():
    arena = Arena(start=0, limit=1 << 20)
    alloc = Allocator(arena)
    sizes = [24, 100, 3000]
    addrs = [alloc.malloc(n) for n in sizes]
    alloc.free(addrs[1])
    used = sum(((n + HEADER_SIZE - 1) // HEADER_SIZE + 1) * HEADER_SIZE for n in (24, 3000))
    free_total = sum(size for _, size in alloc.free_blocks())
    assert free_total + used == arena.brk - arena.start


def test_exhaustion_then_recovery():
    alloc = Allocator(Arena(start=0, limit=200_000))
    addrs = []
    with pytest.raises(OutOfMemory):
        while True:
            addrs.append(alloc.malloc(10001))
    assert addrs
    for addr in addrs:
        alloc.free(addr)
    big = alloc.malloc(1024 * 20)
    assert alloc.arena.start <= big < alloc.arena.brk


def test_too_large_request():
    alloc = Allocator(Arena(start=0, limit=4096 * HEADER_SIZE))
    with pytest.raises(OutOfMemory):
        alloc.malloc(4096 * HEADER_SIZE)


def test_double_free_rejected():
    alloc = Allocator(Arena(start=0, limit=1 << 20))
    addr = alloc.malloc(10)
    alloc.free(addr)
    with pytest.raises(ValueError):
        alloc.free(addr)


def test_negative_size_rejected():
    alloc = Allocator()
    with pytest.raises(ValueError):
        alloc.malloc(-1)


def test_no_free_blocks_before_first_malloc():
    assert Allocator().free_blocks() == []