import pytest

from xv6tools.umalloc import HEADER_SIZE, Allocator


def fill(alloc, size):
    addrs = []
    while True:
        try:
            addrs.append(alloc.malloc(size))
        except MemoryError:
            return addrs


def test_addresses_are_aligned_and_distinct():
    alloc = Allocator(1 << 20)
    addrs = [alloc.malloc(n) for n in (1, 17, 100, 5000, 0)]
    assert len(set(addrs)) == len(addrs)
    assert all(a % HEADER_SIZE == 0 for a in addrs)


def test_allocations_do_not_overlap():
    alloc = Allocator(1 << 20)
    sizes = [10, 300, 7, 4000, 64, 1]
    spans = sorted((alloc.malloc(n), n) for n in sizes)
    for (a, n), (b, _) in zip(spans, spans[1:]):
        assert a + n <= b - HEADER_SIZE


def test_freed_block_is_reused():
    alloc = Allocator(1 << 20)
    a = alloc.malloc(200)
    used = alloc.heap_used
    alloc.free(a)
    assert alloc.malloc(200) == a
    assert alloc.heap_used == used


def test_request_beyond_limit_raises():
    alloc = Allocator(1 << 16)
    with pytest.raises(MemoryError):
        alloc.malloc(1 << 17)


def test_heap_never_exceeds_limit():
    alloc = Allocator(1 << 18)
    fill(alloc, 3000)
    assert alloc.heap_used <= 1 << 18


def test_coalescing_allows_large_block_after_frees():
    alloc = Allocator(1 << 16)
    small = [alloc.malloc(1000) for _ in range(30)]
    for a in small[::2] + small[1::2]:
        alloc.free(a)
    assert alloc.malloc(40000) % HEADER_SIZE == 0


def test_free_unknown_address_raises():
    alloc = Allocator(1 << 20)
    a = alloc.malloc(10)
    with pytest.raises(ValueError):
        alloc.free(a + HEADER_SIZE)


def test_double_free_raises():
    alloc = Allocator(1 << 20)
    a = alloc.malloc(10)
    alloc.free(a)
    with pytest.raises(ValueError):
        alloc.free(a)


def test_negative_size_raises():
    with pytest.raises(ValueError):
        Allocator(1 << 20).malloc(-1)