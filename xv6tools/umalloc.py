"""First-fit free-list allocator over a simulated growable heap."""

from __future__ import annotations

HEADER_SIZE = 16
_MIN_UNITS = 4096
_BASE = 0
_HEAP_START = HEADER_SIZE


class Allocator:
    """A circular, address-ordered free list with coalescing.

    Addresses are plain integers. The heap grows in chunks of at least
    4096 header units, up to ``limit`` bytes in total.
    """

    def __init__(self, limit: int) -> None:
        if limit < 0:
            raise ValueError("limit must not be negative")
        self._limit = limit
        self._brk = _HEAP_START
        # block address -> [next free block address or None, size in units]
        self._headers: dict[int, list] = {}
        self._allocated: set[int] = set()
        self._freep: int | None = None

    @property
    def heap_used(self) -> int:
        """Bytes obtained from the heap so far."""
        return self._brk - _HEAP_START

    def _ptr(self, block: int) -> int:
        return self._headers[block][0]

    def _size(self, block: int) -> int:
        return self._headers[block][1]

    def _end(self, block: int) -> int:
        return block + self._size(block) * HEADER_SIZE

    def _release(self, bp: int) -> None:
        p = self._freep
        while not (p < bp < self._ptr(p)):
            if p >= self._ptr(p) and (bp > p or bp < self._ptr(p)):
                break
            p = self._ptr(p)
        nxt = self._ptr(p)
        if self._end(bp) == nxt:
            self._headers[bp][1] += self._size(nxt)
            self._headers[bp][0] = self._ptr(nxt)
            del self._headers[nxt]
        else:
            self._headers[bp][0] = nxt
        if self._end(p) == bp:
            self._headers[p][1] += self._size(bp)
            self._headers[p][0] = self._ptr(bp)
            del self._headers[bp]
        else:
            self._headers[p][0] = bp
        self._freep = p

    def _morecore(self, nunits: int) -> int | None:
        nunits = max(nunits, _MIN_UNITS)
        nbytes = nunits * HEADER_SIZE
        if self.heap_used + nbytes > self._limit:
            return None
        block = self._brk
        self._brk += nbytes
        self._headers[block] = [None, nunits]
        self._release(block)
        return self._freep

    def malloc(self, nbytes: int) -> int:
        """Allocate ``nbytes`` and return the address of the usable area.

        Raises MemoryError when the heap cannot grow enough.
        """
        if nbytes < 0:
            raise ValueError("size must not be negative")
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._freep is None:
            self._headers[_BASE] = [_BASE, 0]
            self._freep = _BASE
        prevp = self._freep
        p = self._ptr(prevp)
        while True:
            size = self._size(p)
            if size >= nunits:
                if size == nunits:
                    self._headers[prevp][0] = self._ptr(p)
                    self._headers[p][0] = None
                else:
                    self._headers[p][1] = size - nunits
                    p += (size - nunits) * HEADER_SIZE
                    self._headers[p] = [None, nunits]
                self._freep = prevp
                self._allocated.add(p)
                return p + HEADER_SIZE
            if p == self._freep:
                grown = self._morecore(nunits)
                if grown is None:
                    raise MemoryError(f"cannot allocate {nbytes} bytes")
                p = grown
            prevp, p = p, self._ptr(p)

    def free(self, address: int) -> None:
        """Return a block obtained from :meth:`malloc` to the free list."""
        block = address - HEADER_SIZE
        if block not in self._allocated:
            raise ValueError(f"address {address:#x} was not allocated")
        self._allocated.remove(block)
        self._release(block)