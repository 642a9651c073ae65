"""Sv39 three-level page tables over a simulated physical memory."""

from __future__ import annotations

import struct

PGSIZE = 4096
PGSHIFT = 12
PXMASK = 0x1FF
NPTE = PGSIZE // 8
MAXVA = 1 << (9 + 9 + 9 + 12 - 1)

PTE_V = 1 << 0
PTE_R = 1 << 1
PTE_W = 1 << 2
PTE_X = 1 << 3
PTE_U = 1 << 4

_U64 = 1 << 64
_PTE_PAGE = struct.Struct(f"<{NPTE}Q")


class Panic(RuntimeError):
    """An unrecoverable inconsistency in the page tables."""


class OutOfMemory(MemoryError):
    """No free physical page was available."""


class BadAddress(ValueError):
    """A user virtual address is not mapped for user access."""


def pg_round_up(sz: int) -> int:
    """Round ``sz`` up to a page boundary."""
    return (sz + PGSIZE - 1) & ~(PGSIZE - 1)


def pg_round_down(a: int) -> int:
    """Round ``a`` down to a page boundary."""
    return a & ~(PGSIZE - 1)


def _px(level: int, va: int) -> int:
    return (va >> (PGSHIFT + 9 * level)) & PXMASK


def _pa2pte(pa: int) -> int:
    return (pa >> 12) << 10


def _pte2pa(pte: int) -> int:
    return (pte >> 10) << 12


def _pte_flags(pte: int) -> int:
    return pte & 0x3FF


class PhysicalMemory:
    """A contiguous range of page frames with a simple free list."""

    def __init__(self, npages: int, base: int = 0x80000000) -> None:
        if npages < 0:
            raise ValueError("npages must not be negative")
        if base % PGSIZE:
            raise ValueError("base must be page aligned")
        self.base = base
        self.npages = npages
        self._data = bytearray(npages * PGSIZE)
        self._free = [base + k * PGSIZE for k in reversed(range(npages))]
        self._free_set = set(self._free)

    @property
    def free_count(self) -> int:
        """Number of pages currently free."""
        return len(self._free)

    def kalloc(self) -> int:
        """Take a free page and return its physical address."""
        if not self._free:
            raise OutOfMemory("out of physical pages")
        pa = self._free.pop()
        self._free_set.discard(pa)
        return pa

    def kfree(self, pa: int) -> None:
        """Return a page obtained from :meth:`kalloc`."""
        if pa % PGSIZE or not self.base <= pa < self.base + self.npages * PGSIZE:
            raise Panic("kfree")
        if pa in self._free_set:
            raise Panic("kfree")
        self._free.append(pa)
        self._free_set.add(pa)

    def _offset(self, pa: int, n: int) -> int:
        off = pa - self.base
        if n < 0 or off < 0 or off + n > len(self._data):
            raise ValueError(f"physical range {pa:#x}+{n} out of memory")
        return off

    def read(self, pa: int, n: int) -> bytes:
        """Read ``n`` bytes at physical address ``pa``."""
        off = self._offset(pa, n)
        return bytes(self._data[off:off + n])

    def write(self, pa: int, data: bytes) -> None:
        """Write ``data`` at physical address ``pa``."""
        off = self._offset(pa, len(data))
        self._data[off:off + len(data)] = data


class PageTable:
    """A user page table whose pages live in a :class:`PhysicalMemory`."""

    def __init__(self, memory: PhysicalMemory) -> None:
        self.memory = memory
        self.root = memory.kalloc()
        memory.write(self.root, bytes(PGSIZE))

    def _load(self, addr: int) -> int:
        return int.from_bytes(self.memory.read(addr, 8), "little")

    def _store(self, addr: int, value: int) -> None:
        self.memory.write(addr, (value % _U64).to_bytes(8, "little"))

    def _zeroed_page(self) -> int:
        pa = self.memory.kalloc()
        self.memory.write(pa, bytes(PGSIZE))
        return pa

    def walk(self, va: int, alloc: bool = False) -> int | None:
        """Return the physical address of the leaf PTE for ``va``.

        With ``alloc`` missing page-table pages are created; otherwise,
        or when memory runs out, None is returned for a missing level.
        """
        if va >= MAXVA:
            raise Panic("walk")
        table = self.root
        for level in (2, 1):
            addr = table + 8 * _px(level, va)
            pte = self._load(addr)
            if pte & PTE_V:
                table = _pte2pa(pte)
                continue
            if not alloc:
                return None
            try:
                table = self._zeroed_page()
            except OutOfMemory:
                return None
            self._store(addr, _pa2pte(table) | PTE_V)
        return table + 8 * _px(0, va)

    def walkaddr(self, va: int) -> int | None:
        """Return the physical page of a user-accessible ``va``, or None."""
        if va >= MAXVA:
            return None
        addr = self.walk(va)
        if addr is None:
            return None
        pte = self._load(addr)
        if not pte & PTE_V or not pte & PTE_U:
            return None
        return _pte2pa(pte)

    def mappages(self, va: int, size: int, pa: int, perm: int) -> None:
        """Map ``size`` bytes from ``va`` to physical memory from ``pa``."""
        if size <= 0:
            raise Panic("mappages: size")
        a = pg_round_down(va)
        last = pg_round_down(va + size - 1)
        while True:
            addr = self.walk(a, True)
            if addr is None:
                raise OutOfMemory("no page for page table")
            if self._load(addr) & PTE_V:
                raise Panic("remap")
            self._store(addr, _pa2pte(pa) | perm | PTE_V)
            if a == last:
                return
            a += PGSIZE
            pa += PGSIZE

    def unmap(self, va: int, npages: int, do_free: bool) -> None:
        """Remove ``npages`` existing mappings from page-aligned ``va``."""
        if va % PGSIZE:
            raise Panic("uvmunmap: not aligned")
        for a in range(va, va + npages * PGSIZE, PGSIZE):
            addr = self.walk(a)
            if addr is None:
                raise Panic("uvmunmap: walk")
            pte = self._load(addr)
            if not pte & PTE_V:
                raise Panic("uvmunmap: not mapped")
            if _pte_flags(pte) == PTE_V:
                raise Panic("uvmunmap: not a leaf")
            if do_free:
                self.memory.kfree(_pte2pa(pte))
            self._store(addr, 0)

    def init_first(self, src: bytes) -> None:
        """Load ``src`` (less than a page) at virtual address 0."""
        if len(src) >= PGSIZE:
            raise Panic("inituvm: more than a page")
        mem = self._zeroed_page()
        self.mappages(0, PGSIZE, mem, PTE_W | PTE_R | PTE_X | PTE_U)
        self.memory.write(mem, bytes(src))

    def grow(self, oldsz: int, newsz: int) -> int:
        """Allocate zeroed user pages from ``oldsz`` up to ``newsz``.

        Returns the new size. On failure the pages added are released
        and OutOfMemory is raised.
        """
        if newsz < oldsz:
            return oldsz
        oldsz = pg_round_up(oldsz)
        for a in range(oldsz, newsz, PGSIZE):
            try:
                mem = self._zeroed_page()
            except OutOfMemory:
                self.shrink(a, oldsz)
                raise
            try:
                self.mappages(a, PGSIZE, mem, PTE_W | PTE_X | PTE_R | PTE_U)
            except OutOfMemory:
                self.memory.kfree(mem)
                self.shrink(a, oldsz)
                raise
        return newsz

    def shrink(self, oldsz: int, newsz: int) -> int:
        """Free user pages to bring the size from ``oldsz`` to ``newsz``."""
        if newsz >= oldsz:
            return oldsz
        if pg_round_up(newsz) < pg_round_up(oldsz):
            npages = (pg_round_up(oldsz) - pg_round_up(newsz)) // PGSIZE
            self.unmap(pg_round_up(newsz), npages, True)
        return newsz

    def _freewalk(self, table: int) -> None:
        entries = _PTE_PAGE.unpack(self.memory.read(table, PGSIZE))
        for i, pte in enumerate(entries):
            if pte & PTE_V and not pte & (PTE_R | PTE_W | PTE_X):
                self._freewalk(_pte2pa(pte))
                self._store(table + 8 * i, 0)
            elif pte & PTE_V:
                raise Panic("freewalk: leaf")
        self.memory.kfree(table)

    def free(self, sz: int) -> None:
        """Free ``sz`` bytes of user memory, then every page-table page."""
        if sz > 0:
            self.unmap(0, pg_round_up(sz) // PGSIZE, True)
        self._freewalk(self.root)

    def copy_to(self, other: PageTable, sz: int) -> None:
        """Copy the first ``sz`` bytes of memory and mappings into ``other``.

        On failure everything copied is released and OutOfMemory is raised.
        """
        i = 0
        try:
            for i in range(0, sz, PGSIZE):
                addr = self.walk(i)
                if addr is None:
                    raise Panic("uvmcopy: pte should exist")
                pte = self._load(addr)
                if not pte & PTE_V:
                    raise Panic("uvmcopy: page not present")
                pa = _pte2pa(pte)
                mem = self.memory.kalloc()
                self.memory.write(mem, self.memory.read(pa, PGSIZE))
                try:
                    other.mappages(i, PGSIZE, mem, _pte_flags(pte))
                except OutOfMemory:
                    self.memory.kfree(mem)
                    raise
        except OutOfMemory:
            other.unmap(0, i // PGSIZE, True)
            raise

    def clear_user(self, va: int) -> None:
        """Remove user access from the page holding ``va``."""
        addr = self.walk(va)
        if addr is None:
            raise Panic("uvmclear")
        self._store(addr, self._load(addr) & ~PTE_U)

    def _user_page(self, va0: int) -> int:
        pa0 = self.walkaddr(va0)
        if pa0 is None:
            raise BadAddress(f"user address {va0:#x} not mapped")
        return pa0

    def copyout(self, dstva: int, data: bytes) -> None:
        """Copy ``data`` to user virtual address ``dstva``."""
        view = memoryview(bytes(data))
        while view:
            va0 = pg_round_down(dstva)
            pa0 = self._user_page(va0)
            n = min(PGSIZE - (dstva - va0), len(view))
            self.memory.write(pa0 + (dstva - va0), bytes(view[:n]))
            view = view[n:]
            dstva = va0 + PGSIZE

    def copyin(self, srcva: int, n: int) -> bytes:
        """Copy ``n`` bytes from user virtual address ``srcva``."""
        out = bytearray()
        while n > 0:
            va0 = pg_round_down(srcva)
            pa0 = self._user_page(va0)
            chunk = min(PGSIZE - (srcva - va0), n)
            out += self.memory.read(pa0 + (srcva - va0), chunk)
            n -= chunk
            srcva = va0 + PGSIZE
        return bytes(out)

    def copyinstr(self, srcva: int, max_len: int) -> bytes:
        """Copy a NUL-terminated string of at most ``max_len`` bytes.

        The terminator is not included. BadAddress is raised if no NUL
        is found within ``max_len`` bytes or a page is not mapped.
        """
        out = bytearray()
        while max_len > 0:
            va0 = pg_round_down(srcva)
            pa0 = self._user_page(va0)
            n = min(PGSIZE - (srcva - va0), max_len)
            head, nul, _ = self.memory.read(pa0 + (srcva - va0), n).partition(b"\0")
            out += head
            if nul:
                return bytes(out)
            max_len -= n
            srcva = va0 + PGSIZE
        raise BadAddress("string not terminated")