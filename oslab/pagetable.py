"""A simulated five-level page table over a pool of 4 KiB physical frames."""

from __future__ import annotations

import sys
from collections.abc import Iterator

NO_MAPPING = (1 << 64) - 1
NPAGES = 1024 * 1024
PAGE_SIZE = 4096
ENTRIES_PER_TABLE = PAGE_SIZE // 8
FRAME_BASE = 0xBAAAAAAD
LEVELS = 5
BITS_PER_LEVEL = 9
OFFSET_BITS = 12

_INDEX_MASK = (1 << BITS_PER_LEVEL) - 1
_VALID = 1
_MASK64 = (1 << 64) - 1


class OutOfMemoryError(MemoryError):
    """Raised when every physical frame has been handed out."""


class PhysicalMemory:
    """A pool of page frames, each holding 512 64-bit page-table entries."""

    def __init__(self, npages: int = NPAGES) -> None:
        self.npages = npages
        self._frames: list[list[int]] = []

    def __len__(self) -> int:
        return len(self._frames)

    def alloc_page_frame(self) -> int:
        """Allocate a zeroed frame and return its physical page number."""
        if len(self._frames) >= self.npages:
            raise OutOfMemoryError("out of physical memory")
        self._frames.append([0] * ENTRIES_PER_TABLE)
        return len(self._frames) - 1 + FRAME_BASE

    def frame(self, ppn: int) -> list[int]:
        """Return the entries of the frame with physical page number ``ppn``."""
        index = ppn - FRAME_BASE
        if not 0 <= index < len(self._frames):
            raise ValueError(f"no physical frame {ppn:#x}")
        return self._frames[index]


def _indices(vpn: int) -> Iterator[int]:
    for level in range(LEVELS - 1, -1, -1):
        yield (vpn >> (BITS_PER_LEVEL * level)) & _INDEX_MASK


def _check_number(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} must not be negative: {value}")


def page_table_update(memory: PhysicalMemory, pt: int, vpn: int, ppn: int | None) -> None:
    """Map ``vpn`` to ``ppn`` in the table rooted at frame ``pt``.

    Passing ``None`` or ``NO_MAPPING`` as ``ppn`` removes the mapping.
    Missing intermediate tables are allocated along the way.
    """
    _check_number("vpn", vpn)
    *path, leaf = _indices(vpn)
    table = memory.frame(pt)
    for index in path:
        entry = table[index]
        if not entry & _VALID:
            entry = ((memory.alloc_page_frame() << OFFSET_BITS) | _VALID) & _MASK64
            table[index] = entry
        table = memory.frame(entry >> OFFSET_BITS)

    if ppn is None or ppn == NO_MAPPING:
        table[leaf] &= ~_VALID & _MASK64
    else:
        _check_number("ppn", ppn)
        table[leaf] = ((ppn << OFFSET_BITS) | _VALID) & _MASK64


def page_table_query(memory: PhysicalMemory, pt: int, vpn: int) -> int:
    """Return the page number ``vpn`` maps to, or ``NO_MAPPING``."""
    _check_number("vpn", vpn)
    *path, leaf = _indices(vpn)
    table = memory.frame(pt)
    for index in path:
        entry = table[index]
        if not entry & _VALID:
            return NO_MAPPING
        table = memory.frame(entry >> OFFSET_BITS)

    entry = table[leaf]
    if not entry & _VALID:
        return NO_MAPPING
    return entry >> OFFSET_BITS


class PageTable:
    """A page table bound to its physical memory and root frame."""

    def __init__(self, memory: PhysicalMemory | None = None, root: int | None = None) -> None:
        self.memory = memory if memory is not None else PhysicalMemory()
        self.root = self.memory.alloc_page_frame() if root is None else root

    def update(self, vpn: int, ppn: int | None) -> None:
        """Map ``vpn`` to ``ppn``; ``None`` or ``NO_MAPPING`` unmaps it."""
        page_table_update(self.memory, self.root, vpn, ppn)

    def query(self, vpn: int) -> int:
        """Return the mapped page number for ``vpn`` or ``NO_MAPPING``."""
        return page_table_query(self.memory, self.root, vpn)


def main(argv: list[str] | None = None) -> int:
    """Run the built-in self check and return the exit status."""
    table = PageTable()
    probes = (0xCAFECAFEEEE, 0xFFFECAFEEEE, 0xCAFECAFEEFF)

    def expect(vpn: int, wanted: int) -> None:
        got = table.query(vpn)
        if got != wanted:
            raise SystemExit(f"query({vpn:#x}) returned {got:#x}, expected {wanted:#x}")

    for vpn in probes:
        expect(vpn, NO_MAPPING)
    table.update(0xCAFECAFEEEE, 0xF00D)
    expect(0xCAFECAFEEEE, 0xF00D)
    expect(0xFFFECAFEEEE, NO_MAPPING)
    expect(0xCAFECAFEEFF, NO_MAPPING)
    table.update(0xCAFECAFEEEE, NO_MAPPING)
    for vpn in probes:
        expect(vpn, NO_MAPPING)
    return 0


if __name__ == "__main__":
    sys.exit(main())