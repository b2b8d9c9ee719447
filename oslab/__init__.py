"""Operating-system building blocks: a page table, device models, a FIFO queue and a counting server."""

__version__ = "0.1.0"