# oslab

A collection of small operating-system building blocks:

- `oslab.pagetable`: a five-level radix page table over simulated physical memory (`PhysicalMemory`, `PageTable`, `page_table_update`, `page_table_query`, `OutOfMemoryError`). Each physical frame holds 512 entries.
- `oslab.fifoqueue`: a thread-safe FIFO queue. Blocked readers are served in the order they arrived (`ConcurrentQueue`, `QueueEmpty`). `try_dequeue` never takes an item that a waiting reader is owed.
- `oslab.messageslot`: an in-process model of a message-slot device (`SlotRegistry`, `SlotFile`, `open_device`, `ioc_write`, `run_tester`). Each minor number has its own slot. Each open handle picks a channel, and each channel keeps one message of 1 to 128 bytes. Errors are raised as `OSError` with the matching `errno`.
- `oslab.slotcli`: command-line sender and reader for message-slot device files (`sender_main`, `reader_main`).
- `oslab.chardev`: a single-opener character device model with an "encryption" flag that shifts each written byte by one (`CharDevice`, `DeviceBusyError`).
- `oslab.pccserver` / `oslab.pccclient`: a TCP server that counts printable ASCII characters (32 to 126) in files it receives (`PccServer`, `PrintableCounter`, `count_printable`), and a client that sends it a file (`send_file`).

## Installation

```
pip install .
```

To run the tests with `pytest`, install with `pip install .[test]`.

## Commands

```
oslab-pagetable                      # run the page-table self-check
oslab-message-sender DEVICE CHANNEL MESSAGE
oslab-message-reader DEVICE CHANNEL
oslab-chardev                        # exercise the character device model
oslab-pcc-server PORT                # Ctrl-C stops it and prints per-character totals
oslab-pcc-client HOST PORT FILE      # prints "# of printable characters: N"
```

The sender and reader work on the device model of the process they run in. Its messages are not kept between runs.

## Library use

```python
from oslab.pagetable import PhysicalMemory, PageTable, NO_MAPPING

memory = PhysicalMemory()
table = PageTable(memory)
table.update(0xCAFECAFEEEE, 0xF00D)
assert table.query(0xCAFECAFEEEE) == 0xF00D
table.update(0xCAFECAFEEEE, None)
assert table.query(0xCAFECAFEEEE) == NO_MAPPING
```

```python
from oslab.fifoqueue import ConcurrentQueue

q = ConcurrentQueue()
q.enqueue("a")
assert q.dequeue() == "a"
assert q.visited() == 1
```

```python
from oslab.messageslot import SlotRegistry

registry = SlotRegistry()
with registry.open(0) as slot:
    slot.set_channel(6)
    slot.write(b"Hello World!")
    assert slot.read(128) == b"Hello World!"
```

```python
from oslab.pccserver import count_printable

assert count_printable(b"hi\n") == 2
```

## What it does not do

The package has no interactive command shell. It also does not install a real kernel device. The message-slot and character devices exist only as in-memory models inside the Python process.