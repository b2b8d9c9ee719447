"""An in-memory message-slot device: per-minor slots holding one message per channel."""

from __future__ import annotations

import errno
import logging
import os
import re
import sys
from collections.abc import Callable

log = logging.getLogger(__name__)

MAJOR_NUM = 235
DEVICE_RANGE_NAME = "message_slot"
DEVICE_FILE_NAME = "message_slot"
BUF_LEN = 128
SUCCESS = 0
MINOR_COUNT = 256

_IOC_WRITE = 1
_SIZEOF_UNSIGNED_LONG = 8
_UINT32_MASK = (1 << 32) - 1
_ULONG_MASK = (1 << 64) - 1


def ioc_write(major: int, number: int, size: int) -> int:
    """Encode a write ioctl request number the way the Linux ``_IOW`` macro does."""
    if not 0 <= major <= 0xFF:
        raise ValueError(f"ioctl type out of range: {major}")
    if not 0 <= number <= 0xFF:
        raise ValueError(f"ioctl number out of range: {number}")
    if not 0 <= size < (1 << 14):
        raise ValueError(f"ioctl argument size out of range: {size}")
    return (_IOC_WRITE << 30) | (size << 16) | (major << 8) | number


MSG_SLOT_CHANNEL = ioc_write(MAJOR_NUM, 0, _SIZEOF_UNSIGNED_LONG)


def _fail(code: int) -> OSError:
    return OSError(code, os.strerror(code))


class SlotRegistry:
    """All message slots of the device, keyed by minor number."""

    def __init__(self) -> None:
        self._slots: dict[int, dict[int, bytes]] = {}

    def __contains__(self, minor: object) -> bool:
        return minor in self._slots

    def open(self, minor: int) -> SlotFile:
        """Open the slot for ``minor``, creating it on first use."""
        if not 0 <= minor < MINOR_COUNT:
            raise _fail(errno.EINVAL)
        if minor not in self._slots:
            self._slots[minor] = {}
            log.info("Slot number %d created", minor)
        return SlotFile(self, minor)

    def _slot(self, minor: int) -> dict[int, bytes]:
        try:
            return self._slots[minor]
        except KeyError:
            raise _fail(errno.EINVAL) from None


class SlotFile:
    """An open handle on one slot; each handle selects its own channel."""

    def __init__(self, registry: SlotRegistry, minor: int) -> None:
        self._registry = registry
        self.minor = minor
        self._param = 0
        self._closed = False

    def __enter__(self) -> SlotFile:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def channel(self) -> int:
        """The channel id selected on this handle, 0 if none."""
        return self._param & _UINT32_MASK

    def _check_open(self) -> None:
        if self._closed:
            raise _fail(errno.EBADF)

    def ioctl(self, command: int, param: int) -> int:
        """Handle an ioctl; only ``MSG_SLOT_CHANNEL`` with a non-zero id is accepted."""
        self._check_open()
        if command != MSG_SLOT_CHANNEL or param < 0 or param & _ULONG_MASK == 0:
            raise _fail(errno.EINVAL)
        self._param = param & _ULONG_MASK
        log.info("Channel number set to %d", self.channel)
        return SUCCESS

    def set_channel(self, channel_id: int) -> int:
        """Select the channel that later reads and writes use."""
        return self.ioctl(MSG_SLOT_CHANNEL, channel_id)

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Replace the message on the selected channel; return the bytes written."""
        self._check_open()
        if data is None:
            raise _fail(errno.EINVAL)
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"expected a bytes-like object, got {type(data).__name__}")
        message = bytes(data)
        if not 0 < len(message) <= BUF_LEN:
            raise _fail(errno.EMSGSIZE)
        if self.channel == 0:
            raise _fail(errno.EINVAL)
        self._registry._slot(self.minor)[self.channel] = message
        log.info("Wrote to slot number %d channel number %d", self.minor, self.channel)
        return len(message)

    def read(self, length: int) -> bytes:
        """Return the message on the selected channel if it fits in ``length`` bytes."""
        self._check_open()
        if self.channel == 0:
            raise _fail(errno.EINVAL)
        slot = self._registry._slot(self.minor)
        message = slot.get(self.channel)
        if message is None:
            raise _fail(errno.EWOULDBLOCK)
        if len(message) > length:
            raise _fail(errno.ENOSPC)
        log.info("Read from slot number %d channel number %d", self.minor, self.channel)
        return message

    def close(self) -> None:
        """Release the handle; the slot's messages stay in place."""
        self._param = 0
        self._closed = True


_DEFAULT_REGISTRY = SlotRegistry()
_TRAILING_DIGITS = re.compile(r"(\d+)$")


def _minor_from_path(path: str) -> int:
    match = _TRAILING_DIGITS.search(os.path.basename(path))
    return int(match.group(1)) if match else 0


def open_device(path: str) -> SlotFile:
    """Open a device node of the shared registry.

    The minor number is taken from the digits that end the file name;
    a name without them stands for minor 0.
    """
    return _DEFAULT_REGISTRY.open(_minor_from_path(path))


DEV0 = "/dev/test0"
DEV1 = "/dev/test1"


class _TestFailure(Exception):
    pass


def _check(condition: bool) -> None:
    if not condition:
        raise _TestFailure


def _fails_with(code: int, call: Callable[..., object], *args: object) -> bool:
    try:
        call(*args)
    except OSError as exc:
        return exc.errno == code
    return False


def _fails(call: Callable[..., object], *args: object) -> bool:
    try:
        call(*args)
    except OSError:
        return True
    return False


def run_tester(registry: SlotRegistry) -> list[tuple[int, bool]]:
    """Run the device acceptance checks in order, stopping at the first failure.

    Prints one line per check and returns ``(number, passed)`` pairs.
    """

    def open_dev(path: str) -> SlotFile:
        return registry.open(_minor_from_path(path))

    def test1() -> None:
        dev = open_dev(DEV0)
        dev.set_channel(6)
        _check(dev.write(b"Hello World!") >= 12)
        _check(dev.read(128)[:12] == b"Hello World!")

    def test2() -> None:
        dev0, dev1 = open_dev(DEV0), open_dev(DEV1)
        dev0.set_channel(99)
        dev1.set_channel(99)
        _check(dev0.write(b"dev0") >= 4)
        _check(dev1.write(b"dev1") >= 4)
        _check(dev0.read(128)[:4] == b"dev0")
        _check(dev1.read(128)[:4] == b"dev1")
        dev0.close()
        dev1.close()

    def test3() -> None:
        dev = open_dev(DEV0)
        dev.set_channel(50)
        dev.set_channel(6)
        _check(dev.read(128)[:12] == b"Hello World!")
        dev.close()

    def test4() -> None:
        dev0, dev1 = open_dev(DEV0), open_dev(DEV1)
        dev0.set_channel(6)
        _check(_fails(dev1.write, b"hey"))
        dev0.close()
        dev1.close()

    def test5() -> None:
        dev0 = open_dev(DEV0)
        dev0.set_channel(6)
        dev1 = open_dev(DEV1)
        _check(_fails(dev1.write, b"hey"))
        dev0.close()
        dev1.close()

    def test6() -> None:
        dev = open_dev(DEV0)
        dev.set_channel(1024)
        _check(dev.write(b"old") >= 3)
        _check(dev.write(b"new") >= 3)
        _check(dev.read(128)[:3] == b"new")
        _check(dev.read(128)[:3] == b"new")
        dev.close()

    def test7() -> None:
        junk = bytes(16)
        dev = open_dev(DEV0)
        dev.set_channel(161616)
        _check(dev.write(junk) >= len(junk))
        _check(len(dev.read(len(junk))) >= len(junk))
        dev.close()

    def test8() -> None:
        dev = open_dev(DEV0)
        dev.set_channel(199)
        _check(_fails_with(errno.EWOULDBLOCK, dev.read, 128))
        dev.close()

    def test9() -> None:
        dev = open_dev(DEV0)
        dev.set_channel(54)
        _check(_fails_with(errno.EMSGSIZE, dev.write, b""))
        dev.close()

    def test10() -> None:
        dev = open_dev(DEV0)
        dev.set_channel(2049)
        _check(_fails_with(errno.EMSGSIZE, dev.write, b"a" * 129))
        dev.close()

    def test11() -> None:
        dev = open_dev(DEV0)
        _check(_fails_with(errno.EINVAL, dev.write, b"abcd"))
        dev.close()

    def test12() -> None:
        dev = open_dev(DEV0)
        _check(_fails_with(errno.EINVAL, dev.read, 4))
        dev.close()

    def test13() -> None:
        dev = open_dev(DEV0)
        dev.set_channel(999)
        _check(dev.write(b"testtest") >= 8)
        _check(_fails_with(errno.ENOSPC, dev.read, 4))
        dev.close()

    def test14() -> None:
        dev = open_dev(DEV0)
        dev.set_channel(1048578)
        dev.close()

    checks = (
        test1, test2, test3, test4, test5, test6, test7,
        test8, test9, test10, test11, test12, test13, test14,
    )
    results: list[tuple[int, bool]] = []
    print("RESULTS\n-------")
    for number, check in enumerate(checks, start=1):
        try:
            check()
        except (OSError, _TestFailure):
            print(f"TEST {number}: Failure")
            results.append((number, False))
            return results
        print(f"TEST {number}: Success")
        results.append((number, True))
    print("DONE!")
    return results


if __name__ == "__main__":
    outcome = run_tester(SlotRegistry())
    sys.exit(0 if all(passed for _, passed in outcome) else 1)