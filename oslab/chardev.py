"""A simple single-user character device that stores what is written, optionally shifted."""

from __future__ import annotations

import errno
import logging
import os
import sys
import threading

from oslab.messageslot import ioc_write

log = logging.getLogger(__name__)

MAJOR_NUM = 236
DEVICE_RANGE_NAME = "char_dev"
BUF_LEN = 80
DEVICE_FILE_NAME = "simple_char_dev"
SUCCESS = 0

_SIZEOF_UNSIGNED_LONG = 8
_IOC_READ = 2

IOCTL_SET_ENC = ioc_write(MAJOR_NUM, 0, _SIZEOF_UNSIGNED_LONG)


def _ioc_read(major: int, number: int, size: int) -> int:
    return (_IOC_READ << 30) | (size << 16) | (major << 8) | number


class DeviceBusyError(OSError):
    """Raised when the device is opened while another user holds it."""

    def __init__(self) -> None:
        super().__init__(errno.EBUSY, os.strerror(errno.EBUSY))


class CharDevice:
    """A device holding one message buffer; talks to one opener at a time."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._open_count = 0
        self._message = bytearray(BUF_LEN)
        self.encryption_flag = 0

    @property
    def message(self) -> bytes:
        """The full contents of the message buffer."""
        return bytes(self._message)

    def open(self) -> None:
        """Take the device; raise DeviceBusyError if it is already taken."""
        log.info("Invoking device_open(%r)", self)
        with self._lock:
            if self._open_count == 1:
                raise DeviceBusyError()
            self._open_count += 1

    def release(self) -> None:
        """Give the device back for the next caller."""
        log.info("Invoking device_release(%r)", self)
        with self._lock:
            self._open_count -= 1

    def read(self, length: int) -> bytes:
        """Reading is not supported: always raises EINVAL."""
        log.info(
            "Invoking device_read(%r,%d) - operation not supported yet (last written - %r)",
            self,
            length,
            self.message,
        )
        raise OSError(errno.EINVAL, os.strerror(errno.EINVAL))

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Store up to BUF_LEN bytes, each plus one when encryption is on."""
        chunk = bytes(data)[:BUF_LEN]
        log.info("Invoking device_write(%r,%d)", self, len(data))
        shift = 1 if self.encryption_flag == 1 else 0
        self._message[: len(chunk)] = bytes((byte + shift) & 0xFF for byte in chunk)
        return len(chunk)

    def ioctl(self, command: int, param: int) -> int:
        """Set the encryption flag on IOCTL_SET_ENC; other commands are ignored."""
        if command == IOCTL_SET_ENC:
            log.info("Invoking ioctl: setting encryption flag to %d", param)
            self.encryption_flag = param
        return SUCCESS


def main(argv: list[str] | None = None) -> int:
    """Exercise a device with both encryption settings and print the ioctl numbers."""
    device = CharDevice()
    try:
        device.open()
    except DeviceBusyError:
        print(f"Can't open device file: {DEVICE_FILE_NAME}")
        return 1
    try:
        for flag in (0, 1):
            device.ioctl(IOCTL_SET_ENC, flag)
            device.write(b"Hello")
            try:
                device.read(100)
            except OSError:
                pass
        read_number = _ioc_read(MAJOR_NUM, 0, _SIZEOF_UNSIGNED_LONG)
        print(f"Magic Numbers: {IOCTL_SET_ENC}, {read_number}")
    finally:
        device.release()
    return 0


if __name__ == "__main__":
    sys.exit(main())