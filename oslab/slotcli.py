"""Command-line sender and reader for the message-slot device."""

from __future__ import annotations

import os
import re
import sys

from oslab.messageslot import BUF_LEN, SlotFile, open_device

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_UINT32_MASK = (1 << 32) - 1


def _atoi(text: str) -> int:
    """Parse a leading integer the lenient way; anything else counts as 0."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) & _UINT32_MASK if match else 0


def _perror(message: str, exc: OSError) -> None:
    reason = exc.strerror or str(exc)
    print(f"{message}: {reason}", file=sys.stderr, flush=True)


def _open(path: str) -> SlotFile | None:
    try:
        return open_device(path)
    except OSError as exc:
        _perror(f"Can't open device file: {path}", exc)
        return None


def _select_channel(device: SlotFile, channel: str) -> bool:
    try:
        device.set_channel(_atoi(channel))
    except OSError as exc:
        _perror("ioctl failed", exc)
        return False
    return True


def sender_main(argv: list[str] | None = None) -> int:
    """Write a message to a channel: ``<device_file> <channel_id> <message>``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 3:
        print("Usage: <device_file> <ioctl_command> <ioctl_param>", file=sys.stderr, flush=True)
        return 1
    path, channel, text = args

    device = _open(path)
    if device is None:
        return 1
    with device:
        if not _select_channel(device, channel):
            return 1
        try:
            device.write(os.fsencode(text))
        except OSError as exc:
            _perror("write failed", exc)
            return 1
    return 0


def reader_main(argv: list[str] | None = None) -> int:
    """Print the message held on a channel: ``<device_file> <channel_id>``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print("Usage: <device_file> <ioctl_param>", file=sys.stderr, flush=True)
        return 1
    path, channel = args

    device = _open(path)
    if device is None:
        return 1
    with device:
        if not _select_channel(device, channel):
            return 1
        try:
            message = device.read(BUF_LEN)
        except OSError as exc:
            _perror("read failed", exc)
            return 1

    out = getattr(sys.stdout, "buffer", None)
    if out is None:
        sys.stdout.write(message.decode(errors="replace"))
        sys.stdout.flush()
    else:
        sys.stdout.flush()
        out.write(message)
        out.flush()
    return 0


if __name__ == "__main__":
    sys.exit(sender_main())