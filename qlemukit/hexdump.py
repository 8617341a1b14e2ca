"""Classic hex plus ASCII dump of a byte string."""

from __future__ import annotations

from typing import Iterator

_ROW = 16
_HALF = 8


def _hex(chunk: bytes) -> str:
    return "".join(f"{b:02X} " for b in chunk)


def _ascii(chunk: bytes) -> str:
    return "".join(chr(b) if 0x20 <= b <= 0x7E else "." for b in chunk)


def hexdump_lines(data: bytes) -> Iterator[str]:
    """Yield one formatted line per 16 bytes of data, without line endings."""
    data = bytes(data)
    for start in range(0, len(data), _ROW):
        chunk = data[start:start + _ROW]
        padding = "   " * (_ROW - len(chunk))
        yield (
            f"{_hex(chunk[:_HALF])} {_hex(chunk[_HALF:])} {padding}"
            f"|  {_ascii(chunk)} "
        )


def hexdump(data: bytes) -> None:
    """Print a hex dump of data to standard output."""
    for line in hexdump_lines(data):
        print(line)