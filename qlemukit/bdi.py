"""Block device interface that backs a QL disk unit with a host image file."""

from __future__ import annotations

import logging
import os
from typing import BinaryIO, Optional

log = logging.getLogger(__name__)

BLOCK_SIZE = 512
UNITS = 8

READ_COMMAND = 2
WRITE_COMMAND = 3


class BlockDeviceInterface:
    """Register-level model of the block device interface.

    Only unit 1 can be attached; it is backed by the image file at ``path``.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self.address = 0
        self.unit = 0
        self._counter = 0
        self._buffer = bytearray(BLOCK_SIZE)
        self._files: list[Optional[BinaryIO]] = [None] * UNITS

    def __enter__(self) -> "BlockDeviceInterface":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _current(self) -> Optional[BinaryIO]:
        if 1 <= self.unit <= UNITS:
            return self._files[self.unit - 1]
        return None

    def select(self, unit: int) -> None:
        """Select a unit; unit 0 releases the currently selected one."""
        if unit == 1 and self._files[0] is None and self.path:
            log.debug("BDI: opening %s", self.path)
            try:
                self._files[0] = open(self.path, "r+b")
            except OSError as exc:
                log.error("BDI: error opening %s: %s", self.path, exc)

        if unit == 0 and 1 <= self.unit <= UNITS:
            handle = self._files[self.unit - 1]
            if handle is not None:
                handle.close()
            self._files[self.unit - 1] = None

        self.unit = unit

    def command(self, command: int) -> None:
        """Start a read or write transfer; other commands are ignored."""
        if command in (READ_COMMAND, WRITE_COMMAND):
            self._counter = 0
        else:
            log.debug("BDI: unknown command 0x%02x", command)

    def status(self) -> int:
        """Return 1 when the selected unit has no open image, else 0."""
        return 0 if self._current() is not None else 1

    def read_data(self) -> int:
        """Return the next byte of the block at the current address."""
        handle = self._current()
        if handle is None:
            return 0
        if self._counter == 0:
            handle.seek(self.address * BLOCK_SIZE)
            try:
                chunk = handle.read(BLOCK_SIZE)
            except OSError as exc:
                log.error("BDI: read failed: %s", exc)
            else:
                self._buffer[:len(chunk)] = chunk
        if self._counter < BLOCK_SIZE:
            value = self._buffer[self._counter]
            self._counter += 1
            return value
        return 0

    def write_data(self, value: int) -> None:
        """Store one byte; a full block is written to the image."""
        handle = self._current()
        if handle is None:
            return
        if self._counter == 0:
            handle.seek(self.address * BLOCK_SIZE)
        log.debug("BDI: write %d", self._counter)
        if self._counter < BLOCK_SIZE:
            self._buffer[self._counter] = value & 0xFF
            self._counter += 1
        if self._counter == BLOCK_SIZE:
            try:
                handle.write(self._buffer)
                handle.flush()
                os.fsync(handle.fileno())
            except OSError as exc:
                log.error("BDI: write failed: %s", exc)

    def set_address_high(self, value: int) -> None:
        """Set the upper 16 bits of the block address."""
        self.address = (self.address & 0x0000FFFF) | ((value & 0xFFFF) << 16)

    def set_address_low(self, value: int) -> None:
        """Set the lower 16 bits of the block address."""
        self.address = (self.address & 0xFFFF0000) | (value & 0xFFFF)

    def _blocks(self) -> Optional[int]:
        handle = self._current()
        if handle is None:
            return None
        return os.fstat(handle.fileno()).st_size // BLOCK_SIZE

    def size_high(self) -> int:
        """Return the high register of the image size in blocks.

        The block count is truncated to 16 bits before the shift, so this
        register always reads as zero.
        """
        blocks = self._blocks()
        if blocks is None:
            return 0
        return (blocks & 0xFFFF) >> 16

    def size_low(self) -> int:
        """Return the low 16 bits of the image size in blocks."""
        blocks = self._blocks()
        if blocks is None:
            return 0
        return blocks & 0xFFFF

    def close(self) -> None:
        """Close every open image."""
        for i, handle in enumerate(self._files):
            if handle is not None:
                handle.close()
                self._files[i] = None