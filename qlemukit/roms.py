"""ROM loading, memory size and screen memory layout at emulator start."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

log = logging.getLogger(__name__)

QL_ROM_SIZE = 48 * 1024
MIN_RAM_TOP = 256 * 1024
MINERVA_MAX_TOP = 16384 * 1024
OTHER_MAX_TOP = 4096 * 1024
SCREEN_BASE = 128 * 1024
STANDARD_SCREEN_LEN = 0x8000


class RomError(Exception):
    """A ROM image is missing, unreadable or too large."""


@dataclass(frozen=True)
class ScreenLayout:
    """Screen geometry and where its memory lies, with the resulting RAM top."""

    xres: int
    yres: int
    linel: int
    qm_lo: int
    qm_hi: int
    qm_len: int
    top: int


def rom_path(rom_dir: str, rom_name: str, home: str = "") -> str:
    """Join a ROM directory and name, expanding a leading ~ to home."""
    if rom_dir.startswith("~"):
        return f"{home}/{rom_dir[1:]}/{rom_name}"
    return f"{rom_dir}/{rom_name}"


def load_rom(rom_dir: str, rom_name: str, size: int, home: str = "") -> bytes:
    """Read a ROM image of at most ``size`` bytes; raises RomError on failure."""
    path = rom_path(rom_dir, rom_name, home)
    try:
        actual = os.stat(path).st_size
    except OSError as exc:
        raise RomError(f"{path}: {exc.strerror}") from exc
    if actual > size:
        raise RomError(f"{path}: rom size error {size} != {actual}")
    if actual < size:
        log.warning("ROM is not 48k")
    try:
        with open(path, "rb") as handle:
            return handle.read(size)
    except OSError as exc:
        raise RomError(f"{path}: {exc.strerror}") from exc


def ram_top(ramsize: int, ramtop: int) -> int:
    """Return the top of memory in bytes; ramsize in KB wins over ramtop.

    Raises ValueError when less RAM is configured than QDOS needs.
    """
    top = (128 + ramsize) * 1024 if ramsize else ramtop * 1024
    if top < MIN_RAM_TOP:
        raise ValueError(f"not enough ram defined for QDOS {top // 1024 - 128}K")
    return top


def _standard(top: int) -> ScreenLayout:
    return ScreenLayout(
        xres=512,
        yres=256,
        linel=128,
        qm_lo=SCREEN_BASE,
        qm_hi=SCREEN_BASE + STANDARD_SCREEN_LEN,
        qm_len=STANDARD_SCREEN_LEN,
        top=top,
    )


def screen_layout(xres: int, yres: int, top: int, minerva: bool) -> ScreenLayout:
    """Lay out screen memory for the ROM in use, capping the RAM top first.

    Only Minerva supports screens other than 512x256; a screen larger than
    32K is placed at the top of RAM, which then shrinks to make room.
    """
    top = min(top, MINERVA_MAX_TOP if minerva else OTHER_MAX_TOP)
    if not minerva:
        return _standard(top)

    xres &= ~7
    linel = xres // 4
    qm_len = linel * yres
    qm_lo = SCREEN_BASE
    if qm_len > STANDARD_SCREEN_LEN:
        if top - qm_len < MIN_RAM_TOP + 8192:
            log.warning("not enough RAM for such a big screen")
            return _standard(top)
        qm_lo = ((top - qm_len) >> 15) << 15
        top = qm_lo
    return ScreenLayout(
        xres=xres,
        yres=yres,
        linel=linel,
        qm_lo=qm_lo,
        qm_hi=qm_lo + qm_len,
        qm_len=qm_len,
        top=top,
    )