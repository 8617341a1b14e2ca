"""Window sizing and mapping of window mouse positions onto the QL screen."""

from __future__ import annotations

from dataclasses import dataclass

# Pixel aspect ratios selectable with the fixaspect option. 1.355 is the
# ratio the QL ROMs themselves assume.
SQUARE_PIXELS = 1.0
NON_SQUARE_PIXELS = 3.0 / 2.0
BBQL_PIXELS = 1.355


@dataclass(frozen=True)
class Rect:
    """A rectangle in window coordinates."""

    x: int
    y: int
    w: int
    h: int


def aspect_ratio(fixaspect: int) -> float:
    """Return the vertical stretch factor for a fixaspect option value."""
    if fixaspect == 1:
        return NON_SQUARE_PIXELS
    if fixaspect == 2:
        return BBQL_PIXELS
    return SQUARE_PIXELS


def window_size(
    xres: int, yres: int, ratio: float, win_size: str
) -> tuple[int, int, bool, bool]:
    """Return (width, height, maximized, fullscreen) for a win_size option.

    "1x" (or anything unrecognised) gives the QL resolution with the aspect
    stretch applied, "2x" and "3x" scale it, "max" asks for a maximized
    window and "full" for a full-screen one.
    """
    ay = yres * ratio
    width, height = xres, round(ay)
    maximized = fullscreen = False
    if win_size == "2x":
        width, height = xres * 2, round(ay * 2.0)
    elif win_size == "3x":
        width, height = xres * 3, round(ay * 3.0)
    elif win_size == "max":
        maximized = True
    elif win_size == "full":
        fullscreen = True
    return width, height, maximized, fullscreen


def _axis(pos: int, start: int, length: int, res: int) -> int:
    if pos < start:
        return 0
    if pos > start + length:
        return res - 1
    scale = length / res
    return int((pos - start) / scale)


def sdl_mouse_to_ql(
    x: int, y: int, dest: Rect, xres: int, yres: int, highdpi: bool = False
) -> tuple[int, int]:
    """Map a window mouse position onto QL screen coordinates.

    Positions before the destination rectangle clamp to 0, positions beyond
    it to the last pixel. High-DPI windows report half-size coordinates.
    """
    if highdpi:
        x *= 2
        y *= 2
    return _axis(x, dest.x, dest.w, xres), _axis(y, dest.y, dest.h, yres)