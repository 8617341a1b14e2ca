"""Viewport fitting, shader source assembly and mouse mapping for the GPU display."""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Optional

log = logging.getLogger(__name__)

DEFAULT_HEADER = "#version 100\nprecision mediump int;\nprecision mediump float;\n"
CURVATURE_DEFINE = "#define CURVATURE\n"

_UNSET = 1e8
_FLOAT_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class ShaderKind(Enum):
    """Shader stage that a source is compiled for."""

    VERTEX = "vertex"
    FRAGMENT = "fragment"

    @property
    def directive(self) -> str:
        """Preprocessor line that selects this stage in a combined source."""
        return f"#define {self.name}\n"


def fit_viewport(
    width: int, height: int, pixel_ratio: float, screen_ratio: float
) -> tuple[int, int, int, int]:
    """Return (x, y, w, h) of the largest area with the screen's aspect in a window."""
    target = (pixel_ratio * height) / screen_ratio
    if abs(width - target) < 3.0:
        return 0, 0, width, height
    if width > target:
        w = int(target)
        return int((width - w) / 2), 0, w, height
    h = int(width * screen_ratio / pixel_ratio)
    return 0, int((height - h) / 2), width, h


def distort(x: float, y: float, curve_x: float, curve_y: float) -> tuple[float, float]:
    """Apply the barrel distortion of the curved shader to a point in 0..1 space."""
    scale_x = 1.0 - 0.23 * curve_x
    scale_y = 1.0 - 0.23 * curve_y
    cx = x - 0.5
    cy = y - 0.5
    rsq = cx * cx + cy * cy
    cx += cx * curve_x * rsq
    cy += cy * curve_y * rsq
    return cx * scale_x + 0.5, cy * scale_y + 0.5


def _strtof(token: str) -> float:
    match = _FLOAT_PREFIX.match(token)
    return float(match.group(0)) if match else 0.0


def read_curve(source: str) -> tuple[float, float]:
    """Read CURVATURE_X and CURVATURE_Y defines from shader source.

    Falls back to (1.0, 1.0) unless both are found.
    """
    tokens = iter(t for t in re.split(r"[ \t\n]+", source) if t)
    x = y = _UNSET
    define = False
    for token in tokens:
        if define and token in ("CURVATURE_X", "CURVATURE_Y"):
            value = next(tokens, None)
            if value is None:
                break
            if token == "CURVATURE_X":
                x = _strtof(value)
            else:
                y = _strtof(value)
            token = value
        define = token == "#define"
    if x == _UNSET or y == _UNSET:
        log.warning("Cannot read curve data")
        return 1.0, 1.0
    return x, y


def shader_header(language: str, min_version: int, max_version: int) -> str:
    """Return the version header for a shader language ("glsl" or "glsles")."""
    if language.lower() == "glsl":
        if min_version >= 120:
            return f"#version {min_version}\n"
        if max_version >= 120:
            return "#version 120\n"
        return "#version 110\n"
    return DEFAULT_HEADER


def build_shader_source(
    source: str, kind: ShaderKind, prepend: Optional[str] = None, header: str = DEFAULT_HEADER
) -> str:
    """Assemble header, stage directive, optional extra lines and the shader body."""
    return header + kind.directive + (prepend or "") + source


def gpu_mouse_to_ql(
    x: int,
    y: int,
    rect: tuple[int, int, int, int],
    xres: int,
    yres: int,
    curve: Optional[tuple[float, float]] = None,
) -> tuple[int, int]:
    """Map window coordinates to QL screen coordinates within the viewport rect."""
    rx, ry, rw, rh = rect
    qlx = int(((x - rx) * xres + 0.5) / rw)
    qly = int(((y - ry) * yres + 0.5) / rh)

    if curve is not None:
        fx, fy = distort(qlx / xres, qly / yres, curve[0], curve[1])
        qlx = int(fx * xres)
        qly = int(fy * yres)

    qlx = qlx if qlx > 0 else 0
    qlx = qlx if qlx < xres else xres - 1
    qly = qly if qly > 0 else 0
    qly = qly if qly < yres else yres - 1
    return qlx, qly