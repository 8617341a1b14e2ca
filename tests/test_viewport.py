import pytest

from qlemukit.viewport import (
    DEFAULT_HEADER,
    ShaderKind,
    build_shader_source,
    distort,
    fit_viewport,
    gpu_mouse_to_ql,
    read_curve,
    shader_header,
)


def test_fit_exact():
    assert fit_viewport(512, 256, 2.0, 1.0) == (0, 0, 512, 256)


def test_fit_within_tolerance_fills_window():
    assert fit_viewport(514, 256, 2.0, 1.0) == (0, 0, 514, 256)


def test_fit_wide_window_centres_horizontally():
    x, y, w, h = fit_viewport(1000, 256, 2.0, 1.0)
    assert h == 256 and y == 0
    assert w < 1000
    assert x == (1000 - w) // 2
    assert w == 512


def test_fit_tall_window_centres_vertically():
    x, y, w, h = fit_viewport(512, 900, 2.0, 1.5)
    assert w == 512 and x == 0
    assert h < 900
    assert y == (900 - h) // 2
    assert abs(w - 2.0 * h / 1.5) < 3


def test_distort_centre_fixed():
    assert distort(0.5, 0.5, 0.3, 0.4) == pytest.approx((0.5, 0.5))


def test_distort_zero_curve_is_identity():
    assert distort(0.1, 0.8, 0.0, 0.0) == pytest.approx((0.1, 0.8))


def test_distort_symmetric():
    ax, ay = distort(0.7, 0.2, 0.25, 0.25)
    bx, by = distort(0.3, 0.8, 0.25, 0.25)
    assert ax - 0.5 == pytest.approx(-(bx - 0.5))
    assert ay - 0.5 == pytest.approx(-(by - 0.5))


def test_read_curve_values():
    src = "uniform x;\n#define CURVATURE_X 0.25\n#define CURVATURE_Y 0.5\nvoid main(){}\n"
    assert read_curve(src) == (0.25, 0.5)


def test_read_curve_missing_falls_back():
    assert read_curve("void main() {}") == (1.0, 1.0)


def test_read_curve_only_one_falls_back():
    assert read_curve("#define CURVATURE_X 0.1\n") == (1.0, 1.0)


def test_read_curve_ignores_without_define():
    assert read_curve("CURVATURE_X 0.2 CURVATURE_Y 0.3") == (1.0, 1.0)


@pytest.mark.parametrize(
    "language, lo, hi, expected",
    [
        ("glsl", 130, 450, "#version 130\n"),
        ("glsl", 110, 450, "#version 120\n"),
        ("glsl", 100, 110, "#version 110\n"),
        ("glsles", 100, 300, DEFAULT_HEADER),
    ],
)
def test_shader_header(language, lo, hi, expected):
    assert shader_header(language, lo, hi) == expected


def test_build_shader_source_order():
    body = "void main() {}\n"
    text = build_shader_source(body, ShaderKind.FRAGMENT, "#define CURVATURE\n", "#version 120\n")
    assert text == "#version 120\n#define FRAGMENT\n#define CURVATURE\n" + body


def test_build_shader_source_default_header():
    text = build_shader_source("x", ShaderKind.VERTEX)
    assert text.startswith(DEFAULT_HEADER + "#define VERTEX\n")
    assert text.endswith("x")


def test_mouse_identity_mapping():
    assert gpu_mouse_to_ql(100, 50, (0, 0, 512, 256), 512, 256) == (100, 50)


def test_mouse_scaled():
    assert gpu_mouse_to_ql(200, 100, (0, 0, 1024, 512), 512, 256) == (100, 50)


def test_mouse_clamped():
    assert gpu_mouse_to_ql(-10, -10, (0, 0, 512, 256), 512, 256) == (0, 0)
    assert gpu_mouse_to_ql(5000, 5000, (0, 0, 512, 256), 512, 256) == (511, 255)


def test_mouse_offset_rect():
    assert gpu_mouse_to_ql(110, 70, (10, 20, 512, 256), 512, 256) == (100, 50)


def test_mouse_zero_curve_matches_flat():
    flat = gpu_mouse_to_ql(300, 100, (0, 0, 512, 256), 512, 256)
    assert gpu_mouse_to_ql(300, 100, (0, 0, 512, 256), 512, 256, (0.0, 0.0)) == flat