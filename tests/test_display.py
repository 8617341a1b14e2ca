import pytest

from qlemukit.display import Rect, aspect_ratio, sdl_mouse_to_ql, window_size


@pytest.mark.parametrize(
    "option, expected", [(0, 1.0), (1, 1.5), (2, 1.355), (7, 1.0)]
)
def test_aspect_ratio(option, expected):
    assert aspect_ratio(option) == pytest.approx(expected)


def test_window_size_single_square():
    assert window_size(512, 256, 1.0, "1x") == (512, 256, False, False)


def test_window_size_scales_with_factor():
    w1, h1, _, _ = window_size(512, 256, 1.5, "1x")
    w2, h2, _, _ = window_size(512, 256, 1.5, "2x")
    w3, h3, _, _ = window_size(512, 256, 1.5, "3x")
    assert (w2, h2) == (2 * w1, 2 * h1)
    assert (w3, h3) == (3 * w1, 3 * h1)


def test_window_size_applies_ratio_to_height():
    w, h, _, _ = window_size(512, 256, 1.5, "1x")
    assert w == 512
    assert h == 384


def test_window_size_max_and_full_flags():
    assert window_size(512, 256, 1.0, "max")[2:] == (True, False)
    assert window_size(512, 256, 1.0, "full")[2:] == (False, True)
    assert window_size(512, 256, 1.0, "bogus") == window_size(512, 256, 1.0, "1x")


def test_mouse_identity_mapping():
    dest = Rect(0, 0, 512, 256)
    assert sdl_mouse_to_ql(100, 50, dest, 512, 256) == (100, 50)


def test_mouse_clamps_outside_rect():
    dest = Rect(10, 20, 512, 256)
    assert sdl_mouse_to_ql(5, 5, dest, 512, 256) == (0, 0)
    assert sdl_mouse_to_ql(1000, 1000, dest, 512, 256) == (511, 255)


def test_mouse_scaled_rect_halves_coordinates():
    dest = Rect(0, 0, 1024, 512)
    for x, y in [(0, 0), (200, 100), (1000, 400)]:
        assert sdl_mouse_to_ql(x, y, dest, 512, 256) == (x // 2, y // 2)


def test_mouse_offset_rect():
    dest = Rect(40, 30, 512, 256)
    assert sdl_mouse_to_ql(140, 80, dest, 512, 256) == (100, 50)


def test_mouse_highdpi_doubles_input():
    dest = Rect(0, 0, 1024, 512)
    assert sdl_mouse_to_ql(60, 40, dest, 512, 256, highdpi=True) == sdl_mouse_to_ql(
        120, 80, dest, 512, 256
    )


def test_mouse_result_within_screen():
    dest = Rect(16, 8, 700, 300)
    for x in range(0, 800, 37):
        for y in range(0, 400, 29):
            qx, qy = sdl_mouse_to_ql(x, y, dest, 512, 256)
            assert 0 <= qx < 512
            assert 0 <= qy <= 256