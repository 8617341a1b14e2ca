from qlemukit.clock import (
    TIME_DIFF,
    QLClock,
    local_tz_offset,
    ql_to_ux_time,
    ux_to_ql_time,
)


def test_epoch_offset():
    assert ux_to_ql_time(0, 0) == 283996800
    assert ql_to_ux_time(283996800, 0) == 0


def test_round_trip():
    for t, tz in [(0, 0), (1_000_000, 3600), (1_700_000_000, -18000)]:
        assert ql_to_ux_time(ux_to_ql_time(t, tz), tz) == t


def test_timezone_shifts_result():
    assert ux_to_ql_time(100, 3600) - ux_to_ql_time(100, 0) == 3600


def test_local_tz_offset_is_whole_minutes():
    offset = local_tz_offset()
    assert offset % 60 == 0
    assert abs(offset) <= 14 * 3600


def test_clock_now_uses_source():
    clock = QLClock(tz_offset=0, source=lambda: 1000.9)
    assert clock.now() == ux_to_ql_time(1000, 0)


def test_clock_adjust():
    base = QLClock(tz_offset=0, source=lambda: 5000.0)
    shifted = QLClock(tz_offset=0, adjust=10, source=lambda: 5000.0)
    assert shifted.now() - base.now() == 10


def test_clock_wraps_to_signed_32_bits():
    clock = QLClock(tz_offset=0, source=lambda: float(2**31 - TIME_DIFF))
    assert clock.now() == -(2**31)


def test_default_tz_is_local():
    assert QLClock().tz_offset == local_tz_offset()