"""QL real-time clock: conversion between host and QL time."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

# Seconds between the QL epoch (1961-01-01) and the Unix epoch.
TIME_DIFF = 283996800


def ux_to_ql_time(t: int, tz_offset: int) -> int:
    """Convert Unix seconds to QL seconds in local time."""
    return t + TIME_DIFF + tz_offset


def ql_to_ux_time(t: int, tz_offset: int) -> int:
    """Convert QL seconds in local time to Unix seconds."""
    return t - TIME_DIFF - tz_offset


def local_tz_offset() -> int:
    """Return the offset of local time from UTC in seconds, east positive."""
    now = time.time()
    local = time.localtime(now)
    utc = time.gmtime(now)
    utc_as_local = time.struct_time(tuple(utc)[:8] + (local.tm_isdst,))
    return int(time.mktime(local) - time.mktime(utc_as_local))


def _to_w32(value: int) -> int:
    return ((value + 2**31) % 2**32) - 2**31


@dataclass
class QLClock:
    """The QL clock: host time shifted to the QL epoch plus an adjustment."""

    tz_offset: int = field(default_factory=local_tz_offset)
    adjust: int = 0
    source: Callable[[], float] = time.time

    def now(self) -> int:
        """Return the current QL time as a signed 32-bit value."""
        return _to_w32(ux_to_ql_time(int(self.source()), self.tz_offset) + self.adjust)