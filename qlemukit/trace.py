"""Backtrace of control-flow events recorded while emulating."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

# Event kinds; negative values are negated exception numbers.
RTS = 1
RTE = 2
RTR = 3
JSR = 4
BSR = 5

BACKTRACE_SIZE = 100

_EVENT_NAMES = {RTS: "RTS", RTE: "RTE", RTR: "RTR", JSR: "JSR", BSR: "BSR"}

_EXCEPTION_NAMES = {
    2: "bus error",
    3: "address error",
    4: "Illegal code",
    5: "divide by zero",
    6: "CHK instruction",
    7: "TRAPV instruction",
    8: "privilege violation",
    9: "trace xc",
    10: "Axxx instruction code",
    11: "Fxxx instruction code",
}


@dataclass(frozen=True)
class BacktraceEvent:
    """One recorded event: where it happened, where it went, and its kind."""

    where: int
    to: int
    what: int


def exception_name(xc: int) -> str:
    """Describe a 68000 exception number."""
    if 32 <= xc <= 32 + 15:
        return f"TRAP #{xc - 32}"
    if 24 <= xc <= 24 + 7:
        return f"Interrupt #{xc - 24}"
    return f"Exception {_EXCEPTION_NAMES.get(xc, '')}"


class Backtrace:
    """Ring of the most recent control-flow events."""

    def __init__(self) -> None:
        self.events: deque[BacktraceEvent] = deque(maxlen=BACKTRACE_SIZE)
        self._unchanged = True

    def add(self, where: int, to: int, what: int) -> None:
        """Record an event."""
        self.events.append(BacktraceEvent(where, to, what))
        self._unchanged = False

    def report(self, depth: int) -> list[str]:
        """Return report lines for up to ``depth`` events, newest first."""
        lines = ["BackTrace:"]
        if self._unchanged:
            lines.append("\tunchanged")
            return lines
        self._unchanged = True
        depth = min(depth, BACKTRACE_SIZE)
        for event in list(reversed(self.events))[:max(depth, 0)]:
            if event.what > 0:
                label = f"\t {_EVENT_NAMES.get(event.what, 'unknown')}\t"
            else:
                label = f"\t{exception_name(-event.what)}\t"
            lines.append(f"{label}at PC={event.where:x}, new pc={event.to:x}")
        return lines