"""Bounded polling shared by the settle heuristics."""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], float]
Sleeper = Callable[[float], None]


def poll_until(
    predicate: Callable[[], bool],
    *,
    interval: float,
    timeout: float,
    clock: Clock = time.monotonic,
    sleep: Sleeper = time.sleep,
) -> bool:
    """Evaluate ``predicate`` every ``interval`` seconds until it holds.

    Returns ``True`` as soon as the predicate is satisfied and ``False`` once
    ``timeout`` seconds have elapsed without that happening. The predicate is
    always evaluated at least once and never sleeps past the deadline.
    """

    deadline = clock() + timeout
    while True:
        if predicate():
            return True
        remaining = deadline - clock()
        if remaining <= 0:
            return False
        sleep(min(interval, remaining))
