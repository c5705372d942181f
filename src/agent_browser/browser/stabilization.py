"""Heuristic wait for client-side rendering to settle after navigation."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .polling import Clock, Sleeper, poll_until

LOGGER = logging.getLogger(__name__)


class ContentLengthTracker:
    """Predicate that holds once the content length stops changing.

    Each call samples the content once. A non-zero length equal to the previous
    sample extends the current run; anything else starts over. The predicate
    holds when ``threshold`` consecutive samples share the same length.
    """

    def __init__(self, content: Callable[[], str], threshold: int = 3) -> None:
        self._content = content
        self._threshold = threshold
        self._last_length: Optional[int] = None
        self.stable_samples = 0
        self.samples = 0

    def __call__(self) -> bool:
        length = len(self._content().encode("utf-8"))
        self.samples += 1
        LOGGER.debug("Content length last=%s current=%s", self._last_length, length)
        if length == 0:
            self.stable_samples = 0
        elif length == self._last_length:
            self.stable_samples += 1
        else:
            self.stable_samples = 1
        self._last_length = length
        return self.stable_samples >= self._threshold


def wait_for_stable_content(
    content: Callable[[], str],
    *,
    interval: float = 0.5,
    timeout: float = 5.0,
    threshold: int = 3,
    clock: Clock = time.monotonic,
    sleep: Sleeper = time.sleep,
) -> bool:
    """Poll ``content`` until its length is stable or ``timeout`` elapses.

    Pages whose markup keeps changing (clocks, tickers) never stabilize and
    always run into the timeout.
    """

    tracker = ContentLengthTracker(content, threshold=threshold)
    stable = poll_until(tracker, interval=interval, timeout=timeout, clock=clock, sleep=sleep)
    if stable:
        LOGGER.debug("Page content stable after %d samples", tracker.samples)
    else:
        LOGGER.debug("Page content still changing after %.1fs", timeout)
    return stable
