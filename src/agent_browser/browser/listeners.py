"""Page event listeners scoped to a single browser action."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Iterator

from ..models import LogEntry, LogSource
from .polling import Clock


class PageLogCollector:
    """Collects console output and page errors in delivery order."""

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self.entries: list[LogEntry] = []
        self.last_activity = clock()

    def on_console(self, message: Any) -> None:
        self.entries.append(
            LogEntry(source=LogSource.CONSOLE, text=message.text, level=message.type)
        )
        self.last_activity = self._clock()

    def on_page_error(self, error: Any) -> None:
        self.entries.append(LogEntry(source=LogSource.PAGE_ERROR, text=str(error)))
        self.last_activity = self._clock()

    def add_error(self, text: str) -> None:
        self.entries.append(LogEntry(source=LogSource.ERROR, text=text))

    def is_quiet(self, window: float) -> bool:
        return self._clock() - self.last_activity >= window


class NavigationWatcher:
    """Remembers network requests and main-frame navigations on the page."""

    def __init__(self) -> None:
        self.seen = False
        self.navigated = False

    def on_request(self, request: Any) -> None:
        self.seen = True

    def on_frame_navigated(self, frame: Any) -> None:
        if is_main_frame(frame):
            self.navigated = True


def is_main_frame(frame: Any) -> bool:
    return frame.parent_frame is None


@contextmanager
def capture_page_logs(page: Any, clock: Clock = time.monotonic) -> Iterator[PageLogCollector]:
    """Attach console and page-error listeners for the duration of the block."""

    collector = PageLogCollector(clock)
    page.on("console", collector.on_console)
    page.on("pageerror", collector.on_page_error)
    try:
        yield collector
    finally:
        page.remove_listener("console", collector.on_console)
        page.remove_listener("pageerror", collector.on_page_error)


@contextmanager
def watch_navigation(page: Any) -> Iterator[NavigationWatcher]:
    """Attach request and frame-navigation listeners for the duration of the block."""

    watcher = NavigationWatcher()
    page.on("request", watcher.on_request)
    page.on("framenavigated", watcher.on_frame_navigated)
    try:
        yield watcher
    finally:
        page.remove_listener("request", watcher.on_request)
        page.remove_listener("framenavigated", watcher.on_frame_navigated)
