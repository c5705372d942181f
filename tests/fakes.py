"""In-memory stand-ins for Playwright objects used across the tests."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from agent_browser.browser.base import PageProvider


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class FakeFrame:
    parent_frame: Optional["FakeFrame"] = None


@dataclass
class FakeConsoleMessage:
    type: str
    text: str


class FakeMouse:
    def __init__(self, page: "FakePage") -> None:
        self._page = page

    def click(self, x: int, y: int) -> None:
        self._page.calls.append(("click", x, y))
        if self._page.on_click:
            self._page.on_click(x, y)


class FakeKeyboard:
    def __init__(self, page: "FakePage") -> None:
        self._page = page

    def type(self, text: str) -> None:
        self._page.calls.append(("type", text))


class FakePage:
    def __init__(self, clock: FakeClock, url: str = "about:blank") -> None:
        self.clock = clock
        self.url = url
        self.handlers: dict[str, list[Callable[[Any], None]]] = defaultdict(list)
        self.calls: list[tuple[Any, ...]] = []
        self.contents: list[str] = []
        self.failing_formats: set[str] = set()
        self.goto_error: Optional[Exception] = None
        self.load_state_error: Optional[Exception] = None
        self.on_click: Optional[Callable[[int, int], None]] = None
        self.chatty = False
        self.navigating = False
        self.pending_navigation: Optional[tuple[str, float]] = None
        self.mouse = FakeMouse(self)
        self.keyboard = FakeKeyboard(self)

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        self.handlers[event].append(handler)

    def remove_listener(self, event: str, handler: Callable[[Any], None]) -> None:
        self.handlers[event].remove(handler)

    def listener_count(self, event: str) -> int:
        return len(self.handlers[event])

    def emit(self, event: str, payload: Any) -> None:
        for handler in list(self.handlers[event]):
            handler(payload)

    def wait_for_timeout(self, timeout: float) -> None:
        self.calls.append(("wait_for_timeout", timeout))
        self.clock.advance(timeout / 1000)
        if self.chatty:
            self.emit("console", FakeConsoleMessage("log", "tick"))

    def goto(self, url: str, timeout: Optional[float] = None, wait_until: Optional[str] = None) -> None:
        self.calls.append(("goto", url, timeout, wait_until))
        if self.goto_error:
            raise self.goto_error
        self.url = url

    def commit_navigation(self, url: str) -> FakeFrame:
        self.navigating = False
        self.url = url
        frame = FakeFrame()
        self.emit("framenavigated", frame)
        return frame

    def wait_for_event(
        self,
        event: str,
        predicate: Optional[Callable[[Any], bool]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        self.calls.append(("wait_for_event", event, timeout))
        if event == "framenavigated" and self.pending_navigation:
            url, delay = self.pending_navigation
            self.pending_navigation = None
            self.clock.advance(delay)
            frame = self.commit_navigation(url)
            if predicate is None or predicate(frame):
                return frame
        self.clock.advance((timeout or 0) / 1000)
        raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded while waiting for event \"{event}\"")

    def wait_for_load_state(self, state: str, timeout: Optional[float] = None) -> None:
        self.calls.append(("wait_for_load_state", state, timeout))
        if self.load_state_error:
            raise self.load_state_error

    def content(self) -> str:
        self.calls.append(("content",))
        if self.navigating:
            raise PlaywrightError("Unable to retrieve content because the page is navigating")
        if len(self.contents) > 1:
            return self.contents.pop(0)
        return self.contents[0] if self.contents else "<html></html>"

    def evaluate(self, expression: str, arg: Any = None) -> None:
        self.calls.append(("evaluate", expression, arg))

    def screenshot(self, type: str = "png") -> bytes:
        self.calls.append(("screenshot", type))
        if type in self.failing_formats:
            raise PlaywrightError(f"{type} capture failed")
        return f"{type}-bytes".encode()

    def called(self, name: str) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == name]


class FakeProvider(PageProvider):
    def __init__(
        self,
        page: FakePage,
        *,
        obtain_error: Optional[Exception] = None,
        teardown_error: Optional[Exception] = None,
    ) -> None:
        self.page = page
        self.obtain_error = obtain_error
        self.teardown_error = teardown_error
        self.teardowns = 0

    def obtain_page(self) -> FakePage:
        if self.obtain_error:
            raise self.obtain_error
        return self.page

    def teardown(self) -> None:
        self.teardowns += 1
        if self.teardown_error:
            raise self.teardown_error
