"""Playwright-powered browser session implementation."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from ..config import BrowserConfig, TimingConfig
from ..models import ActionResult, LogEntry, LogSource
from .base import (
    BrowserSession,
    BrowserSessionError,
    Coordinate,
    NoActivePageError,
    PageProvider,
    SessionMode,
)
from .listeners import capture_page_logs, is_main_frame, watch_navigation
from .polling import Clock, poll_until
from .providers import build_page_provider
from .screenshot import capture_screenshot
from .stabilization import wait_for_stable_content

LOGGER = logging.getLogger(__name__)

ProviderFactory = Callable[[BrowserConfig, bool, str], PageProvider]
Effect = Callable[[Any], None]

_TRANSITIONS = {
    SessionMode.CLOSED: {SessionMode.LAUNCHED, SessionMode.ATTACHED},
    SessionMode.LAUNCHED: {SessionMode.CLOSED},
    SessionMode.ATTACHED: {SessionMode.CLOSED},
}


class PlaywrightBrowserSession(BrowserSession):
    """Browser session backed by Playwright.

    The session owns at most one page. Every mutating action goes through
    :meth:`_execute`, which records console output and page errors emitted
    while the action runs, waits for that output to go quiet and captures a
    screenshot. Calls must not overlap.
    """

    def __init__(
        self,
        config: Optional[BrowserConfig] = None,
        timing: Optional[TimingConfig] = None,
        *,
        provider_factory: Optional[ProviderFactory] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self._config = config or BrowserConfig()
        self._timing = timing or TimingConfig()
        self._provider_factory = provider_factory or build_page_provider
        self._clock = clock
        self._mode = SessionMode.CLOSED
        self._provider: Optional[PageProvider] = None
        self._page = None
        self._cursor: Optional[Coordinate] = None
        self._interactive = False
        self._port = self._config.debugging_port

    @property
    def mode(self) -> SessionMode:
        return self._mode

    @property
    def interactive(self) -> bool:
        return self._interactive

    @property
    def port(self) -> str:
        return self._port

    @property
    def endpoint(self) -> Any:
        return self._provider.endpoint if self._provider else None

    @property
    def cursor_position(self) -> Optional[Coordinate]:
        return self._cursor

    @property
    def has_active_page(self) -> bool:
        return self._page is not None

    def launch(self, interactive: bool = False, port: Optional[str] = None) -> ActionResult:
        if self._mode != SessionMode.CLOSED:
            LOGGER.debug("Closing previous browser session before relaunch")
            self.close()
        if port:
            self._port = port
        provider = self._provider_factory(self._config, interactive, self._port)
        try:
            page = provider.obtain_page()
        except Exception:
            self._teardown(provider)
            raise
        self._transition(SessionMode.ATTACHED if interactive else SessionMode.LAUNCHED)
        self._interactive = interactive
        self._provider = provider
        self._page = page
        if interactive:
            message = "Connected to browser in remote debugging mode."
        else:
            message = "Browser launched successfully."
        LOGGER.info(message)
        return ActionResult(
            log_entries=[LogEntry(source=LogSource.STATUS, text=message)],
            current_url=page.url,
            cursor_position=self._cursor_text(),
        )

    def close(self) -> ActionResult:
        if self._mode == SessionMode.CLOSED:
            return ActionResult()
        if self._mode == SessionMode.ATTACHED:
            LOGGER.info("Disconnecting from browser")
        else:
            LOGGER.info("Closing browser")
        provider = self._provider
        self._provider = None
        self._page = None
        self._transition(SessionMode.CLOSED)
        if provider:
            self._teardown(provider)
        return ActionResult()

    def navigate_to_url(self, url: str) -> ActionResult:
        def effect(page: Any) -> None:
            deadline = self._clock() + self._timing.navigation_timeout
            page.goto(url, timeout=self._remaining_ms(deadline), wait_until="domcontentloaded")
            page.wait_for_load_state("networkidle", timeout=self._remaining_ms(deadline))
            self._wait_till_stable(page)

        LOGGER.info("Navigating to %s", url)
        return self._execute(effect)

    def click(self, coordinate: str) -> ActionResult:
        target = Coordinate.parse(coordinate)

        def effect(page: Any) -> None:
            with watch_navigation(page) as activity:
                try:
                    page.mouse.click(target.x, target.y)
                finally:
                    self._cursor = target
                page.wait_for_timeout(self._timing.click_settle * 1000)
                if not activity.seen:
                    return
                deadline = self._clock() + self._timing.navigation_timeout
                try:
                    # Load states refer to the current document until the navigation commits.
                    if not activity.navigated:
                        page.wait_for_event(
                            "framenavigated",
                            predicate=is_main_frame,
                            timeout=self._remaining_ms(deadline),
                        )
                    page.wait_for_load_state("domcontentloaded", timeout=self._remaining_ms(deadline))
                    page.wait_for_load_state("networkidle", timeout=self._remaining_ms(deadline))
                except PlaywrightTimeoutError:
                    LOGGER.debug("Navigation after click at %s did not finish in time", target)
                self._wait_till_stable(page)

        LOGGER.info("Clicking at %s", target)
        return self._execute(effect)

    def type(self, text: str) -> ActionResult:
        LOGGER.info("Typing %d characters", len(text))
        return self._execute(lambda page: page.keyboard.type(text))

    def scroll_down(self) -> ActionResult:
        LOGGER.info("Scrolling down")
        return self._execute(self._scroll_effect(self._timing.scroll_step))

    def scroll_up(self) -> ActionResult:
        LOGGER.info("Scrolling up")
        return self._execute(self._scroll_effect(-self._timing.scroll_step))

    def _scroll_effect(self, delta: int) -> Effect:
        def effect(page: Any) -> None:
            page.evaluate("(top) => window.scrollBy({ top, behavior: 'auto' })", delta)
            page.wait_for_timeout(self._timing.scroll_settle * 1000)

        return effect

    def _execute(self, effect: Effect) -> ActionResult:
        page = self._require_page()
        with capture_page_logs(page, self._clock) as logs:
            try:
                effect(page)
            except PlaywrightTimeoutError as exc:
                LOGGER.debug("Browser action timed out: %s", exc)
            except PlaywrightError as exc:
                LOGGER.debug("Browser action failed: %s", exc)
                logs.add_error(str(exc))

            quiet = poll_until(
                lambda: logs.is_quiet(self._timing.quiescence_window),
                interval=self._timing.quiescence_interval,
                timeout=self._timing.quiescence_timeout,
                clock=self._clock,
                sleep=self._page_sleeper(page),
            )
            if not quiet:
                LOGGER.debug("Page output still active; capturing anyway")
            screenshot = capture_screenshot(page)
            entries = list(logs.entries)
        return ActionResult(
            screenshot=screenshot,
            log_entries=entries,
            current_url=page.url,
            cursor_position=self._cursor_text(),
        )

    def _wait_till_stable(self, page: Any) -> bool:
        return wait_for_stable_content(
            page.content,
            interval=self._timing.stabilization_interval,
            timeout=self._timing.stabilization_timeout,
            threshold=self._timing.stabilization_threshold,
            clock=self._clock,
            sleep=self._page_sleeper(page),
        )

    def _require_page(self) -> Any:
        if self._mode == SessionMode.CLOSED or self._page is None:
            raise NoActivePageError(
                "Browser is not launched or connected. This may occur if the browser was "
                "closed by a tool other than a browser action."
            )
        return self._page

    def _transition(self, target: SessionMode) -> None:
        if target not in _TRANSITIONS[self._mode]:
            raise BrowserSessionError(
                f"Cannot move browser session from {self._mode.value} to {target.value}"
            )
        LOGGER.debug("Browser session %s -> %s", self._mode.value, target.value)
        self._mode = target

    def _remaining_ms(self, deadline: float) -> float:
        # Playwright treats a zero timeout as "wait forever".
        return max(deadline - self._clock(), 0.001) * 1000

    def _cursor_text(self) -> Optional[str]:
        return str(self._cursor) if self._cursor else None

    @staticmethod
    def _page_sleeper(page: Any) -> Callable[[float], None]:
        # The sync driver only dispatches page events while a Playwright call is running.
        return lambda seconds: page.wait_for_timeout(seconds * 1000)

    @staticmethod
    def _teardown(provider: PageProvider) -> None:
        try:
            provider.teardown()
        except Exception:
            LOGGER.debug("Ignoring error while releasing the browser", exc_info=True)
