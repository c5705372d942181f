"""Browser session abstractions."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ..models import ActionResult, BrowserAction, BrowserActionType


class BrowserSessionError(RuntimeError):
    """Base class for failures surfaced to the caller of a browser session."""


class BrowserConnectionError(BrowserSessionError):
    """Raised when attaching to a remote-debugging browser fails."""


class NoActivePageError(BrowserSessionError):
    """Raised when an action is issued while no page is open."""


class InvalidCoordinateError(BrowserSessionError):
    """Raised when a click target cannot be parsed."""


class ScreenshotFailedError(BrowserSessionError):
    """Raised when no screenshot format could be captured."""


class InvalidActionError(BrowserSessionError):
    """Raised when an action lacks the argument its type requires."""


class SessionMode(str, enum.Enum):
    """Lifecycle state of a browser session."""

    CLOSED = "closed"
    LAUNCHED = "launched"
    ATTACHED = "attached"


@dataclass(frozen=True)
class Coordinate:
    """A viewport position in CSS pixels."""

    x: int
    y: int

    @classmethod
    def parse(cls, raw: str) -> "Coordinate":
        parts = raw.split(",")
        if len(parts) != 2:
            raise InvalidCoordinateError(f'Invalid coordinate {raw!r}; expected "x,y"')
        try:
            return cls(int(parts[0].strip()), int(parts[1].strip()))
        except ValueError as exc:
            raise InvalidCoordinateError(
                f'Invalid coordinate {raw!r}; expected two integers as "x,y"'
            ) from exc

    def __str__(self) -> str:
        return f"{self.x},{self.y}"


class PageProvider(ABC):
    """Source of the single page a session drives."""

    @abstractmethod
    def obtain_page(self):
        """Connect or launch as needed and return a fresh page."""

    @abstractmethod
    def teardown(self) -> None:
        """Release the browser connection or process."""

    @property
    def endpoint(self) -> Any:
        """Debug port or owned browser handle, if any."""
        return None


class BrowserSession(ABC):
    """Interface for the agent-facing browser session."""

    @abstractmethod
    def launch(self, interactive: bool = False, port: Optional[str] = None) -> ActionResult:
        """Launch a private browser or attach to a running one."""

    @abstractmethod
    def close(self) -> ActionResult:
        """End the session; never raises."""

    @abstractmethod
    def navigate_to_url(self, url: str) -> ActionResult:
        """Load ``url`` and wait for the page to settle."""

    @abstractmethod
    def click(self, coordinate: str) -> ActionResult:
        """Click at an ``"x,y"`` viewport position."""

    @abstractmethod
    def type(self, text: str) -> ActionResult:
        """Type ``text`` into the focused element."""

    @abstractmethod
    def scroll_down(self) -> ActionResult:
        """Scroll the viewport down by one step."""

    @abstractmethod
    def scroll_up(self) -> ActionResult:
        """Scroll the viewport up by one step."""

    def perform(self, action: BrowserAction) -> ActionResult:
        """Dispatch ``action`` to the matching operation."""

        if action.type == BrowserActionType.NAVIGATE:
            if not action.url:
                raise InvalidActionError("Navigate action requires a URL")
            return self.navigate_to_url(action.url)
        if action.type == BrowserActionType.CLICK:
            if not action.coordinate:
                raise InvalidActionError("Click action requires a coordinate")
            return self.click(action.coordinate)
        if action.type == BrowserActionType.TYPE:
            if action.text is None:
                raise InvalidActionError("Type action requires text")
            return self.type(action.text)
        if action.type == BrowserActionType.SCROLL_DOWN:
            return self.scroll_down()
        if action.type == BrowserActionType.SCROLL_UP:
            return self.scroll_up()
        raise InvalidActionError(f"Unsupported action type: {action.type}")
