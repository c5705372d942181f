"""Shared models used across the agent browser session."""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, computed_field


class BrowserActionType(str, enum.Enum):
    """Enumerated browser operations the agent can request."""

    NAVIGATE = "navigate"
    CLICK = "click"
    TYPE = "type"
    SCROLL_DOWN = "scroll_down"
    SCROLL_UP = "scroll_up"


class BrowserAction(BaseModel):
    """An instruction for the browser session to execute."""

    model_config = ConfigDict(frozen=True)

    type: BrowserActionType
    url: Optional[str] = None
    coordinate: Optional[str] = Field(
        default=None,
        description='Click target in "x,y" form, in viewport pixels.',
    )
    text: Optional[str] = None


class LogSource(str, enum.Enum):
    """Where a captured log line came from."""

    CONSOLE = "console"
    PAGE_ERROR = "page_error"
    ERROR = "error"
    STATUS = "status"


class LogEntry(BaseModel):
    """A single line captured while executing an action."""

    source: LogSource
    text: str
    level: Optional[str] = Field(default=None, description="Console message level.")

    def render(self) -> str:
        if self.source == LogSource.CONSOLE:
            if self.level in (None, "log"):
                return self.text
            return f"[{self.level}] {self.text}"
        if self.source == LogSource.PAGE_ERROR:
            return f"[Page Error] {self.text}"
        if self.source == LogSource.ERROR:
            return f"[Error] {self.text}"
        return self.text


class ActionResult(BaseModel):
    """Observable state of the page after a browser action."""

    screenshot: Optional[str] = Field(
        default=None,
        description="Data URI of the captured screenshot.",
    )
    log_entries: list[LogEntry] = Field(default_factory=list)
    current_url: Optional[str] = None
    cursor_position: Optional[str] = Field(
        default=None,
        description='Last clicked coordinate in "x,y" form.',
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def logs(self) -> str:
        return "\n".join(entry.render() for entry in self.log_entries)

    @property
    def is_empty(self) -> bool:
        return (
            self.screenshot is None
            and not self.log_entries
            and self.current_url is None
            and self.cursor_position is None
        )


_ACTION_LIST = TypeAdapter(list[BrowserAction])


def load_action_script(path: Path) -> list[BrowserAction]:
    """Read a YAML list of browser actions."""

    import yaml

    data = yaml.safe_load(path.read_text()) or []
    return _ACTION_LIST.validate_python(data)
