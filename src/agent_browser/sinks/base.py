"""Destinations for browser action results."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional

from rich.console import Console
from rich.markup import escape

from ..browser.screenshot import decode_data_uri, extension_for
from ..models import ActionResult

LOGGER = logging.getLogger(__name__)

_MAX_SLUG = 60


class ResultSink(ABC):
    """Interface for consumers of action results."""

    @abstractmethod
    def publish(self, label: str, result: ActionResult) -> None:
        """Hand over the result of the action described by ``label``."""


class ConsoleResultSink(ResultSink):
    """Prints results to the terminal using Rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()

    def publish(self, label: str, result: ActionResult) -> None:
        self._console.print(f"[bold cyan]{escape(label)}[/]")
        if result.current_url:
            self._console.print(f"  url: {result.current_url}", markup=False)
        if result.cursor_position:
            self._console.print(f"  cursor: {result.cursor_position}", markup=False)
        if result.screenshot:
            self._console.print(f"  screenshot: {len(result.screenshot)} bytes", style="dim")
        for line in result.logs.splitlines():
            self._console.print(f"  {line}", style="dim", markup=False)


class ScreenshotDirectorySink(ResultSink):
    """Writes every captured screenshot to a numbered file."""

    def __init__(self, directory: Path) -> None:
        self._directory = directory
        self._counter = 0
        self.written: list[Path] = []

    def publish(self, label: str, result: ActionResult) -> None:
        self._counter += 1
        if not result.screenshot:
            return
        mime, data = decode_data_uri(result.screenshot)
        self._directory.mkdir(parents=True, exist_ok=True)
        slug = re.sub(r"[^a-z0-9]+", "-", label.lower())[:_MAX_SLUG].strip("-") or "action"
        path = self._directory / f"{self._counter:03d}-{slug}.{extension_for(mime)}"
        path.write_bytes(data)
        LOGGER.debug("Saved screenshot to %s", path)
        self.written.append(path)


class CollectingResultSink(ResultSink):
    """Keeps results in memory."""

    def __init__(self) -> None:
        self.results: list[tuple[str, ActionResult]] = []

    def publish(self, label: str, result: ActionResult) -> None:
        self.results.append((label, result))


class CompositeResultSink(ResultSink):
    """Fan-out sink that propagates results to multiple sinks."""

    def __init__(self, sinks: Iterable[ResultSink]) -> None:
        self._sinks = list(sinks)

    def publish(self, label: str, result: ActionResult) -> None:
        for sink in self._sinks:
            sink.publish(label, result)
