"""Factories for constructing components from configuration."""

from __future__ import annotations

from .browser.playwright_session import PlaywrightBrowserSession
from .config import AgentBrowserSettings, OutputConfig
from .sinks.base import CompositeResultSink, ConsoleResultSink, ResultSink, ScreenshotDirectorySink


def build_session(config: AgentBrowserSettings) -> PlaywrightBrowserSession:
    return PlaywrightBrowserSession(config.browser, config.timing)


def build_sink(config: OutputConfig) -> ResultSink:
    sinks: list[ResultSink] = []
    if config.console:
        sinks.append(ConsoleResultSink())
    if config.screenshot_dir is not None:
        sinks.append(ScreenshotDirectorySink(config.screenshot_dir))
    return CompositeResultSink(sinks)
