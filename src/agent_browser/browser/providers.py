"""Launch and attach strategies that hand the session its page."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from ..config import BrowserConfig
from .base import BrowserConnectionError, PageProvider

LOGGER = logging.getLogger(__name__)


def _connection_help(port: str) -> str:
    return (
        f"make sure you have a running browser with --remote-debugging-port={port}"
    )


def resolve_websocket_endpoint(
    host: str,
    port: str,
    *,
    timeout: float = 5.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> str:
    """Read the browser's WebSocket control URL from ``/json/version``."""

    url = f"http://{host}:{port}/json/version"
    LOGGER.debug("Fetching remote-debugging metadata from %s", url)
    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            response = client.get(url)
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
        raise BrowserConnectionError(
            f"Failed to connect to browser on port {port}: {exc}; {_connection_help(port)}"
        ) from exc
    endpoint = data.get("webSocketDebuggerUrl") if isinstance(data, dict) else None
    if not endpoint:
        raise BrowserConnectionError(
            f"Could not get webSocketDebuggerUrl from the browser debugging API on port "
            f"{port}; {_connection_help(port)}"
        )
    return endpoint


class LaunchedPageProvider(PageProvider):
    """Starts a private, always headed Chromium instance."""

    def __init__(self, config: BrowserConfig) -> None:
        self._config = config
        self._playwright = None
        self._browser = None

    def obtain_page(self):
        LOGGER.debug("Launching private browser")
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(
            headless=False,
            args=list(self._config.launch_args),
        )
        context = self._browser.new_context(
            viewport={
                "width": self._config.viewport_width,
                "height": self._config.viewport_height,
            },
            user_agent=self._config.user_agent,
        )
        return context.new_page()

    def teardown(self) -> None:
        LOGGER.debug("Closing private browser")
        try:
            if self._browser:
                self._browser.close()
        finally:
            if self._playwright:
                self._playwright.stop()
            self._browser = None
            self._playwright = None

    @property
    def endpoint(self) -> Any:
        return self._browser


class AttachedPageProvider(PageProvider):
    """Drives a user-visible browser through its remote-debugging port."""

    def __init__(
        self,
        config: BrowserConfig,
        port: str,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._port = port
        self._transport = transport
        self._playwright = None
        self._browser = None

    def obtain_page(self):
        endpoint = resolve_websocket_endpoint(
            self._config.debugging_host,
            self._port,
            timeout=self._config.endpoint_timeout,
            transport=self._transport,
        )
        LOGGER.debug("Connecting to browser at %s", endpoint)
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.connect_over_cdp(endpoint)
        except PlaywrightError as exc:
            self._playwright.stop()
            self._playwright = None
            raise BrowserConnectionError(
                f"Failed to connect to browser on port {self._port}: {exc}; "
                f"{_connection_help(self._port)}"
            ) from exc
        contexts = self._browser.contexts
        context = contexts[0] if contexts else self._browser.new_context()
        return context.new_page()

    def teardown(self) -> None:
        # Only the driver connection goes away; the remote browser keeps running.
        LOGGER.debug("Disconnecting from browser on port %s", self._port)
        if self._playwright:
            self._playwright.stop()
        self._browser = None
        self._playwright = None

    @property
    def endpoint(self) -> str:
        return self._port


def build_page_provider(
    config: BrowserConfig,
    interactive: bool,
    port: str,
) -> PageProvider:
    if interactive:
        return AttachedPageProvider(config, port)
    return LaunchedPageProvider(config)
