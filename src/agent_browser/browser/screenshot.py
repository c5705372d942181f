"""Screenshot capture with a lossless fallback."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

from playwright.sync_api import Error as PlaywrightError

from .base import ScreenshotFailedError

LOGGER = logging.getLogger(__name__)

_FORMATS = (("jpeg", "image/jpeg"), ("png", "image/png"))
_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png"}


def capture_screenshot(page: Any) -> str:
    """Return the visible viewport as a data URI, preferring JPEG."""

    failures: list[str] = []
    for image_type, mime in _FORMATS:
        try:
            data = page.screenshot(type=image_type)
        except PlaywrightError as exc:
            LOGGER.debug("Capturing %s screenshot failed: %s", image_type, exc)
            failures.append(f"{image_type}: {exc}")
            continue
        return to_data_uri(data, mime)
    raise ScreenshotFailedError("Failed to take screenshot (" + "; ".join(failures) + ")")


def to_data_uri(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    """Split a base64 data URI into its MIME type and raw bytes."""

    header, sep, payload = uri.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URI")
    mime = header[len("data:") : -len(";base64")]
    try:
        return mime, base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise ValueError("Invalid base64 payload in data URI") from exc


def extension_for(mime: str) -> str:
    return _EXTENSIONS.get(mime, "bin")
