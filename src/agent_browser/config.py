"""Configuration models for the agent browser session."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/128.0.0.0 Safari/537.36"
)


class BrowserConfig(BaseModel):
    """Settings for launching or attaching to the browser."""

    viewport_width: int = 900
    viewport_height: int = 600
    user_agent: str = DEFAULT_USER_AGENT
    launch_args: list[str] = Field(default_factory=list)
    debugging_host: str = "127.0.0.1"
    debugging_port: str = Field(
        default="7333",
        description="Remote-debugging port used when attaching to a running browser.",
    )
    endpoint_timeout: float = Field(
        default=5.0,
        description="Timeout (in seconds) for fetching the remote-debugging metadata.",
    )


class TimingConfig(BaseModel):
    """Timeouts and delays (in seconds) used while executing actions."""

    navigation_timeout: float = 7.0
    quiescence_window: float = 0.5
    quiescence_interval: float = 0.1
    quiescence_timeout: float = 3.0
    stabilization_interval: float = 0.5
    stabilization_timeout: float = 5.0
    stabilization_threshold: int = 3
    click_settle: float = 0.1
    scroll_step: int = 600
    scroll_settle: float = 0.3


class OutputConfig(BaseModel):
    """Where action results are published."""

    console: bool = True
    screenshot_dir: Optional[Path] = None


class AgentBrowserSettings(BaseSettings):
    """Top-level configuration for the browser session."""

    model_config = SettingsConfigDict(
        env_prefix="AGENT_BROWSER_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    timing: TimingConfig = Field(default_factory=TimingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> AgentBrowserSettings:
    """Load configuration from an optional YAML file and overrides.

    Values from the file and ``overrides`` take precedence over environment
    variables and the ``.env`` file.
    """

    data: dict[str, Any] = {}
    if path:
        import yaml

        data = yaml.safe_load(path.read_text()) or {}
    if overrides:
        _deep_update(data, overrides)
    settings_kwargs: dict[str, object] = {}
    if env_file is not None:
        settings_kwargs["_env_file"] = env_file
    config = AgentBrowserSettings(**settings_kwargs)
    if not data:
        return config

    merged = config.model_dump(mode="python")
    _deep_update(merged, data)
    return AgentBrowserSettings.model_validate(merged)


def _deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    """Recursively merge ``updates`` into ``target`` in-place."""

    for key, value in updates.items():
        if (
            isinstance(value, Mapping)
            and isinstance(existing := target.get(key), Mapping)
        ):
            nested: dict[str, Any]
            if isinstance(existing, dict):
                nested = existing
            else:
                nested = dict(existing)
            _deep_update(nested, value)
            target[key] = nested
        else:
            target[key] = value
