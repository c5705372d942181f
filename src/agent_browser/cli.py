"""Command line interface for agent-browser."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import typer

from .browser.base import BrowserSessionError
from .browser.providers import resolve_websocket_endpoint
from .config import load_config
from .factory import build_session, build_sink
from .models import BrowserAction, load_action_script

app = typer.Typer(help="Agent browser session entry point")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before executing any command."""

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Print the package version."""

    try:
        typer.echo(get_version("agent-browser"))
    except PackageNotFoundError:  # pragma: no cover - when running from source tree
        typer.echo("0.0.0")


@app.command()
def run(
    script: Annotated[
        Path,
        typer.Argument(help="YAML file with the list of actions to perform."),
    ],
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option(
            "--env-file",
            help="Path to an .env file with default configuration values.",
        ),
    ] = None,
    interactive: Annotated[
        bool,
        typer.Option(
            "--interactive/--private",
            help="Attach to a running debuggable browser instead of launching one.",
        ),
    ] = False,
    port: Annotated[
        Optional[str],
        typer.Option("--port", help="Remote-debugging port used with --interactive."),
    ] = None,
    screenshot_dir: Annotated[
        Optional[Path],
        typer.Option("--screenshot-dir", help="Directory for captured screenshots."),
    ] = None,
) -> None:
    """Launch a browser, perform the scripted actions and close it."""

    overrides: dict[str, Any] = {}
    if port is not None:
        overrides["browser"] = {"debugging_port": port}
    if screenshot_dir is not None:
        overrides["output"] = {"screenshot_dir": str(screenshot_dir)}

    config = load_config(config_path, env_file=env_file, **overrides)
    actions = load_action_script(script)
    typer.echo(f"Loaded {len(actions)} actions from {script}")

    session = build_session(config)
    sink = build_sink(config.output)
    try:
        sink.publish("launch", session.launch(interactive=interactive))
        for action in actions:
            sink.publish(describe_action(action), session.perform(action))
    except BrowserSessionError as exc:
        typer.secho(f"Browser action failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    finally:
        session.close()
    typer.echo("All actions completed.")


@app.command()
def probe(
    port: Annotated[
        str,
        typer.Option("--port", help="Remote-debugging port of the running browser."),
    ] = "7333",
    host: Annotated[
        str,
        typer.Option("--host", help="Host of the running browser."),
    ] = "127.0.0.1",
) -> None:
    """Print the WebSocket control endpoint of a debuggable browser."""

    try:
        endpoint = resolve_websocket_endpoint(host, port)
    except BrowserSessionError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(endpoint)


def describe_action(action: BrowserAction) -> str:
    # Typed text may be a password; only its length is shown.
    if action.text is not None:
        return f"{action.type.value} ({len(action.text)} characters)"
    detail = action.url or action.coordinate
    if detail:
        return f"{action.type.value} {detail}"
    return action.type.value


if __name__ == "__main__":
    app()
