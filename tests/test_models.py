from pathlib import Path

import pytest
from pydantic import ValidationError

from agent_browser.models import (
    ActionResult,
    BrowserAction,
    BrowserActionType,
    LogEntry,
    LogSource,
    load_action_script,
)


@pytest.mark.parametrize(
    ("entry", "expected"),
    [
        (LogEntry(source=LogSource.CONSOLE, text="hello", level="log"), "hello"),
        (LogEntry(source=LogSource.CONSOLE, text="careful", level="warning"), "[warning] careful"),
        (LogEntry(source=LogSource.PAGE_ERROR, text="ReferenceError: x"), "[Page Error] ReferenceError: x"),
        (LogEntry(source=LogSource.ERROR, text="net::ERR_FAILED"), "[Error] net::ERR_FAILED"),
        (LogEntry(source=LogSource.STATUS, text="Browser launched successfully."), "Browser launched successfully."),
    ],
)
def test_log_entry_render(entry, expected):
    assert entry.render() == expected


def test_action_result_joins_logs_and_dumps_them():
    result = ActionResult(
        screenshot="data:image/png;base64,AAAA",
        log_entries=[
            LogEntry(source=LogSource.CONSOLE, text="one", level="log"),
            LogEntry(source=LogSource.CONSOLE, text="two", level="error"),
        ],
        current_url="https://example.com",
        cursor_position="1,2",
    )

    assert result.logs == "one\n[error] two"
    assert result.model_dump()["logs"] == "one\n[error] two"
    assert not result.is_empty
    assert ActionResult().is_empty
    assert ActionResult().logs == ""


def test_browser_action_is_immutable():
    action = BrowserAction(type=BrowserActionType.NAVIGATE, url="https://example.com")

    with pytest.raises(ValidationError):
        action.url = "https://other.example"


def test_load_action_script(tmp_path: Path) -> None:
    script = tmp_path / "actions.yaml"
    script.write_text(
        "\n".join(
            [
                "- type: navigate",
                "  url: https://example.com",
                "- type: click",
                '  coordinate: "450,300"',
                "- type: type",
                "  text: hello",
                "- type: scroll_down",
                "- type: scroll_up",
            ]
        )
    )

    actions = load_action_script(script)

    assert [action.type for action in actions] == [
        BrowserActionType.NAVIGATE,
        BrowserActionType.CLICK,
        BrowserActionType.TYPE,
        BrowserActionType.SCROLL_DOWN,
        BrowserActionType.SCROLL_UP,
    ]
    assert actions[1].coordinate == "450,300"


def test_load_action_script_rejects_unknown_type(tmp_path: Path) -> None:
    script = tmp_path / "actions.yaml"
    script.write_text("- type: hover\n")

    with pytest.raises(ValidationError):
        load_action_script(script)
