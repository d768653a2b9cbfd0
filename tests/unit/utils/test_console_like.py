"""Tests for the plain-text console fallback."""

from unittest.mock import MagicMock

import pytest
from rich.markup import escape

from kubecm.utils.console_like import StdoutConsole, coalesce_console


class TestStdoutConsole:
    """Tests for StdoutConsole output."""

    def test_markup_is_stripped(self, capsys: pytest.CaptureFixture[str]) -> None:
        StdoutConsole().print("  [dim]STATUS: deployed[/dim]")

        assert capsys.readouterr().out == "  STATUS: deployed\n"

    def test_escaped_brackets_stay_literal(self, capsys: pytest.CaptureFixture[str]) -> None:
        StdoutConsole().print(f"[dim]{escape('http://host[/api]')}[/dim]")

        assert capsys.readouterr().out == "http://host[/api]\n"

    def test_warn_and_error_are_prefixed(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = StdoutConsole()

        console.warn("[yellow]careful[/yellow]")
        console.error("broken")

        assert capsys.readouterr().out == "warning: careful\nerror: broken\n"


def test_coalesce_console_keeps_given_console():
    console = MagicMock()

    assert coalesce_console(console) is console
    assert isinstance(coalesce_console(None), StdoutConsole)
