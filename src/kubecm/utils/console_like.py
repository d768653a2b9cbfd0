"""Notice emitter protocol for the release pipeline.

The deployer reports progress through any object with these methods. The CLI
passes its rich console; library callers get StdoutConsole, which prints
plain text with rich markup removed.
"""

from __future__ import annotations

from typing import Protocol

from rich.console import ConsoleRenderable
from rich.text import Text


class ConsoleLike(Protocol):
    def print(self, msg: ConsoleRenderable | str | None = None) -> None: ...

    def info(self, msg: str) -> None: ...

    def warn(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...

    def ok(self, msg: str) -> None: ...


def plain(msg: str) -> str:
    """Strip rich markup tags, keeping escaped brackets as literal text."""
    return Text.from_markup(msg).plain


class StdoutConsole:
    """Plain-text console for use outside the CLI."""

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        print(plain(msg) if isinstance(msg, str) else msg)

    def info(self, msg: str) -> None:
        print(plain(msg))

    def warn(self, msg: str) -> None:
        print(f"warning: {plain(msg)}")

    def error(self, msg: str) -> None:
        print(f"error: {plain(msg)}")

    def ok(self, msg: str) -> None:
        print(plain(msg))


def coalesce_console(console: ConsoleLike | None) -> ConsoleLike:
    return console if console is not None else StdoutConsole()
