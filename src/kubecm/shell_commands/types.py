"""Data types for shell command results and plans.

This module contains the dataclasses shared by the shell command modules
and by the release pipeline that assembles commands for them.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "CommandResult",
    "CommandPlan",
    "ServerVersion",
]


@dataclass
class CommandResult:
    """Result of a command execution."""

    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0


@dataclass(frozen=True)
class CommandPlan:
    """A fully assembled external invocation.

    Plans are built once by the command builder and never mutated afterwards;
    the runner only executes them.

    Attributes:
        tokens: Program name followed by its arguments, in order
        output: Optional file receiving the command's standard output
    """

    tokens: tuple[str, ...]
    output: Path | None = None

    @property
    def program(self) -> str:
        """Get the executable name."""
        return self.tokens[0]

    @property
    def args(self) -> tuple[str, ...]:
        """Get the arguments following the executable."""
        return self.tokens[1:]

    def display(self) -> str:
        """Render the plan as a copy-pasteable shell line."""
        line = shlex.join(self.tokens)
        if self.output is not None:
            line = f"{line} > {shlex.quote(str(self.output))}"
        return line

    def __str__(self) -> str:
        return self.display()


@dataclass
class ServerVersion:
    """Kubernetes API server version as reported by `kubectl version`.

    Attributes:
        major: Raw major component (may carry suffixes like "1+")
        minor: Raw minor component (may carry suffixes like "27+")
        git_version: Full git version string, if reported
    """

    major: str
    minor: str
    git_version: str = ""
