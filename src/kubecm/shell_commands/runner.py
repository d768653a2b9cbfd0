"""Command runner for executing shell commands.

This module provides the base command execution functionality used by
all specialized command modules.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from loguru import logger

from .types import CommandResult


class CommandRunner:
    """Low-level command executor with consistent result handling.

    This class provides the foundation for executing shell commands with
    proper output capture, output redirection and streaming support.

    All specialized command modules (Helm, kubectl) use this runner for
    actual command execution.
    """

    def __init__(self, working_dir: Path | None = None) -> None:
        """Initialize the command runner.

        Args:
            working_dir: Directory commands are executed from.
                         Defaults to the process working directory.
        """
        self.working_dir = working_dir

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = True,
        stdout_path: Path | None = None,
    ) -> CommandResult:
        """Execute a shell command and return structured result.

        Args:
            cmd: Command and arguments as a sequence
            cwd: Working directory (defaults to working_dir)
            capture_output: Whether to capture stdout/stderr
            stdout_path: Write standard output to this file instead of
                         capturing it (the file is truncated first)

        Returns:
            CommandResult with success status, output, and return code
        """
        logger.debug(f"Running: {shlex.join(cmd)}")

        if stdout_path is not None:
            with open(stdout_path, "w") as out:
                result = subprocess.run(
                    list(cmd),
                    cwd=cwd or self.working_dir,
                    stdout=out,
                    stderr=subprocess.PIPE,
                    text=True,
                )
        else:
            result = subprocess.run(
                list(cmd),
                cwd=cwd or self.working_dir,
                capture_output=capture_output,
                text=True,
            )

        return CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )

    def run_streaming(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Execute a shell command with real-time output streaming.

        This method runs a command and calls the on_output callback for each
        line of output, allowing real-time progress display.

        Args:
            cmd: Command and arguments as a sequence
            cwd: Working directory (defaults to working_dir)
            on_output: Callback function called with each line of output.
                      If None, output is collected but not streamed.

        Returns:
            CommandResult with success status, collected output, and return code
        """
        logger.debug(f"Running (streaming): {shlex.join(cmd)}")

        env = os.environ.copy()
        env["PYTHONUNBUFFERED"] = "1"

        process = subprocess.Popen(
            list(cmd),
            cwd=cwd or self.working_dir,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,  # Merge stderr into stdout
            text=True,
            bufsize=0,
            env=env,
        )

        stdout_lines: list[str] = []

        if process.stdout:
            for line in iter(process.stdout.readline, ""):
                line = line.rstrip("\n")
                if line:
                    stdout_lines.append(line)
                    if on_output:
                        on_output(line)

        process.wait()

        output = "\n".join(stdout_lines)
        return CommandResult(
            success=process.returncode == 0,
            stdout=output,
            # stderr is merged into stdout; keep it visible on failure
            stderr=output if process.returncode else "",
            returncode=process.returncode or 0,
        )
