"""Helm command abstractions.

This module provides commands for Helm repository registration and for
executing assembled release plans (upgrade --install / template).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from .types import CommandPlan, CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner


class HelmCommands:
    """Helm-related shell commands.

    Provides operations for:
    - Repository management (repo add)
    - Plan execution (apply and render invocations)
    """

    def __init__(self, runner: CommandRunner, binary: str = "helm") -> None:
        """Initialize Helm commands.

        Args:
            runner: Command runner for executing shell commands
            binary: Name or path of the helm executable
        """
        self._runner = runner
        self.binary = binary

    # =========================================================================
    # Repository Management
    # =========================================================================

    def repo_add(self, alias: str, url: str) -> CommandResult:
        """Register a chart repository under a local alias.

        Args:
            alias: Repository alias used in `alias/chart` references
            url: Repository URL

        Returns:
            CommandResult with registration status

        Example:
            >>> helm.repo_add("bitnami", "https://charts.bitnami.com/bitnami")
        """
        cmd = [self.binary, "repo", "add", alias, url]
        return self._runner.run(cmd)

    # =========================================================================
    # Plan Execution
    # =========================================================================

    def execute(
        self,
        plan: CommandPlan,
        *,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Execute an assembled helm plan.

        Plans with an output file (render mode) have their standard output
        written to that file. Otherwise output is streamed line by line when
        a callback is given, or captured.

        Args:
            plan: Command plan built by the command builder
            on_output: Optional callback for real-time output streaming

        Returns:
            CommandResult with execution status
        """
        if plan.output is not None:
            return self._runner.run(plan.tokens, stdout_path=plan.output)
        if on_output:
            return self._runner.run_streaming(plan.tokens, on_output=on_output)
        return self._runner.run(plan.tokens, capture_output=True)
