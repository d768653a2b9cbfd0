"""Kubectl command abstractions.

This module provides the kubectl queries used while preparing a release.
Only read-only cluster queries live here; cluster mutation is done by helm.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner


class KubectlCommands:
    """Kubectl-related shell commands.

    Provides operations for:
    - Cluster version queries
    """

    def __init__(self, runner: CommandRunner, binary: str = "kubectl") -> None:
        """Initialize kubectl commands.

        Args:
            runner: Command runner for executing shell commands
            binary: Name or path of the kubectl executable
        """
        self._runner = runner
        self.binary = binary

    def version(self, output: str = "yaml") -> CommandResult:
        """Query client and server versions.

        Args:
            output: Output format passed to `-o` (yaml or json)

        Returns:
            CommandResult whose stdout holds the structured version document
        """
        cmd = [self.binary, "version", "-o", output]
        return self._runner.run(cmd)
