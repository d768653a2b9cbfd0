"""Shell command abstractions for release deployment.

This package provides a clean interface for the external tools used while
deploying a release. It is organized into specialized modules for each tool:

- helm: Repository registration and release plan execution
- kubectl: Cluster version queries

Design Principles:
- Single Responsibility: Each module focuses on one tool
- Consistent Return Types: Functions return CommandResult; callers decide
  whether a failure is fatal
- Separation of Concerns: Commands are decoupled from release logic, which
  assembles CommandPlan objects without executing anything

Usage:
    from kubecm.shell_commands import ShellCommands

    commands = ShellCommands()
    commands.helm.repo_add("fakerepo", "https://example.com/fakerepo")
"""

from pathlib import Path

from .helm import HelmCommands
from .kubectl import KubectlCommands
from .runner import CommandRunner
from .types import CommandPlan, CommandResult, ServerVersion


class ShellCommands:
    """Unified interface for all shell command operations.

    Attributes:
        helm: Helm-related commands
        kubectl: Kubernetes kubectl commands

    Example:
        >>> commands = ShellCommands()
        >>> commands.helm.execute(plan)
    """

    def __init__(
        self,
        working_dir: Path | None = None,
        *,
        helm_binary: str = "helm",
        kubectl_binary: str = "kubectl",
    ) -> None:
        """Initialize the shell commands executor.

        Args:
            working_dir: Directory commands are executed from. Relative chart
                         paths and render targets resolve against it.
            helm_binary: Name or path of the helm executable
            kubectl_binary: Name or path of the kubectl executable
        """
        self._runner = CommandRunner(working_dir)

        self.helm = HelmCommands(self._runner, helm_binary)
        self.kubectl = KubectlCommands(self._runner, kubectl_binary)

    @property
    def runner(self) -> CommandRunner:
        """Get the underlying command runner."""
        return self._runner


__all__ = [
    "ShellCommands",
    "CommandResult",
    "CommandPlan",
    "ServerVersion",
    "HelmCommands",
    "KubectlCommands",
    "CommandRunner",
]
