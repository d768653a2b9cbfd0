"""Release deployment errors.

Every failure of the release pipeline surfaces as a DeploymentError
subclass naming the stage that failed. None of them is retried.
"""

from __future__ import annotations


class DeploymentError(Exception):
    """Raised when a deployment operation fails."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigurationError(DeploymentError):
    """Contradictory or missing release settings, raised before any external call."""


class WorkspaceError(DeploymentError):
    """The release workspace could not be created or populated."""


class StagingError(DeploymentError):
    """The chart could not be scaffolded, copied or its repository registered."""


class ProbeError(DeploymentError):
    """The cluster version could not be determined for a render."""


class ExecutionError(DeploymentError):
    """The main helm command exited with a non-zero status.

    Attributes:
        returncode: Exit status of the helm process, -1 when it could not start
        stderr: Error output of the helm process, verbatim
    """

    def __init__(self, message: str, *, returncode: int, stderr: str = ""):
        super().__init__(message, details=stderr or None)
        self.returncode = returncode
        self.stderr = stderr
