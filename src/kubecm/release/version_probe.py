"""Cluster version probing for render mode.

`helm template` renders offline and needs the target Kubernetes version to
evaluate `.Capabilities.KubeVersion` conditions. The version is taken from the
cluster itself; a render never silently falls back to helm's built-in default.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

import yaml  # type: ignore[import-untyped]
from loguru import logger

from kubecm.shell_commands.types import ServerVersion

from .errors import ProbeError

if TYPE_CHECKING:
    from kubecm.shell_commands import ShellCommands

_NON_DIGITS = re.compile(r"[^0-9]")


def parse_server_version(document: str) -> ServerVersion:
    """Parse the output of `kubectl version -o yaml`.

    Raises:
        ProbeError: If the document is not YAML or lacks serverVersion.major/minor
    """
    try:
        data: Any = yaml.safe_load(document)
    except yaml.YAMLError as e:
        raise ProbeError("Cannot parse cluster version document", details=str(e)) from e

    server = data.get("serverVersion") if isinstance(data, dict) else None
    if not isinstance(server, dict) or "major" not in server or "minor" not in server:
        raise ProbeError(
            "Cluster did not report serverVersion.major/minor",
            details=document.strip() or None,
        )
    return ServerVersion(
        major=str(server["major"]),
        minor=str(server["minor"]),
        git_version=str(server.get("gitVersion", "")),
    )


def normalize_kube_version(version: ServerVersion) -> str:
    """Build the `major.minor` string helm accepts for --kube-version.

    Non-digit characters are stripped from each component, so managed
    clusters reporting e.g. minor "27+" yield "1.27".

    Raises:
        ProbeError: If a component contains no digits at all
    """
    major = _NON_DIGITS.sub("", version.major)
    minor = _NON_DIGITS.sub("", version.minor)
    if not major or not minor:
        raise ProbeError(
            f"Malformed cluster version: major={version.major!r} minor={version.minor!r}"
        )
    return f"{major}.{minor}"


class VersionProbe:
    """Queries the target cluster for its Kubernetes version."""

    def __init__(self, commands: ShellCommands) -> None:
        """Initialize the probe.

        Args:
            commands: Shell command executor (kubectl)
        """
        self.commands = commands

    def kube_version(self) -> str:
        """Get the cluster's `major.minor` version.

        Raises:
            ProbeError: If kubectl fails or reports an unusable version
        """
        try:
            result = self.commands.kubectl.version(output="yaml")
        except OSError as e:
            raise ProbeError(
                "Cannot run kubectl to query the cluster version", details=str(e)
            ) from e
        if not result.success:
            raise ProbeError(
                "Cannot query the cluster version",
                details=result.stderr or None,
            )
        kube_version = normalize_kube_version(parse_server_version(result.stdout))
        logger.info(f"Cluster reports Kubernetes {kube_version}")
        return kube_version
