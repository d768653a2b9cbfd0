"""Helm command assembly.

Commands are built from fixed-position token groups. Each group is either
present in full or absent, and the group order below is the order helm
receives the tokens in:

Apply mode:
    upgrade --install | <release> <chart> | --no-hooks |
    --create-namespace --namespace <ns> | post-renderer + values |
    --version <v> | --wait --timeout <t>

Render mode:
    template --kube-version <major.minor> | <release> <chart> |
    post-renderer + values                       (stdout -> render target)
"""

from __future__ import annotations

from itertools import chain
from pathlib import Path
from typing import TYPE_CHECKING

from kubecm.shell_commands.types import CommandPlan

from .constants import DeploymentConstants
from .errors import ConfigurationError

if TYPE_CHECKING:
    from kubecm.config.request import ReleaseRequest

    from .chart_source import ResolvedChart
    from .workspace import Workspace

TokenGroup = list[str]


class HelmCommandBuilder:
    """Builds helm command plans for one release and chart."""

    def __init__(
        self,
        release: str,
        chart_reference: str,
        workspace: Workspace,
        *,
        helm_binary: str = DeploymentConstants.HELM_BINARY,
    ) -> None:
        """Initialize the builder.

        Args:
            release: Release name
            chart_reference: Chart argument (path, alias/name or oci:// URI)
            workspace: Release workspace holding post-renderer and values
            helm_binary: Name or path of the helm executable
        """
        self.release = release
        self.chart_reference = chart_reference
        self.workspace = workspace
        self.helm_binary = helm_binary

    # =========================================================================
    # Token Groups
    # =========================================================================

    def _target(self) -> TokenGroup:
        return [self.release, self.chart_reference]

    @staticmethod
    def _hooks(hooks: bool) -> TokenGroup:
        return [] if hooks else ["--no-hooks"]

    @staticmethod
    def _namespace(namespace: str | None) -> TokenGroup:
        if not namespace:
            return []
        return ["--create-namespace", "--namespace", namespace]

    def _post_render(self) -> TokenGroup:
        return [
            "--post-renderer",
            str(self.workspace.post_renderer),
            "--post-renderer-args",
            str(self.workspace.root),
            "--values",
            str(self.workspace.values_file),
        ]

    @staticmethod
    def _version(version: str | None) -> TokenGroup:
        return ["--version", version] if version else []

    @staticmethod
    def _wait(wait: bool, timeout: str) -> TokenGroup:
        return ["--wait", "--timeout", timeout] if wait else []

    def _plan(self, groups: list[TokenGroup], output: Path | None = None) -> CommandPlan:
        tokens = (self.helm_binary, *chain.from_iterable(groups))
        return CommandPlan(tokens=tokens, output=output)

    # =========================================================================
    # Plans
    # =========================================================================

    def apply(
        self,
        *,
        hooks: bool = True,
        namespace: str | None = None,
        version: str | None = None,
        wait: bool = False,
        timeout: str = DeploymentConstants.DEFAULT_TIMEOUT,
    ) -> CommandPlan:
        """Build an idempotent `helm upgrade --install` plan."""
        return self._plan(
            [
                ["upgrade", "--install"],
                self._target(),
                self._hooks(hooks),
                self._namespace(namespace),
                self._post_render(),
                self._version(version),
                self._wait(wait, timeout),
            ]
        )

    def render(self, kube_version: str, output: Path) -> CommandPlan:
        """Build a `helm template` plan writing manifests to output.

        Raises:
            ConfigurationError: If kube_version is empty
        """
        if not kube_version:
            raise ConfigurationError("Rendering requires the cluster's Kubernetes version")
        return self._plan(
            [
                ["template", "--kube-version", kube_version],
                self._target(),
                self._post_render(),
            ],
            output=output,
        )


def build_command_plan(
    request: ReleaseRequest,
    chart: ResolvedChart,
    workspace: Workspace,
    *,
    kube_version: str | None = None,
    helm_binary: str = DeploymentConstants.HELM_BINARY,
) -> CommandPlan:
    """Build the main helm plan for a request.

    Render requests get a `template` plan (kube_version is mandatory);
    all other requests get an `upgrade --install` plan.
    """
    builder = HelmCommandBuilder(
        request.release, chart.reference, workspace, helm_binary=helm_binary
    )
    if request.render_to is not None:
        return builder.render(kube_version or "", request.render_to)
    return builder.apply(
        hooks=request.hooks,
        namespace=request.namespace,
        version=request.version,
        wait=request.wait,
        timeout=request.timeout,
    )
