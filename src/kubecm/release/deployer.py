"""Release deployment pipeline.

This module provides the ReleaseDeployer class which takes one
ReleaseRequest from start to finish:

1. Gate: skip everything when the request is switched off
2. Workspace: create <build_dir>/<release>[-<namespace>]
3. Prepare: write values.yaml, kustomization and the post-renderer
4. Chart: scaffold, copy or register the chart source
5. Probe: ask the cluster for its version (render mode only)
6. Build: assemble the helm command plan
7. Execute: optionally wait, then run helm

Any failure aborts the pipeline; completed steps are not rolled back.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from loguru import logger
from rich.markup import escape

from kubecm.config.request import ReleaseRequest
from kubecm.shell_commands import ShellCommands
from kubecm.shell_commands.types import CommandPlan
from kubecm.utils.console_like import ConsoleLike, coalesce_console

from .chart_source import ChartStager, ResolvedChart, resolve_chart
from .command_builder import build_command_plan
from .errors import ExecutionError
from .version_probe import VersionProbe
from .workspace import (
    WorkingDirectory,
    Workspace,
    WorkspacePreparer,
    WorkspaceResolver,
)


class DeploymentStage(str, Enum):
    """Pipeline states, in the order a successful deployment passes them."""

    START = "start"
    WORKSPACE_READY = "workspace_ready"
    SOURCE_RESOLVED = "source_resolved"
    VERSION_PROBED = "version_probed"
    COMMAND_BUILT = "command_built"
    EXECUTED = "executed"
    END = "end"


@dataclass(frozen=True)
class DeploymentOutcome:
    """What a deploy() call did.

    Attributes:
        skipped: True when the request was switched off
        workspace: Release workspace (None when skipped)
        chart: Resolved chart (None when skipped)
        plan: Executed helm plan (None when skipped)
    """

    skipped: bool
    workspace: Workspace | None = None
    chart: ResolvedChart | None = None
    plan: CommandPlan | None = None


class ReleaseDeployer:
    """Deploys or renders a single release via helm.

    The deployer holds no per-release state; one instance can deploy any
    number of requests, one after another or from separate threads.

    Attributes:
        commands: Shell command executor
        console: Notice emitter for user-facing output
        workspaces: Workspace resolver
        preparer: Workspace file writer
        stager: Chart staging side effects
        probe: Cluster version probe
    """

    def __init__(
        self,
        commands: ShellCommands | None = None,
        console: ConsoleLike | None = None,
        *,
        cwd: WorkingDirectory = Path.cwd,
        sleep: Callable[[float], None] = time.sleep,
        stream_output: bool = True,
    ) -> None:
        """Initialize the release deployer.

        Args:
            commands: Shell command executor (defaults to a fresh ShellCommands)
            console: Console for notices (defaults to plain stdout)
            cwd: Working directory discovery used when no build_dir is given
            sleep: Blocking sleep used for the pre-deployment wait
            stream_output: Print helm output line by line while it runs
        """
        self.commands = commands if commands is not None else ShellCommands()
        self.console = coalesce_console(console)
        self._sleep = sleep
        self.stream_output = stream_output

        self.workspaces = WorkspaceResolver(cwd)
        self.preparer = WorkspacePreparer()
        self.stager = ChartStager(self.commands)
        self.probe = VersionProbe(self.commands)

    # =========================================================================
    # Public Interface
    # =========================================================================

    def plan(
        self, request: ReleaseRequest, kube_version: str | None = None
    ) -> tuple[Workspace, ResolvedChart, CommandPlan]:
        """Compute what deploy() would run, without side effects.

        Args:
            request: Release request
            kube_version: Version used for render plans instead of probing

        Raises:
            ConfigurationError: If the request is contradictory
        """
        workspace = self.workspaces.resolve(request)
        chart = resolve_chart(request, workspace)
        plan = build_command_plan(
            request,
            chart,
            workspace,
            kube_version=kube_version,
            helm_binary=self.commands.helm.binary,
        )
        return workspace, chart, plan

    def deploy(self, request: ReleaseRequest) -> DeploymentOutcome:
        """Deploy (or render) one release.

        Args:
            request: Release request

        Returns:
            DeploymentOutcome describing what was done

        Raises:
            DeploymentError: Subclass naming the stage that failed
        """
        if not request.deploy:
            logger.info(f"Skipping release {request.release}: deploy is disabled")
            self._transition(request, DeploymentStage.END)
            return DeploymentOutcome(skipped=True)

        self._transition(request, DeploymentStage.START)

        # Contradictory chart settings fail before anything touches the disk
        resolve_chart(request, self.workspaces.resolve(request))

        workspace = self.workspaces.ensure(request)
        self.preparer.prepare(workspace, request)
        self._transition(request, DeploymentStage.WORKSPACE_READY)

        chart = resolve_chart(request, workspace)
        self.stager.stage(chart, workspace, request.release)
        self._transition(request, DeploymentStage.SOURCE_RESOLVED)

        kube_version: str | None = None
        if request.renders:
            kube_version = self.probe.kube_version()
            self._transition(request, DeploymentStage.VERSION_PROBED)

        plan = build_command_plan(
            request,
            chart,
            workspace,
            kube_version=kube_version,
            helm_binary=self.commands.helm.binary,
        )
        self._transition(request, DeploymentStage.COMMAND_BUILT)

        if request.sleep:
            self._wait(request.sleep)

        self._execute(request, plan)
        self._transition(request, DeploymentStage.EXECUTED)
        self._transition(request, DeploymentStage.END)

        return DeploymentOutcome(
            skipped=False, workspace=workspace, chart=chart, plan=plan
        )

    # =========================================================================
    # Private Helpers
    # =========================================================================

    @staticmethod
    def _transition(request: ReleaseRequest, stage: DeploymentStage) -> None:
        logger.debug(f"[{request.release}] {stage.value}")

    def _wait(self, seconds: int) -> None:
        self.console.info(f"Waiting {seconds} seconds")
        self._sleep(seconds)

    def _execute(self, request: ReleaseRequest, plan: CommandPlan) -> None:
        """Run the main helm plan.

        Raises:
            ExecutionError: If helm cannot be started or exits non-zero
        """
        logger.info(f"Running: {plan.display()}")

        def print_helm_output(line: str) -> None:
            line = line.strip()
            if line:
                self.console.print(f"  [dim]{escape(line)}[/dim]")

        verb = "render" if request.renders else "deploy"
        try:
            result = self.commands.helm.execute(
                plan, on_output=print_helm_output if self.stream_output else None
            )
        except OSError as e:
            # missing helm binary or unwritable render target
            raise ExecutionError(
                f"Cannot run helm to {verb} release '{request.release}'",
                returncode=-1,
                stderr=str(e),
            ) from e
        if not result.success:
            raise ExecutionError(
                f"helm failed to {verb} release '{request.release}' "
                f"(exit code {result.returncode})",
                returncode=result.returncode,
                stderr=result.stderr,
            )

        if request.render_to is not None:
            self.console.ok(f"Rendered {request.release} to {request.render_to}")
        else:
            self.console.ok(f"Release {request.release} deployed")
