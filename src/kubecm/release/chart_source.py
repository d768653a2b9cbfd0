"""Chart source classification and staging.

A chart reference given by the user takes exactly one of five forms:

- SCAFFOLD: no source; an empty chart is created in the workspace
- ABSOLUTE: a local directory, copied into the workspace
- REPOSITORY: ``alias/name`` plus a repository URL, registered with helm
- OCI: an ``oci://`` URI, passed to helm untouched
- RELATIVE: anything else, passed to helm untouched

Classification and resolution are pure; ChartStager performs the side
effects (scaffold, copy, repo add) a resolved chart requires.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import yaml  # type: ignore[import-untyped]
from loguru import logger

from .constants import DeploymentConstants
from .errors import ConfigurationError, StagingError

if TYPE_CHECKING:
    from kubecm.config.request import ReleaseRequest
    from kubecm.shell_commands import ShellCommands

    from .workspace import Workspace

_CONSTANTS = DeploymentConstants()


class ChartSourceKind(str, Enum):
    """The form a chart source takes."""

    SCAFFOLD = "scaffold"
    ABSOLUTE = "absolute"
    REPOSITORY = "repository"
    OCI = "oci"
    RELATIVE = "relative"


@dataclass(frozen=True)
class ResolvedChart:
    """A chart reference helm can consume, plus what staging it needs.

    Attributes:
        kind: Classified form of the chart source
        reference: Chart argument passed to helm
        requires_repo_add: Whether a repository must be registered first
        repo_alias: Alias to register (repository charts only)
        repo_url: URL to register (repository charts only)
        origin: Local directory to copy from (absolute charts only)
    """

    kind: ChartSourceKind
    reference: str
    requires_repo_add: bool = False
    repo_alias: str | None = None
    repo_url: str | None = None
    origin: Path | None = None


def classify_chart_source(chart_source: str | None, repo_url: str | None) -> ChartSourceKind:
    """Classify a chart source.

    Precedence: ``oci://`` scheme, then a leading ``/``, then a repository URL
    (which requires ``alias/name``), otherwise a relative passthrough.

    Raises:
        ConfigurationError: If repo_url is given for a source that is not of
            ``alias/name`` form
    """
    if chart_source is None:
        kind = ChartSourceKind.SCAFFOLD
    elif chart_source.startswith(_CONSTANTS.OCI_SCHEME):
        kind = ChartSourceKind.OCI
    elif chart_source.startswith("/"):
        kind = ChartSourceKind.ABSOLUTE
    elif repo_url and _CONSTANTS.REPOSITORY_REF_PATTERN.match(chart_source):
        return ChartSourceKind.REPOSITORY
    else:
        kind = ChartSourceKind.RELATIVE

    if repo_url:
        raise ConfigurationError(
            "repo_url requires a chart_source of the form 'alias/name'",
            details=(
                f"chart_source: {chart_source or '(unset)'}\n"
                f"repo_url: {repo_url}\n\n"
                "Either reference a chart in the repository (e.g. 'myrepo/mychart') "
                "or drop repo_url."
            ),
        )
    return kind


# =============================================================================
# Per-variant resolvers
# =============================================================================

SourceResolver = Callable[[str, "str | None", "Workspace"], ResolvedChart]


def _resolve_scaffold(workspace: Workspace) -> ResolvedChart:
    return ResolvedChart(
        kind=ChartSourceKind.SCAFFOLD, reference=str(workspace.chart_dir)
    )


def _resolve_absolute(source: str, repo_url: str | None, workspace: Workspace) -> ResolvedChart:
    return ResolvedChart(
        kind=ChartSourceKind.ABSOLUTE,
        reference=str(workspace.chart_dir),
        origin=Path(source),
    )


def _resolve_repository(source: str, repo_url: str | None, workspace: Workspace) -> ResolvedChart:
    alias = source.split("/", 1)[0]
    return ResolvedChart(
        kind=ChartSourceKind.REPOSITORY,
        reference=source,
        requires_repo_add=True,
        repo_alias=alias,
        repo_url=repo_url,
    )


def _resolve_oci(source: str, repo_url: str | None, workspace: Workspace) -> ResolvedChart:
    return ResolvedChart(kind=ChartSourceKind.OCI, reference=source)


def _resolve_relative(source: str, repo_url: str | None, workspace: Workspace) -> ResolvedChart:
    # No "./" prefix: helm resolves the path against its working directory
    return ResolvedChart(kind=ChartSourceKind.RELATIVE, reference=source)


_RESOLVERS: dict[ChartSourceKind, SourceResolver] = {
    ChartSourceKind.ABSOLUTE: _resolve_absolute,
    ChartSourceKind.REPOSITORY: _resolve_repository,
    ChartSourceKind.OCI: _resolve_oci,
    ChartSourceKind.RELATIVE: _resolve_relative,
}


def resolve_chart(request: ReleaseRequest, workspace: Workspace) -> ResolvedChart:
    """Resolve the helm chart argument for a request.

    Pure: nothing is written and no command is run.

    Raises:
        ConfigurationError: If chart_source and repo_url contradict each other
    """
    kind = classify_chart_source(request.chart_source, request.repo_url)
    if request.chart_source is None:
        resolved = _resolve_scaffold(workspace)
    else:
        resolved = _RESOLVERS[kind](request.chart_source, request.repo_url, workspace)
    logger.debug(f"Chart source {request.chart_source!r} -> {kind.value}: {resolved.reference}")
    return resolved


# =============================================================================
# Staging
# =============================================================================


class ChartScaffolder:
    """Creates minimal empty charts."""

    def ensure_empty_chart(self, path: Path, name: str | None = None) -> None:
        """Make sure an empty chart exists at path.

        An existing Chart.yaml is left alone so repeated deployments keep any
        manual edits.

        Args:
            path: Chart directory
            name: Chart name (defaults to the directory name)
        """
        chart_file = path / "Chart.yaml"
        (path / "templates").mkdir(parents=True, exist_ok=True)
        if chart_file.exists():
            return
        metadata = {
            "apiVersion": "v2",
            "name": name or path.name,
            "version": "0.1.0",
            "type": "application",
        }
        with open(chart_file, "w") as f:
            yaml.safe_dump(metadata, f, default_flow_style=False, sort_keys=False)


class ChartStager:
    """Performs the side effects a resolved chart needs before helm runs."""

    def __init__(
        self,
        commands: ShellCommands,
        scaffolder: ChartScaffolder | None = None,
    ) -> None:
        """Initialize the chart stager.

        Args:
            commands: Shell command executor (used for repo add)
            scaffolder: Empty chart scaffolder
        """
        self.commands = commands
        self.scaffolder = scaffolder or ChartScaffolder()

    def stage(
        self, chart: ResolvedChart, workspace: Workspace, release: str
    ) -> None:
        """Stage a resolved chart.

        Raises:
            StagingError: If scaffolding, copying or repository registration fails
            ConfigurationError: If a repository chart lacks its alias or URL
        """
        if chart.kind is ChartSourceKind.SCAFFOLD:
            self._scaffold(workspace.chart_dir, release)
        elif chart.origin is not None:
            self._copy(chart.origin, workspace.chart_dir)
        elif chart.requires_repo_add:
            if not chart.repo_alias or not chart.repo_url:
                raise ConfigurationError(
                    f"Chart '{chart.reference}' needs both a repository alias and a repo_url"
                )
            self._repo_add(chart.repo_alias, chart.repo_url)

    def _scaffold(self, chart_dir: Path, release: str) -> None:
        try:
            self.scaffolder.ensure_empty_chart(chart_dir, release)
        except OSError as e:
            raise StagingError(f"Cannot create empty chart at {chart_dir}", details=str(e)) from e
        logger.debug(f"Empty chart ready at {chart_dir}")

    def _copy(self, origin: Path, chart_dir: Path) -> None:
        if not origin.is_dir():
            raise StagingError(
                f"Chart directory not found: {origin}",
                details="Absolute chart sources must point at an unpacked chart directory.",
            )
        try:
            if chart_dir.exists():
                shutil.rmtree(chart_dir)
            shutil.copytree(origin, chart_dir)
        except OSError as e:
            raise StagingError(f"Cannot copy chart {origin} to {chart_dir}", details=str(e)) from e
        logger.debug(f"Copied chart {origin} -> {chart_dir}")

    def _repo_add(self, alias: str, url: str) -> None:
        try:
            result = self.commands.helm.repo_add(alias, url)
        except OSError as e:
            raise StagingError(
                f"Cannot run helm to add chart repository '{alias}'", details=str(e)
            ) from e
        if not result.success:
            raise StagingError(
                f"Cannot add chart repository '{alias}' ({url})",
                details=result.stderr or None,
            )
        logger.info(f"Registered chart repository {alias} -> {url}")
