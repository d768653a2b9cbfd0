"""Release deployment package.

Each concern of deploying a release lives in its own module:

- workspace: build directory resolution and workspace files
- chart_source: chart source classification and staging
- version_probe: cluster version detection for render mode
- command_builder: helm command plan assembly
- deployer: the pipeline tying them together

Usage:
    from kubecm.release import ReleaseDeployer

    deployer = ReleaseDeployer(console=console)
    deployer.deploy(request)
"""

from .chart_source import (
    ChartScaffolder,
    ChartSourceKind,
    ChartStager,
    ResolvedChart,
    classify_chart_source,
    resolve_chart,
)
from .command_builder import HelmCommandBuilder, build_command_plan
from .constants import DeploymentConstants
from .deployer import DeploymentOutcome, DeploymentStage, ReleaseDeployer
from .errors import (
    ConfigurationError,
    DeploymentError,
    ExecutionError,
    ProbeError,
    StagingError,
    WorkspaceError,
)
from .version_probe import VersionProbe, normalize_kube_version, parse_server_version
from .workspace import Workspace, WorkspacePreparer, WorkspaceResolver

__all__ = [
    "ReleaseDeployer",
    "DeploymentOutcome",
    "DeploymentStage",
    "DeploymentConstants",
    # Errors
    "DeploymentError",
    "ConfigurationError",
    "WorkspaceError",
    "StagingError",
    "ProbeError",
    "ExecutionError",
    # Components for testing/extension
    "Workspace",
    "WorkspaceResolver",
    "WorkspacePreparer",
    "ChartSourceKind",
    "ResolvedChart",
    "ChartScaffolder",
    "ChartStager",
    "classify_chart_source",
    "resolve_chart",
    "VersionProbe",
    "parse_server_version",
    "normalize_kube_version",
    "HelmCommandBuilder",
    "build_command_plan",
]
