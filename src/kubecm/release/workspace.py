"""Release workspace resolution and preparation.

Each release gets a deterministic build directory:

    <build_dir>/<release>            (no namespace)
    <build_dir>/<release>-<namespace>

holding the staged chart, the values file, and the kustomize post-renderer
helm pipes its rendered manifests through.
"""

from __future__ import annotations

import stat
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml  # type: ignore[import-untyped]
from loguru import logger

from .constants import DeploymentConstants
from .errors import WorkspaceError

if TYPE_CHECKING:
    from kubecm.config.request import ReleaseRequest

WorkingDirectory = Callable[[], Path]

POST_RENDERER_TEMPLATE = """\
#!/bin/sh
# Helm post-renderer: keep the rendered chart, emit the kustomized result.
set -e
cat > "$1/{rendered}"
exec {kubectl} kustomize "$1"
"""


@dataclass(frozen=True)
class Workspace:
    """Per-release build directory and the paths derived from it."""

    root: Path
    constants: DeploymentConstants = DeploymentConstants()

    @property
    def chart_dir(self) -> Path:
        """Get path where local and scaffolded charts are staged."""
        return self.root / self.constants.CHART_DIR_NAME

    @property
    def post_renderer(self) -> Path:
        """Get path to the kustomize.sh post-renderer."""
        return self.root / self.constants.POST_RENDERER_NAME

    @property
    def values_file(self) -> Path:
        """Get path to values.yaml."""
        return self.root / self.constants.VALUES_FILE_NAME

    @property
    def kustomization_file(self) -> Path:
        """Get path to kustomization.yaml."""
        return self.root / self.constants.KUSTOMIZATION_FILE_NAME

    @property
    def resources_file(self) -> Path:
        """Get path to the extra resources manifest."""
        return self.root / self.constants.RESOURCES_FILE_NAME


class WorkspaceResolver:
    """Computes and creates release workspaces."""

    def __init__(
        self,
        cwd: WorkingDirectory = Path.cwd,
        constants: DeploymentConstants | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            cwd: Working directory discovery, only called when a request
                 has no explicit build_dir
            constants: Optional deployment constants
        """
        self._cwd = cwd
        self.constants = constants or DeploymentConstants()

    def build_dir(self, request: ReleaseRequest) -> Path:
        """Get the base build directory for a request."""
        if request.build_dir is not None:
            return request.build_dir
        return self._cwd() / self.constants.BUILD_DIR_NAME

    def resolve(self, request: ReleaseRequest) -> Workspace:
        """Compute the workspace for a request without touching the disk."""
        root = self.build_dir(request) / request.release_dir_name
        return Workspace(root=root, constants=self.constants)

    def ensure(self, request: ReleaseRequest) -> Workspace:
        """Compute the workspace and make sure its directory exists.

        Raises:
            WorkspaceError: If the directory cannot be created
        """
        workspace = self.resolve(request)
        try:
            workspace.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WorkspaceError(
                f"Cannot create workspace {workspace.root}", details=str(e)
            ) from e
        logger.debug(f"Workspace ready at {workspace.root}")
        return workspace


class WorkspacePreparer:
    """Writes values, kustomization and post-renderer into a workspace."""

    def __init__(self, constants: DeploymentConstants | None = None) -> None:
        self.constants = constants or DeploymentConstants()

    def prepare(self, workspace: Workspace, request: ReleaseRequest) -> None:
        """Populate the workspace files helm and kustomize read.

        Raises:
            WorkspaceError: If any file cannot be written
        """
        try:
            self._write_yaml(workspace.values_file, request.values)
            self._write_kustomization(workspace, request)
            self._write_post_renderer(workspace.post_renderer)
        except OSError as e:
            raise WorkspaceError(
                f"Cannot prepare workspace {workspace.root}", details=str(e)
            ) from e

    def _write_kustomization(self, workspace: Workspace, request: ReleaseRequest) -> None:
        resources = [self.constants.RENDERED_FILE_NAME]
        if request.resources:
            resources.append(self.constants.RESOURCES_FILE_NAME)
            with open(workspace.resources_file, "w") as f:
                yaml.safe_dump_all(request.resources, f, default_flow_style=False)
        elif workspace.resources_file.exists():
            workspace.resources_file.unlink()

        kustomization: dict[str, Any] = {
            "apiVersion": "kustomize.config.k8s.io/v1beta1",
            "kind": "Kustomization",
            "resources": resources,
        }
        if request.patches:
            kustomization["patches"] = list(request.patches)
        self._write_yaml(workspace.kustomization_file, kustomization)

    def _write_post_renderer(self, path: Path) -> None:
        path.write_text(
            POST_RENDERER_TEMPLATE.format(
                rendered=self.constants.RENDERED_FILE_NAME,
                kubectl=self.constants.KUBECTL_BINARY,
            )
        )
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    @staticmethod
    def _write_yaml(path: Path, data: Any) -> None:
        with open(path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
