"""Deployment constants.

This module centralizes the binary names, file names and defaults used
throughout the release pipeline.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class DeploymentConstants:
    """Constants for Helm release deployment.

    All attributes are class-level and immutable.
    """

    # External tools
    HELM_BINARY: str = "helm"
    KUBECTL_BINARY: str = "kubectl"

    # Workspace layout
    BUILD_DIR_NAME: str = "build"
    CHART_DIR_NAME: str = "chart"
    POST_RENDERER_NAME: str = "kustomize.sh"
    VALUES_FILE_NAME: str = "values.yaml"
    KUSTOMIZATION_FILE_NAME: str = "kustomization.yaml"
    RENDERED_FILE_NAME: str = "helm.yaml"
    RESOURCES_FILE_NAME: str = "resources.yaml"

    # Helm defaults
    DEFAULT_TIMEOUT: str = "1h"
    OCI_SCHEME: str = "oci://"

    # Repository chart references: "alias/name", no scheme, no leading "/" or "."
    REPOSITORY_REF_PATTERN: re.Pattern[str] = re.compile(
        r"^(?P<alias>[^/.:][^/:]*)/(?P<chart>[^/:]+)$"
    )
