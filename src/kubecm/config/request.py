"""Release request model.

A ReleaseRequest is the single input of one deployment. Every optional
field carries an explicit default so that a request built from the CLI,
from a release file, or in code behaves identically.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReleaseRequest(BaseModel):
    """Everything needed to deploy or render one release."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    release: str = Field(
        min_length=1,
        description="Release name, also used as the workspace directory name",
    )
    chart_source: str | None = Field(
        default=None,
        description=(
            "Absolute path, relative path, 'alias/name' repository reference or "
            "oci:// URI. Unset deploys an empty chart."
        ),
    )
    repo_url: str | None = Field(
        default=None,
        description="Repository URL registered under the alias of chart_source",
    )
    build_dir: Path | None = Field(
        default=None,
        description="Base build directory (defaults to <cwd>/build)",
    )
    namespace: str | None = Field(
        default=None, description="Target namespace, created if missing"
    )
    hooks: bool = Field(default=True, description="Run chart hooks")
    wait: bool = Field(
        default=False, description="Wait for resources to become ready"
    )
    timeout: str = Field(
        default="1h", description="Wait timeout, only used together with wait"
    )
    version: str | None = Field(default=None, description="Chart version pin")
    render_to: Path | None = Field(
        default=None,
        description="Render manifests to this file instead of deploying",
    )
    deploy: bool = Field(
        default=True, description="Master switch; false skips the release entirely"
    )
    sleep: int | None = Field(
        default=None, ge=0, description="Seconds to wait before deploying"
    )
    values: dict[str, Any] = Field(
        default_factory=dict, description="Chart values written to values.yaml"
    )
    resources: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Extra manifests added to the kustomization",
    )
    patches: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Kustomize patches applied to the rendered chart",
    )

    @field_validator(
        "chart_source",
        "repo_url",
        "build_dir",
        "namespace",
        "version",
        "render_to",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("release")
    @classmethod
    def _release_is_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("release must not be blank")
        return value

    @property
    def renders(self) -> bool:
        """Whether this request renders manifests instead of deploying."""
        return self.render_to is not None

    @property
    def release_dir_name(self) -> str:
        """Workspace directory name: release, suffixed with the namespace."""
        if self.namespace:
            return f"{self.release}-{self.namespace}"
        return self.release
