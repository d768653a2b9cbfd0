"""Release request loading.

Requests come from CLI options, optionally layered on top of a YAML release
file. The file is a flat mapping of ReleaseRequest fields:

    release: myapp
    chart_source: fakerepo/fakechart
    repo_url: https://example.com/fakerepo
    namespace: ${TARGET_NAMESPACE:-default}
    values:
      replicaCount: 2
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import ValidationError

from kubecm.config.env import substitute_env_vars
from kubecm.config.request import ReleaseRequest
from kubecm.release.errors import ConfigurationError


def read_release_file(file_path: Path) -> dict[str, Any]:
    """Read a release file, substituting environment placeholders.

    Args:
        file_path: Path to the YAML release file

    Returns:
        Raw field mapping (not yet validated)

    Raises:
        ConfigurationError: If the file is missing, unreadable, references an
            unset required variable, or is not a YAML mapping
    """
    try:
        with open(file_path) as f:
            content = f.read()
    except OSError as e:
        raise ConfigurationError(f"Cannot read release file {file_path}", details=str(e)) from e

    try:
        content = substitute_env_vars(content)
    except ValueError as e:
        raise ConfigurationError(
            f"Cannot substitute variables in {file_path}", details=str(e)
        ) from e

    try:
        loaded = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing YAML in {file_path}", details=str(e)) from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigurationError(
            f"Invalid release file {file_path}",
            details="Expected a mapping of release settings at the top level",
        )
    return loaded


def build_release_request(
    settings: Mapping[str, Any], overrides: Mapping[str, Any] | None = None
) -> ReleaseRequest:
    """Validate settings into a ReleaseRequest.

    Args:
        settings: Base field mapping (e.g. from a release file)
        overrides: Fields taking precedence over settings; None values are
            treated as "not given" and ignored

    Raises:
        ConfigurationError: If the merged settings do not validate
    """
    merged = dict(settings)
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value

    try:
        return ReleaseRequest.model_validate(merged)
    except ValidationError as e:
        problems = "\n".join(
            f"  • {'.'.join(str(p) for p in err['loc']) or 'request'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError("Invalid release settings", details=problems) from e


def load_release_request(
    file_path: Path | None = None, overrides: Mapping[str, Any] | None = None
) -> ReleaseRequest:
    """Load a release request from an optional file plus overrides.

    Args:
        file_path: Optional YAML release file
        overrides: CLI-level settings that win over the file

    Returns:
        Validated ReleaseRequest
    """
    settings: dict[str, Any] = {}
    if file_path is not None:
        logger.info(f"Loading release settings from {file_path}")
        settings = read_release_file(file_path)
        logger.debug(f"Release file keys: {sorted(settings)}")
    return build_release_request(settings, overrides)
