"""Shared fixtures for kubecm tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from kubecm.config.request import ReleaseRequest
from kubecm.shell_commands.types import CommandResult

VERSION_YAML = """\
clientVersion:
  major: "1"
  minor: "30"
serverVersion:
  major: "1"
  minor: "99"
"""


@pytest.fixture
def mock_commands() -> MagicMock:
    """Create a mock ShellCommands whose tools all succeed."""
    commands = MagicMock()
    commands.helm.binary = "helm"
    commands.helm.repo_add.return_value = CommandResult(success=True)
    commands.helm.execute.return_value = CommandResult(success=True)
    commands.kubectl.version.return_value = CommandResult(
        success=True, stdout=VERSION_YAML
    )
    return commands


@pytest.fixture
def fake_cwd(tmp_path: Path) -> Path:
    """A working directory standing in for the process cwd."""
    cwd = tmp_path / "fakedir"
    cwd.mkdir()
    return cwd


@pytest.fixture
def make_request():
    """Factory for ReleaseRequest objects with release='test' by default."""

    def _make(**fields: Any) -> ReleaseRequest:
        fields.setdefault("release", "test")
        return ReleaseRequest(**fields)

    return _make
