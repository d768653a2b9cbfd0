"""Tests for Helm and kubectl command wrappers."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from kubecm.shell_commands import ShellCommands
from kubecm.shell_commands.helm import HelmCommands
from kubecm.shell_commands.kubectl import KubectlCommands
from kubecm.shell_commands.types import CommandPlan, CommandResult


class TestHelmRepoAdd:
    """Tests for Helm repository registration."""

    @pytest.fixture
    def mock_runner(self) -> MagicMock:
        """Create a mock command runner."""
        runner = MagicMock()
        runner.run.return_value = CommandResult(
            success=True, stdout='"fakerepo" has been added to your repositories'
        )
        return runner

    def test_repo_add_command(self, mock_runner: MagicMock) -> None:
        result = HelmCommands(mock_runner).repo_add(
            "fakerepo", "https://example.com/fakerepo"
        )

        assert result.success
        mock_runner.run.assert_called_once_with(
            ["helm", "repo", "add", "fakerepo", "https://example.com/fakerepo"]
        )

    def test_custom_binary(self, mock_runner: MagicMock) -> None:
        HelmCommands(mock_runner, binary="/usr/local/bin/helm3").repo_add("a", "https://x")

        cmd = mock_runner.run.call_args[0][0]
        assert cmd[0] == "/usr/local/bin/helm3"


class TestHelmExecute:
    """Tests for plan execution routing."""

    @pytest.fixture
    def mock_runner(self) -> MagicMock:
        """Create a mock command runner."""
        runner = MagicMock()
        runner.run.return_value = CommandResult(success=True)
        runner.run_streaming.return_value = CommandResult(success=True)
        return runner

    def test_render_plan_writes_to_file(self, mock_runner: MagicMock) -> None:
        plan = CommandPlan(tokens=("helm", "template", "x", "y"), output=Path("out.yaml"))

        HelmCommands(mock_runner).execute(plan)

        mock_runner.run.assert_called_once_with(plan.tokens, stdout_path=Path("out.yaml"))
        mock_runner.run_streaming.assert_not_called()

    def test_apply_plan_streams_when_callback_given(self, mock_runner: MagicMock) -> None:
        plan = CommandPlan(tokens=("helm", "upgrade", "--install", "x", "y"))
        on_output = MagicMock()

        HelmCommands(mock_runner).execute(plan, on_output=on_output)

        mock_runner.run_streaming.assert_called_once_with(plan.tokens, on_output=on_output)
        mock_runner.run.assert_not_called()

    def test_apply_plan_captures_without_callback(self, mock_runner: MagicMock) -> None:
        plan = CommandPlan(tokens=("helm", "upgrade", "--install", "x", "y"))

        HelmCommands(mock_runner).execute(plan)

        mock_runner.run.assert_called_once_with(plan.tokens, capture_output=True)


class TestKubectlVersion:
    """Tests for the kubectl version query."""

    def test_version_yaml(self) -> None:
        runner = MagicMock()
        runner.run.return_value = CommandResult(success=True, stdout="serverVersion: {}")

        result = KubectlCommands(runner).version()

        assert result.success
        runner.run.assert_called_once_with(["kubectl", "version", "-o", "yaml"])


class TestShellCommands:
    """Tests for the facade wiring."""

    def test_binaries_are_configurable(self) -> None:
        commands = ShellCommands(helm_binary="helm3", kubectl_binary="oc")

        assert commands.helm.binary == "helm3"
        assert commands.kubectl.binary == "oc"

    def test_modules_share_runner(self, tmp_path: Path) -> None:
        commands = ShellCommands(tmp_path)

        assert commands.runner.working_dir == tmp_path
