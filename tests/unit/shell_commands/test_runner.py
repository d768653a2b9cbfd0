"""Tests for CommandRunner and CommandPlan."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from kubecm.shell_commands.runner import CommandRunner
from kubecm.shell_commands.types import CommandPlan


class TestCommandRunner:
    """Tests for subprocess execution."""

    @patch("subprocess.run")
    def test_run_captures_output(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=0, stdout="ok\n", stderr=""
        )

        result = CommandRunner(tmp_path).run(["helm", "version"])

        assert result.success
        assert result.stdout == "ok\n"
        assert mock_run.call_args.args[0] == ["helm", "version"]
        assert mock_run.call_args.kwargs["cwd"] == tmp_path
        assert mock_run.call_args.kwargs["capture_output"] is True

    @patch("subprocess.run")
    def test_run_reports_failure(self, mock_run: MagicMock) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=1, stdout="", stderr="Error: boom"
        )

        result = CommandRunner().run(["helm", "upgrade"])

        assert not result.success
        assert result.returncode == 1
        assert result.stderr == "Error: boom"
        assert mock_run.call_args.kwargs["cwd"] is None

    @patch("subprocess.run")
    def test_run_redirects_stdout_to_file(self, mock_run: MagicMock, tmp_path: Path) -> None:
        target = tmp_path / "out.yaml"
        target.write_text("stale")

        def fake_run(cmd, **kwargs):  # type: ignore[no-untyped-def]
            kwargs["stdout"].write("kind: ConfigMap\n")
            return subprocess.CompletedProcess(args=cmd, returncode=0, stdout=None, stderr="")

        mock_run.side_effect = fake_run

        result = CommandRunner().run(["helm", "template"], stdout_path=target)

        assert result.success
        assert result.stdout == ""
        assert target.read_text() == "kind: ConfigMap\n"
        assert mock_run.call_args.kwargs["stderr"] == subprocess.PIPE

    @patch("subprocess.Popen")
    def test_run_streaming_forwards_lines(self, mock_popen: MagicMock) -> None:
        process = MagicMock()
        process.stdout.readline.side_effect = ["Release \"x\" has been upgraded.\n", "\n", "STATUS: deployed\n", ""]
        process.returncode = 0
        mock_popen.return_value = process
        lines: list[str] = []

        result = CommandRunner().run_streaming(["helm", "upgrade"], on_output=lines.append)

        assert result.success
        assert lines == ['Release "x" has been upgraded.', "STATUS: deployed"]
        assert result.stdout == "\n".join(lines)
        assert result.stderr == ""

    @patch("subprocess.Popen")
    def test_run_streaming_keeps_output_as_stderr_on_failure(
        self, mock_popen: MagicMock
    ) -> None:
        process = MagicMock()
        process.stdout.readline.side_effect = ["Error: UPGRADE FAILED\n", ""]
        process.returncode = 1
        mock_popen.return_value = process

        result = CommandRunner().run_streaming(["helm", "upgrade"])

        assert not result.success
        assert result.stderr == "Error: UPGRADE FAILED"


class TestCommandPlan:
    """Tests for plan rendering."""

    def test_display_quotes_tokens(self) -> None:
        plan = CommandPlan(tokens=("helm", "upgrade", "--install", "my app", "chart"))

        assert plan.display() == "helm upgrade --install 'my app' chart"

    def test_display_shows_redirect(self) -> None:
        plan = CommandPlan(tokens=("helm", "template", "x", "y"), output=Path("test.yaml"))

        assert str(plan) == "helm template x y > test.yaml"

    def test_program_and_args(self) -> None:
        plan = CommandPlan(tokens=("helm", "template"))

        assert plan.program == "helm"
        assert plan.args == ("template",)
