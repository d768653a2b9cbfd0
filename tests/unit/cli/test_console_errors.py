import pytest
import typer

from kubecm.cli.shared.console import with_error_handling
from kubecm.release.errors import DeploymentError, StagingError


def test_with_error_handling_handles_deployment_error():
    @with_error_handling
    def _command() -> None:
        raise DeploymentError("Boom", details="extra")

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 1


def test_with_error_handling_handles_stage_errors():
    @with_error_handling
    def _command() -> None:
        raise StagingError("Failed to add chart repository 'fakerepo'")

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 1


def test_with_error_handling_handles_keyboard_interrupt():
    @with_error_handling
    def _command() -> None:
        raise KeyboardInterrupt

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 130


def test_with_error_handling_lets_other_errors_through():
    @with_error_handling
    def _command() -> None:
        raise RuntimeError("unexpected")

    with pytest.raises(RuntimeError):
        _command()
