"""Main CLI application module.

This module provides the main entry point for the kubecm CLI.

Commands:
- deploy: Install, upgrade or render a release
- plan: Show the workspace and helm command a deploy would use
"""

import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from kubecm.config import load_env_file

from .deploy_commands import deploy, plan

# Create the main CLI application
app = typer.Typer(
    help="🚢 kubecm - Helm release deployment",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command()(deploy)
app.command()(plan)


@app.callback()
def configure(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging on stderr"),
    ] = False,
) -> None:
    """Configure logging and load .env before any command runs."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")
    load_env_file(Path.cwd())


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
