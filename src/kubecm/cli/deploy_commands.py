"""Release deployment commands.

`deploy` runs the full pipeline for one release; `plan` shows the workspace,
chart reference and helm command a deploy would use, without running
anything.
"""

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.table import Table

from kubecm.config import ReleaseRequest, load_release_request
from kubecm.release import ReleaseDeployer

from .shared import console, with_error_handling

# ---------------------------------------------------------------------------
# Shared Options
# ---------------------------------------------------------------------------

ReleaseArg = Annotated[
    str | None,
    typer.Argument(help="Release name (may also come from --file)"),
]
FileOpt = Annotated[
    Path | None,
    typer.Option(
        "--file",
        "-f",
        exists=True,
        dir_okay=False,
        help="YAML release file; command-line options override its values",
    ),
]
ChartOpt = Annotated[
    str | None,
    typer.Option(
        "--chart",
        "-c",
        help="Chart source: /abs/path, rel/path, alias/name or oci://... "
        "(default: empty chart)",
    ),
]
RepoUrlOpt = Annotated[
    str | None,
    typer.Option("--repo-url", help="Repository URL for an alias/name chart"),
]
BuildDirOpt = Annotated[
    Path | None,
    typer.Option("--build-dir", help="Base build directory (default: ./build)"),
]
NamespaceOpt = Annotated[
    str | None,
    typer.Option("--namespace", "-n", help="Target namespace (created if missing)"),
]
HooksOpt = Annotated[
    bool | None,
    typer.Option("--hooks/--no-hooks", help="Run chart hooks (default: on)"),
]
WaitOpt = Annotated[
    bool | None,
    typer.Option("--wait/--no-wait", help="Wait for resources to be ready"),
]
TimeoutOpt = Annotated[
    str | None,
    typer.Option("--timeout", help="Wait timeout, used with --wait (default: 1h)"),
]
VersionOpt = Annotated[
    str | None,
    typer.Option("--version", help="Chart version to deploy"),
]
RenderToOpt = Annotated[
    Path | None,
    typer.Option(
        "--render-to",
        help="Render manifests to this file instead of deploying",
    ),
]
DeployOpt = Annotated[
    bool | None,
    typer.Option("--deploy/--skip", help="Skip the release entirely with --skip"),
]
SleepOpt = Annotated[
    int | None,
    typer.Option("--sleep", min=0, help="Seconds to wait before running helm"),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_deployer() -> ReleaseDeployer:
    """Get a release deployer wired to the CLI console."""
    return ReleaseDeployer(console=console)


def _load_request(file: Path | None, **overrides: Any) -> ReleaseRequest:
    """Build a request from an optional release file plus CLI overrides."""
    return load_release_request(file, overrides)


def _show_plan(request: ReleaseRequest, kube_version: str | None) -> None:
    deployer = _get_deployer()
    workspace, chart, plan = deployer.plan(request, kube_version=kube_version)

    table = Table(title=f"Release {request.release}", show_header=False)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Workspace", str(workspace.root))
    table.add_row("Chart source", chart.kind.value)
    table.add_row("Chart reference", chart.reference)
    if chart.requires_repo_add:
        table.add_row(
            "Repository",
            f"{deployer.commands.helm.binary} repo add {chart.repo_alias} {chart.repo_url}",
        )
    if not request.deploy:
        table.add_row("Deploy", "[yellow]skipped[/yellow]")
    if request.sleep:
        table.add_row("Wait before", f"{request.sleep}s")
    table.add_row("Command", plan.display())
    console.print(table)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@with_error_handling
def deploy(
    release: ReleaseArg = None,
    file: FileOpt = None,
    chart: ChartOpt = None,
    repo_url: RepoUrlOpt = None,
    build_dir: BuildDirOpt = None,
    namespace: NamespaceOpt = None,
    hooks: HooksOpt = None,
    wait: WaitOpt = None,
    timeout: TimeoutOpt = None,
    version: VersionOpt = None,
    render_to: RenderToOpt = None,
    deploy: DeployOpt = None,
    sleep: SleepOpt = None,
) -> None:
    """Install or upgrade a release with helm.

    Examples:
        kubecm deploy myapp
        kubecm deploy myapp -c fakerepo/fakechart --repo-url https://example.com/fakerepo
        kubecm deploy myapp -c oci://example.com/charts/myapp --version 1.2.3 --wait
        kubecm deploy myapp -n staging --render-to myapp.yaml
        kubecm deploy -f releases/myapp.yaml
    """
    request = _load_request(
        file,
        release=release,
        chart_source=chart,
        repo_url=repo_url,
        build_dir=build_dir,
        namespace=namespace,
        hooks=hooks,
        wait=wait,
        timeout=timeout,
        version=version,
        render_to=render_to,
        deploy=deploy,
        sleep=sleep,
    )

    if request.deploy:
        action = "Rendering" if request.renders else "Deploying"
        console.print_header(f"{action} {request.release}")

    outcome = _get_deployer().deploy(request)
    if outcome.skipped:
        console.warn(f"Skipping release {request.release} (deploy disabled)")


@with_error_handling
def plan(
    release: ReleaseArg = None,
    file: FileOpt = None,
    chart: ChartOpt = None,
    repo_url: RepoUrlOpt = None,
    build_dir: BuildDirOpt = None,
    namespace: NamespaceOpt = None,
    hooks: HooksOpt = None,
    wait: WaitOpt = None,
    timeout: TimeoutOpt = None,
    version: VersionOpt = None,
    render_to: RenderToOpt = None,
    deploy: DeployOpt = None,
    sleep: SleepOpt = None,
    kube_version: Annotated[
        str,
        typer.Option(
            "--kube-version",
            help="Kubernetes version shown in render plans (the cluster is not queried)",
        ),
    ] = "<major.minor>",
) -> None:
    """Show what deploy would run, without touching disk or cluster.

    Examples:
        kubecm plan myapp -n staging --no-hooks --wait
        kubecm plan myapp --render-to myapp.yaml --kube-version 1.29
    """
    request = _load_request(
        file,
        release=release,
        chart_source=chart,
        repo_url=repo_url,
        build_dir=build_dir,
        namespace=namespace,
        hooks=hooks,
        wait=wait,
        timeout=timeout,
        version=version,
        render_to=render_to,
        deploy=deploy,
        sleep=sleep,
    )
    _show_plan(request, kube_version)
