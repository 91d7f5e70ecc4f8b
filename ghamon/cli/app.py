"""``ghamon`` — monitor GitHub Actions workflows for one or more repositories.

Entry point: ``ghamon`` (configured via pyproject.toml console_scripts).

Repositories come from the config file (``-c``, default ``~/.ghamon/default``)
followed by positional arguments, de-duplicated case-insensitively.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from ghamon.config import Settings, configure_logging, effective_rate
from ghamon.core.fetch_pipeline import FetchPipeline
from ghamon.core.refresh_machine import RefreshMachine
from ghamon.core.repo_config import ConfigFileError, load_repositories
from ghamon.core.repositories import (
    InvalidRepositoryError,
    dedupe_repositories,
    validate_repository,
)
from ghamon.dashboard.app import run_dashboard
from ghamon.models.state import DashboardState, RefreshPhase
from ghamon.monitor.renderer import DashboardRenderer
from ghamon.provider.github import GitHubStatusProvider

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="ghamon",
    help="GHA Monitor: live status of GitHub Actions workflows across repositories.",
    rich_markup_mode="rich",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _collect_repositories(config_path: Path, cli_repos: list[str]) -> list[str]:
    """Config-file entries first, then positional ones, de-duplicated."""
    try:
        from_config = load_repositories(config_path)
    except ConfigFileError as exc:
        err_console.print(f"[yellow]Warning:[/yellow] could not load config: {escape(str(exc))}")
        from_config = []
    except InvalidRepositoryError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    from_cli: list[str] = []
    for repo in cli_repos:
        try:
            from_cli.append(validate_repository(repo))
        except InvalidRepositoryError as exc:
            raise typer.BadParameter(str(exc), param_hint="REPOS") from exc

    return dedupe_repositories(from_config + from_cli)


@app.command(name="ghamon")
def monitor_cmd(
    repos: list[str] | None = typer.Argument(
        None,
        help="GitHub repositories in owner/repo form (multiple allowed).",
        show_default=False,
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the repository list file [default: ~/.ghamon/default].",
        show_default=False,
    ),
    rate: int | None = typer.Option(
        None,
        "--rate",
        "-r",
        help="Refresh rate in seconds [default: 30]; values below 1 use the default.",
        show_default=False,
    ),
    workflow: str | None = typer.Option(
        None,
        "--workflow",
        "-w",
        help="Workflow file name or id to monitor [default: all workflows].",
        show_default=False,
    ),
    once: bool = typer.Option(
        False,
        "--once",
        help="Fetch every repository once, print the table and exit.",
    ),
    restart_in_flight: bool | None = typer.Option(
        None,
        "--restart-in-flight/--no-restart-in-flight",
        help="Whether 'r' restarts a refresh that is already running.",
        show_default=False,
    ),
) -> None:
    """Monitor GitHub Actions workflows.

    Keys: [bold]q[/bold] quit, [bold]r[/bold] refresh, arrows or
    [bold]j[/bold]/[bold]k[/bold] scroll.
    """
    settings = Settings()
    configure_logging(settings)

    repositories = _collect_repositories(config_path or settings.config_path, repos or [])

    if not settings.has_token:
        err_console.print(
            "[bold red]Error:[/bold red] GITHUB_TOKEN environment variable is not set"
        )
        raise typer.Exit(code=1)

    if not repositories:
        err_console.print("[bold red]Error:[/bold red] no repositories specified")
        err_console.print("[dim]Usage: ghamon [OPTIONS] [REPOS]...  (see --help)[/dim]")
        raise typer.Exit(code=1)

    refresh = effective_rate(rate if rate is not None else settings.refresh_seconds)
    state = DashboardState.initial(
        repositories,
        workflow=workflow if workflow is not None else "",
        refresh_seconds=refresh,
        restart_in_flight=(
            restart_in_flight
            if restart_in_flight is not None
            else settings.restart_in_flight
        ),
    )
    machine = RefreshMachine(state)
    logger.info(
        "Monitoring %d repositories every %ds (workflow=%s)",
        len(repositories),
        refresh,
        workflow or "all",
    )

    with GitHubStatusProvider(
        settings.github_token,
        api_url=settings.api_url,
        timeout=settings.request_timeout,
    ) as provider:
        pipeline = FetchPipeline(provider, workflow=state.workflow)
        if once:
            pipeline.run_pass(machine)
            DashboardRenderer(console=console).print_snapshot(machine.state)
            if machine.state.phase == RefreshPhase.ERROR:
                raise typer.Exit(code=1)
            return
        run_dashboard(machine, pipeline)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
