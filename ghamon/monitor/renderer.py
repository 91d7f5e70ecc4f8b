"""Rich renderer for the ghamon dashboard.

``render_dashboard`` is a pure function of ``DashboardState``: it reads the
snapshot, the refresh progress and the view, and returns a Rich renderable
exactly ``view.height`` lines tall.  It never mutates state.

Color scheme
------------
- green       : success
- red         : failure, timed_out, error
- yellow      : in progress, queued
- dark orange : cancelled
- dim         : skipped, no runs, no workflows, pending
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator
from rich.cells import cell_len
from rich.console import Console, Group, RenderableType
from rich.table import Table
from rich.text import Text

from ghamon.core import viewport
from ghamon.models.runs import StatusKind, WorkflowRun
from ghamon.models.state import DashboardState, RefreshPhase

TITLE = "GHA Monitor"

MIN_REPOSITORY_WIDTH = 20
MIN_WORKFLOW_WIDTH = 15
STATUS_WIDTH = 14
PROGRESS_BAR_WIDTH = 20
COLUMN_GAP = "  "

FOOTER_HINTS = "q: quit | r: refresh | ↑/k ↓/j: scroll | PgUp/PgDn"


class StatusPalette(BaseModel):
    """Style table keyed by ``StatusKind``; must cover every kind."""

    model_config = ConfigDict(frozen=True)

    styles: dict[StatusKind, str]

    @model_validator(mode="after")
    def _check_exhaustive(self) -> StatusPalette:
        missing = [kind.value for kind in StatusKind if kind not in self.styles]
        if missing:
            raise ValueError(f"palette is missing styles for: {', '.join(missing)}")
        return self

    def style_for(self, kind: StatusKind) -> str:
        return self.styles[kind]


DEFAULT_PALETTE = StatusPalette(
    styles={
        StatusKind.SUCCESS: "green",
        StatusKind.FAILURE: "bold red",
        StatusKind.IN_PROGRESS: "yellow",
        StatusKind.QUEUED: "yellow",
        StatusKind.CANCELLED: "dark_orange",
        StatusKind.TIMED_OUT: "red",
        StatusKind.SKIPPED: "dim",
        StatusKind.NO_RUNS: "dim",
        StatusKind.NO_WORKFLOWS: "dim",
        StatusKind.ERROR: "bold red",
        StatusKind.PENDING: "dim",
        StatusKind.OTHER: "default",
    }
)


# ---------------------------------------------------------------------------
# Pieces
# ---------------------------------------------------------------------------


def progress_bar(completed: int, total: int, width: int = PROGRESS_BAR_WIDTH) -> str:
    """``[████░░░░]`` style bar; empty when there is nothing to fetch."""
    if total <= 0:
        return ""
    filled = width * min(completed, total) // total
    return "[" + "█" * filled + "░" * (width - filled) + "]"


def column_widths(rows: list[WorkflowRun]) -> tuple[int, int]:
    """Repository and workflow column widths for the current snapshot."""
    repo_width = max([MIN_REPOSITORY_WIDTH] + [cell_len(r.repository) for r in rows])
    workflow_width = max([MIN_WORKFLOW_WIDTH] + [cell_len(r.workflow or "-") for r in rows])
    return repo_width, workflow_width


def _line(*parts: str | tuple[str, str]) -> Text:
    return Text.assemble(*parts, no_wrap=True, overflow="crop")


def _header(state: DashboardState) -> list[Text]:
    if state.phase == RefreshPhase.ERROR:
        status: tuple[str, str] = (f"Error: {state.error}", "bold red")
    elif state.phase == RefreshPhase.FETCHING:
        status = ("refreshing…", "dim")
    else:
        status = ("", "")

    title = _line((TITLE, "bold magenta"), COLUMN_GAP, status)

    workflow = state.workflow or "all"
    progress = progress_bar(state.completed_count, state.total_repositories)
    info = _line(
        (f"Workflow: {workflow}", "grey50"),
        COLUMN_GAP,
        (f"Refresh: {state.refresh_seconds}s", "grey50"),
        COLUMN_GAP,
        (progress, "magenta"),
        " " if progress else "",
        (f"{state.completed_count}/{state.total_repositories}", "bold"),
    )
    return [title, info, Text("")]


def _run_table(
    rows: list[WorkflowRun],
    widths: tuple[int, int],
    palette: StatusPalette,
) -> Table:
    """Borderless table of runs; cells are measured in terminal cells."""
    repo_width, workflow_width = widths
    table = Table(
        box=None,
        show_header=True,
        header_style="bold cyan",
        show_edge=False,
        pad_edge=False,
        padding=(0, 1),
    )
    table.add_column("REPOSITORY", width=repo_width, no_wrap=True, overflow="crop")
    table.add_column("WORKFLOW", width=workflow_width, no_wrap=True, overflow="crop")
    table.add_column("STATUS", width=STATUS_WIDTH, no_wrap=True, overflow="crop")
    table.add_column("UPDATED", style="dim", no_wrap=True, overflow="crop")

    for row in rows:
        updated = row.updated_at.strftime("%Y-%m-%d %H:%M") if row.updated_at else "-"
        table.add_row(
            row.repository,
            row.workflow or "-",
            Text(row.display_status, style=palette.style_for(row.kind)),
            updated,
        )
    return table


def _content(
    state: DashboardState, palette: StatusPalette, *, limit: int | None = None
) -> tuple[RenderableType, int]:
    """Run table (or the empty-list hint) and the number of lines it takes.

    ``limit`` caps the rows shown from the viewport window; ``None`` lists
    every row regardless of the viewport.
    """
    if not state.repositories:
        hint = Text(
            "No repositories configured. Specify repos via -c or as arguments.",
            style="yellow",
        )
        return hint, 1

    rows = state.rows
    if limit is None:
        window = rows
    else:
        start = state.view.scroll_offset
        shown = min(limit, viewport.visible_rows(state.view.height))
        window = rows[start : start + shown]
    return _run_table(window, column_widths(rows), palette), 1 + len(window)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_dashboard(
    state: DashboardState,
    palette: StatusPalette = DEFAULT_PALETTE,
    *,
    full: bool = False,
) -> RenderableType:
    """Render header, visible rows and footer as one Rich ``Group``.

    With ``full=True`` every row is listed and the footer is dropped; this is
    the one-shot output.
    """
    header = _header(state)
    if full:
        content, _ = _content(state, palette)
        return Group(*header, content)

    body_height = max(0, state.view.height - viewport.FOOTER_HEIGHT)
    parts: list[RenderableType] = list(header[:body_height])
    used = len(parts)
    room = body_height - used
    if room > 0:
        content, content_height = _content(state, palette, limit=room - 1)
        parts.append(content)
        used += content_height
    parts.extend(Text("") for _ in range(body_height - used))
    parts.append(_line((FOOTER_HINTS, "grey50")))
    return Group(*parts)


def render_text(
    state: DashboardState,
    palette: StatusPalette = DEFAULT_PALETTE,
    *,
    full: bool = False,
) -> str:
    """Render to plain text at the state's terminal width."""
    console = Console(
        width=state.view.width, color_system=None, force_terminal=False, highlight=False
    )
    with console.capture() as capture:
        console.print(render_dashboard(state, palette, full=full))
    return capture.get()


class DashboardRenderer:
    """Prints dashboard states to a Rich console.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    palette:
        Status style table.
    """

    def __init__(
        self,
        console: Console | None = None,
        palette: StatusPalette = DEFAULT_PALETTE,
    ) -> None:
        self.console = console or Console()
        self.palette = palette

    def render(self, state: DashboardState) -> RenderableType:
        return render_dashboard(state, self.palette)

    def print_snapshot(self, state: DashboardState) -> None:
        """Print every row of ``state`` once, without the footer."""
        self.console.print(render_dashboard(state, self.palette, full=True))
