"""Refresh state machine — a pure reducer over ``DashboardState``.

``handle(state, event)`` returns the next state together with the effects
the runtime shell must perform (start a fetch step, arm the timer, quit).
It never performs I/O itself, so every transition can be tested without an
event loop.

Phases:

- IDLE / ERROR are resting phases.  A timer tick or ``r`` starts a pass.
- FETCHING walks the repository list one step at a time.  Exactly one
  provider call is outstanding while fetching.
- QUIT is terminal; every later event is ignored.

Each pass gets a fresh ``generation``.  A ``FetchStepCompleted`` whose
generation or index does not match the live pass is stale and leaves the
snapshot untouched.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from ghamon.core import viewport
from ghamon.models.runs import STATUS_ERROR, STATUS_NO_WORKFLOWS, WorkflowRun
from ghamon.models.state import (
    DashboardState,
    Effect,
    Event,
    FetchStep,
    FetchStepCompleted,
    KeyPressed,
    PassCompleted,
    Quit,
    RefreshPhase,
    ScheduleTick,
    Started,
    TerminalResized,
    TimerElapsed,
)

logger = logging.getLogger(__name__)

QUIT_KEYS = frozenset({"q", "Q", "ctrl+c"})
REFRESH_KEYS = frozenset({"r", "R"})

_RESTING_PHASES = (RefreshPhase.IDLE, RefreshPhase.ERROR)


class Transition(BaseModel):
    """Result of feeding one event to the machine."""

    model_config = ConfigDict(frozen=True)

    state: DashboardState
    effects: tuple[Effect, ...] = ()


def handle(state: DashboardState, event: Event) -> Transition:
    """Compute the transition for ``event`` in ``state``."""
    if state.phase == RefreshPhase.QUIT:
        return Transition(state=state)

    if isinstance(event, FetchStepCompleted):
        return _on_step_completed(state, event)
    if isinstance(event, KeyPressed):
        return _on_key(state, event.key)
    if isinstance(event, TimerElapsed):
        return _on_timer(state)
    if isinstance(event, TerminalResized):
        view = viewport.resize(state.view, event.width, event.height, state.total_rows)
        return Transition(state=state.model_copy(update={"view": view}))
    if isinstance(event, Started):
        started = _start_pass(state)
        return Transition(
            state=started.state,
            effects=started.effects + (ScheduleTick(seconds=state.refresh_seconds),),
        )
    raise TypeError(f"Unsupported event: {event!r}")


# ------------------------------------------------------------------
# Triggers
# ------------------------------------------------------------------


def _on_timer(state: DashboardState) -> Transition:
    tick = ScheduleTick(seconds=state.refresh_seconds)
    if state.phase in _RESTING_PHASES:
        started = _start_pass(state)
        return Transition(state=started.state, effects=started.effects + (tick,))
    # A pass is still running; keep the cadence and let it finish.
    return Transition(state=state, effects=(tick,))


def _on_key(state: DashboardState, key: str) -> Transition:
    if key in QUIT_KEYS:
        return Transition(
            state=state.model_copy(update={"phase": RefreshPhase.QUIT}),
            effects=(Quit(),),
        )

    if key in REFRESH_KEYS:
        if state.phase in _RESTING_PHASES or state.restart_in_flight:
            # Manual refresh never touches the timer schedule.
            return _start_pass(state)
        return Transition(state=state)

    if key in viewport.SCROLL_KEYS:
        view = viewport.scroll(state.view, key, state.total_rows)
        return Transition(state=state.model_copy(update={"view": view}))

    return Transition(state=state)


# ------------------------------------------------------------------
# Pass lifecycle
# ------------------------------------------------------------------


def _start_pass(state: DashboardState) -> Transition:
    """Begin a new pass at index 0 under a fresh generation."""
    generation = state.generation + 1
    update: dict[str, object] = {
        "generation": generation,
        "next_index": 0,
        "completed_count": 0,
        "failed_count": 0,
        "error": None,
    }

    if not state.repositories:
        update["phase"] = RefreshPhase.IDLE
        return Transition(
            state=state.model_copy(update=update),
            effects=(PassCompleted(generation=generation),),
        )

    update["phase"] = RefreshPhase.FETCHING
    if state.in_flight_generation is not None:
        # A superseded step is still running; step 0 is dispatched once its
        # reply arrives so the provider never sees two calls at once.
        logger.debug(
            "Pass %d deferred until step of pass %d completes",
            generation,
            state.in_flight_generation,
        )
        return Transition(state=state.model_copy(update=update))

    update["in_flight_generation"] = generation
    return Transition(
        state=state.model_copy(update=update),
        effects=(
            FetchStep(
                generation=generation, index=0, repository=state.repositories[0]
            ),
        ),
    )


def _on_step_completed(state: DashboardState, event: FetchStepCompleted) -> Transition:
    live = (
        state.phase == RefreshPhase.FETCHING
        and event.generation == state.generation
        and event.index == state.next_index
    )
    if not live:
        return _on_stale_step(state, event)

    index = event.index
    repository = state.repositories[index]
    failed_count = state.failed_count

    if event.error is not None:
        logger.warning("Fetch failed for %s: %s", repository, event.error)
        rows: tuple[WorkflowRun, ...] = (WorkflowRun.sentinel(repository, STATUS_ERROR),)
        failed_count += 1
    elif event.rows:
        rows = tuple(event.rows)
    else:
        rows = (WorkflowRun.sentinel(repository, STATUS_NO_WORKFLOWS),)

    groups = state.groups[:index] + (rows,) + state.groups[index + 1 :]
    total_rows = sum(len(group) for group in groups)
    update: dict[str, object] = {
        "groups": groups,
        "completed_count": index + 1,
        "failed_count": failed_count,
        "view": viewport.reclamp(state.view, total_rows),
    }

    next_index = index + 1
    if next_index < state.total_repositories:
        update["next_index"] = next_index
        update["in_flight_generation"] = state.generation
        return Transition(
            state=state.model_copy(update=update),
            effects=(
                FetchStep(
                    generation=state.generation,
                    index=next_index,
                    repository=state.repositories[next_index],
                ),
            ),
        )

    # Pass finished.  It only counts as failed if nothing succeeded.
    all_failed = failed_count == state.total_repositories
    update["next_index"] = next_index
    update["in_flight_generation"] = None
    if all_failed:
        update["phase"] = RefreshPhase.ERROR
        update["error"] = f"all {failed_count} repositories failed: {event.error}"
    else:
        update["phase"] = RefreshPhase.IDLE
        update["error"] = None
    logger.info(
        "Pass %d complete: %d/%d repositories, %d failed",
        state.generation,
        index + 1,
        state.total_repositories,
        failed_count,
    )
    return Transition(
        state=state.model_copy(update=update),
        effects=(PassCompleted(generation=state.generation, failed=all_failed),),
    )


def _on_stale_step(state: DashboardState, event: FetchStepCompleted) -> Transition:
    logger.debug(
        "Discarding stale reply for pass %d step %d (live pass %d)",
        event.generation,
        event.index,
        state.generation,
    )
    if (
        state.in_flight_generation != event.generation
        or event.generation == state.generation
    ):
        return Transition(state=state)

    # The outstanding call has returned; release the deferred step, if any.
    if state.phase != RefreshPhase.FETCHING:
        return Transition(state=state.model_copy(update={"in_flight_generation": None}))
    return Transition(
        state=state.model_copy(update={"in_flight_generation": state.generation}),
        effects=(
            FetchStep(
                generation=state.generation,
                index=state.next_index,
                repository=state.repositories[state.next_index],
            ),
        ),
    )


class RefreshMachine:
    """Holds the current ``DashboardState`` and feeds it through ``handle``.

    The runtime shell owns one instance and calls ``handle`` from its event
    loop only.

    Parameters
    ----------
    state:
        Initial state, usually ``DashboardState.initial(...)``.
    """

    def __init__(self, state: DashboardState) -> None:
        self._state = state

    @property
    def state(self) -> DashboardState:
        return self._state

    @property
    def is_quit(self) -> bool:
        return self._state.phase == RefreshPhase.QUIT

    def handle(self, event: Event) -> Transition:
        """Apply ``event`` and return the transition (new state + effects)."""
        transition = handle(self._state, event)
        self._state = transition.state
        return transition
