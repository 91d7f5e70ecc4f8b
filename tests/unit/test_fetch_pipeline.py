"""Tests for the FetchPipeline — ordering, sentinels and failure conversion."""

from __future__ import annotations

from ghamon.core.fetch_pipeline import FetchPipeline
from ghamon.core.refresh_machine import RefreshMachine
from ghamon.models.state import DashboardState, FetchStep, RefreshPhase


class TestFetchOne:
    def test_passes_owner_repo_and_filter(self, make_run, make_provider):
        provider = make_provider({"octo/app": [make_run("octo/app", "ci.yml")]})
        pipeline = FetchPipeline(provider, workflow="ci.yml")
        rows = pipeline.fetch_one("octo/app")
        assert provider.calls == [("octo", "app", "ci.yml")]
        assert [r.workflow for r in rows] == ["ci.yml"]

    def test_empty_result_becomes_no_workflows_row(self, make_provider):
        pipeline = FetchPipeline(make_provider({"c/d": []}))
        rows = pipeline.fetch_one("c/d")
        assert len(rows) == 1
        assert rows[0].repository == "c/d"
        assert rows[0].display_status == "no workflows"


class TestStep:
    def test_success_event(self, scenario_provider):
        event = FetchPipeline(scenario_provider).step(3, 0, "a/b")
        assert event.generation == 3
        assert event.index == 0
        assert event.error is None
        assert [r.workflow for r in event.rows] == ["CI", "Deploy"]

    def test_provider_error_becomes_event_error(self, failing_provider):
        event = FetchPipeline(failing_provider).step(1, 1, "c/d")
        assert event.rows == ()
        assert event.error == "GitHub API returned 404"

    def test_unexpected_exception_still_degrades(self, make_provider):
        provider = make_provider({"a/b": KeyError("workflow_runs")})
        event = FetchPipeline(provider).step(1, 0, "a/b")
        assert event.error is not None
        assert "KeyError" in event.error

    def test_run_effect(self, scenario_provider):
        event = FetchPipeline(scenario_provider).run_effect(
            FetchStep(generation=2, index=1, repository="c/d")
        )
        assert (event.generation, event.index) == (2, 1)
        assert event.rows[0].display_status == "no workflows"


class TestRunPass:
    def test_scenario_rows_in_repository_order(self, scenario_provider):
        machine = RefreshMachine(DashboardState.initial(["a/b", "c/d"]))
        FetchPipeline(scenario_provider).run_pass(machine)

        state = machine.state
        assert state.phase == RefreshPhase.IDLE
        assert state.completed_count == state.total_repositories == 2
        assert [(r.repository, r.workflow or "-", r.display_status) for r in state.rows] == [
            ("a/b", "CI", "success"),
            ("a/b", "Deploy", "in progress"),
            ("c/d", "-", "no workflows"),
        ]

    def test_calls_are_sequential_and_ordered(self, scenario_provider):
        repos = ["c/d", "a/b", "e/f"]
        machine = RefreshMachine(DashboardState.initial(repos))
        FetchPipeline(scenario_provider).run_pass(machine)
        assert [f"{o}/{r}" for o, r, _ in scenario_provider.calls] == repos

    def test_every_repository_gets_a_row(self, scenario_provider):
        repos = ["a/b", "c/d", "x/y"]
        machine = RefreshMachine(DashboardState.initial(repos))
        FetchPipeline(scenario_provider).run_pass(machine)
        assert {r.repository for r in machine.state.rows} == set(repos)

    def test_partial_failure_reaches_idle(self, failing_provider):
        machine = RefreshMachine(DashboardState.initial(["a/b", "c/d"]))
        FetchPipeline(failing_provider).run_pass(machine)
        assert machine.state.phase == RefreshPhase.IDLE
        assert [r.display_status for r in machine.state.rows] == ["success", "error"]
