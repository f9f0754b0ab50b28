"""Tests for runner result models."""

from __future__ import annotations

from dockwright.runners.models import CommandResult, WorkflowRun


class TestCommandResult:
    def test_success(self) -> None:
        assert CommandResult(0, "out", "", 1).success

    def test_timed_out_is_not_success(self) -> None:
        assert not CommandResult(0, "", "", 1, timed_out=True).success

    def test_output_combines_streams(self) -> None:
        assert CommandResult(1, "out", "err", 1).output == "out\nerr"
        assert CommandResult(1, "", "err", 1).output == "err"
        assert CommandResult(0, "out", "", 1).output == "out"


class TestWorkflowRun:
    def test_is_completed(self) -> None:
        run = WorkflowRun(
            run_id=1,
            status="completed",
            url="https://github.com/acme/widget/actions/runs/1",
            head_sha="abc",
            head_branch="main",
            conclusion="success",
        )
        assert run.is_completed
