"""Unit tests for the run state machine."""

import pytest

from chainbench.runner.state_machine import RunState, RunStateError, RunStateMachine


class TestRunStateMachine:
    """Tests for RunStateMachine transitions."""

    def test_initial_state(self) -> None:
        """Machines start in PENDING."""
        machine = RunStateMachine("run-1")

        assert machine.state == RunState.PENDING
        assert not machine.is_terminal()

    def test_benchmark_path(self) -> None:
        """A full run goes through collection, aggregation and export."""
        machine = RunStateMachine("run-1")

        machine.to_collecting()
        machine.to_aggregating()
        machine.to_exporting()
        machine.to_done()

        assert machine.state == RunState.DONE
        assert machine.is_terminal()

    def test_collect_only_path(self) -> None:
        """Collect-only runs finish straight from COLLECTING."""
        machine = RunStateMachine("run-1")

        machine.to_collecting()
        machine.to_done()

        assert machine.state == RunState.DONE

    def test_classify_must_aggregate(self) -> None:
        """Classification cannot finish without aggregating."""
        machine = RunStateMachine("run-1")
        machine.to_classifying()

        with pytest.raises(RunStateError) as exc_info:
            machine.to_done()

        assert exc_info.value.from_state == RunState.CLASSIFYING
        assert exc_info.value.to_state == RunState.DONE
        assert "CLASSIFYING -> DONE" in str(exc_info.value)

    def test_cannot_aggregate_from_pending(self) -> None:
        """The grid is never built before responses exist."""
        assert not RunStateMachine("run-1").can_transition(RunState.AGGREGATING)

    @pytest.mark.parametrize(
        "advance",
        [
            [],
            ["to_collecting"],
            ["to_classifying"],
            ["to_collecting", "to_aggregating"],
            ["to_collecting", "to_aggregating", "to_exporting"],
        ],
    )
    def test_fail_from_any_non_terminal(self, advance: list[str]) -> None:
        """Every non-terminal state can fail."""
        machine = RunStateMachine("run-1")
        for step in advance:
            getattr(machine, step)()

        machine.to_failed()

        assert machine.state == RunState.FAILED

    def test_terminal_states_are_final(self) -> None:
        """Nothing follows DONE or FAILED."""
        machine = RunStateMachine("run-1")
        machine.to_failed()

        with pytest.raises(RunStateError):
            machine.to_collecting()
