"""Benchmark run lifecycle state machine."""

from enum import Enum, auto
from typing import ClassVar

import structlog


logger = structlog.get_logger()


class RunState(Enum):
    """Run lifecycle states.

    State transitions:
        PENDING -> COLLECTING: Begin sending prompts to providers
        PENDING -> CLASSIFYING: Begin classifying stored responses
        COLLECTING -> AGGREGATING: Every provider finished
        COLLECTING -> DONE: Collect-only run finished
        CLASSIFYING -> AGGREGATING: Every classification batch settled
        AGGREGATING -> EXPORTING: Grid built, begin writing reports
        AGGREGATING -> DONE: Nothing to export
        EXPORTING -> DONE: Reports written
        Any non-terminal -> FAILED: Run failed
    """

    PENDING = auto()
    COLLECTING = auto()
    CLASSIFYING = auto()
    AGGREGATING = auto()
    EXPORTING = auto()
    DONE = auto()
    FAILED = auto()


class RunStateError(Exception):
    """Raised when an invalid run state transition is attempted."""

    def __init__(self, from_state: RunState, to_state: RunState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid run state transition: {from_state.name} -> {to_state.name}"
        )


class RunStateMachine:
    """State machine for a benchmark run.

    The grid is only built in AGGREGATING, which is reachable from
    CLASSIFYING once all batches have settled.
    """

    VALID_TRANSITIONS: ClassVar[dict[RunState, set[RunState]]] = {
        RunState.PENDING: {RunState.COLLECTING, RunState.CLASSIFYING, RunState.FAILED},
        RunState.COLLECTING: {RunState.AGGREGATING, RunState.DONE, RunState.FAILED},
        RunState.CLASSIFYING: {RunState.AGGREGATING, RunState.FAILED},
        RunState.AGGREGATING: {RunState.EXPORTING, RunState.DONE, RunState.FAILED},
        RunState.EXPORTING: {RunState.DONE, RunState.FAILED},
        RunState.DONE: set(),
        RunState.FAILED: set(),
    }

    def __init__(self, run_id: str) -> None:
        """Initialize the state machine in PENDING state.

        Args:
            run_id: Run identifier for logging.
        """
        self._run_id = run_id
        self._state = RunState.PENDING
        self._log = logger.bind(run_id=run_id, component="runner")

    @property
    def state(self) -> RunState:
        """Get the current state."""
        return self._state

    def can_transition(self, to_state: RunState) -> bool:
        """Check if a transition to the given state is valid."""
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: RunState) -> None:
        """Transition to a new state.

        Raises:
            RunStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.name,
                to_state=to_state.name,
            )
            raise RunStateError(self._state, to_state)

        old_state = self._state
        self._state = to_state
        self._log.info(
            "run_state_transition",
            from_state=old_state.name,
            to_state=to_state.name,
        )

    def to_collecting(self) -> None:
        """Transition to COLLECTING state."""
        self.transition(RunState.COLLECTING)

    def to_classifying(self) -> None:
        """Transition to CLASSIFYING state."""
        self.transition(RunState.CLASSIFYING)

    def to_aggregating(self) -> None:
        """Transition to AGGREGATING state."""
        self.transition(RunState.AGGREGATING)

    def to_exporting(self) -> None:
        """Transition to EXPORTING state."""
        self.transition(RunState.EXPORTING)

    def to_done(self) -> None:
        """Transition to DONE state."""
        self.transition(RunState.DONE)

    def to_failed(self) -> None:
        """Transition to FAILED state."""
        self.transition(RunState.FAILED)

    def is_terminal(self) -> bool:
        """Check if the current state is terminal."""
        return self._state in (RunState.DONE, RunState.FAILED)
