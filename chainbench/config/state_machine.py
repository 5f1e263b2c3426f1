"""Lifecycle of one benchmark configuration load."""

from enum import Enum, auto
from typing import ClassVar


class ConfigSource(str, Enum):
    """Where the prompt set and model roster come from."""

    FILE = "file"
    DEFAULTS = "defaults"


class ConfigState(Enum):
    """Configuration loading states.

    State transitions:
        IDLE -> READING: benchmark.yaml is being read
        READING -> PARSED: YAML parsed and checksummed
        PARSED -> READY: Schema validation passed
        IDLE -> READY: Built-in prompts and models, no file I/O
        READING | PARSED -> FAILED: File missing, bad YAML or schema errors
    """

    IDLE = auto()
    READING = auto()
    PARSED = auto()
    READY = auto()
    FAILED = auto()


class ConfigStateError(Exception):
    """Raised when a loader step runs out of order."""

    def __init__(self, from_state: ConfigState, to_state: ConfigState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Config loader cannot move from {from_state.name} to {to_state.name}"
        )


class ConfigStateMachine:
    """Tracks one load from either a file or the built-in defaults.

    A loader is single use: READY and FAILED accept no further steps.
    """

    VALID_TRANSITIONS: ClassVar[dict[ConfigState, frozenset[ConfigState]]] = {
        ConfigState.IDLE: frozenset({ConfigState.READING, ConfigState.READY}),
        ConfigState.READING: frozenset({ConfigState.PARSED, ConfigState.FAILED}),
        ConfigState.PARSED: frozenset({ConfigState.READY, ConfigState.FAILED}),
        ConfigState.READY: frozenset(),
        ConfigState.FAILED: frozenset(),
    }

    def __init__(self) -> None:
        self._state = ConfigState.IDLE
        self._source: ConfigSource | None = None
        self._failed_in: ConfigState | None = None

    @property
    def state(self) -> ConfigState:
        """Get the current state."""
        return self._state

    @property
    def source(self) -> ConfigSource | None:
        """Get the configuration source, once a load has started."""
        return self._source

    @property
    def failed_in(self) -> ConfigState | None:
        """Get the step that was running when the load failed."""
        return self._failed_in

    def _move(self, to_state: ConfigState) -> None:
        if to_state not in self.VALID_TRANSITIONS[self._state]:
            raise ConfigStateError(self._state, to_state)
        self._state = to_state

    def start_reading(self) -> None:
        """Begin loading from a benchmark file."""
        self._move(ConfigState.READING)
        self._source = ConfigSource.FILE

    def mark_parsed(self) -> None:
        """Record that the file was read and parsed as YAML."""
        self._move(ConfigState.PARSED)

    def mark_validated(self) -> None:
        """Record that the parsed file passed schema validation."""
        self._move(ConfigState.READY)

    def use_defaults(self) -> None:
        """Take the built-in configuration, skipping file I/O."""
        self._move(ConfigState.READY)
        self._source = ConfigSource.DEFAULTS

    def fail(self) -> None:
        """Record a failure in the current step."""
        failed_in = self._state
        self._move(ConfigState.FAILED)
        self._failed_in = failed_in
