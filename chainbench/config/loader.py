"""Benchmark configuration loader with validation and state machine."""

import hashlib
import time
from collections.abc import Iterable, Sequence
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from chainbench.config.constants import COMPONENT_CONFIG
from chainbench.config.defaults import default_config
from chainbench.config.schemas import BenchmarkConfig
from chainbench.config.state_machine import ConfigState, ConfigStateMachine
from chainbench.settings.app import AppSettings
from chainbench.store.models import ModelConfig


logger = structlog.get_logger()


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: list[dict[str, str]], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: List of validation error details.
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"Validation failed for {file_path}: {len(errors)} errors")


class ConfigLoader:
    """Loads and validates a benchmark.yaml file.

    A file goes IDLE -> READING -> PARSED -> READY. Without a path the
    built-in prompt set and model roster are used and the loader moves
    straight to READY.
    """

    def __init__(self, run_id: str) -> None:
        """Initialize the loader.

        Args:
            run_id: Unique identifier for the current run.
        """
        self._run_id = run_id
        self._state_machine = ConfigStateMachine()
        self._file_checksums: dict[str, str] = {}
        self._validation_errors: list[dict[str, str]] = []
        self._validation_duration_ms: float = 0

    @property
    def state(self) -> ConfigState:
        """Get the current loader state."""
        return self._state_machine.state

    @property
    def file_checksums(self) -> dict[str, str]:
        """Get SHA-256 checksums of loaded files."""
        return self._file_checksums.copy()

    @property
    def validation_errors(self) -> list[dict[str, str]]:
        """Get validation errors if any."""
        return self._validation_errors.copy()

    @property
    def validation_duration_ms(self) -> float:
        """Get validation duration in milliseconds."""
        return self._validation_duration_ms

    def _load_yaml_file(self, file_path: Path) -> tuple[dict[str, object], str]:
        """Load a YAML file and compute its checksum.

        Raises:
            FileNotFoundError: If file does not exist.
            yaml.YAMLError: If YAML parsing fails.
        """
        content_bytes = file_path.read_bytes()
        checksum = hashlib.sha256(content_bytes).hexdigest()
        parsed: dict[str, object] = yaml.safe_load(content_bytes.decode("utf-8")) or {}
        return parsed, checksum

    def load(self, config_path: Path | None = None) -> BenchmarkConfig:
        """Load and validate the benchmark configuration.

        Args:
            config_path: Path to benchmark.yaml, or None for the defaults.

        Returns:
            Validated benchmark configuration.

        Raises:
            ConfigValidationError: If validation fails.
            ConfigStateError: If the loader was already used.
        """
        start_time = time.perf_counter()
        log = logger.bind(run_id=self._run_id, component=COMPONENT_CONFIG)

        if config_path is None:
            self._state_machine.use_defaults()
            config = default_config()
            log.info(
                "config_defaults_used",
                phase=ConfigState.READY.name,
                prompt_count=len(config.prompts),
                model_count=len(config.models),
            )
            return config

        source = str(config_path)
        self._state_machine.start_reading()
        log.info("loading_config_file", phase=ConfigState.READING.name, file_path=source)
        try:
            data, checksum = self._load_yaml_file(config_path)
            self._file_checksums[str(config_path.resolve())] = checksum
            self._state_machine.mark_parsed()
            log.info(
                "config_file_loaded",
                phase=ConfigState.PARSED.name,
                file_path=source,
                file_sha256=checksum,
            )
            config = BenchmarkConfig.model_validate(data)
        except ValidationError as e:
            self._handle_validation_error(e, log)
            raise ConfigValidationError(self.validation_errors, source) from e
        except FileNotFoundError as e:
            self._record_failure("file", str(e), "file_not_found")
            log.error("config_file_not_found", phase="FAILED", error=str(e))
            raise ConfigValidationError(self.validation_errors, source) from e
        except yaml.YAMLError as e:
            self._record_failure("yaml", str(e), "yaml_parse_error")
            log.error("config_yaml_parse_error", phase="FAILED", error=str(e))
            raise ConfigValidationError(self.validation_errors, source) from e

        self._state_machine.mark_validated()
        self._validation_duration_ms = (time.perf_counter() - start_time) * 1000
        log.info(
            "config_ready",
            phase=ConfigState.READY.name,
            prompt_count=len(config.prompts),
            model_count=len(config.models),
            config_validation_duration_ms=self._validation_duration_ms,
        )
        return config

    def _handle_validation_error(
        self,
        error: ValidationError,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        """Handle Pydantic validation error."""
        self._state_machine.fail()
        for err in error.errors():
            self._validation_errors.append(
                {
                    "loc": ".".join(str(loc) for loc in err["loc"]),
                    "msg": err["msg"],
                    "type": err["type"],
                }
            )
        log.error(
            "config_validation_failed",
            phase="FAILED",
            validation_error_count=len(self._validation_errors),
            errors=self._validation_errors,
        )

    def _record_failure(self, loc: str, msg: str, error_type: str) -> None:
        self._state_machine.fail()
        self._validation_errors.append({"loc": loc, "msg": msg, "type": error_type})

    def get_validation_summary(self) -> dict[str, object]:
        """Get a summary of the validation process."""
        machine = self._state_machine
        return {
            "run_id": self._run_id,
            "state": machine.state.name,
            "source": machine.source.value if machine.source else None,
            "failed_in": machine.failed_in.name if machine.failed_in else None,
            "file_checksums": self._file_checksums,
            "validation_error_count": len(self._validation_errors),
            "validation_errors": self._validation_errors,
            "validation_duration_ms": self._validation_duration_ms,
        }


def available_models(
    models: Iterable[ModelConfig],
    settings: AppSettings,
    filter_ids: Sequence[str] | None = None,
) -> list[ModelConfig]:
    """Filter models to those whose provider has credentials.

    Args:
        models: Candidate models.
        settings: Settings holding provider API keys.
        filter_ids: Optional allow-list of model ids. Empty means no filter.

    Returns:
        Models in their original order.
    """
    selected = [m for m in models if settings.api_key_for_provider(m.provider)]
    if filter_ids:
        allowed = set(filter_ids)
        selected = [m for m in selected if m.id in allowed]
    return selected
