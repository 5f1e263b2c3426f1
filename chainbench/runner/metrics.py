"""Metrics collection for benchmark runs."""

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock


_metrics_instance: "RunnerMetrics | None" = None
_metrics_lock: Lock = Lock()


@dataclass
class RunnerMetrics:
    """Thread-safe counters for provider calls and classifications.

    Use get_instance() for singleton access.
    """

    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    calls_by_provider: Counter[str] = field(default_factory=Counter)
    failures_by_provider: Counter[str] = field(default_factory=Counter)
    retries_by_provider: Counter[str] = field(default_factory=Counter)
    latency_ms_by_model: dict[str, list[int]] = field(default_factory=dict)

    classifications_total: int = 0
    classification_failures_total: int = 0

    @classmethod
    def get_instance(cls) -> "RunnerMetrics":
        """Get the singleton instance (thread-safe)."""
        global _metrics_instance  # noqa: PLW0603
        if _metrics_instance is None:
            with _metrics_lock:
                if _metrics_instance is None:
                    _metrics_instance = cls()
        return _metrics_instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (for testing)."""
        global _metrics_instance  # noqa: PLW0603
        with _metrics_lock:
            _metrics_instance = None

    def record_call(self, provider: str, model_id: str, latency_ms: int) -> None:
        """Record a successful provider call."""
        with self._lock:
            self.calls_by_provider[provider] += 1
            self.latency_ms_by_model.setdefault(model_id, []).append(latency_ms)

    def record_call_failure(self, provider: str) -> None:
        """Record a provider call that failed after retries."""
        with self._lock:
            self.calls_by_provider[provider] += 1
            self.failures_by_provider[provider] += 1

    def record_retry(self, provider: str) -> None:
        """Record a retry of a provider call."""
        with self._lock:
            self.retries_by_provider[provider] += 1

    def record_classification(self, failed: bool = False) -> None:
        """Record one classified response."""
        with self._lock:
            self.classifications_total += 1
            if failed:
                self.classification_failures_total += 1

    def get_summary(self) -> dict[str, object]:
        """Get metrics summary."""
        with self._lock:
            return {
                "calls_total": sum(self.calls_by_provider.values()),
                "call_failures_total": sum(self.failures_by_provider.values()),
                "retries_total": sum(self.retries_by_provider.values()),
                "calls_by_provider": dict(self.calls_by_provider),
                "classifications_total": self.classifications_total,
                "classification_failures_total": self.classification_failures_total,
            }
