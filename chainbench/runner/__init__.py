"""Benchmark orchestration: collection, classification and run lifecycle."""

from chainbench.runner.benchmark import (
    BenchmarkRunner,
    DryRunPlan,
    RunOutcome,
    group_by_provider,
)
from chainbench.runner.classify import (
    ClassifyOptions,
    ClassifyOutcome,
    ClassifyRunner,
    build_detector_factory,
    failed_analysis,
)
from chainbench.runner.metrics import RunnerMetrics
from chainbench.runner.state_machine import RunState, RunStateError, RunStateMachine


__all__ = [
    "BenchmarkRunner",
    "ClassifyOptions",
    "ClassifyOutcome",
    "ClassifyRunner",
    "DryRunPlan",
    "RunOutcome",
    "RunState",
    "RunStateError",
    "RunStateMachine",
    "RunnerMetrics",
    "build_detector_factory",
    "failed_analysis",
    "group_by_provider",
]
