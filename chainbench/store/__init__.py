"""Flat-file persistence for benchmark records."""

from chainbench.store.json_store import (
    RESPONSES_FILE,
    RESULTS_FILE,
    ResultStore,
    create_run_dir,
    load_responses,
    load_responses_or_results,
    load_results,
    record_filename,
)
from chainbench.store.models import (
    BenchmarkResult,
    ModelConfig,
    ModelTier,
    Prompt,
    ProviderResponse,
    RawResponse,
)


__all__ = [
    "RESPONSES_FILE",
    "RESULTS_FILE",
    "BenchmarkResult",
    "ModelConfig",
    "ModelTier",
    "Prompt",
    "ProviderResponse",
    "RawResponse",
    "ResultStore",
    "create_run_dir",
    "load_responses",
    "load_responses_or_results",
    "load_results",
    "record_filename",
]
