"""Benchmark configuration loading and validation module."""

from chainbench.config.defaults import DEFAULT_MODELS, DEFAULT_PROMPTS, default_config
from chainbench.config.loader import (
    ConfigLoader,
    ConfigValidationError,
    available_models,
)
from chainbench.config.schemas import BenchmarkConfig, ModelEntry, PromptConfig
from chainbench.config.state_machine import ConfigSource, ConfigState, ConfigStateError


__all__ = [
    "DEFAULT_MODELS",
    "DEFAULT_PROMPTS",
    "BenchmarkConfig",
    "ConfigLoader",
    "ConfigSource",
    "ConfigState",
    "ConfigStateError",
    "ConfigValidationError",
    "ModelEntry",
    "PromptConfig",
    "available_models",
    "default_config",
]
