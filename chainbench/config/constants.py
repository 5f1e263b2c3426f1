"""Constants for the configuration module."""

# Log component names
COMPONENT_CONFIG = "config"
COMPONENT_CLI = "cli"

# Pattern shared by prompt and model identifiers
ID_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9._-]*$"

# Default number of repetitions per (prompt, model)
DEFAULT_RUNS = 1
