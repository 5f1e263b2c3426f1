"""Error hints for benchmark configuration validation errors."""

from typing import Final


ERROR_HINTS: Final[dict[str, str]] = {
    "missing": "This field is required. Please add it to your configuration.",
    "literal_error": "Check the allowed values in the documentation.",
    "enum": "Check the allowed values in the documentation.",
    "string_type": "This field must be a text string.",
    "list_type": "This field must be a list.",
    "too_short": "The list is empty. Add at least one entry.",
    "string_too_short": "The text is too short. Check minimum length requirement.",
    "string_too_long": "The text is too long. Check maximum length requirement.",
    "string_pattern_mismatch": (
        "The format is invalid. Use letters, numbers, dots, hyphens or underscores."
    ),
    "extra_forbidden": "Unknown field. Check for typos in the field name.",
    "value_error": "Check the value. Prompt and model ids must be unique.",
    "file_not_found": "The file does not exist. Check the file path.",
    "yaml_parse_error": "Invalid YAML syntax. Check for proper indentation and formatting.",
}

FIELD_HINTS: Final[dict[str, str]] = {
    "id": "Use letters, numbers, dots, hyphens or underscores (e.g., 'token-launch').",
    "provider": "Must be one of: anthropic, openai, google.",
    "tier": "Must be 'flagship' or 'mid-tier'.",
    "version": "Use a MAJOR.MINOR version string such as '1.0'.",
}


def get_error_hint(error_type: str, field_name: str | None = None) -> str:
    """Get a user-friendly hint for a validation error.

    Args:
        error_type: The Pydantic error type (e.g., 'missing').
        field_name: Optional dotted field location for field-specific hints.

    Returns:
        A user-friendly hint string.
    """
    if field_name:
        simple_field = field_name.split(".")[-1]
        if simple_field in FIELD_HINTS:
            return FIELD_HINTS[simple_field]

    return ERROR_HINTS.get(
        error_type, "Check the configuration documentation for valid values."
    )


def format_validation_error(
    location: str,
    message: str,
    error_type: str,
    *,
    include_hint: bool = True,
) -> str:
    """Format a validation error with an optional hint line."""
    base = f"{location}: {message}"
    if include_hint:
        return f"{base}\n    Hint: {get_error_hint(error_type, location)}"
    return base
