from __future__ import annotations

from typing import Any

from diffpost.exceptions.base import DiffPostError


class ConfigError(DiffPostError):
    """Exception for configuration loading, parsing, and validation errors.

    Raised when configuration cannot be loaded, parsed, or validated. This
    includes YAML parsing failures, Pydantic validation errors, and invalid
    environment variable values.

    Attributes:
        message: Human-readable error message describing the configuration issue.
        field: Optional field name that caused the error (e.g., "max_retries").
        value: Optional value that failed validation (for debugging).

    Examples:
        ```python
        raise ConfigError(
            "Invalid configuration value",
            field="backoff_factor",
            value=0.5,
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message)


class CredentialMissingError(ConfigError):
    """No GitHub token was supplied for a live run."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or (
                "GitHub token is required. Provide it via --github-token, "
                "GH_TOKEN, or GITHUB_TOKEN environment variable"
            ),
            field="github_token",
        )
