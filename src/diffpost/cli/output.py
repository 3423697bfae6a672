"""Output formatting helpers for the diffpost CLI."""

from __future__ import annotations

__all__ = [
    "format_error",
    "format_success",
]


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Example:
        >>> print(format_error(
        ...     "invalid PR reference",
        ...     details=["Value: invalid"],
        ...     suggestion="Use owner/repo#123",
        ... ))
        Error: invalid PR reference
          Value: invalid
        Suggestion: Use owner/repo#123
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)


def format_success(message: str) -> str:
    """Format a success message.

    Example:
        >>> format_success("Posted 3 comments")
        'Success: Posted 3 comments'
    """
    return f"Success: {message}"
