from __future__ import annotations


class DiffPostError(Exception):
    """Base exception class for all diffpost-specific errors.

    This is the root of the diffpost exception hierarchy. The CLI catches
    it at its boundary, prints the message and exits non-zero, while
    system exceptions propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            await post_diff_comments(request, config=config)
        except DiffPostError as e:
            click.echo(format_error(e.message), err=True)
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the DiffPostError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
