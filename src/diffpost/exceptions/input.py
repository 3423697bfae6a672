from __future__ import annotations

from pathlib import Path

from diffpost.exceptions.base import DiffPostError


class InputError(DiffPostError):
    """The diff report could not be read.

    Attributes:
        message: Human-readable error message.
        path: Path of the report that failed to load.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)
