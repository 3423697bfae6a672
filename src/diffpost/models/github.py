"""Data models for GitHub destinations."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["PullRequestRef"]


@dataclass(frozen=True, slots=True)
class PullRequestRef:
    """Pull request a report is posted to.

    Attributes:
        owner: Repository owner (user or organization).
        repo: Repository name.
        number: Pull request (issue) number.
    """

    owner: str
    repo: str
    number: int

    @property
    def full_name(self) -> str:
        """Repository name in ``owner/repo`` form."""
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return f"{self.full_name}#{self.number}"
