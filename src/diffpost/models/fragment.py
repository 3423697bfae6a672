"""Data models for split diff reports."""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["Chunk", "Fragment", "byte_length"]


def byte_length(text: str) -> int:
    """Size of ``text`` as GitHub counts it (UTF-8 bytes)."""
    return len(text.encode("utf-8"))


@dataclass(frozen=True, slots=True)
class Fragment:
    """One independently postable part of a diff report.

    Attributes:
        part_number: 1-based position of this part.
        total_parts: Number of parts produced for the report.
        content: Comment body to post.
        size: UTF-8 byte length of ``content``.

    Example:
        >>> fragment = Fragment.create(1, 1, "## Diff")
        >>> fragment.size
        7
    """

    part_number: int
    total_parts: int
    content: str
    size: int

    @classmethod
    def create(cls, part_number: int, total_parts: int, content: str) -> Fragment:
        return cls(
            part_number=part_number,
            total_parts=total_parts,
            content=content,
            size=byte_length(content),
        )

    @property
    def is_last(self) -> bool:
        return self.part_number == self.total_parts

    def exceeds(self, max_bytes: int) -> bool:
        """Whether this part is larger than the requested comment limit."""
        return self.size > max_bytes


@dataclass(slots=True)
class Chunk:
    """Body lines grouped into one part, before header/footer assembly.

    ``lines`` are the original report lines in order. ``opening`` holds the
    synthetic continuation header that reopens a section cut off by the
    previous chunk; ``closing`` holds the synthetic tags that close a
    section cut off by this chunk. Both are empty when no cut happened
    inside a section.
    """

    lines: list[str] = field(default_factory=list)
    opening: str = ""
    closing: str = ""

    def render(self) -> str:
        parts = [self.opening] if self.opening else []
        parts.extend(self.lines)
        return "\n".join(parts) + self.closing
