"""Split rendered diff reports into comment-sized parts.

A report has three regions, found by scanning for markers:
- Header: everything before the first ``<details>`` line
- Body: ``<details>`` sections, each titled by a ``<summary>`` tag and
  usually wrapping a fenced diff block
- Footer: from the last ``_Stats_:`` line to the end of the report

The header and footer go into the first part only. The body is cut on
line boundaries; a cut inside a section closes it in the current part and
reopens it, marked as a continuation, in the next one, so each part
renders correctly on its own. A section whose content has not started
when the budget runs out is moved whole into the next part rather than
cut.

Section tracking is flat: an inner ``</details>`` ends the enclosing
section as well, so a report with nested ``<details>`` blocks is not
reopened correctly when a cut lands in the outer block after the inner
one has closed.
"""

from __future__ import annotations

import structlog

from diffpost.constants import (
    CODE_FENCE,
    CONTINUATION_SUFFIX,
    MIN_CONTENT_BUDGET,
    PART_INDICATOR_RESERVE,
    SECTION_CLOSE_MARKER,
    SECTION_OPEN_MARKER,
    SUMMARY_CLOSE_TAG,
    SUMMARY_OPEN_TAG,
    TRAILER_MARKER,
)
from diffpost.exceptions import BudgetTooSmallError, StructureError
from diffpost.logging import get_logger
from diffpost.models.fragment import Chunk, Fragment, byte_length

__all__ = [
    "DocumentSplitter",
    "extract_section_title",
    "part_indicator_reserve",
    "render_part_indicator",
]

#: Worst-case synthetic closer, reserved whenever a cut could land in a section.
_FULL_SECTION_CLOSER = f"\n{CODE_FENCE}\n\n{SECTION_CLOSE_MARKER}\n"


def render_part_indicator(part_number: int, total_parts: int) -> str:
    """Render the "Part i of N" trailer; empty for single-part reports.

    Examples:
        >>> render_part_indicator(2, 3)
        '\\n\\n---\\n**Part 2 of 3**\\n'
        >>> render_part_indicator(1, 1)
        ''
    """
    if total_parts <= 1:
        return ""
    return f"\n\n---\n**Part {part_number} of {total_parts}**\n"


def part_indicator_reserve(digits: int) -> int:
    """Bytes to reserve for a part indicator with ``digits``-wide numbers."""
    widest = 10**digits - 1
    return max(PART_INDICATOR_RESERVE, byte_length(render_part_indicator(widest, widest)))


def extract_section_title(line: str) -> str:
    """Return the text between ``<summary>`` and ``</summary>``, or "".

    Examples:
        >>> extract_section_title("<summary>app-name (path)</summary>")
        'app-name (path)'
        >>> extract_section_title("<summary>unterminated")
        ''
    """
    start = line.find(SUMMARY_OPEN_TAG)
    if start == -1:
        return ""
    start += len(SUMMARY_OPEN_TAG)
    end = line.find(SUMMARY_CLOSE_TAG, start)
    if end == -1:
        return ""
    return line[start:end].strip()


def _section_closer(in_fence: bool) -> str:
    if in_fence:
        return _FULL_SECTION_CLOSER
    return f"\n\n{SECTION_CLOSE_MARKER}\n"


def _is_section_preamble(line: str, fence_opener: str | None) -> bool:
    stripped = line.strip()
    if not stripped or stripped in ("<br>", "<br/>", "<br />"):
        return True
    if SUMMARY_OPEN_TAG in stripped:
        return True
    return fence_opener is None and stripped.startswith(CODE_FENCE)


def _continuation_header(title: str, fence_opener: str | None) -> str:
    summary = f"{title} {CONTINUATION_SUFFIX}" if title else CONTINUATION_SUFFIX
    header = f"{SECTION_OPEN_MARKER}\n{SUMMARY_OPEN_TAG}{summary}{SUMMARY_CLOSE_TAG}\n<br>\n"
    if fence_opener is not None:
        header += f"\n{fence_opener}"
    return header


class DocumentSplitter:
    """Split a diff report into parts no larger than a byte budget.

    The splitter is stateless between calls; the logger is the only
    collaborator.

    Example:
        ```python
        splitter = DocumentSplitter()
        for fragment in splitter.split(report, max_bytes=65536):
            print(fragment.part_number, fragment.size)
        ```
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or get_logger(__name__)

    def split(self, document: str, max_bytes: int) -> list[Fragment]:
        """Split ``document`` into fragments of at most ``max_bytes``.

        Args:
            document: Full report text.
            max_bytes: Maximum UTF-8 size of a single comment.

        Returns:
            Fragments numbered 1..N. A report that already fits is
            returned unchanged as a single fragment.

        Raises:
            StructureError: If an oversized report has no ``<details>`` section.
            BudgetTooSmallError: If ``max_bytes`` leaves fewer than
                MIN_CONTENT_BUDGET bytes per part for section content.
        """
        size = byte_length(document)
        if size <= max_bytes:
            self._logger.info("split_not_needed", size=size, max_bytes=max_bytes)
            return [Fragment.create(1, 1, document)]

        self._logger.info("split_required", size=size, max_bytes=max_bytes)

        lines = document.split("\n")
        body_start = self._find_body_start(lines)
        footer_start = self._find_footer_start(lines, body_start)
        body_end = footer_start if footer_start is not None else len(lines)

        header = "\n".join(lines[:body_start]) + "\n" if body_start > 0 else ""
        footer = "\n" + "\n".join(lines[footer_start:]) if footer_start is not None else ""
        overhead = byte_length(header) + byte_length(footer)
        body = lines[body_start:body_end]

        # The reserve assumes 3-digit part numbers; widen it and split again
        # if the report turns out to need more parts than that.
        digits = 3
        while True:
            budget = max_bytes - overhead - part_indicator_reserve(digits)
            if budget < MIN_CONTENT_BUDGET:
                raise BudgetTooSmallError(
                    f"max length too small to split file "
                    f"(effective content space: {budget} bytes)",
                    effective_budget=budget,
                )
            chunks = self.split_body(body, budget)
            needed = len(str(len(chunks)))
            if needed <= digits:
                break
            digits = needed

        total_parts = len(chunks)
        fragments: list[Fragment] = []
        for part_number, chunk in enumerate(chunks, start=1):
            content = chunk.render()
            if part_number == 1:
                content = header + content + footer
            content += render_part_indicator(part_number, total_parts)
            fragments.append(Fragment.create(part_number, total_parts, content))

        self._logger.info("split_completed", parts=total_parts, budget=budget)
        return fragments

    def split_body(self, lines: list[str], budget: int) -> list[Chunk]:
        """Group body lines into chunks whose rendered size stays within budget.

        A section whose content has not started yet (only its ``<details>``,
        ``<summary>``, ``<br>``, blank or fence-opening lines so far) is moved
        whole into the next chunk instead of being cut. A line larger than
        the whole budget still goes into its own chunk; chunks are never
        empty.

        Args:
            lines: Body lines, starting at the first section.
            budget: Maximum rendered size of one chunk in bytes.

        Returns:
            Chunks in order. Concatenating their ``lines`` yields ``lines``.
        """
        chunks: list[Chunk] = []
        current = Chunk()
        current_size = 0

        in_section = False
        title = ""
        fence_opener: str | None = None
        # Index of the open section's <details> line in current.lines, or
        # None when the section was reopened from a previous chunk.
        section_start: int | None = None
        section_started = False

        for index, line in enumerate(lines):
            opens_section = SECTION_OPEN_MARKER in line
            closes_section = SECTION_CLOSE_MARKER in line and not opens_section
            line_size = byte_length(line) + 1
            closer_size = (
                byte_length(_FULL_SECTION_CLOSER)
                if (in_section or opens_section) and not closes_section
                else 0
            )

            if current.lines and current_size + line_size + closer_size > budget:
                if in_section and not section_started and section_start:
                    carried = current.lines[section_start:]
                    del current.lines[section_start:]
                    self._seal(chunks, current, cut_in_section=False)
                    current = Chunk(lines=carried)
                    current_size = sum(byte_length(c) + 1 for c in carried)
                    section_start = 0
                else:
                    if in_section:
                        current.closing = _section_closer(fence_opener is not None)
                    self._seal(chunks, current, cut_in_section=in_section)
                    current = Chunk()
                    current_size = 0
                    if in_section:
                        current.opening = _continuation_header(title, fence_opener)
                        current_size = byte_length(current.opening) + 1
                        section_start = None
                        section_started = True

            if opens_section:
                section_start = len(current.lines)
                section_started = False
            elif in_section and not _is_section_preamble(line, fence_opener):
                section_started = True

            current.lines.append(line)
            current_size += line_size

            if opens_section:
                in_section = True
                fence_opener = None
                title = extract_section_title(line)
                if not title and index + 1 < len(lines):
                    title = extract_section_title(lines[index + 1])
            elif in_section and line.lstrip().startswith(CODE_FENCE):
                fence_opener = None if fence_opener is not None else line.strip()

            if SECTION_CLOSE_MARKER in line:
                in_section = False
                title = ""
                fence_opener = None
                section_start = None

        chunks.append(current)
        self._logger.debug(
            "chunk_created",
            index=len(chunks),
            size=byte_length(current.render()),
            final=True,
        )
        return chunks

    def _seal(self, chunks: list[Chunk], chunk: Chunk, *, cut_in_section: bool) -> None:
        chunks.append(chunk)
        self._logger.debug(
            "chunk_created",
            index=len(chunks),
            size=byte_length(chunk.render()),
            cut_in_section=cut_in_section,
        )

    @staticmethod
    def _find_body_start(lines: list[str]) -> int:
        for index, line in enumerate(lines):
            if SECTION_OPEN_MARKER in line:
                return index
        raise StructureError(f"could not find {SECTION_OPEN_MARKER} tag in the file")

    @staticmethod
    def _find_footer_start(lines: list[str], body_start: int) -> int | None:
        # The last trailer wins; one that sits in the header is not a footer.
        for index in range(len(lines) - 1, body_start, -1):
            if TRAILER_MARKER in lines[index]:
                return index
        return None
