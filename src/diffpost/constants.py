"""diffpost constants.

Single source of truth for report markers, GitHub limits and default
delivery settings.
"""

from __future__ import annotations

# =============================================================================
# Report markers
# =============================================================================

#: Opens a collapsible section.
SECTION_OPEN_MARKER: str = "<details>"

#: Closes a collapsible section.
SECTION_CLOSE_MARKER: str = "</details>"

#: Surrounds the section title on the line after SECTION_OPEN_MARKER.
SUMMARY_OPEN_TAG: str = "<summary>"
SUMMARY_CLOSE_TAG: str = "</summary>"

#: First line of the report footer.
TRAILER_MARKER: str = "_Stats_:"

#: Prefix of a fenced code block line.
CODE_FENCE: str = "```"

#: Appended to a section title when the section resumes in a later part.
CONTINUATION_SUFFIX: str = "(continuation...)"

# =============================================================================
# Splitting
# =============================================================================

#: Minimum bytes reserved for the "Part N of M" indicator.
PART_INDICATOR_RESERVE: int = 35

#: Smallest per-part content budget considered usable.
MIN_CONTENT_BUDGET: int = 100

# =============================================================================
# GitHub
# =============================================================================

#: GitHub's maximum issue comment length in bytes.
DEFAULT_MAX_COMMENT_LENGTH: int = 65536

#: REST API root.
DEFAULT_GITHUB_API_URL: str = "https://api.github.com"

#: Added on top of the reported reset time before retrying a rate-limited post.
RATE_LIMIT_BUFFER_SECONDS: float = 1.0

#: Pause between consecutive posts to stay clear of secondary rate limits.
DEFAULT_INTER_POST_DELAY: float = 0.5

# =============================================================================
# Retry defaults
# =============================================================================

DEFAULT_MAX_RETRIES: int = 3
DEFAULT_RETRY_DELAY: float = 2.0
DEFAULT_BACKOFF_FACTOR: float = 2.0
DEFAULT_REQUEST_TIMEOUT: float = 30.0

#: Short description shown by ``diffpost version``.
DESCRIPTION: str = "A CLI tool to post rendered diff reports as pull request comments"
