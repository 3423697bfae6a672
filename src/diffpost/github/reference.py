"""Parse pull request references given on the command line.

Accepted forms:
- ``owner/repo#123``
- ``https://github.com/owner/repo/pull/123`` (``http://`` also accepted;
  trailing path segments such as ``/files`` are ignored)
"""

from __future__ import annotations

from diffpost.exceptions import ReferenceFormatError
from diffpost.models.github import PullRequestRef

__all__ = ["parse_pr_reference"]

_URL_PREFIXES: tuple[str, ...] = ("https://github.com/", "http://github.com/")


def _parse_number(raw: str, reference: str) -> int:
    if not (raw.isascii() and raw.isdigit()):
        raise ReferenceFormatError(f"invalid PR number: {raw!r}", reference=reference)
    return int(raw)


def _parse_url(path: str, reference: str) -> PullRequestRef:
    parts = path.split("/")
    if len(parts) < 4 or parts[2] != "pull" or not parts[0] or not parts[1]:
        raise ReferenceFormatError(
            "invalid GitHub PR URL format, expected "
            "https://github.com/owner/repo/pull/123",
            reference=reference,
        )
    return PullRequestRef(
        owner=parts[0],
        repo=parts[1],
        number=_parse_number(parts[3], reference),
    )


def _parse_short(reference: str) -> PullRequestRef:
    repo_part, sep, number_part = reference.partition("#")
    if "#" in number_part:
        raise ReferenceFormatError(
            "invalid PR reference format, expected owner/repo#123",
            reference=reference,
        )
    owner, slash, repo = repo_part.partition("/")
    if not slash or "/" in repo or not owner or not repo:
        raise ReferenceFormatError(
            "invalid repository format, expected owner/repo",
            reference=reference,
        )
    return PullRequestRef(
        owner=owner,
        repo=repo,
        number=_parse_number(number_part, reference),
    )


def parse_pr_reference(reference: str) -> PullRequestRef:
    """Parse a pull request reference.

    Args:
        reference: ``owner/repo#123`` or a GitHub pull request URL.

    Returns:
        The parsed PullRequestRef.

    Raises:
        ReferenceFormatError: If the reference matches neither form.

    Examples:
        >>> parse_pr_reference("octo/widgets#42")
        PullRequestRef(owner='octo', repo='widgets', number=42)
        >>> str(parse_pr_reference("https://github.com/octo/widgets/pull/7"))
        'octo/widgets#7'
    """
    text = reference.strip()

    for prefix in _URL_PREFIXES:
        if text.startswith(prefix):
            return _parse_url(text[len(prefix) :], reference)

    if "#" in text:
        return _parse_short(text)

    raise ReferenceFormatError(
        "invalid PR reference format, expected owner/repo#123 "
        "or https://github.com/owner/repo/pull/123",
        reference=reference,
    )
