"""Tests for pull request reference parsing."""

from __future__ import annotations

import pytest

from diffpost.exceptions import ReferenceFormatError
from diffpost.github.reference import parse_pr_reference
from diffpost.models.github import PullRequestRef


class TestParsePrReference:
    @pytest.mark.parametrize(
        ("reference", "expected"),
        [
            ("octo/widgets#42", PullRequestRef("octo", "widgets", 42)),
            ("  octo/widgets#42\n", PullRequestRef("octo", "widgets", 42)),
            (
                "https://github.com/octo/widgets/pull/7",
                PullRequestRef("octo", "widgets", 7),
            ),
            (
                "http://github.com/octo/widgets/pull/7",
                PullRequestRef("octo", "widgets", 7),
            ),
            (
                "https://github.com/octo/widgets/pull/7/files",
                PullRequestRef("octo", "widgets", 7),
            ),
        ],
    )
    def test_valid(self, reference: str, expected: PullRequestRef):
        assert parse_pr_reference(reference) == expected

    @pytest.mark.parametrize(
        ("reference", "match"),
        [
            ("octo/widgets#abc", "invalid PR number"),
            ("octo/widgets#", "invalid PR number"),
            ("octo/widgets#-1", "invalid PR number"),
            ("octo#42", "invalid repository format"),
            ("octo/widgets/extra#42", "invalid repository format"),
            ("/widgets#42", "invalid repository format"),
            ("octo/#42", "invalid repository format"),
            ("octo/widgets#4#2", "invalid PR reference format"),
            ("octo/widgets", "invalid PR reference format"),
            ("", "invalid PR reference format"),
            ("https://github.com/octo/widgets/issues/7", "invalid GitHub PR URL"),
            ("https://github.com/octo/widgets", "invalid GitHub PR URL"),
            ("https://github.com/octo/widgets/pull/x", "invalid PR number"),
        ],
    )
    def test_invalid(self, reference: str, match: str):
        with pytest.raises(ReferenceFormatError, match=match) as exc_info:
            parse_pr_reference(reference)

        assert exc_info.value.reference == reference


class TestPullRequestRef:
    def test_full_name_and_str(self):
        ref = PullRequestRef(owner="octo", repo="widgets", number=42)

        assert ref.full_name == "octo/widgets"
        assert str(ref) == "octo/widgets#42"
