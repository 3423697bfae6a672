"""Tests for duration parsing."""

from __future__ import annotations

import pytest

from diffpost.utils.duration import parse_duration


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (2, 2.0),
        (0.5, 0.5),
        ("30", 30.0),
        ("1.5", 1.5),
        ("2s", 2.0),
        ("500ms", 0.5),
        ("1m30s", 90.0),
        ("1h", 3600.0),
        ("250us", 0.00025),
        (" 3s ", 3.0),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["", "soon", "5 s", "s5", "-1", -2, "1x", True])
def test_parse_duration_invalid(value):
    with pytest.raises(ValueError):
        parse_duration(value)
