"""Parse human-friendly durations such as ``2s``, ``500ms`` or ``1m30s``.

Plain numbers are seconds. Unit strings are sequences of
``<number><unit>`` pairs with units ``ns``, ``us``, ``ms``, ``s``, ``m``
and ``h``.
"""

from __future__ import annotations

import re

__all__ = ["parse_duration"]

_UNIT_SECONDS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d+)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str | float | int) -> float:
    """Convert a duration to seconds.

    Args:
        value: Seconds as a number, a numeric string, or a unit string.

    Returns:
        Duration in seconds.

    Raises:
        ValueError: If the value is negative or not a recognized duration.

    Examples:
        >>> parse_duration("1m30s")
        90.0
        >>> parse_duration("500ms")
        0.5
        >>> parse_duration(2)
        2.0
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, int | float):
        seconds = float(value)
    else:
        text = value.strip()
        try:
            seconds = float(text)
        except ValueError:
            seconds = _parse_units(text)
    if seconds < 0:
        raise ValueError(f"duration must not be negative: {value!r}")
    return seconds


def _parse_units(text: str) -> float:
    if not text:
        raise ValueError("invalid duration: empty string")
    total = 0.0
    position = 0
    for match in _COMPONENT.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()
    if position != len(text):
        raise ValueError(f"invalid duration: {text!r}")
    return total

