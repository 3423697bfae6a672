"""Custom Click parameter types."""

from __future__ import annotations

from typing import Any

import click

from diffpost.utils.duration import parse_duration

__all__ = ["DURATION", "DurationParamType"]


class DurationParamType(click.ParamType):
    """Duration option accepting ``30``, ``2s``, ``500ms`` or ``1m30s``.

    Converts to seconds as a float.
    """

    name = "duration"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> float:
        if isinstance(value, float):
            return value
        try:
            return parse_duration(value)
        except (TypeError, ValueError) as e:
            self.fail(str(e), param, ctx)


DURATION = DurationParamType()
