"""Utility helpers for diffpost."""

from __future__ import annotations

from diffpost.utils.duration import parse_duration

__all__ = ["parse_duration"]
