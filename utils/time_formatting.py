"""Reusable helpers for formatting elapsed durations."""

from __future__ import annotations

from typing import Union

from utils import common

logger = common.get_logger("time_formatting")

Number = Union[int, float]


def _whole_seconds(seconds: Number) -> int:
    try:
        return max(int(seconds), 0)
    except (TypeError, ValueError):
        logger.debug("Invalid seconds value for formatting: %r", seconds)
        return 0


def format_elapsed(seconds: Number) -> str:
    """Return ``MM:SS`` for an elapsed duration; minutes keep counting past 59."""
    total_seconds = _whole_seconds(seconds)
    minutes, secs = divmod(total_seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


__all__ = ["format_elapsed"]
