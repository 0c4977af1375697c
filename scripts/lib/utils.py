"""
Utility functions for Intent Signal Hub.
Number parsing, batching, rounding, and week labels.

Usage:
    from scripts.lib.utils import parse_int_prefix, batched, current_week_label
"""
import math
import re
from datetime import date, timedelta
from typing import Any, Iterator, List, Optional

_INT_PREFIX = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_int_prefix(val: Any) -> Optional[int]:
    """
    Parse the leading integer of a string, the way browsers' parseInt(s, 10) does.

    "80" -> 80, " 72.9" -> 72, "45abc" -> 45, "abc" -> None, "" -> None.
    Integers pass through; floats are truncated; NaN and None give None.
    """
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, int):
        return val
    if isinstance(val, float):
        return None if math.isnan(val) or math.isinf(val) else int(val)
    match = _INT_PREFIX.match(str(val))
    if not match:
        return None
    return int(match.group(1))


def parse_count(val: Any) -> Optional[int]:
    """parse_int_prefix for counts exported with thousands separators ("1,200")."""
    if isinstance(val, str):
        val = val.replace(",", "")
    return parse_int_prefix(val)


def js_round(value: float) -> int:
    """Round half up (Math.round), not half to even."""
    return int(math.floor(value + 0.5))


def batched(items: List, size: int) -> Iterator[List]:
    """Yield successive batches from a list."""
    if size < 1:
        raise ValueError("batch size must be at least 1")
    for i in range(0, len(items), size):
        yield items[i : i + size]


def _short_date(d: date) -> str:
    return f"{d:%b} {d.day}"


def current_week_label(today: Optional[date] = None) -> str:
    """
    Default reporting-week label for an upload, weeks starting on Sunday.

    >>> current_week_label(date(2026, 10, 19))
    'Week of Oct 18 - Oct 24, 2026'
    """
    today = today or date.today()
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    end = start + timedelta(days=6)
    return f"Week of {_short_date(start)} - {_short_date(end)}, {end.year}"
