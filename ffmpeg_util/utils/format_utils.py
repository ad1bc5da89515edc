"""
This module contains helper functions for formatting values into FFmpeg arguments.
These are used by the command builders to render numbers, durations and sizes
consistently.
"""

import re
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

Number = Union[int, float, str]

_SIZE_PATTERN = re.compile(r"^(\d+)x(\d+)$")


def format_number(value: Number) -> str:
    """
    Renders a number without a trailing ".0".

    Strings are passed through stripped, so callers can hand over FFmpeg
    notations like "00:00:02" or "30000/1001" untouched.

    Examples:
        5.0 -> "5", 2.5 -> "2.5", "25/1" -> "25/1"
    """
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return f"{value:g}" if isinstance(value, float) else str(value)


def to_seconds(value: Number) -> Optional[float]:
    """
    Converts a plain number or an "HH:MM:SS(.ms)" / "MM:SS" timestamp to seconds.

    Returns None when the value cannot be parsed.
    """
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    try:
        return float(text)
    except ValueError:
        pass
    match = re.fullmatch(r"(?:(\d+):)?(\d{1,2}):(\d{1,2}(?:\.\d+)?)", text)
    if not match:
        return None
    hours_str, minutes_str, seconds_str = match.groups()
    hours = int(hours_str) if hours_str else 0
    return hours * 3600 + int(minutes_str) * 60 + float(seconds_str)


def to_rate(value: Number) -> Optional[float]:
    """Converts a frame rate given as a number or a rational ("30000/1001") to a float."""
    if isinstance(value, (int, float)):
        return float(value)
    numerator, _, denominator = str(value).strip().partition("/")
    try:
        rate = float(numerator)
        if denominator:
            rate /= float(denominator)
    except (ValueError, ZeroDivisionError):
        return None
    return rate


def parse_size(size: str) -> Optional[Tuple[int, int]]:
    """Parses "WxH" into (width, height); None if the string is not in that form."""
    match = _SIZE_PATTERN.match(size.strip()) if size else None
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def common_extension(paths: Sequence[Union[str, Path]]) -> Optional[str]:
    """
    Returns the shared extension (without the dot) of `paths`, or None if they differ.

    The comparison is case-insensitive; the extension of the first path is
    returned as written.
    """
    extension = None
    for path in paths:
        suffix = Path(path).suffix.lstrip(".")
        if extension is None:
            extension = suffix
        elif suffix.lower() != extension.lower():
            return None
    return extension
