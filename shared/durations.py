"""
Duration parsing and formatting.

Parses short human-readable durations ("1h", "30m", "1.5h", "45") into
seconds and renders seconds back into compact strings such as "1h30m".
"""

import logging
import math
import re
from typing import Optional

logger = logging.getLogger(__name__)

SECONDS_PER_UNIT = {"h": 3600, "m": 60, "s": 1}

_UNIT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)([hms])")
_LEADING_NUMBER = re.compile(r"^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+))")


def parse_duration(value: Optional[str], default: float = 3600.0) -> float:
    """Parse a duration string into seconds.

    The first "<number><unit>" match wins, where unit is one of h, m, s
    (case-insensitive). Without a unit the leading number is read as hours.
    A string with no usable number yields ``default``.

    Example:
        >>> parse_duration("1.5h")
        5400.0
        >>> parse_duration("45")
        162000.0
    """
    if value is None:
        return default

    text = str(value).lower()
    match = _UNIT_PATTERN.search(text)
    if match:
        amount = float(match.group(1))
        return amount * SECONDS_PER_UNIT[match.group(2)]

    leading = _LEADING_NUMBER.match(text)
    if not leading:
        logger.warning(f"Unrecognized duration {value!r}, using {format_duration(int(default))}")
        return default
    return float(leading.group(1)) * SECONDS_PER_UNIT["h"]


def format_duration(seconds: int) -> str:
    """Render seconds as e.g. "1h1m1s"; zero renders as "0s"."""
    seconds = int(seconds)
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")
    return "".join(parts)


def round_up_seconds(seconds: int, increment: float) -> int:
    """Round ``seconds`` up to the next multiple of ``increment`` seconds."""
    if increment <= 0 or seconds <= 0:
        return int(seconds)
    return int(math.ceil(seconds / increment) * increment)
