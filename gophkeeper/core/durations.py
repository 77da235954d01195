"""Human duration parsing ("90s", "15m", "1h30m", "2d", "1w")."""

import re
from datetime import timedelta

# Unit -> length in microseconds
_UNITS: dict[str, float] = {
    "ns": 0.001,
    "us": 1,
    "µs": 1,
    "μs": 1,
    "ms": 1_000,
    "s": 1_000_000,
    "m": 60 * 1_000_000,
    "h": 3600 * 1_000_000,
    "d": 86400 * 1_000_000,
    "w": 7 * 86400 * 1_000_000,
}

_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h|d|w)")


def parse_duration(value: str) -> timedelta:
    """Parse a duration string into a timedelta.

    The grammar is a possibly signed sequence of decimal numbers, each with a
    unit suffix, such as "300ms", "-1.5h" or "2d3h45m". A bare "0" is
    accepted.

    Raises:
        ValueError: If the string does not match the grammar or the duration
            does not fit a timedelta.
    """
    if not isinstance(value, str):
        raise ValueError(f"duration must be a string, got {type(value).__name__}")

    text = value.strip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {value!r}")

    total_us = 0.0
    pos = 0
    while pos < len(text):
        match = _PART.match(text, pos)
        if match is None:
            raise ValueError(f"invalid duration {value!r}")
        number, unit = match.groups()
        total_us += float(number) * _UNITS[unit]
        pos = match.end()

    try:
        return timedelta(microseconds=sign * total_us)
    except OverflowError as e:
        raise ValueError(f"duration {value!r} is out of range") from e
