"""
Date and time utilities for SINEX processing.

SINEX epochs are written as YY:DDD:SSSSS (two-digit year, day of year,
seconds of day). Epochs are held internally as elapsed seconds since
1970-01-01 00:00:00 UTC.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone


# Constants
SECONDS_PER_DAY = 86400
UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

SINEX_EPOCH_PATTERN = re.compile(r"^(\d\d):(\d\d\d):(\d\d\d\d\d)$")


def full_year(two_digit_year: int) -> int:
    """Expand a two-digit SINEX year.

    Years are windowed so that 80-99 map to 1980-1999 and 00-79 map
    to 2000-2079.

    Args:
        two_digit_year: Year as written in the file (0-99)

    Returns:
        Four digit year
    """
    year = two_digit_year + 1900
    if year < 1980:
        year += 100
    return year


def yearday_seconds(year: int, doy: int) -> float:
    """Calculate elapsed seconds at the start of a day of year.

    Args:
        year: Four digit year
        doy: Day of year (1-366)

    Returns:
        Seconds since 1970-01-01 00:00:00 UTC
    """
    start = datetime(year, 1, 1, tzinfo=timezone.utc)
    return (start - UNIX_EPOCH).total_seconds() + (doy - 1) * SECONDS_PER_DAY


def parse_sinex_epoch(token: str) -> float:
    """Convert a YY:DDD:SSSSS token to elapsed seconds.

    Args:
        token: SINEX epoch string, e.g. '24:260:43200'

    Returns:
        Seconds since 1970-01-01 00:00:00 UTC

    Raises:
        ValueError: If the token is not a valid SINEX epoch
    """
    match = SINEX_EPOCH_PATTERN.match(token.strip())
    if match is None:
        raise ValueError(f"Invalid SINEX epoch {token!r}")
    yy, doy, sec = (int(x) for x in match.groups())
    return yearday_seconds(full_year(yy), doy) + sec


def epoch_to_datetime(seconds: float) -> datetime:
    """Convert elapsed seconds to a UTC datetime."""
    return UNIX_EPOCH + timedelta(seconds=seconds)
