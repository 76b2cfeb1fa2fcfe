"""
Date / time utility helpers.

All timestamps are serialised as ``"YYYY-MM-DD HH:mm:ss"`` (the Python
format string ``"%Y-%m-%d %H:%M:%S"``).  On input a ``T`` may replace the
space separator and the seconds may be omitted.  Instants are naive; no
timezone handling is attempted.
"""

from __future__ import annotations

import calendar
from datetime import datetime
from typing import Tuple

from microsave.errors import ParseError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

ACCEPTED_FORMATS: Tuple[str, ...] = (
    TIMESTAMP_FORMAT,
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S.%f",
)


def _normalise(raw: str) -> str:
    return raw.strip().replace("T", " ", 1)


def _strptime_any(text: str) -> datetime:
    for fmt in ACCEPTED_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(text)


def _clamp_day(text: str) -> str:
    """Pull an overflowing day (``2023-11-31``) back to the month's last day."""
    date_part, time_part = text.split(" ", 1)
    y_str, m_str, d_str = date_part.split("-")
    year, month, day = int(y_str), int(m_str), int(d_str)
    max_day = calendar.monthrange(year, month)[1]
    day = min(day, max_day)
    return f"{year:04d}-{month:02d}-{day:02d} {time_part}"


def parse_timestamp(raw: str) -> datetime:
    """
    Parse *raw* into a naive :class:`~datetime.datetime` at second precision.

    Raises
    ------
    ParseError
        If *raw* is not a string or matches none of the accepted shapes.
    """
    if not isinstance(raw, str):
        raise ParseError(
            f"Invalid timestamp {raw!r}. Expected format: YYYY-MM-DD HH:mm:ss"
        )

    text = _normalise(raw)

    # Fast path – valid date
    try:
        return _strptime_any(text).replace(microsecond=0)
    except ValueError:
        pass

    # Slow path – attempt day clamping
    try:
        return _strptime_any(_clamp_day(text)).replace(microsecond=0)
    except (ValueError, calendar.IllegalMonthError) as exc:
        raise ParseError(
            f"Invalid timestamp {raw!r}. Expected format: YYYY-MM-DD HH:mm:ss"
        ) from exc


def format_timestamp(dt: datetime) -> str:
    return dt.strftime(TIMESTAMP_FORMAT)


def is_within_range(dt: datetime, start: datetime, end: datetime) -> bool:
    return start <= dt <= end
