"""Display formatting of millisecond timestamps in the configured time zone."""

import os
from datetime import datetime, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "Asia/Shanghai"


@lru_cache(maxsize=None)
def load_zone(name: str) -> ZoneInfo:
    """Look up an IANA zone.

    Raises:
        ZoneInfoNotFoundError: If no zone has that key
        ValueError: If the key is malformed
    """
    return ZoneInfo(name)


def display_zone() -> tzinfo:
    """Time zone used for display, from NETPULSE_TIMEZONE (default Beijing time)."""
    return load_zone(os.environ.get("NETPULSE_TIMEZONE", DEFAULT_TIMEZONE))


def to_datetime(timestamp_ms: int, tz: tzinfo | None = None) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz or display_zone())


def format_clock(timestamp_ms: int, include_seconds: bool = True, tz: tzinfo | None = None) -> str:
    """Format as 24-hour ``HH:MM:SS`` (or ``HH:MM``)."""
    fmt = "%H:%M:%S" if include_seconds else "%H:%M"
    return to_datetime(timestamp_ms, tz).strftime(fmt)


def format_date(timestamp_ms: int, tz: tzinfo | None = None) -> str:
    return to_datetime(timestamp_ms, tz).strftime("%Y-%m-%d")


def format_datetime(timestamp_ms: int, tz: tzinfo | None = None) -> str:
    return to_datetime(timestamp_ms, tz).strftime("%Y-%m-%d %H:%M:%S")
