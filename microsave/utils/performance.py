"""
System performance snapshot utilities.
"""

from __future__ import annotations

import threading

import psutil


def get_process_memory_mb() -> float:
    """
    Return the RSS (Resident Set Size) of the current process in megabytes.
    Uses :mod:`psutil` for cross-platform accuracy.
    """
    process = psutil.Process()
    rss_bytes: int = process.memory_info().rss
    return rss_bytes / (1024 * 1024)


def get_active_thread_count() -> int:
    """Return the number of currently active Python threads."""
    return threading.active_count()


def format_elapsed(seconds: float) -> str:
    """Render *seconds* as ``HH:mm:ss.fff``; hours keep counting past 24."""
    millis = int(round(seconds * 1_000))
    hours, millis = divmod(millis, 3_600_000)
    minutes, millis = divmod(millis, 60_000)
    secs, millis = divmod(millis, 1_000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"


def collect_performance_snapshot(uptime_seconds: float) -> dict:
    """
    Build a performance metrics dictionary.

    Parameters
    ----------
    uptime_seconds:
        Seconds elapsed since the application was created.

    Returns
    -------
    dict
        ``{"time": "HH:mm:ss.fff", "memory": "XX.XX MB", "threads": int}``
    """
    return {
        "time": format_elapsed(uptime_seconds),
        "memory": f"{get_process_memory_mb():.2f} MB",
        "threads": get_active_thread_count(),
    }
