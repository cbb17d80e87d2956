"""
Application service: timestamp window check shared by both schemes.
"""

from src.domain.errors import StaleTimestamp

DEFAULT_TOLERANCE_SECONDS = 300


def check(timestamp: int, now: int, tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS) -> None:
    """Accept *timestamp* when it is within ±tolerance of *now* (inclusive).

    Raises:
        StaleTimestamp: if the timestamp is too old or too far in the future.
    """
    if abs(now - timestamp) > tolerance_seconds:
        raise StaleTimestamp(timestamp, now, tolerance_seconds)
