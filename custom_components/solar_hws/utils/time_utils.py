"""Time-related utility functions for the Solar Hot Water integration.

Provides shared time calculations used by the controller.
"""

from datetime import datetime

SECONDS_PER_MINUTE = 60


def minutes_since(then: datetime | None, now: datetime) -> float:
    """Get minutes elapsed between two instants.

    Args:
        then: Earlier instant, or None if the event never happened
        now: Current instant

    Returns:
        Elapsed minutes (infinite when then is None)
    """
    if then is None:
        return float("inf")
    return (now - then).total_seconds() / SECONDS_PER_MINUTE


def seconds_since(then: datetime | None, now: datetime) -> float:
    """Get seconds elapsed between two instants (infinite when then is None)."""
    if then is None:
        return float("inf")
    return (now - then).total_seconds()


def epoch_millis(now: datetime) -> int:
    """Convert a datetime to epoch milliseconds for time-series logging."""
    return int(now.timestamp() * 1000)
