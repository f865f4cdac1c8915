"""
Percentage change between billing periods.
"""

from typing import Optional


def percentage_change(current: float, previous: float) -> Optional[float]:
    """Relative change from previous to current, in percent.

    Returns None when previous is zero since the change is undefined.
    """
    if previous == 0:
        return None
    return ((current - previous) / previous) * 100


def format_percentage(change: Optional[float]) -> str:
    """Format a percentage change rounded to the nearest whole number."""
    if change is None:
        return "n/a"
    # round() yields an int, so small decreases print "0%" rather than "-0%"
    return f"{round(change)}%"
