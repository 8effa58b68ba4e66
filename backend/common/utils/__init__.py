"""Common utility functions."""

from .formatting import (
    TIME_24H_PATTERN,
    format_time_12h,
    passenger_seats,
)

__all__ = [
    "TIME_24H_PATTERN",
    "format_time_12h",
    "passenger_seats",
]
