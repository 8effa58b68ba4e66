"""Display helpers shared by ride and bus route responses."""

import re

TIME_24H_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def format_time_12h(time_24: str) -> str:
    """
    Convert a 24-hour "HH:MM" string to "hh:MM AM/PM".

    Anything that is not strictly HH:MM is returned unchanged.
    """
    if not time_24 or not re.fullmatch(r"\d{2}:\d{2}", time_24):
        return time_24

    hours_str, minutes_str = time_24.split(":")
    hours = int(hours_str)
    suffix = "PM" if hours >= 12 else "AM"
    hours = hours % 12 or 12
    return f"{hours:02d}:{minutes_str} {suffix}"


def passenger_seats(capacity: int) -> str:
    """Seats left for passengers once the driver is counted."""
    if capacity <= 1:
        return "0 (Driver only)"
    return str(capacity - 1)
