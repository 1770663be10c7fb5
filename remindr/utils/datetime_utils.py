"""Date and time utilities."""

from datetime import date, datetime, time

CLOCK_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"


def parse_clock_time(value: str) -> time:
    """Parse an HH:MM time of day."""
    return datetime.strptime(value.strip(), CLOCK_FORMAT).time()


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD date."""
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


def format_clock_time(value: time) -> str:
    return value.strftime(CLOCK_FORMAT)
