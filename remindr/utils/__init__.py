"""Utility functions."""

from .config import get_default_config, load_config, merge_config, resolve_config, validate_config
from .datetime_utils import format_clock_time, parse_clock_time, parse_date
from .schedule_file import LineError, ScheduleFile, load_schedule, parse_schedule

__all__ = [
    'get_default_config', 'load_config', 'merge_config', 'resolve_config', 'validate_config',
    'format_clock_time', 'parse_clock_time', 'parse_date',
    'LineError', 'ScheduleFile', 'load_schedule', 'parse_schedule',
]
