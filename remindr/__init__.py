"""RemindR - daily task reminders with completion check-ins."""

__version__ = "0.1.0"
