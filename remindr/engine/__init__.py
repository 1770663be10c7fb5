"""Reminder engine and clocks."""

from .clock import Clock, SystemClock
from .reminder import ConfirmationSpan, EngineRun, ReminderEngine

__all__ = ['Clock', 'SystemClock', 'ConfirmationSpan', 'EngineRun', 'ReminderEngine']
