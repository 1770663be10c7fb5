"""Task, outcome and report models."""

from .report import DailyReport, ReportEntry
from .task import (
    DuplicateName,
    EmptyName,
    InvalidDeadline,
    MalformedLine,
    Outcome,
    OutcomeTag,
    Task,
    TaskAlreadyResolvedError,
    TaskState,
    UpcomingDeadline,
    ValidationError,
    validate,
)

__all__ = [
    'DailyReport', 'ReportEntry', 'DuplicateName', 'EmptyName', 'InvalidDeadline',
    'MalformedLine', 'Outcome', 'OutcomeTag', 'Task', 'TaskAlreadyResolvedError',
    'TaskState', 'UpcomingDeadline', 'ValidationError', 'validate',
]
