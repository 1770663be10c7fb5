"""Task and outcome data models."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Optional


class ValidationError(ValueError):
    """A task definition that cannot be scheduled."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"line {self.line_number}: {self.message}"


class InvalidDeadline(ValidationError):
    """Deadline is not strictly after the start time."""


class EmptyName(ValidationError):
    """Task name is blank."""


class MalformedLine(ValidationError):
    """Line does not follow the task list syntax."""


class DuplicateName(ValidationError):
    """Task name already used earlier in the same list."""


class TaskAlreadyResolvedError(RuntimeError):
    """Raised when an outcome is recorded twice for the same task."""


class TaskState(Enum):
    """Lifecycle states driven by the reminder engine."""

    PENDING = "pending"
    STARTED = "started"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    RESOLVED = "resolved"


class OutcomeTag(Enum):
    """Terminal result of a task."""

    COMPLETED = "completed"
    MISSED = "missed"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class Outcome:
    """Recorded result of one task's lifecycle."""

    tag: OutcomeTag
    resolved_at: datetime
    reason: Optional[str] = None

    def __post_init__(self):
        """Enforce that only missed tasks carry a (non-empty) reason."""
        if self.tag is OutcomeTag.MISSED:
            if self.reason is None or not self.reason.strip():
                raise ValueError("Missed outcome requires a non-empty reason")
        elif self.reason is not None:
            raise ValueError(f"{self.tag.value} outcome cannot carry a reason")

    @classmethod
    def completed(cls, at: datetime) -> "Outcome":
        return cls(OutcomeTag.COMPLETED, at)

    @classmethod
    def missed(cls, reason: str, at: datetime) -> "Outcome":
        return cls(OutcomeTag.MISSED, at, reason.strip())

    @classmethod
    def unresolved(cls, at: datetime) -> "Outcome":
        return cls(OutcomeTag.UNRESOLVED, at)


@dataclass
class Task:
    """One entry of the day's task list plus its per-run state."""

    name: str
    start: time
    deadline: time
    line_number: Optional[int] = None
    state: TaskState = field(default=TaskState.PENDING, compare=False)
    outcome: Optional[Outcome] = field(default=None, compare=False)

    @property
    def is_resolved(self) -> bool:
        return self.outcome is not None

    def resolve(self, outcome: Outcome) -> None:
        """Record the terminal outcome; a task is resolved exactly once."""
        if self.outcome is not None:
            raise TaskAlreadyResolvedError(f"Task '{self.name}' already resolved")
        self.outcome = outcome
        self.state = TaskState.RESOLVED

    def window(self) -> str:
        """Return the HH:MM-HH:MM label used in prompts and reports."""
        return f"{self.start.strftime('%H:%M')}-{self.deadline.strftime('%H:%M')}"


def validate(task: Task) -> Task:
    """Check a task definition, returning it unchanged or raising ValidationError."""
    if not task.name or not task.name.strip():
        raise EmptyName("Task name is empty", task.line_number)

    if task.deadline <= task.start:
        raise InvalidDeadline(
            f"Deadline {task.deadline.strftime('%H:%M')} is not after "
            f"start {task.start.strftime('%H:%M')} for '{task.name}'",
            task.line_number,
        )

    return task


@dataclass(frozen=True)
class UpcomingDeadline:
    """A dated, longer-range deadline shown alongside the day's tasks."""

    due: date
    description: str

    def days_left(self, today: date) -> int:
        """Days until the deadline; negative when overdue."""
        return (self.due - today).days

    def describe(self, today: date) -> str:
        days = self.days_left(today)
        if days >= 0:
            return f"{self.description} (in {days} days)"
        return f"{self.description} ({abs(days)} days ago!)"
