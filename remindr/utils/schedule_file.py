"""Task list file loading.

Lines look like::

    # comment
    06:00-07:00 Study physics
    DEADLINE 2026-02-28 Midterm Exam
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Union

from ..models.task import (
    DuplicateName,
    MalformedLine,
    Task,
    UpcomingDeadline,
    ValidationError,
    validate,
)
from .datetime_utils import parse_clock_time, parse_date

DEADLINE_KEYWORD = "DEADLINE"


@dataclass(frozen=True)
class LineError:
    """A rejected line of the task list."""

    line_number: int
    text: str
    error: ValidationError

    def __str__(self) -> str:
        return f"line {self.line_number}: {self.error.message} ({self.text!r})"


@dataclass
class ScheduleFile:
    """Parsed task list: valid tasks, dated deadlines and rejected lines."""

    tasks: List[Task] = field(default_factory=list)
    deadlines: List[UpcomingDeadline] = field(default_factory=list)
    errors: List[LineError] = field(default_factory=list)


def parse_task_line(line: str, line_number: int) -> Task:
    """Parse ``HH:MM-HH:MM name`` into a validated Task."""
    time_range, _, name = line.partition(' ')
    start_text, dash, end_text = time_range.partition('-')
    if not dash:
        raise MalformedLine("Expected HH:MM-HH:MM followed by a task name", line_number)
    try:
        start = parse_clock_time(start_text)
        deadline = parse_clock_time(end_text)
    except ValueError:
        raise MalformedLine(f"Invalid time range '{time_range}'", line_number) from None
    return validate(Task(name.strip(), start, deadline, line_number))


def parse_deadline_line(line: str, line_number: int) -> UpcomingDeadline:
    """Parse ``DEADLINE YYYY-MM-DD description``."""
    parts = line.split(None, 2)
    if len(parts) < 3:
        raise MalformedLine("Expected DEADLINE YYYY-MM-DD description", line_number)
    try:
        due = parse_date(parts[1])
    except ValueError:
        raise MalformedLine(f"Invalid date '{parts[1]}'", line_number) from None
    return UpcomingDeadline(due, parts[2].strip())


def parse_schedule(lines: Iterable[str]) -> ScheduleFile:
    """Parse task list lines; every rejected line is kept as a LineError."""
    schedule = ScheduleFile()
    seen_names = set()

    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue

        try:
            if line.upper().startswith(DEADLINE_KEYWORD + ' '):
                schedule.deadlines.append(parse_deadline_line(line, line_number))
                continue

            task = parse_task_line(line, line_number)
            if task.name in seen_names:
                raise DuplicateName(f"Task '{task.name}' is listed twice", line_number)
            seen_names.add(task.name)
            schedule.tasks.append(task)
        except ValidationError as exc:
            schedule.errors.append(LineError(line_number, line, exc))

    return schedule


def load_schedule(path: Union[str, Path]) -> ScheduleFile:
    """Read and parse a task list file."""
    with open(path, 'r', encoding='utf-8') as f:
        return parse_schedule(f.read().splitlines())
