"""Daily report construction."""

from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..models.report import DailyReport, ReportEntry
from ..models.task import Outcome, OutcomeTag, Task, UpcomingDeadline


class IncompleteTaskError(RuntimeError):
    """A task reached the report builder without an outcome."""


def build_report(
    tasks: Sequence[Task],
    report_date: date,
    generated_at: Optional[datetime] = None,
    deadlines: Iterable[UpcomingDeadline] = (),
    partial: bool = False,
) -> DailyReport:
    """Fold resolved tasks into a report, keeping task-list order."""
    unresolved_names = [task.name for task in tasks if task.outcome is None]
    if unresolved_names:
        raise IncompleteTaskError(
            f"Tasks without an outcome: {', '.join(unresolved_names)}"
        )

    entries = tuple(
        ReportEntry(task.name, task.start, task.deadline, task.outcome)
        for task in tasks
    )
    counts = {tag: 0 for tag in OutcomeTag}
    for entry in entries:
        counts[entry.outcome.tag] += 1

    return DailyReport(
        report_date=report_date,
        entries=entries,
        completed=counts[OutcomeTag.COMPLETED],
        missed=counts[OutcomeTag.MISSED],
        unresolved=counts[OutcomeTag.UNRESOLVED],
        generated_at=generated_at or datetime.now(),
        partial=partial,
        deadlines=tuple(deadlines),
    )


def build_partial_report(
    tasks: Sequence[Task],
    report_date: date,
    generated_at: Optional[datetime] = None,
    deadlines: Iterable[UpcomingDeadline] = (),
) -> DailyReport:
    """Report on a run that has not finished.

    Tasks still in flight are shown as unresolved without touching the
    tasks themselves.
    """
    generated_at = generated_at or datetime.now()
    snapshot = []
    for task in tasks:
        if task.outcome is None:
            task = Task(task.name, task.start, task.deadline, task.line_number,
                        outcome=Outcome.unresolved(generated_at))
        snapshot.append(task)
    return build_report(snapshot, report_date, generated_at, deadlines, partial=True)
