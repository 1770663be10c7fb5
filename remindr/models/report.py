"""Daily report models."""

from dataclasses import dataclass, field, asdict
from datetime import date, datetime, time
from typing import Any, Dict, Tuple

from .task import Outcome, OutcomeTag, UpcomingDeadline

STATUS_LABELS = {
    OutcomeTag.COMPLETED: "✅ COMPLETED",
    OutcomeTag.MISSED: "❌ NOT COMPLETED",
    OutcomeTag.UNRESOLVED: "⏭️  UNRESOLVED",
}


@dataclass(frozen=True)
class ReportEntry:
    """One task line of the report, in task-list order."""

    name: str
    start: time
    deadline: time
    outcome: Outcome


@dataclass(frozen=True)
class DailyReport:
    """Resolved outcomes for one day plus summary counts."""

    report_date: date
    entries: Tuple[ReportEntry, ...]
    completed: int
    missed: int
    unresolved: int
    generated_at: datetime
    partial: bool = False
    deadlines: Tuple[UpcomingDeadline, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def completion_rate(self) -> float:
        """Percentage of tasks confirmed as completed."""
        if not self.entries:
            return 0.0
        return self.completed / self.total * 100

    def summary(self) -> Dict[str, int]:
        return {
            'completed': self.completed,
            'missed': self.missed,
            'unresolved': self.unresolved,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary for JSON export."""
        data = asdict(self)
        data['summary'] = self.summary()
        data['total'] = self.total
        data['completion_rate'] = round(self.completion_rate, 1)
        for entry in data['entries']:
            entry['outcome']['tag'] = entry['outcome']['tag'].value
        return data

    def to_human_readable(self) -> str:
        """Render the plain-text report: one block per task and a summary footer."""
        lines = [
            "📌 RemindR Daily Report",
            f"Date: {self.report_date.isoformat()}",
        ]
        if self.partial:
            lines.append("(partial report - run did not finish)")
        lines.extend([
            "",
            "Tasks Summary",
            "=" * 70,
            "",
        ])

        for entry in self.entries:
            lines.append(STATUS_LABELS[entry.outcome.tag])
            lines.append(f"   Time: {entry.start.strftime('%H:%M')}-{entry.deadline.strftime('%H:%M')}")
            lines.append(f"   Task: {entry.name}")
            if entry.outcome.reason:
                lines.append(f"   Reason: {entry.outcome.reason}")
            lines.append("")

        lines.extend([
            "=" * 70,
            "",
            "Summary:",
            f"  Total Tasks: {self.total}",
            f"  ✅ Completed: {self.completed}",
            f"  ❌ Not Completed: {self.missed}",
            f"  ⏭️  Unresolved: {self.unresolved}",
            f"  Completion Rate: {self.completion_rate:.0f}%",
            "",
        ])

        if self.deadlines:
            lines.append("Upcoming Deadlines:")
            for deadline in self.deadlines:
                lines.append(f"  ⏳ {deadline.describe(self.report_date)}")
            lines.append("")

        lines.append(f"Generated: {self.generated_at.strftime('%Y-%m-%d %H:%M:%S')}")

        return "\n".join(lines) + "\n"
