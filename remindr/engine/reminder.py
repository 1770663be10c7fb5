"""Core reminder engine."""

import heapq
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from threading import Event
from typing import Callable, List, Optional, Sequence, Tuple

from ..models.task import Outcome, Task, TaskState
from ..notifiers.base import ConfirmationError, ConfirmationStatus, Notifier, NotifyError
from .clock import Clock, SystemClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfirmationSpan:
    """When one completion prompt was shown and answered."""

    task_name: str
    started_at: datetime
    ended_at: datetime


@dataclass
class EngineRun:
    """State of one day's run, handed to the report builder."""

    day: date
    tasks: List[Task]
    interrupted: bool = False
    confirmations: List[ConfirmationSpan] = field(default_factory=list)

    @property
    def all_resolved(self) -> bool:
        return all(task.is_resolved for task in self.tasks)


class ReminderEngine:
    """Drives each task from start alert to recorded outcome.

    Tasks wait in a heap keyed by their next trigger time (start, then
    deadline) with list position as tie-breaker. Confirmation prompts are
    handled one at a time on the single control loop.
    """

    def __init__(
        self,
        notifier: Notifier,
        config: dict,
        clock: Optional[Clock] = None,
        on_resolved: Optional[Callable[[EngineRun], None]] = None,
    ):
        """Initialize engine with the notifier chosen at startup."""
        self.notifier = notifier
        self.config = config
        engine_config = config.get('engine', {})
        confirmation_config = config.get('confirmation', {})
        self.window = timedelta(seconds=confirmation_config.get('window_seconds', 900))
        self.clock = clock or SystemClock(engine_config.get('max_sleep_seconds', 30))
        self.on_resolved = on_resolved
        self._cancel_event = Event()

    def cancel(self) -> None:
        """Stop the run at the next suspension point. Safe from signal handlers."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def run(self, tasks: Sequence[Task], day: Optional[date] = None) -> EngineRun:
        """Run until every task is resolved or the run is cancelled."""
        day = day or self.clock.now().date()
        run = EngineRun(day=day, tasks=list(tasks))

        queue: List[Tuple[datetime, int]] = []
        for index, task in enumerate(run.tasks):
            if not task.is_resolved:
                heapq.heappush(queue, (self._next_trigger(task, day), index))

        logger.info("Monitoring %d tasks for %s", len(queue), day.isoformat())

        try:
            while queue and not self.cancelled:
                now = self.clock.now()
                if queue[0][0] > now:
                    self.clock.wait_until(queue[0][0], self._cancel_event)
                    continue

                due = []
                while queue and queue[0][0] <= now:
                    due.append(heapq.heappop(queue))

                for _, index in due:
                    if self.cancelled:
                        break
                    task = run.tasks[index]
                    self._advance(task, run)
                    if not task.is_resolved:
                        heapq.heappush(queue, (self._next_trigger(task, day), index))
        except KeyboardInterrupt:
            logger.warning("Interrupted by user")
            self.cancel()

        if self.cancelled:
            run.interrupted = True
            self._resolve_remaining(run)

        return run

    def _next_trigger(self, task: Task, day: date) -> datetime:
        if task.state is TaskState.PENDING:
            return datetime.combine(day, task.start)
        return datetime.combine(day, task.deadline)

    def _advance(self, task: Task, run: EngineRun) -> None:
        """Apply the transition whose trigger time has arrived."""
        now = self.clock.now()
        deadline_at = datetime.combine(run.day, task.deadline)

        if task.state is TaskState.PENDING:
            task.state = TaskState.STARTED
            if now >= deadline_at:
                logger.info("Deadline for '%s' already passed, skipping start alert", task.name)
            else:
                self._alert(f"⏰ Task Starting:\n{task.name}")
                return

        if task.state is TaskState.STARTED and now >= deadline_at:
            self._confirm(task, run)

    def _confirm(self, task: Task, run: EngineRun) -> None:
        task.state = TaskState.AWAITING_CONFIRMATION
        self._alert(f"⏰ Time is up:\n{task.name}")

        started_at = self.clock.now()
        try:
            result = self.notifier.confirm(
                f"Did you complete: {task.name}?",
                started_at + self.window,
                cancel_event=self._cancel_event,
                now=self.clock.now,
                reason_prompt=f"Why was '{task.name}' not completed?",
            )
            status = result.status
            reason = result.reason
            if result.cancelled:
                logger.warning("Interrupted while asking about '%s'", task.name)
        except ConfirmationError as exc:
            logger.error("Confirmation for '%s' failed: %s", task.name, exc)
            status, reason = ConfirmationStatus.TIMED_OUT, None
        ended_at = self.clock.now()
        run.confirmations.append(ConfirmationSpan(task.name, started_at, ended_at))

        if status is ConfirmationStatus.YES:
            task.resolve(Outcome.completed(ended_at))
            self._alert("Great! One step closer to your goal 🎉", celebrate=True)
        elif status is ConfirmationStatus.NO:
            task.resolve(Outcome.missed(reason, ended_at))
        else:
            logger.info("No answer for '%s', marking unresolved", task.name)
            task.resolve(Outcome.unresolved(ended_at))

        logger.info("Resolved '%s' as %s", task.name, task.outcome.tag.value)
        self._checkpoint(run)

    def _alert(self, message: str, celebrate: bool = False) -> None:
        try:
            if celebrate:
                self.notifier.celebrate(message)
            else:
                self.notifier.alert(message)
        except NotifyError as exc:
            logger.warning("Alert failed, continuing: %s", exc)

    def _checkpoint(self, run: EngineRun) -> None:
        if self.on_resolved is not None:
            self.on_resolved(run)

    def _resolve_remaining(self, run: EngineRun) -> None:
        """Record every task not yet resolved as unresolved."""
        now = self.clock.now()
        pending = [task for task in run.tasks if not task.is_resolved]
        for task in pending:
            task.resolve(Outcome.unresolved(now))
        if pending:
            logger.warning("Run interrupted; %d task(s) recorded as unresolved", len(pending))
            self._checkpoint(run)
