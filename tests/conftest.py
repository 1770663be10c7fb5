"""Shared fixtures: a virtual clock and a scripted notifier."""

from collections import deque
from datetime import datetime, time, timedelta
from threading import Event
from typing import Optional

import pytest

from remindr.engine.clock import Clock
from remindr.models.task import Task
from remindr.notifiers.base import Notifier, NotifyError
from remindr.utils.config import get_default_config

DAY_START = datetime(2026, 10, 19, 8, 0)


class VirtualClock(Clock):
    """Clock that jumps straight to the requested wake-up time."""

    def __init__(self, start: datetime = DAY_START):
        self.current = start
        self.waits = []

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)

    def wait_until(self, target: datetime, cancel_event: Event) -> bool:
        if cancel_event.is_set():
            return True
        self.waits.append(target)
        if target > self.current:
            self.current = target
        return False


class ScriptedNotifier(Notifier):
    """Answers prompts from queued values and records every call.

    Queued yes/no answers are True, False, None (no answer) or an exception
    instance to raise. Answering takes ``answer_delay`` seconds of virtual
    time; not answering burns the whole timeout.
    """

    name = "scripted"

    def __init__(self, config, clock, answers=(), reasons=(), answer_delay=30, fail_alerts=False):
        super().__init__(config)
        self.clock = clock
        self.answers = deque(answers)
        self.reasons = deque(reasons)
        self.answer_delay = answer_delay
        self.fail_alerts = fail_alerts
        self.alerts = []
        self.questions = []
        self.reason_prompts = []

    def alert(self, message: str) -> None:
        self.alerts.append((self.clock.now(), message))
        if self.fail_alerts:
            raise NotifyError("display unavailable")

    def _ask_yes_no(self, prompt: str, timeout: float, cancel_event: Event) -> Optional[bool]:
        self.questions.append((self.clock.now(), prompt))
        answer = self.answers.popleft() if self.answers else None
        if isinstance(answer, Exception):
            raise answer
        if answer is None:
            self.clock.advance(timeout)
            return None
        self.clock.advance(self.answer_delay)
        return answer

    def _ask_reason(self, prompt: str, timeout: float, cancel_event: Event) -> Optional[str]:
        self.reason_prompts.append((self.clock.now(), prompt))
        reason = self.reasons.popleft() if self.reasons else None
        if isinstance(reason, Exception):
            raise reason
        if reason is None:
            self.clock.advance(timeout)
            return None
        self.clock.advance(self.answer_delay)
        return reason


def make_task(name: str, start: str, deadline: str, line_number: int = 1) -> Task:
    return Task(
        name,
        time.fromisoformat(start),
        time.fromisoformat(deadline),
        line_number,
    )


@pytest.fixture
def config():
    cfg = get_default_config()
    cfg['confirmation']['window_seconds'] = 600
    return cfg


@pytest.fixture
def clock():
    return VirtualClock()
