"""Base notifier interface."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from threading import Event
from typing import Callable, Optional

logger = logging.getLogger(__name__)

NO_REASON_GIVEN = "(no reason given)"


class NotifyError(RuntimeError):
    """An alert could not be delivered."""


class ConfirmationError(RuntimeError):
    """The input channel used for confirmation is broken."""


class ConfirmationStatus(Enum):
    YES = "yes"
    NO = "no"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class ConfirmationResult:
    """Answer to a completion prompt."""

    status: ConfirmationStatus
    reason: Optional[str] = None
    cancelled: bool = False

    @classmethod
    def yes(cls) -> "ConfirmationResult":
        return cls(ConfirmationStatus.YES)

    @classmethod
    def no(cls, reason: str) -> "ConfirmationResult":
        return cls(ConfirmationStatus.NO, reason)

    @classmethod
    def timed_out(cls, cancelled: bool = False) -> "ConfirmationResult":
        return cls(ConfirmationStatus.TIMED_OUT, cancelled=cancelled)


class Notifier(ABC):
    """Abstract base class for alert and confirmation backends."""

    name = "base"

    def __init__(self, config: dict):
        """Initialize notifier with configuration."""
        self.config = config
        confirmation_config = config.get('confirmation', {})
        self.max_confirm_attempts = max(1, int(confirmation_config.get('max_confirm_attempts', 3)))
        self.max_reason_prompts = max(1, int(confirmation_config.get('max_reason_prompts', 3)))

    @abstractmethod
    def alert(self, message: str) -> None:
        """Show or sound a best-effort alert. Raises NotifyError on failure."""
        pass

    def celebrate(self, message: str) -> None:
        """Acknowledge a completed task."""
        self.alert(message)

    @abstractmethod
    def _ask_yes_no(self, prompt: str, timeout: float, cancel_event: Event) -> Optional[bool]:
        """Ask a yes/no question; None means no answer within timeout."""
        pass

    @abstractmethod
    def _ask_reason(self, prompt: str, timeout: float, cancel_event: Event) -> Optional[str]:
        """Ask for free text; None means no answer within timeout."""
        pass

    def confirm(
        self,
        prompt: str,
        respond_by: datetime,
        cancel_event: Optional[Event] = None,
        now: Optional[Callable[[], datetime]] = None,
        reason_prompt: str = "Why was this task not completed?",
    ) -> ConfirmationResult:
        """Ask whether a task was completed and, if not, why.

        Blocks until the user answers, ``respond_by`` passes or
        ``cancel_event`` is set. A broken input channel is retried up to
        ``max_confirm_attempts`` times before giving up as timed out.
        """
        cancel_event = cancel_event or Event()
        now = now or datetime.now
        failures = 0

        while True:
            if cancel_event.is_set():
                return ConfirmationResult.timed_out(cancelled=True)
            remaining = (respond_by - now()).total_seconds()
            if remaining <= 0:
                return ConfirmationResult.timed_out()
            try:
                answer = self._ask_yes_no(prompt, remaining, cancel_event)
                break
            except ConfirmationError as exc:
                failures += 1
                logger.warning(
                    "Confirmation attempt %d/%d failed: %s",
                    failures, self.max_confirm_attempts, exc,
                )
                if failures >= self.max_confirm_attempts:
                    return ConfirmationResult.timed_out()

        if answer is None:
            return ConfirmationResult.timed_out(cancelled=cancel_event.is_set())
        if answer:
            return ConfirmationResult.yes()

        for attempt in range(1, self.max_reason_prompts + 1):
            if cancel_event.is_set():
                break
            remaining = (respond_by - now()).total_seconds()
            if remaining <= 0:
                break
            try:
                reason = self._ask_reason(reason_prompt, remaining, cancel_event)
            except ConfirmationError as exc:
                logger.warning("Reason prompt %d failed: %s", attempt, exc)
                continue
            if reason is not None and reason.strip():
                return ConfirmationResult.no(reason.strip())
            if reason is None:
                break
            logger.debug("Empty reason given, asking again (%d/%d)", attempt, self.max_reason_prompts)

        # An interrupted answer is not a finished one.
        if cancel_event.is_set():
            return ConfirmationResult.timed_out(cancelled=True)
        return ConfirmationResult.no(NO_REASON_GIVEN)
