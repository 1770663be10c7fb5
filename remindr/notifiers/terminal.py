"""Terminal notifier: stdout alerts and stdin confirmations."""

import io
import logging
import select
import sys
import time
from threading import Event
from typing import Optional, TextIO

from .base import ConfirmationError, Notifier, NotifyError

logger = logging.getLogger(__name__)

# Longest single blocking read; keeps cancellation responsive.
POLL_INTERVAL_SECONDS = 0.5

YES_ANSWERS = ('y', 'yes')
NO_ANSWERS = ('n', 'no')


class TerminalNotifier(Notifier):
    """Fallback notifier that only needs a terminal."""

    name = "terminal"

    def __init__(
        self,
        config: dict,
        input_stream: Optional[TextIO] = None,
        output_stream: Optional[TextIO] = None,
    ):
        super().__init__(config)
        self.input = input_stream or sys.stdin
        self.output = output_stream or sys.stdout
        self.bell = config.get('notifier', {}).get('sound', True)

    def alert(self, message: str) -> None:
        """Print the message and ring the terminal bell."""
        try:
            self.output.write(f"\n🔔 {message}\n")
            if self.bell:
                self.output.write("\x07")
            self.output.flush()
        except (OSError, ValueError) as exc:
            raise NotifyError(f"Terminal alert failed: {exc}") from exc

    def _ask_yes_no(self, prompt: str, timeout: float, cancel_event: Event) -> Optional[bool]:
        give_up_at = time.monotonic() + timeout
        question = f"\n{prompt} (y/n): "

        while True:
            self._write(question)
            line = self._read_line(give_up_at - time.monotonic(), cancel_event)
            if line is None:
                return None
            answer = line.strip().lower()
            if answer in YES_ANSWERS:
                return True
            if answer in NO_ANSWERS:
                return False
            question = "Please answer 'y' or 'n': "

    def _ask_reason(self, prompt: str, timeout: float, cancel_event: Event) -> Optional[str]:
        self._write(f"\n{prompt}\n> ")
        line = self._read_line(timeout, cancel_event)
        if line is None:
            return None
        return line.strip()

    def _write(self, text: str) -> None:
        try:
            self.output.write(text)
            self.output.flush()
        except (OSError, ValueError) as exc:
            raise ConfirmationError(f"Cannot write prompt: {exc}") from exc

    def _read_line(self, timeout: float, cancel_event: Event) -> Optional[str]:
        """Read one line, or return None on timeout or cancellation.

        Raises ConfirmationError when the input stream is closed.
        """
        fd = self._fileno()
        if fd is None:
            # In-memory streams never block.
            return self._readline()

        give_up_at = time.monotonic() + max(0.0, timeout)
        while not cancel_event.is_set():
            remaining = give_up_at - time.monotonic()
            if remaining <= 0:
                return None
            try:
                ready, _, _ = select.select([fd], [], [], min(POLL_INTERVAL_SECONDS, remaining))
            except (OSError, ValueError) as exc:
                raise ConfirmationError(f"Cannot wait for input: {exc}") from exc
            if ready:
                return self._readline()
        return None

    def _readline(self) -> str:
        try:
            line = self.input.readline()
        except (OSError, ValueError) as exc:
            raise ConfirmationError(f"Cannot read input: {exc}") from exc
        if line == "":
            raise ConfirmationError("Input stream closed")
        return line

    def _fileno(self) -> Optional[int]:
        if sys.platform == "win32":
            # select() only supports sockets on Windows.
            return None
        try:
            return self.input.fileno()
        except (AttributeError, io.UnsupportedOperation):
            return None
