"""Graphical notifier backed by zenity dialogs and paplay sounds."""

import logging
import subprocess
from pathlib import Path
from threading import Event
from typing import List, Optional, Sequence, Tuple

from .base import ConfirmationError, Notifier, NotifyError

logger = logging.getLogger(__name__)

SOUND_PATHS = [
    "/usr/share/sounds/freedesktop/stereo/complete.oga",
    "/usr/share/sounds/freedesktop/stereo/bell.oga",
    "/usr/share/sounds/ubuntu/stereo/bells.oga",
    "/usr/share/sounds/freedesktop/stereo/alarm-clock-elapsed.oga",
]

# zenity exit codes
ZENITY_OK = 0
ZENITY_CANCEL = 1
ZENITY_TIMEOUT = 5

POLL_INTERVAL_SECONDS = 0.5


class GraphicalNotifier(Notifier):
    """Popup dialogs through zenity, with optional alarm sound."""

    name = "graphical"

    def __init__(self, config: dict, has_paplay: bool = False, sound_paths: Optional[Sequence[str]] = None):
        super().__init__(config)
        notifier_config = config.get('notifier', {})
        self.popup_timeout = int(notifier_config.get('popup_timeout_seconds', 10))
        self.sound_enabled = notifier_config.get('sound', True)
        self.has_paplay = has_paplay
        self.sound_paths = list(sound_paths) if sound_paths is not None else SOUND_PATHS

    def alert(self, message: str) -> None:
        """Show a self-closing info popup and play the alarm sound."""
        try:
            subprocess.Popen(
                ["zenity", "--info", "--text", message, f"--timeout={self.popup_timeout}"],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as exc:
            raise NotifyError(f"zenity popup failed: {exc}") from exc
        self.play_alarm()

    def play_alarm(self) -> None:
        """Play the first available alarm sound; failures are only logged."""
        if not self.sound_enabled:
            return
        commands: List[List[str]] = []
        if self.has_paplay:
            sound = next((p for p in self.sound_paths if Path(p).exists()), None)
            if sound:
                commands.append(["paplay", sound])
        commands.append(["beep"])

        for command in commands:
            try:
                subprocess.Popen(command, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
                return
            except OSError:
                logger.debug("Sound command %s unavailable", command[0])
        logger.debug("No sound played")

    def _ask_yes_no(self, prompt: str, timeout: float, cancel_event: Event) -> Optional[bool]:
        result = self._run_dialog(
            ["zenity", "--question", "--text", prompt, "--ok-label=Yes", "--cancel-label=No"],
            timeout,
            cancel_event,
        )
        if result is None:
            return None
        returncode, _ = result
        if returncode == ZENITY_OK:
            return True
        if returncode == ZENITY_CANCEL:
            return False
        raise ConfirmationError(f"zenity --question exited with {returncode}")

    def _ask_reason(self, prompt: str, timeout: float, cancel_event: Event) -> Optional[str]:
        result = self._run_dialog(
            ["zenity", "--entry", "--text", prompt, "--title", "Task Incomplete Reason"],
            timeout,
            cancel_event,
        )
        if result is None:
            return None
        returncode, stdout = result
        if returncode in (ZENITY_OK, ZENITY_CANCEL):
            return stdout.strip()
        raise ConfirmationError(f"zenity --entry exited with {returncode}")

    def _run_dialog(
        self,
        args: List[str],
        timeout: float,
        cancel_event: Event,
    ) -> Optional[Tuple[int, str]]:
        """Run a blocking dialog; None when it timed out or was cancelled."""
        timeout_seconds = max(1, int(timeout))
        try:
            process = subprocess.Popen(
                args + [f"--timeout={timeout_seconds}"],
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
            )
        except OSError as exc:
            raise ConfirmationError(f"Cannot start {args[0]}: {exc}") from exc

        # Grace period lets zenity close itself before we kill it.
        waited = 0.0
        while process.poll() is None:
            if cancel_event.is_set() or waited > timeout_seconds + 2:
                process.kill()
                process.wait()
                return None
            cancel_event.wait(POLL_INTERVAL_SECONDS)
            waited += POLL_INTERVAL_SECONDS

        stdout = process.stdout.read() if process.stdout else ""
        if process.stdout:
            process.stdout.close()
        if process.returncode == ZENITY_TIMEOUT:
            return None
        return process.returncode, stdout
