"""One-time detection of notification capabilities and backend selection."""

import logging
import os
import shutil
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from ..utils.config import NOTIFIER_BACKENDS
from .base import Notifier
from .graphical import GraphicalNotifier
from .terminal import TerminalNotifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Environment:
    """Desktop capabilities available to this process."""

    has_zenity: bool
    has_paplay: bool
    is_headless: bool

    @property
    def graphical_available(self) -> bool:
        return self.has_zenity and not self.is_headless

    @classmethod
    def detect(cls, environ: Optional[Mapping[str, str]] = None) -> "Environment":
        """Probe PATH and display variables once at startup."""
        environ = os.environ if environ is None else environ
        is_headless = not environ.get("DISPLAY") and not environ.get("WAYLAND_DISPLAY")
        return cls(
            has_zenity=shutil.which("zenity") is not None,
            has_paplay=shutil.which("paplay") is not None,
            is_headless=is_headless,
        )


def create_notifier(config: dict, environment: Environment) -> Notifier:
    """Pick the notifier used for the whole run.

    ``auto`` prefers the graphical variant and falls back to the terminal one
    when zenity or a display is missing. The choice is never revisited.
    """
    backend = config.get('notifier', {}).get('backend', 'auto').lower()
    if backend not in NOTIFIER_BACKENDS:
        raise ValueError(f"Unknown notifier backend: {backend}")

    if backend == 'terminal':
        return _terminal_notifier(config)

    if environment.graphical_available:
        return GraphicalNotifier(config, has_paplay=environment.has_paplay)

    if environment.is_headless:
        detail = "no display available"
    else:
        detail = "zenity not installed"
    logger.info("Graphical notifications unavailable (%s); using the terminal for this run", detail)
    return _terminal_notifier(config)


def _terminal_notifier(config: dict) -> TerminalNotifier:
    if sys.platform == "win32":
        logger.warning(
            "Terminal prompts on Windows wait for an answer without a time limit; "
            "unanswered tasks will not time out"
        )
    return TerminalNotifier(config)
