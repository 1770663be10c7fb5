"""Notifier implementations."""

from .base import (
    ConfirmationError,
    ConfirmationResult,
    ConfirmationStatus,
    Notifier,
    NotifyError,
)
from .environment import Environment, create_notifier
from .graphical import GraphicalNotifier
from .terminal import TerminalNotifier

__all__ = [
    'ConfirmationError', 'ConfirmationResult', 'ConfirmationStatus', 'Notifier',
    'NotifyError', 'Environment', 'create_notifier', 'GraphicalNotifier', 'TerminalNotifier',
]
