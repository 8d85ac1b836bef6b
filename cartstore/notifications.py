"""User notification channel for cart failures."""
from typing import Protocol

from cartstore.logging import get_logger

logger = get_logger(__name__)


class Notifier(Protocol):
    def error(self, message: str) -> None:
        ...


class LogNotifier:
    """Notifier that writes user-facing messages to the log.

    Used when no UI surface is attached (scripts, background sessions).
    """

    def __init__(self, name: str = "cartstore.user"):
        self._logger = get_logger(name)

    def error(self, message: str) -> None:
        self._logger.warning(message)
