"""Transient user-facing messages, injected into whatever needs to report progress."""
from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class Notifier(Protocol):
    def show(self, message: str, level: str = "info") -> None: ...


class LoggingNotifier:
    def show(self, message: str, level: str = "info") -> None:
        logger.log(_LEVELS.get(level, logging.INFO), message)


class CollectingNotifier:
    """Buffers messages for one request so they can be returned to the client."""

    def __init__(self):
        self.messages: list[dict[str, str]] = []

    def show(self, message: str, level: str = "info") -> None:
        logger.log(_LEVELS.get(level, logging.INFO), message)
        self.messages.append({"level": level, "message": message})
