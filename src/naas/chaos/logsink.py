"""Pluggable log sinks for engine events.

The engine only ever calls ``sink.log(level, message, data)``. Which concrete
sink is used is decided once, from the configured logger object:

- ``None``: the ``naas`` stdlib logger
- a ``logging.Logger``: forwarded with the event attached as ``extra``
- any object with leveled methods (``info``, ``error``, ...): ``method(message, data)``
- any object with only ``log``: ``log(data)``
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from .errors import ConfigError
from .schema import LoggingSettings

logger = logging.getLogger(__name__)

LEVELS = {"debug": 10, "info": 20, "warn": 30, "warning": 30, "error": 40}


class LogSink(ABC):
    """Receives engine log events."""

    def __init__(self, threshold: str = "info") -> None:
        self.threshold = LEVELS[threshold]

    def log(self, level: str, message: str, data: dict[str, Any] | None = None) -> None:
        if LEVELS.get(level, 20) < self.threshold:
            return
        event = {
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "service": "naas",
            **(data or {}),
        }
        try:
            self.emit(level, message, event)
        except Exception:
            logger.debug("Log sink %s failed", type(self).__name__, exc_info=True)

    @abstractmethod
    def emit(self, level: str, message: str, event: dict[str, Any]) -> None:
        ...


class NullLogSink(LogSink):
    def log(self, level: str, message: str, data: dict[str, Any] | None = None) -> None:
        return None

    def emit(self, level: str, message: str, event: dict[str, Any]) -> None:
        return None


class StdlibLogSink(LogSink):
    def __init__(self, target: logging.Logger, threshold: str = "info") -> None:
        super().__init__(threshold)
        self.target = target

    def emit(self, level: str, message: str, event: dict[str, Any]) -> None:
        self.target.log(LEVELS.get(level, logging.INFO), message, extra={"naas": event})


class LeveledLogSink(LogSink):
    def __init__(self, target: Any, threshold: str = "info") -> None:
        super().__init__(threshold)
        self.target = target

    def emit(self, level: str, message: str, event: dict[str, Any]) -> None:
        method = getattr(self.target, level, None)
        if callable(method):
            method(message, event)
        elif callable(getattr(self.target, "log", None)):
            self.target.log(event)


class GenericLogSink(LogSink):
    def __init__(self, target: Any, threshold: str = "info") -> None:
        super().__init__(threshold)
        self.target = target

    def emit(self, level: str, message: str, event: dict[str, Any]) -> None:
        self.target.log(event)


def resolve_log_sink(settings: LoggingSettings) -> LogSink:
    """Pick the sink for the configured logger object."""
    if not settings.enabled:
        return NullLogSink()

    target = settings.logger
    if target is None:
        return StdlibLogSink(logging.getLogger("naas"), settings.level)
    if isinstance(target, LogSink):
        return target
    if isinstance(target, logging.Logger):
        return StdlibLogSink(target, settings.level)
    if any(callable(getattr(target, level, None)) for level in ("info", "error")):
        return LeveledLogSink(target, settings.level)
    if callable(getattr(target, "log", None)):
        return GenericLogSink(target, settings.level)
    raise ConfigError("Logger must expose leveled methods (info, error, ...) or a log method")
