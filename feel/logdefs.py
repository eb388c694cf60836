"""Log levels, output options and log categories shared by the logging modules."""

from __future__ import annotations

import enum

__all__ = ["LogLevel", "LogOption", "LogCategory", "level_name"]


class LogLevel(enum.IntEnum):
    """Severity of a log record; records below the logger's minimum are dropped."""

    NONE = 0
    DEBUG = 10
    INFO = 20
    WARNING = 100
    ERROR = 200
    CRITICAL = 250
    INCIDENT = 255


class LogOption(enum.IntFlag):
    """Where and how log records are emitted."""

    OFF = 0b0
    CONSOLE = 0b1
    FILE = 0b10
    INCLUDE_EXEC_TIME = 0b100
    USE_COLOR = 0b1000


class LogCategory(enum.IntFlag):
    """Groups of log files that can be truncated together."""

    TECHNICAL = 0x01
    INCIDENT = 0x02


_LEVEL_NAMES = {
    LogLevel.DEBUG: "DEBU",
    LogLevel.INFO: "INFO",
    LogLevel.WARNING: "WARN",
    LogLevel.ERROR: "ERRO",
    LogLevel.CRITICAL: "CRIT",
    LogLevel.INCIDENT: "INCI",
}


def level_name(level: int) -> str:
    """Return the four-letter tag of a level, or ``"UNKNOWN"``."""
    return _LEVEL_NAMES.get(level, "UNKNOWN")