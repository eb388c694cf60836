"""Formatting of single log records into plain text lines."""

from __future__ import annotations

import time
from typing import Callable

from .logdefs import LogLevel, LogOption, level_name

__all__ = [
    "DEFAULT_MESSAGE_LENGTH",
    "DEFAULT_CONTEXT_WIDTH",
    "LogBuffer",
    "remove_newlines",
    "tail",
    "color_code",
]

DEFAULT_MESSAGE_LENGTH = 256
DEFAULT_CONTEXT_WIDTH = 64

_RESET_COLOR = "\x1b[0m"
_MAX_CONTEXT_WIDTH = 0xFF

_COLOR_CODES = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 32,
    LogLevel.WARNING: 93,
    LogLevel.ERROR: 91,
    LogLevel.CRITICAL: 31,
}

_NEWLINES = {ord("\n"): None, ord("\r"): None}


def remove_newlines(text: str) -> str:
    """Drop every line feed and carriage return from ``text``."""
    return text.translate(_NEWLINES)


def tail(text: str, max_length: int) -> str:
    """Return at most the last ``max_length`` characters of ``text``."""
    if max_length <= 0:
        return ""
    return text[-max_length:]


def color_code(level: int) -> int:
    """Return the ANSI colour code used for a level."""
    return _COLOR_CODES.get(level, 0)


def _fit(text: str, length: int) -> str:
    """Cut ``text`` as a buffer of ``length`` bytes with a terminator would."""
    return text[: max(length - 1, 0)]


class LogBuffer:
    """Holds the current message and renders it into plain log lines."""

    def __init__(
        self,
        *,
        timer: Callable[[], float] = time.monotonic,
        now: Callable[[], str] = time.ctime,
    ) -> None:
        self._max_message_length = DEFAULT_MESSAGE_LENGTH
        self._context_width = DEFAULT_CONTEXT_WIDTH
        self._message = ""
        self._timer = timer
        self._now = now
        self._start = timer()

    @property
    def max_message_length(self) -> int:
        return self._max_message_length

    @property
    def context_width(self) -> int:
        return self._context_width

    def set_message(self, format: str, *args: object) -> None:
        """Format the message printf-style and keep it, cut to the maximum length."""
        text = format % args if args else format
        self._message = _fit(text, self._max_message_length)

    def plain_message(self, level: int, option: int, context: str) -> str:
        """Render the current message with a free-form context field."""
        return self._compose(level, option, context)

    def plain_message_at(
        self, level: int, option: int, file: str, function: str, line: int
    ) -> str:
        """Render the current message with ``file:function:line`` as context."""
        return self._compose(level, option, f"{file}:{function}:{line}")

    def json_message(self) -> str:
        """Return the bare message, as used in JSON records."""
        return self._message

    def set_max_message_length(self, length: int) -> None:
        if length < 0:
            raise ValueError(f"message length must not be negative: {length}")
        self._max_message_length = length
        self._message = ""

    def set_context_width(self, width: int) -> None:
        if not 0 <= width <= _MAX_CONTEXT_WIDTH:
            raise ValueError(f"context width must be within 0..255: {width}")
        self._context_width = width

    def exec_time(self) -> int:
        """Whole seconds elapsed since the buffer was created."""
        return int(self._timer() - self._start)

    def _compose(self, level: int, option: int, context: str) -> str:
        option = LogOption(option)
        exec_part = (
            f" | {self.exec_time()}" if option & LogOption.INCLUDE_EXEC_TIME else ""
        )
        context = tail(_fit(context, self._max_message_length), self._context_width)
        stamp = f"{self._now()}\n"
        body = (
            f"{stamp:>25}{exec_part} | {context:>{self._context_width}} | "
            f"{level_name(level):>4} | {self._message}"
        )
        if option & LogOption.USE_COLOR:
            body = f"\x1b[{color_code(level)}m{body}{_RESET_COLOR}"
        return remove_newlines(_fit(body, self._max_message_length))