"""Command-line dispatch: an application picks the first handler matching argv."""

from __future__ import annotations

import abc
import enum
import sys
from typing import Sequence

__all__ = ["RetCode", "AppHandler", "Application"]


class RetCode(enum.IntEnum):
    """Outcome of a handler run, usable as a process exit status."""

    INIT_OK = 0
    INIT_ERROR = 1


class AppHandler(abc.ABC):
    """One way of running the program, chosen by its command-line arguments."""

    @abc.abstractmethod
    def matches(self, argv: Sequence[str]) -> bool:
        """True when this handler should run for ``argv`` (program name first)."""

    @abc.abstractmethod
    def start(self, argv: Sequence[str]) -> RetCode:
        """Run the handler."""


class Application:
    """Holds the arguments and the handlers that may serve them."""

    def __init__(self, argv: Sequence[str] | None = None) -> None:
        self._argv = list(sys.argv if argv is None else argv)
        self._handlers: list[AppHandler] = []
        self._fallback: AppHandler | None = None

    @property
    def argv(self) -> list[str]:
        return list(self._argv)

    @property
    def handlers(self) -> list[AppHandler]:
        return list(self._handlers)

    @property
    def fallback_handler(self) -> AppHandler | None:
        return self._fallback

    def use_handler(self, handler: AppHandler | None) -> None:
        """Add a handler; None is ignored."""
        if handler is not None:
            self._handlers.append(handler)

    def use_fallback_handler(self, handler: AppHandler | None) -> None:
        """Add a handler that also serves arguments no handler matches."""
        if handler is not None:
            self._fallback = handler
            self._handlers.append(handler)

    def handler(self) -> AppHandler | None:
        """The first handler matching the arguments, else the fallback."""
        return next(
            (handler for handler in self._handlers if handler.matches(self._argv)),
            self._fallback,
        )

    def start(self) -> RetCode:
        """Run the chosen handler; RuntimeError when there is none."""
        handler = self.handler()
        if handler is None:
            raise RuntimeError("no handler matches the command-line arguments")
        return handler.start(self._argv)