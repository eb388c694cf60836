"""Process lifecycle: exit handlers, signal handlers and the shutdown flag."""

from __future__ import annotations

import atexit
import signal
import threading
from types import FrameType
from typing import Callable

from .logger import get_logger

__all__ = [
    "install_exit_handler",
    "stop_logger",
    "install_signal_handler",
    "ignore_signal",
    "sigterm_handler",
    "is_exiting",
    "request_exit",
    "reset_exit",
]

SignalHandler = Callable[[int, "FrameType | None"], object]

_exiting = threading.Event()


def install_exit_handler(handler: Callable[[], object]) -> Callable[[], object]:
    """Run ``handler`` when the interpreter exits; ValueError for a missing handler."""
    if handler is None:
        get_logger().error("FCore: failed to install a NULL exit handler")
        raise ValueError("FCore: failed to install a NULL exit handler")
    atexit.register(handler)
    return handler


def stop_logger() -> None:
    """Exit handler that flushes and closes the shared logger's files."""
    get_logger().stop()


def install_signal_handler(signum: int, handler: SignalHandler) -> None:
    """Install ``handler`` for ``signum``; ValueError for an invalid signal number."""
    if not 1 <= signum < signal.NSIG:
        get_logger().error("FCore: install an invalid signal (number %d)", signum)
        raise ValueError(f"FCore: install an invalid signal (number {signum})")
    try:
        signal.signal(signum, handler)
    except (OSError, ValueError, TypeError):
        get_logger().error(
            "FCore: can not install signal hander for signal (number %d)", signum
        )
        raise


def ignore_signal(signum: int) -> None:
    """Make the process ignore ``signum``."""
    try:
        signal.signal(signum, signal.SIG_IGN)
    except (OSError, ValueError):
        get_logger().error("FCore: can not ignore signal (number %d)", signum)
        raise


def sigterm_handler(signum: int, frame: FrameType | None) -> None:
    """Signal handler that asks the main loop to shut down."""
    _exiting.set()


def is_exiting() -> bool:
    """True once a shutdown has been requested."""
    return _exiting.is_set()


def request_exit() -> None:
    """Ask the main loop to shut down."""
    _exiting.set()


def reset_exit() -> None:
    """Clear a pending shutdown request."""
    _exiting.clear()