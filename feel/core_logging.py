"""Setting up the shared logger from the core configuration."""

from __future__ import annotations

from .config import Config
from .logdefs import LogLevel, LogOption
from .logger import Logger, get_logger

__all__ = [
    "LOG_FILE_SIZE",
    "LOG_CONTEXT_WIDTH",
    "LOG_MESSAGE_LENGTH",
    "init_core_logger",
    "log_level_from_name",
]

LOG_FILE_SIZE = 4 * 1024
LOG_CONTEXT_WIDTH = 4 * 8
LOG_MESSAGE_LENGTH = 4 * 128

_LEVELS = {
    "kDebug": LogLevel.DEBUG,
    "kInfo": LogLevel.INFO,
    "kWarning": LogLevel.WARNING,
    "kError": LogLevel.ERROR,
    "kCritical": LogLevel.CRITICAL,
    "kIncident": LogLevel.INCIDENT,
}


def log_level_from_name(name: str) -> LogLevel:
    """Map a configured level name such as ``kInfo``; unknown names mean debug."""
    return _LEVELS.get(name, LogLevel.DEBUG)


def init_core_logger(config: Config, logger: Logger | None = None) -> Logger:
    """Configure plain file logging into the configured directory.

    Uses ``technical.log`` and ``incident.log``. Raises OSError when the files
    cannot be opened.
    """
    logger = logger if logger is not None else get_logger()
    logger.enable_plain_log(True)
    logger.enable_json_log(False)
    logger.set_log_option(LogOption.FILE)
    logger.set_log_files(config.log_dir, {"technical": "technical.log"}, "incident.log")
    logger.set_backup_log_dir(config.log_dir)
    logger.set_number_backup_files(5)
    logger.set_log_file_size_limit(config.log_size_limit)
    logger.set_context_field_width(LOG_CONTEXT_WIDTH)
    logger.set_log_message_length(LOG_MESSAGE_LENGTH)
    logger.set_log_level(log_level_from_name(config.log_level))
    return logger