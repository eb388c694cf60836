"""Thread-safe logger writing plain and JSON records to rotating files."""

from __future__ import annotations

import contextlib
import json
import os
import sys
import threading
import time
from typing import Mapping

from .logbuffer import LogBuffer
from .logdefs import LogCategory, LogLevel, LogOption, level_name
from .logfiles import LogFile, backup_file, copy_file, file_size, full_path

__all__ = ["Logger", "get_logger"]

_PLAIN_SUFFIX = ".dev"
_MAX_BYTE = 0xFF
_TECHNICAL = int(LogCategory.TECHNICAL)
_INCIDENT = int(LogCategory.INCIDENT)
_BOTH = _TECHNICAL | _INCIDENT


def _epoch_micros() -> int:
    return time.time_ns() // 1000


class Logger:
    """Writes log records to the console and to technical and incident files.

    Plain records go to files carrying a ``.dev`` suffix, JSON records to files
    without it. When separate files are configured, incident records go to the
    incident file and the rest to the technical files.
    """

    def __init__(self, buffer: LogBuffer | None = None) -> None:
        self._lock = threading.RLock()
        self._buffer = buffer if buffer is not None else LogBuffer()
        self._plain_files: dict[str, LogFile] = {}
        self._json_files: dict[str, LogFile] = {}
        self._plain_incident: LogFile | None = None
        self._json_incident: LogFile | None = None
        self._option = LogOption.CONSOLE
        self._plain_enabled = False
        self._json_enabled = False
        self._separated = False
        self._output_dir = ""
        self._backup_dir = ""
        self._max_backups = 0
        self._size_limit = 0
        self._minimum_level = int(LogLevel.DEBUG)

    @property
    def option(self) -> LogOption:
        return self._option

    @property
    def minimum_level(self) -> int:
        return self._minimum_level

    @property
    def backup_dir(self) -> str:
        return self._backup_dir

    @property
    def number_backup_files(self) -> int:
        return self._max_backups

    @property
    def file_size_limit(self) -> int:
        return self._size_limit

    def enable_plain_log(self, enable: bool) -> None:
        self._plain_enabled = bool(enable)

    def enable_json_log(self, enable: bool) -> None:
        self._json_enabled = bool(enable)

    def set_log_file(self, file_path: str, file_name: str) -> None:
        """Send every record to one file in ``file_path``.

        Raises ValueError for an empty name and OSError when a file cannot be opened.
        """
        if not file_name:
            raise ValueError("Log file name is missing")
        with self._lock:
            self._close_technical()
            self._output_dir = file_path
            try:
                if self._plain_enabled:
                    name = f"{file_name}{_PLAIN_SUFFIX}"
                    self._plain_files[name] = LogFile(name).open(file_path)
                if self._json_enabled:
                    self._json_files[file_name] = LogFile(file_name).open(file_path)
            except OSError:
                self._output_dir = ""
                raise
            self._separated = False

    def set_log_files(
        self, file_path: str, file_list: Mapping[str, str], incident_file_name: str
    ) -> None:
        """Use one technical file per key of ``file_list`` plus an incident file.

        Raises ValueError for an empty incident name and OSError when a file
        cannot be opened.
        """
        if not incident_file_name:
            raise ValueError("Incident log file name is missing")
        with self._lock:
            self._close_technical()
            self._output_dir = file_path
            try:
                for key in sorted(file_list):
                    name = file_list[key]
                    if self._plain_enabled:
                        self._plain_files[f"{key}{_PLAIN_SUFFIX}"] = LogFile(
                            f"{name}{_PLAIN_SUFFIX}"
                        ).open(file_path)
                    if self._json_enabled:
                        self._json_files[key] = LogFile(name).open(file_path)
                if self._plain_enabled:
                    self._plain_incident = self._reopen_incident(
                        self._plain_incident, f"{incident_file_name}{_PLAIN_SUFFIX}"
                    )
                if self._json_enabled:
                    self._json_incident = self._reopen_incident(
                        self._json_incident, incident_file_name
                    )
            except OSError:
                self._output_dir = ""
                raise
            self._separated = True

    def set_backup_log_dir(self, backup_dir: str) -> None:
        self._backup_dir = backup_dir

    def set_number_backup_files(self, number: int) -> None:
        if not 0 <= number <= _MAX_BYTE:
            raise ValueError(f"number of backup files must be within 0..255: {number}")
        self._max_backups = number

    def set_log_file_size_limit(self, size: int) -> None:
        if size < 0:
            raise ValueError(f"file size limit must not be negative: {size}")
        self._size_limit = size

    def set_log_level(self, minimum_level: int) -> None:
        if not 0 <= minimum_level <= _MAX_BYTE:
            raise ValueError(f"log level must be within 0..255: {minimum_level}")
        self._minimum_level = int(minimum_level)

    def set_log_option(self, option: int) -> None:
        self._option = LogOption(option)

    def set_log_message_length(self, length: int) -> None:
        with self._lock:
            self._buffer.set_max_message_length(length)

    def set_context_field_width(self, width: int) -> None:
        with self._lock:
            self._buffer.set_context_width(width)

    def log(self, level: int, context: str, format: str, *args: object) -> None:
        """Log a printf-style message with a free-form context field."""
        if not self._accepts(level):
            return
        with self._lock:
            self._buffer.set_message(format, *args)
            if self._plain_enabled:
                target = self._pick(
                    self._plain_files, self._plain_incident, level, context
                )
                if target is not None:
                    self._write(
                        target,
                        self._buffer.plain_message(level, self._option, context),
                    )
            if self._json_enabled:
                target = self._pick(self._json_files, self._json_incident, level, context)
                if target is not None:
                    self._write(target, self._json_record(level, context))

    def log_at(
        self,
        level: int,
        file: str,
        function: str,
        line: int,
        format: str,
        *args: object,
    ) -> None:
        """Log a printf-style message tagged with its source location."""
        if not self._accepts(level):
            return
        with self._lock:
            self._buffer.set_message(format, *args)
            if self._plain_enabled:
                target = self._pick(self._plain_files, self._plain_incident, level, None)
                if target is not None:
                    self._write(
                        target,
                        self._buffer.plain_message_at(
                            level, self._option, file, function, line
                        ),
                    )
            if self._json_enabled:
                target = self._pick(self._json_files, self._json_incident, level, None)
                if target is not None:
                    self._write(target, self._json_record(level, ""))

    def debug(self, format: str, *args: object) -> None:
        self._log_caller(LogLevel.DEBUG, format, args)

    def info(self, format: str, *args: object) -> None:
        self._log_caller(LogLevel.INFO, format, args)

    def warning(self, format: str, *args: object) -> None:
        self._log_caller(LogLevel.WARNING, format, args)

    def error(self, format: str, *args: object) -> None:
        self._log_caller(LogLevel.ERROR, format, args)

    def critical(self, format: str, *args: object) -> None:
        self._log_caller(LogLevel.CRITICAL, format, args)

    def incident(self, format: str, *args: object) -> None:
        self._log_caller(LogLevel.INCIDENT, format, args)

    def truncate(self, category: int) -> None:
        """Move the files of a category to the backup directory and start afresh."""
        selected = int(category)
        with self._lock:
            if selected in (_TECHNICAL, _BOTH):
                if self._plain_enabled:
                    for log_file in self._plain_files.values():
                        self._move_to_backup(log_file)
                if self._json_enabled:
                    for log_file in self._json_files.values():
                        self._move_to_backup(log_file)
            if selected in (_INCIDENT, _BOTH):
                if self._plain_enabled and self._plain_incident is not None:
                    self._move_to_backup(self._plain_incident)
                if self._json_enabled and self._json_incident is not None:
                    self._move_to_backup(self._json_incident)

    def stop(self) -> None:
        """Flush and close every open log file."""
        for log_file in (*self._plain_files.values(), *self._json_files.values()):
            log_file.close()
        for log_file in (self._plain_incident, self._json_incident):
            if log_file is not None:
                log_file.close()

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _accepts(self, level: int) -> bool:
        return self._minimum_level <= level and self._option != LogOption.OFF

    def _log_caller(self, level: int, format: str, args: tuple) -> None:
        if not self._accepts(level):
            return
        frame = sys._getframe(2)
        code = frame.f_code
        self.log_at(
            level,
            os.path.basename(code.co_filename),
            code.co_name,
            frame.f_lineno,
            format,
            *args,
        )

    def _json_record(self, level: int, component: str) -> str:
        record = {
            "message": self._buffer.json_message(),
            "level": level_name(level),
            "component": component,
            "timestamp": _epoch_micros(),
        }
        return json.dumps(
            record, sort_keys=True, separators=(",", ":"), ensure_ascii=False
        )

    def _pick(
        self,
        files: dict[str, LogFile],
        incident: LogFile | None,
        level: int,
        context: str | None,
    ) -> LogFile | None:
        if self._separated and level == LogLevel.INCIDENT:
            return incident
        if not files:
            return None
        if len(files) == 1 or context is None:
            return files[min(files)]
        return files.get(context)

    def _reopen_incident(self, current: LogFile | None, name: str) -> LogFile:
        log_file = current if current is not None else LogFile(name)
        log_file.name = name
        return log_file.open(self._output_dir)

    def _close_technical(self) -> None:
        for log_file in (*self._plain_files.values(), *self._json_files.values()):
            log_file.close()
        self._plain_files.clear()
        self._json_files.clear()

    def _write(self, log_file: LogFile, message: str) -> None:
        if self._option & LogOption.CONSOLE:
            print(message)
        if self._option & LogOption.FILE and self._within_size_limit(log_file):
            log_file.write(message)

    def _within_size_limit(self, log_file: LogFile) -> bool:
        if not log_file.is_open:
            return False
        path = full_path(self._output_dir, log_file.name)
        if file_size(path) >= self._size_limit:
            log_file.close()
            try:
                backup_file(log_file, self._output_dir, self._backup_dir, self._max_backups)
                log_file.open(self._output_dir)
            except OSError as exc:
                print(exc, file=sys.stderr)
                return False
        return True

    def _move_to_backup(self, log_file: LogFile) -> None:
        log_file.close()
        source = full_path(self._output_dir, log_file.name)
        dest = full_path(self._backup_dir, log_file.name)
        try:
            copy_file(source, dest)
        except OSError:
            print(f"copyFile: failed to copy {source} to {dest}", file=sys.stderr)
        with contextlib.suppress(OSError):
            os.remove(source)
        try:
            log_file.open(self._output_dir)
        except OSError:
            print("Failed to create new out file stream", file=sys.stderr)


_instance: Logger | None = None
_instance_lock = threading.Lock()


def get_logger() -> Logger:
    """Return the process-wide logger."""
    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = Logger()
        return _instance