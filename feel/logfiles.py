"""Log file handles, file helpers and rotation of backup files."""

from __future__ import annotations

import contextlib
import os
import re
import shutil
import sys
from dataclasses import dataclass, field
from typing import TextIO

__all__ = ["LogFile", "full_path", "file_size", "copy_file", "backup_file"]


def full_path(directory: str, name: str) -> str:
    """Join a directory and a file name; an empty directory means the name alone."""
    return f"{directory}{os.sep}{name}" if directory else name


def file_size(path: str) -> int:
    """Size of a file in bytes, or 0 when it cannot be examined."""
    try:
        return os.stat(path).st_size
    except OSError:
        print(f"getFileSize: failed to stat() file {path}", file=sys.stderr)
        return 0


def copy_file(source: str, dest: str) -> int:
    """Copy ``source`` to ``dest`` and return the number of bytes copied."""
    shutil.copyfile(source, dest)
    return os.path.getsize(dest)


@dataclass
class LogFile:
    """A named log file and the stream it is appended through."""

    name: str
    stream: TextIO | None = field(default=None, repr=False, compare=False)

    @property
    def is_open(self) -> bool:
        return self.stream is not None

    def open(self, directory: str) -> "LogFile":
        """(Re)open the file in ``directory`` for appending."""
        self.close()
        self.stream = open(full_path(directory, self.name), "a", encoding="utf-8")
        return self

    def close(self) -> None:
        if self.stream is not None:
            self.stream.flush()
            self.stream.close()
            self.stream = None

    def write(self, message: str) -> None:
        """Append one line; does nothing while the file is closed."""
        if self.stream is not None:
            self.stream.write(f"{message}\n")
            self.stream.flush()

    def __enter__(self) -> "LogFile":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def backup_file(
    log_file: LogFile, output_dir: str, backup_dir: str, max_backups: int
) -> str:
    """Move the current log file to ``<name>.1`` in the backup directory.

    Existing backups are shifted up by one; once ``max_backups`` are present the
    oldest is overwritten. Returns the path of the new backup.
    """
    name = log_file.name
    pattern = re.compile(re.escape(name) + r"\.([0-9]{1,2})")

    try:
        entries = sorted(os.listdir(backup_dir))
    except OSError:
        entries = []

    existing: dict[int, str] = {}
    for entry in entries:
        match = pattern.fullmatch(entry)
        if match:
            existing.setdefault(int(match.group(1)), entry)

    numbers = sorted(existing, reverse=True)
    if len(numbers) >= max_backups:
        numbers = numbers[1:]

    for number in numbers:
        origin = full_path(backup_dir, existing[number])
        renamed = full_path(backup_dir, f"{name}.{number + 1}")
        try:
            os.replace(origin, renamed)
        except OSError:
            print(f"Logger: failed to backup {origin} to {renamed}", file=sys.stderr)

    origin = full_path(output_dir, name)
    copied = f"{origin}.1"
    try:
        copy_file(origin, copied)
    except OSError:
        print(f"Logger: failed to copy file {origin} to {copied}", file=sys.stderr)
    else:
        with contextlib.suppress(OSError):
            os.remove(origin)

    target = full_path(backup_dir, f"{name}.1")
    try:
        os.replace(copied, target)
    except OSError as exc:
        raise OSError(f"Logger: failed to backup file {name}") from exc
    return target