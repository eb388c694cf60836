"""Loading of the core configuration file named by the CONFDIR variable."""

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass
from typing import Any, Mapping

__all__ = ["ConfigError", "Config", "load", "reload", "CONFIG_ENV", "CONFIG_FILE_NAME"]

CONFIG_ENV = "CONFDIR"
CONFIG_FILE_NAME = "fcore.conf"


class ConfigError(RuntimeError):
    """The configuration could not be located, read or understood."""


def _object(node: Any) -> dict:
    """Treat a missing node as empty; reject anything that is not a JSON object."""
    if node is None:
        return {}
    if not isinstance(node, dict):
        raise ConfigError(
            "FCore: caught exception: cannot use operator[] with a string "
            f"argument with {type(node).__name__}"
        )
    return node


@dataclass(frozen=True)
class Config:
    """Logger settings of the core service."""

    log_dir: str = ""
    log_level: str = "kDefault"
    log_size_limit: int = 1_000_000

    @classmethod
    def from_file(cls, path: str | os.PathLike) -> "Config":
        """Read ``fcore.logger`` settings from a JSON file; absent keys keep defaults."""
        try:
            with open(path, encoding="utf-8") as handle:
                text = handle.read()
        except OSError as exc:
            raise ConfigError(f"FCore: failed to open config file {path}") from exc

        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"FCore: caught exception: {exc}") from exc

        fcore = _object(document).get("fcore")
        logger = _object(_object(fcore).get("logger"))

        values: dict[str, Any] = {}
        if isinstance(logger.get("path"), str):
            values["log_dir"] = logger["path"]
        if isinstance(logger.get("level"), str):
            values["log_level"] = logger["level"]
        size = logger.get("file_size_limit")
        if isinstance(size, int) and not isinstance(size, bool) and size >= 0:
            values["log_size_limit"] = size
        return cls(**values)


_lock = threading.Lock()
_current: Config | None = None


def _read(environ: Mapping[str, str] | None) -> Config:
    env = os.environ if environ is None else environ
    directory = env.get(CONFIG_ENV)
    if directory is None:
        raise ConfigError("FCore: environment variable CONFDIR is not set")
    return Config.from_file(f"{directory}/{CONFIG_FILE_NAME}")


def load(environ: Mapping[str, str] | None = None) -> Config:
    """Return the shared configuration, reading it on first use."""
    global _current
    with _lock:
        if _current is None:
            _current = _read(environ)
        return _current


def reload(environ: Mapping[str, str] | None = None) -> Config:
    """Drop the shared configuration and read it again."""
    global _current
    with _lock:
        _current = None
    return load(environ)