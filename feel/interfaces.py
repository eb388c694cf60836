"""Typed access to the values that plugins X and Y expose through the core."""

from __future__ import annotations

import re
from typing import Protocol

from .client import read_client, write_client

__all__ = ["NOK_INT", "NOK_FLOAT", "xxx_read", "xxx_write", "yyy_read", "yyy_write"]

NOK_INT = -1
NOK_FLOAT = -1.0

_X_READ = "giid/001"
_X_WRITE = "giid/002"
_Y_READ = "giid/003"
_Y_WRITE = "giid/004"

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


class Reader(Protocol):
    def read(self, giid: str) -> str: ...


class Writer(Protocol):
    def write(self, giid: str, value: str) -> bool: ...


def _leading_int(text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no integer in {text!r}")
    return int(match.group(1))


def _leading_float(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no number in {text!r}")
    return float(match.group(1))


def xxx_read(reader: Reader | None = None) -> int:
    """Read plugin X's integer; -1 when nothing came back."""
    source = reader if reader is not None else read_client()
    value = source.read(_X_READ)
    return _leading_int(value) if value else NOK_INT


def xxx_write(value: int, writer: Writer | None = None) -> bool:
    """Write plugin X's integer."""
    target = writer if writer is not None else write_client()
    return target.write(_X_WRITE, str(int(value)))


def yyy_read(reader: Reader | None = None) -> float:
    """Read plugin Y's float; -1.0 when nothing came back."""
    source = reader if reader is not None else read_client()
    value = source.read(_Y_READ)
    return _leading_float(value) if value else NOK_FLOAT


def yyy_write(value: float, writer: Writer | None = None) -> bool:
    """Write plugin Y's float."""
    target = writer if writer is not None else write_client()
    return target.write(_Y_WRITE, f"{float(value):f}")