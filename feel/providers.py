"""Value providers that back the plugins: an integer store (X) and a float store (Y)."""

from __future__ import annotations

import abc
import re
import struct
import sys
from typing import Callable

__all__ = [
    "PluginProvider",
    "PluginXProvider",
    "PluginYProvider",
    "create_provider",
    "PROVIDERS",
]

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def _parse_int(text: str) -> int:
    """Read the leading integer of ``text``; trailing characters are ignored."""
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no integer in {text!r}")
    value = int(match.group(1))
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _parse_float(text: str) -> float:
    """Read the leading number of ``text`` as a single-precision float."""
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no number in {text!r}")
    try:
        return struct.unpack("f", struct.pack("f", float(match.group(1))))[0]
    except OverflowError as exc:
        raise ValueError(f"number out of range: {text!r}") from exc


class PluginProvider(abc.ABC):
    """What a plugin offers: the giids it serves and read/write access to them."""

    @abc.abstractmethod
    def get_giids(self) -> list[str]:
        """Return every giid this provider supports."""

    @abc.abstractmethod
    def read(self, giid: str) -> str:
        """Return the value behind ``giid``, or an empty string."""

    @abc.abstractmethod
    def write(self, giid: str, value: str) -> bool:
        """Store ``value`` behind ``giid``; False when the giid is not served."""


class PluginXProvider(PluginProvider):
    """Holds an integer, read through giid/001 and written through giid/002."""

    READ_GIID = "giid/001"
    WRITE_GIID = "giid/002"

    def __init__(self) -> None:
        self.value = 0

    def get_giids(self) -> list[str]:
        return ["giid/001", "giid/002"]

    def read(self, giid: str) -> str:
        if giid == self.READ_GIID:
            return str(self.value)
        print("== ERROR: PluginXImpl::read(): unrecognized interface ID", file=sys.stderr)
        return ""

    def write(self, giid: str, value: str) -> bool:
        if giid == self.WRITE_GIID:
            self.value = _parse_int(value)
            return True
        print("== ERROR: PluginXImpl::write(): unrecognized interface ID", file=sys.stderr)
        return False


class PluginYProvider(PluginProvider):
    """Holds a float, read through giid/003 and written through giid/004."""

    READ_GIID = "giid/003"
    WRITE_GIID = "giid/004"

    def __init__(self) -> None:
        self.value = 0.0

    def get_giids(self) -> list[str]:
        return ["giid/001", "giid/002"]

    def read(self, giid: str) -> str:
        if giid == self.READ_GIID:
            return f"{self.value:f}"
        print("== ERROR: PluginYImpl::read(): unrecognized interface ID", file=sys.stderr)
        return ""

    def write(self, giid: str, value: str) -> bool:
        if giid == self.WRITE_GIID:
            self.value = _parse_float(value)
            return True
        print("== ERROR: PluginYImpl::write(): unrecognized interface ID", file=sys.stderr)
        return False


PROVIDERS: dict[str, Callable[[], PluginProvider]] = {
    "PluginX": PluginXProvider,
    "PluginY": PluginYProvider,
}


def create_provider(name: str) -> PluginProvider:
    """Create a fresh provider by plugin name; ValueError for an unknown name."""
    try:
        factory = PROVIDERS[name]
    except KeyError:
        raise ValueError(f"no plugin provider named {name!r}") from None
    return factory()