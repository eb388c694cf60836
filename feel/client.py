"""Clients of the core service's read and write methods."""

from __future__ import annotations

import threading
from typing import Callable

import grpc

from .server import READ_METHOD, WRITE_METHOD, decode_message, encode_message
from .services import ReadRequest, WriteRequest

__all__ = [
    "SERVER_HOST",
    "SERVER_PORT",
    "ReadClient",
    "WriteClient",
    "read_client",
    "write_client",
]

SERVER_HOST = "localhost"
SERVER_PORT = "9997"
_DEFAULT_TARGET = f"{SERVER_HOST}:{SERVER_PORT}"


class _Client:
    def __init__(
        self,
        method: str,
        target: str = _DEFAULT_TARGET,
        *,
        channel: grpc.Channel | None = None,
        timeout: float | None = None,
    ) -> None:
        self._owns_channel = channel is None
        self._channel = channel if channel is not None else grpc.insecure_channel(target)
        self._timeout = timeout
        self._call: Callable = self._channel.unary_unary(
            method,
            request_serializer=encode_message,
            response_deserializer=decode_message,
        )

    def close(self) -> None:
        """Close the channel if this client created it."""
        if self._owns_channel:
            self._channel.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ReadClient(_Client):
    """Reads values from the core service by giid."""

    def __init__(
        self,
        target: str = _DEFAULT_TARGET,
        *,
        channel: grpc.Channel | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(READ_METHOD, target, channel=channel, timeout=timeout)

    def read(self, giid: str) -> str:
        """Return the value behind ``giid``; an empty string when the call fails."""
        try:
            response = self._call(ReadRequest(giid=giid), timeout=self._timeout)
        except grpc.RpcError:
            return ""
        return response.read_value


class WriteClient(_Client):
    """Writes values to the core service by giid."""

    def __init__(
        self,
        target: str = _DEFAULT_TARGET,
        *,
        channel: grpc.Channel | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(WRITE_METHOD, target, channel=channel, timeout=timeout)

    def write(self, giid: str, value: str) -> bool:
        """True when the service answered the call, False when the call failed."""
        try:
            self._call(WriteRequest(giid=giid, write_value=value), timeout=self._timeout)
        except grpc.RpcError:
            return False
        return True


_lock = threading.Lock()
_read_client: ReadClient | None = None
_write_client: WriteClient | None = None


def read_client() -> ReadClient:
    """Return the process-wide read client for the default server."""
    global _read_client
    with _lock:
        if _read_client is None:
            _read_client = ReadClient()
        return _read_client


def write_client() -> WriteClient:
    """Return the process-wide write client for the default server."""
    global _write_client
    with _lock:
        if _write_client is None:
            _write_client = WriteClient()
        return _write_client