"""gRPC server exposing the read and write services."""

from __future__ import annotations

import dataclasses
import json
import threading
from concurrent import futures
from typing import Any, Callable

import grpc

from .services import (
    PreconditionFailed,
    ReadRequest,
    ReadResponse,
    ReadService,
    WriteRequest,
    WriteResponse,
    WriteService,
)

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "READ_SERVICE",
    "WRITE_SERVICE",
    "READ_METHOD",
    "WRITE_METHOD",
    "GrpcServer",
    "encode_message",
    "decode_message",
]

DEFAULT_HOST = "localhost"
DEFAULT_PORT = "9997"
READ_SERVICE = "fcore.Read"
WRITE_SERVICE = "fcore.Write"
READ_METHOD = f"/{READ_SERVICE}/grpc_read"
WRITE_METHOD = f"/{WRITE_SERVICE}/grpc_write"

_MESSAGES = {
    cls.__name__: cls for cls in (ReadRequest, ReadResponse, WriteRequest, WriteResponse)
}


def encode_message(message: Any) -> bytes:
    """Serialise a request or response to bytes; TypeError for other objects."""
    name = type(message).__name__
    if _MESSAGES.get(name) is not type(message):
        raise TypeError(f"cannot encode {type(message).__name__}")
    payload = {"type": name, "fields": dataclasses.asdict(message)}
    return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")


def decode_message(data: bytes) -> Any:
    """Rebuild a request or response from bytes; ValueError when malformed."""
    try:
        payload = json.loads(data.decode("utf-8"))
        cls = _MESSAGES[payload["type"]]
        return cls(**payload["fields"])
    except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError) as exc:
        raise ValueError(f"malformed message: {exc}") from exc


def _handler(
    service: str, method: str, behavior: Callable
) -> grpc.GenericRpcHandler:
    method_handler = grpc.unary_unary_rpc_method_handler(
        behavior,
        request_deserializer=decode_message,
        response_serializer=encode_message,
    )
    return grpc.method_handlers_generic_handler(service, {method: method_handler})


class GrpcServer:
    """Serves the read and write services on ``ipv4:port``."""

    def __init__(
        self,
        read_service: ReadService | None = None,
        write_service: WriteService | None = None,
        max_workers: int = 4,
    ) -> None:
        self._read_service = read_service if read_service is not None else ReadService()
        self._write_service = (
            write_service if write_service is not None else WriteService()
        )
        self._max_workers = max_workers
        self._ipv4 = ""
        self._port = ""
        self._server: grpc.Server | None = None
        self._bound_port = 0
        self._running = threading.Event()
        self._lock = threading.Lock()

    @property
    def bound_port(self) -> int:
        """Port actually listened on; 0 before the server starts."""
        return self._bound_port

    def set_ipv4(self, ipv4: str) -> "GrpcServer":
        self._ipv4 = ipv4
        return self

    def set_port(self, port: str | int) -> "GrpcServer":
        self._port = str(port)
        return self

    def start(self) -> None:
        """Start serving and block until the server is stopped."""
        server = grpc.server(futures.ThreadPoolExecutor(max_workers=self._max_workers))
        server.add_generic_rpc_handlers(
            (
                _handler(READ_SERVICE, "grpc_read", self._read),
                _handler(WRITE_SERVICE, "grpc_write", self._write),
            )
        )
        address = f"{self._ipv4}:{self._port}"
        bound = server.add_insecure_port(address)
        if not bound:
            raise RuntimeError(f"failed to listen on {address}")
        with self._lock:
            self._server = server
            self._bound_port = bound
        server.start()
        self._running.set()
        server.wait_for_termination()

    def is_running(self) -> bool:
        return self._running.is_set()

    def stop(self) -> None:
        """Shut the server down, releasing a blocked ``start``."""
        with self._lock:
            server, self._server = self._server, None
            self._running.clear()
        if server is not None:
            server.stop(None).wait()

    def _read(self, request: Any, context: grpc.ServicerContext) -> ReadResponse:
        if not isinstance(request, ReadRequest):
            context.abort(grpc.StatusCode.INVALID_ARGUMENT, "expected ReadRequest")
        try:
            return self._read_service.read(request)
        except PreconditionFailed as exc:
            context.abort(grpc.StatusCode.FAILED_PRECONDITION, str(exc))

    def _write(self, request: Any, context: grpc.ServicerContext) -> WriteResponse:
        if not isinstance(request, WriteRequest):
            context.abort(grpc.StatusCode.INVALID_ARGUMENT, "expected WriteRequest")
        try:
            return self._write_service.write(request)
        except PreconditionFailed as exc:
            context.abort(grpc.StatusCode.FAILED_PRECONDITION, str(exc))