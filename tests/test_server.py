import threading
import time

import grpc
import pytest

from feel.giid_db import GiidDb
from feel.logdefs import LogOption
from feel.logger import Logger
from feel.plugins import PluginManager
from feel.server import (
    READ_METHOD,
    WRITE_METHOD,
    GrpcServer,
    decode_message,
    encode_message,
)
from feel.services import (
    ReadRequest,
    ReadResponse,
    ReadService,
    WriteRequest,
    WriteResponse,
    WriteService,
)


def _services():
    logger = Logger()
    logger.set_log_option(LogOption.OFF)
    db = GiidDb(PluginManager(), logger)
    db.build_db()
    return ReadService(db, logger), WriteService(db, logger)


@pytest.fixture
def running_server():
    read_service, write_service = _services()
    server = GrpcServer(read_service, write_service)
    server.set_ipv4("127.0.0.1").set_port(0)
    thread = threading.Thread(target=server.start, daemon=True)
    thread.start()
    deadline = time.monotonic() + 10
    while not server.is_running() and time.monotonic() < deadline:
        time.sleep(0.01)
    yield server
    server.stop()
    thread.join(timeout=10)


@pytest.fixture
def channel(running_server):
    with grpc.insecure_channel(f"127.0.0.1:{running_server.bound_port}") as chan:
        yield chan


def _read_call(channel):
    return channel.unary_unary(
        READ_METHOD, request_serializer=encode_message, response_deserializer=decode_message
    )


def _write_call(channel):
    return channel.unary_unary(
        WRITE_METHOD, request_serializer=encode_message, response_deserializer=decode_message
    )


@pytest.mark.parametrize(
    "message",
    [
        ReadRequest("giid/001"),
        ReadRequest(),
        ReadResponse("giid/003", True, "2.000000"),
        WriteRequest("giid/002", "5"),
        WriteResponse("giid/004", False),
    ],
)
def test_message_round_trip(message):
    assert decode_message(encode_message(message)) == message


def test_encoded_read_request_bytes():
    assert (
        encode_message(ReadRequest("giid/001"))
        == b'{"fields":{"giid":"giid/001"},"type":"ReadRequest"}'
    )


def test_encode_rejects_other_objects():
    with pytest.raises(TypeError):
        encode_message({"giid": "giid/001"})


@pytest.mark.parametrize(
    "data",
    [b"not json", b'{"type":"Nope","fields":{}}', b'{"type":"ReadRequest","fields":{"x":1}}'],
)
def test_decode_rejects_malformed(data):
    with pytest.raises(ValueError):
        decode_message(data)


def test_setters_chain():
    server = GrpcServer(*_services())
    assert server.set_ipv4("127.0.0.1").set_port(0) is server
    assert server.is_running() is False
    assert server.bound_port == 0


def test_server_serves_read(running_server, channel):
    assert running_server.is_running() is True
    response = _read_call(channel)(ReadRequest("giid/001"), timeout=10)
    assert response == ReadResponse("giid/001", True, "0")


def test_server_write_then_read(channel):
    written = _write_call(channel)(WriteRequest("giid/002", "7"), timeout=10)
    assert written == WriteResponse("giid/002", True)
    response = _read_call(channel)(ReadRequest("giid/001"), timeout=10)
    assert response.read_value == "7"


def test_server_reports_missing_giid(channel):
    with pytest.raises(grpc.RpcError) as info:
        _read_call(channel)(ReadRequest(), timeout=10)
    assert info.value.code() == grpc.StatusCode.FAILED_PRECONDITION
    assert info.value.details() == "Missing GIID"


def test_server_reports_missing_write_value(channel):
    with pytest.raises(grpc.RpcError) as info:
        _write_call(channel)(WriteRequest("giid/002"), timeout=10)
    assert info.value.code() == grpc.StatusCode.FAILED_PRECONDITION
    assert info.value.details() == "Missing Write value"


def test_stop_clears_running(running_server):
    running_server.stop()
    assert running_server.is_running() is False