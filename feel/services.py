"""Read and write services that route requests to plugins by giid."""

from __future__ import annotations

from dataclasses import dataclass

from .giid_db import GiidDb, get_giid_db
from .logger import Logger, get_logger

__all__ = [
    "PreconditionFailed",
    "ReadRequest",
    "ReadResponse",
    "WriteRequest",
    "WriteResponse",
    "ReadService",
    "WriteService",
]


class PreconditionFailed(Exception):
    """A request lacks something the service needs."""


@dataclass
class ReadRequest:
    giid: str | None = None


@dataclass
class ReadResponse:
    giid: str = ""
    read_success: bool = False
    read_value: str = ""


@dataclass
class WriteRequest:
    giid: str | None = None
    write_value: str | None = None


@dataclass
class WriteResponse:
    giid: str = ""
    write_success: bool = False


class _Service:
    def __init__(self, db: GiidDb | None = None, logger: Logger | None = None) -> None:
        self._db = db
        self._logger = logger

    @property
    def _giids(self) -> GiidDb:
        return self._db if self._db is not None else get_giid_db()

    @property
    def _log(self) -> Logger:
        return self._logger if self._logger is not None else get_logger()


class ReadService(_Service):
    """Reads a value through the plugin that serves the requested giid."""

    def read(self, request: ReadRequest) -> ReadResponse:
        """Raises PreconditionFailed when the request or its giid is missing."""
        if request is None:
            raise PreconditionFailed("")
        if request.giid is None:
            raise PreconditionFailed("Missing GIID")

        giid = request.giid
        self._log.info("FCore: ReadServiceImpl: giid = %s", giid)
        plugin = self._giids.lookup(giid)
        if plugin is None:
            self._log.warning(
                "FCore: ReadServiceImpl: there is no Plugin support giid '%s'", giid
            )
            return ReadResponse(giid=giid, read_success=False, read_value="")
        return ReadResponse(giid=giid, read_success=True, read_value=plugin.read(giid))


class WriteService(_Service):
    """Writes a value through the plugin that serves the requested giid."""

    def write(self, request: WriteRequest) -> WriteResponse:
        """Raises PreconditionFailed when the request, giid or value is missing."""
        if request is None:
            raise PreconditionFailed("")
        if request.giid is None:
            raise PreconditionFailed("Missing GIID")
        if request.write_value is None:
            raise PreconditionFailed("Missing Write value")

        giid = request.giid
        value = request.write_value
        self._log.info(
            "FCore: WriteServiceImpl: giid = %s, write value = %s", giid, value
        )
        plugin = self._giids.lookup(giid)
        if plugin is None:
            self._log.warning(
                "FCore: WriteServiceImpl: there is no Plugin support giid '%s'", giid
            )
            return WriteResponse(giid=giid, write_success=False)
        return WriteResponse(giid=giid, write_success=plugin.write(giid, value))