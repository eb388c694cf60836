"""The core service command: help, version and the gRPC server run."""

from __future__ import annotations

import signal
import sys
import threading
import time
from typing import Mapping, Sequence

from .cli import AppHandler, Application, RetCode
from .config import ConfigError, load
from .core_logging import init_core_logger
from .giid_db import GiidDb, get_giid_db
from .lifecycle import (
    install_exit_handler,
    install_signal_handler,
    is_exiting,
    sigterm_handler,
    stop_logger,
)
from .logger import Logger
from .plugins import PluginLoadError
from .server import DEFAULT_HOST, DEFAULT_PORT, GrpcServer
from .services import ReadService, WriteService

__all__ = ["CORE_VERSION", "HelpHandler", "VersionHandler", "MainHandler", "main"]

CORE_VERSION = "0.1.0"

_HELP_TEXT = (
    "Feel Core\n"
    "Usage:\n"
    " Start: ./feel_core\n"
    "\n"
    " Show version: feel_core -v; feel_core --version\n"
    " Show help: feel_core -h; feel_core --help"
)


class HelpHandler(AppHandler):
    """Prints usage for ``-h`` or ``--help``."""

    def matches(self, argv: Sequence[str]) -> bool:
        return len(argv) == 2 and argv[1] in ("-h", "--help")

    def start(self, argv: Sequence[str]) -> RetCode:
        print(_HELP_TEXT)
        return RetCode.INIT_OK


class VersionHandler(AppHandler):
    """Prints the version for ``-v`` or ``--version``."""

    def matches(self, argv: Sequence[str]) -> bool:
        return len(argv) == 2 and argv[1] in ("-v", "--version")

    def start(self, argv: Sequence[str]) -> RetCode:
        print("Feel Core (gRPC server)")
        print(f"Version {CORE_VERSION}")
        return RetCode.INIT_OK


class MainHandler(AppHandler):
    """Runs the gRPC server until a shutdown is requested."""

    def __init__(
        self,
        *,
        environ: Mapping[str, str] | None = None,
        logger: Logger | None = None,
        giid_db: GiidDb | None = None,
        server: GrpcServer | None = None,
        host: str = DEFAULT_HOST,
        port: str | int = DEFAULT_PORT,
        poll_interval: float = 1.0,
    ) -> None:
        self._environ = environ
        self._logger = logger
        self._giid_db = giid_db
        self._server = server
        self._host = host
        self._port = port
        self._poll_interval = poll_interval

    def matches(self, argv: Sequence[str]) -> bool:
        return len(argv) == 1

    def start(self, argv: Sequence[str]) -> RetCode:
        print("FeelCore (gRPC server)")

        try:
            conf = load(self._environ)
        except ConfigError as exc:
            print(exc, file=sys.stderr)
            print("FCore: cannot load configuration, exit!", file=sys.stderr)
            return RetCode.INIT_ERROR

        try:
            log = init_core_logger(conf, self._logger)
        except (OSError, ValueError):
            print("FCore: failed to init FCore logger, exit!", file=sys.stderr)
            return RetCode.INIT_ERROR

        try:
            install_signal_handler(signal.SIGTERM, sigterm_handler)
        except (OSError, ValueError, TypeError):
            print(
                "FCore: failed to install signal handler for SIGTERM, exit",
                file=sys.stderr,
            )
            return RetCode.INIT_ERROR
        log.info("FCore: installed signal handler for SIGTERM")

        try:
            install_exit_handler(stop_logger)
        except ValueError:
            print("FCore: failed to install exit handler `stopLogger`", file=sys.stderr)
            return RetCode.INIT_ERROR
        log.info("FCore: installed exit handler `stopLogger`")

        db = self._giid_db if self._giid_db is not None else get_giid_db()
        log.info("FCore: build GIID database ...")
        try:
            db.build_db()
        except PluginLoadError:
            log.error("FCore: failed to build GIID database")
            return RetCode.INIT_ERROR
        log.info("FCore: build GIID database completed")

        server = self._server
        if server is None:
            server = GrpcServer(ReadService(db, log), WriteService(db, log))
        server.set_ipv4(self._host).set_port(self._port)

        errors: list[BaseException] = []

        def serve() -> None:
            try:
                server.start()
            except (OSError, RuntimeError) as exc:
                errors.append(exc)

        log.info("FCore: starting FCore server ...")
        thread = threading.Thread(target=serve, name="feel-core-server", daemon=True)
        thread.start()

        while not is_exiting() and thread.is_alive():
            time.sleep(self._poll_interval)

        log.info("FCore: received shutdown order, doing safe shutdown ...")
        while thread.is_alive():
            if server.is_running():
                server.stop()
            thread.join(self._poll_interval)

        if errors:
            log.error("FCore: caught runtime error: %s", errors[0])
            return RetCode.INIT_ERROR

        log.info("FCore: stopped FCore server, shutdown safely")
        return RetCode.INIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the core service command."""
    app = Application(sys.argv if argv is None else argv)
    app.use_handler(HelpHandler())
    app.use_handler(MainHandler())
    app.use_handler(VersionHandler())
    app.use_fallback_handler(HelpHandler())
    return int(app.start())


if __name__ == "__main__":
    sys.exit(main())