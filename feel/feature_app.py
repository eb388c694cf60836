"""The feature command: exercises plugins X and Y through the core service."""

from __future__ import annotations

import sys
import time
from typing import Callable, Sequence

from .cli import AppHandler, Application, RetCode
from .interfaces import Reader, Writer, xxx_read, xxx_write, yyy_read, yyy_write

__all__ = [
    "FEATURE_VERSION",
    "FeatureHelpHandler",
    "FeatureVersionHandler",
    "FeatureMainHandler",
    "main",
]

FEATURE_VERSION = "0.1.0"

_HELP_TEXT = (
    "Feel Feature\n"
    "Usage:\n"
    " Start service: ./feel_feature [-f/--feature <name>]\n"
    "\n"
    " Show version: ./feel_feature -v; ./feel_feature --version\n"
    " Show help: ./feel_feature -h; ./feel_feature --help"
)

_FEATURES = {
    "x": ("X", True, False),
    "X": ("X", True, False),
    "y": ("Y", False, True),
    "Y": ("Y", False, True),
    "xy": ("X and Y", True, True),
    "XY": ("X and Y", True, True),
}


class FeatureHelpHandler(AppHandler):
    """Prints usage for ``-h`` or ``--help``."""

    def matches(self, argv: Sequence[str]) -> bool:
        return len(argv) == 2 and argv[1] in ("-h", "--help")

    def start(self, argv: Sequence[str]) -> RetCode:
        print(_HELP_TEXT)
        return RetCode.INIT_OK


class FeatureVersionHandler(AppHandler):
    """Prints the version for ``-v`` or ``--version``."""

    def matches(self, argv: Sequence[str]) -> bool:
        return len(argv) == 2 and argv[1] in ("-v", "--version")

    def start(self, argv: Sequence[str]) -> RetCode:
        print("Feal Feature")
        print(f"Version {FEATURE_VERSION}")
        return RetCode.INIT_OK


class FeatureMainHandler(AppHandler):
    """Runs the selected features for a fixed number of rounds."""

    def __init__(
        self,
        *,
        reader: Reader | None = None,
        writer: Writer | None = None,
        rounds: int = 1000,
        pause: float = 1.0,
        sleep: Callable[[float], object] = time.sleep,
    ) -> None:
        self.feature_name = ""
        self._reader = reader
        self._writer = writer
        self._rounds = rounds
        self._pause = pause
        self._sleep = sleep

    def matches(self, argv: Sequence[str]) -> bool:
        """Bare command, or ``-f``/``--feature`` with a non-empty name (which is kept)."""
        if len(argv) == 1:
            return True
        if len(argv) == 3 and argv[1] in ("-f", "--feature") and argv[2]:
            self.feature_name = argv[2]
            return True
        return False

    def start(self, argv: Sequence[str]) -> RetCode:
        print("Runtime Containerized Application/Feature ...")

        selected = _FEATURES.get(self.feature_name)
        if selected is None:
            print("== ERROR: Missing feature!", file=sys.stderr)
            return RetCode.INIT_ERROR
        label, run_x, run_y = selected
        print(f"== INFO: starting feature {label}")

        try:
            for _ in range(self._rounds):
                if run_x:
                    self._run_x()
                if run_y:
                    self._run_y()
            print("== INFO: Feel Feature shutdowns")
        except OSError:
            print("== INFO: Feel Feature caught system error")
            return RetCode.INIT_ERROR
        except RuntimeError:
            print("== INFO: Feel Feature caught runtime error")
            return RetCode.INIT_ERROR
        return RetCode.INIT_OK

    def _report(self, name: str, ok: bool) -> None:
        print(f"== INFO: Interfaces::{name}() {'TRUE' if ok else 'FALSE'}")

    def _run_x(self) -> None:
        value = xxx_read(self._reader)
        print(f"== INFO: Interfaces::xxx_read() = {value}")
        self._report("xxx_write", xxx_write(value + 1, self._writer))
        self._sleep(self._pause)

    def _run_y(self) -> None:
        value = yyy_read(self._reader)
        print(f"== INFO: Interfaces::yyy_read() = {value:g}")
        self._report("yyy_write", yyy_write(value + 1.0, self._writer))
        self._sleep(self._pause)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the feature command."""
    app = Application(sys.argv if argv is None else argv)
    app.use_handler(FeatureHelpHandler())
    app.use_handler(FeatureMainHandler())
    app.use_handler(FeatureVersionHandler())
    app.use_fallback_handler(FeatureHelpHandler())
    return int(app.start())


if __name__ == "__main__":
    sys.exit(main())