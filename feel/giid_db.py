"""The giid database: which plugin serves which interface."""

from __future__ import annotations

import threading

from .logger import Logger, get_logger
from .plugins import Plugin, PluginLoadError, PluginManager, get_plugin_manager

__all__ = [
    "PLUGIN_X",
    "PLUGIN_Y",
    "PLUGIN_X_PATH",
    "PLUGIN_Y_PATH",
    "GiidDb",
    "get_giid_db",
]

PLUGIN_X = "PluginX"
PLUGIN_Y = "PluginY"
PLUGIN_X_PATH = "provider/plugins/libPluginX.so"
PLUGIN_Y_PATH = "provider/plugins/libPluginY.so"


class GiidDb:
    """Maps giids to the plugins that serve them."""

    def __init__(
        self, manager: PluginManager | None = None, logger: Logger | None = None
    ) -> None:
        self._manager = manager if manager is not None else get_plugin_manager()
        self._logger = logger

    @property
    def _log(self) -> Logger:
        return self._logger if self._logger is not None else get_logger()

    def build_db(self) -> None:
        """Load both plugins and register their giids; raises PluginLoadError."""
        try:
            xp = self._manager.load(PLUGIN_X, PLUGIN_X_PATH)
        except PluginLoadError:
            self._log.error("FCore: failed to load Plugin X")
            raise
        try:
            yp = self._manager.load(PLUGIN_Y, PLUGIN_Y_PATH)
        except PluginLoadError:
            self._log.error("FCore: failed to load Plugin Y")
            raise

        self._manager.store("giid/001", xp)
        self._manager.store("giid/002", xp)
        self._manager.store("giid/003", yp)
        self._manager.store("giid/004", yp)

    def lookup(self, giid: str) -> Plugin | None:
        """Return the plugin serving ``giid``, or None."""
        return self._manager.lookup(giid)


_instance: GiidDb | None = None
_instance_lock = threading.Lock()


def get_giid_db() -> GiidDb:
    """Return the process-wide giid database."""
    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = GiidDb()
        return _instance