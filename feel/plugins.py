"""Loaded plugins and the registry that maps giids to them."""

from __future__ import annotations

import threading
from typing import Callable

from .providers import PluginProvider, create_provider

__all__ = ["PluginLoadError", "Plugin", "PluginManager", "get_plugin_manager"]

ProviderFactory = Callable[[str], PluginProvider]


class PluginLoadError(RuntimeError):
    """A plugin could not be loaded."""


class Plugin:
    """A named plugin wrapping the provider it was loaded from."""

    def __init__(
        self, name: str, path: str, factory: ProviderFactory = create_provider
    ) -> None:
        self.name = name
        self.path = path
        try:
            self._provider: PluginProvider | None = factory(name)
        except (LookupError, ValueError, OSError) as exc:
            raise PluginLoadError(
                f"Failed to load plugin {name!r} from {path!r}: {exc}"
            ) from exc

    def __repr__(self) -> str:
        return f"Plugin(name={self.name!r}, path={self.path!r})"

    @property
    def _active(self) -> PluginProvider:
        if self._provider is None:
            raise RuntimeError(f"plugin {self.name!r} is closed")
        return self._provider

    def get_giids(self) -> list[str]:
        return self._active.get_giids()

    def read(self, giid: str) -> str:
        return self._active.read(giid)

    def write(self, giid: str, value: str) -> bool:
        return self._active.write(giid, value)

    def close(self) -> None:
        """Release the provider; the plugin cannot be used afterwards."""
        self._provider = None

    def __enter__(self) -> "Plugin":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class PluginManager:
    """Loads plugins and keeps the giid-to-plugin registry."""

    def __init__(self, factory: ProviderFactory = create_provider) -> None:
        self._factory = factory
        self._registry: dict[str, Plugin] = {}

    def load(self, name: str, path: str) -> Plugin:
        """Load a plugin; raises PluginLoadError on failure."""
        return Plugin(name, path, self._factory)

    def unload(self, name: str, path: str) -> None:
        """Remove every giid the named plugin declares from the registry."""
        with self.load(name, path) as plugin:
            for giid in plugin.get_giids():
                self._registry.pop(giid, None)

    def store(self, giid: str, plugin: Plugin) -> None:
        self._registry[giid] = plugin

    def lookup(self, giid: str) -> Plugin | None:
        """Return the plugin serving ``giid``, or None."""
        return self._registry.get(giid)


_instance: PluginManager | None = None
_instance_lock = threading.Lock()


def get_plugin_manager() -> PluginManager:
    """Return the process-wide plugin manager."""
    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = PluginManager()
        return _instance