import pytest

from feel.giid_db import PLUGIN_X, PLUGIN_Y, GiidDb, get_giid_db
from feel.logdefs import LogOption
from feel.logger import Logger
from feel.plugins import PluginLoadError, PluginManager
from feel.providers import create_provider


def _quiet_logger():
    logger = Logger()
    logger.set_log_option(LogOption.OFF)
    return logger


def _db(factory=create_provider):
    return GiidDb(PluginManager(factory=factory), _quiet_logger())


def test_lookup_before_build_is_empty():
    assert _db().lookup("giid/001") is None


def test_build_maps_giids_to_plugins():
    db = _db()
    db.build_db()
    assert db.lookup("giid/001").name == PLUGIN_X
    assert db.lookup("giid/002") is db.lookup("giid/001")
    assert db.lookup("giid/003").name == PLUGIN_Y
    assert db.lookup("giid/004") is db.lookup("giid/003")
    assert db.lookup("giid/005") is None


def test_write_then_read_through_db():
    db = _db()
    db.build_db()
    assert db.lookup("giid/002").write("giid/002", "7") is True
    assert db.lookup("giid/001").read("giid/001") == "7"


def test_float_plugin_through_db():
    db = _db()
    db.build_db()
    assert db.lookup("giid/004").write("giid/004", "0.5") is True
    assert float(db.lookup("giid/003").read("giid/003")) == 0.5


def test_build_fails_when_x_missing():
    def factory(name):
        raise ValueError(f"no {name}")

    db = _db(factory)
    with pytest.raises(PluginLoadError, match=PLUGIN_X):
        db.build_db()
    assert db.lookup("giid/001") is None


def test_build_fails_when_y_missing_and_stores_nothing():
    def factory(name):
        if name == PLUGIN_Y:
            raise ValueError("missing Y")
        return create_provider(name)

    db = _db(factory)
    with pytest.raises(PluginLoadError, match="missing Y"):
        db.build_db()
    assert db.lookup("giid/001") is None
    assert db.lookup("giid/003") is None


def test_get_giid_db_is_shared():
    first = get_giid_db()
    first.build_db()
    second = get_giid_db()
    assert second is first
    assert second.lookup("giid/001").name == PLUGIN_X
    assert second.lookup("giid/003").name == PLUGIN_Y