import pytest

from feel.cli import RetCode
from feel.feature_app import (
    FeatureHelpHandler,
    FeatureMainHandler,
    FeatureVersionHandler,
    main,
)
from feel.providers import PluginXProvider, PluginYProvider


class Router:
    def __init__(self):
        self.x = PluginXProvider()
        self.y = PluginYProvider()

    def _target(self, giid):
        return self.x if giid in ("giid/001", "giid/002") else self.y

    def read(self, giid):
        return self._target(giid).read(giid)

    def write(self, giid, value):
        return self._target(giid).write(giid, value)


def _handler(router, rounds, sleeps=None):
    return FeatureMainHandler(
        reader=router,
        writer=router,
        rounds=rounds,
        pause=0.5,
        sleep=(sleeps.append if sleeps is not None else (lambda _: None)),
    )


def test_help_and_version_matching():
    assert FeatureHelpHandler().matches(["feel_feature", "--help"]) is True
    assert FeatureHelpHandler().matches(["feel_feature"]) is False
    assert FeatureVersionHandler().matches(["feel_feature", "-v"]) is True
    assert FeatureVersionHandler().matches(["feel_feature", "-v", "x"]) is False


def test_help_prints_usage(capsys):
    assert FeatureHelpHandler().start(["feel_feature", "-h"]) is RetCode.INIT_OK
    out = capsys.readouterr().out
    assert out.startswith("Feel Feature\nUsage:\n")
    assert "[-f/--feature <name>]" in out


def test_version_prints_version(capsys):
    assert FeatureVersionHandler().start(["feel_feature", "-v"]) is RetCode.INIT_OK
    assert "Version 0.1.0" in capsys.readouterr().out


@pytest.mark.parametrize("flag", ["-f", "--feature"])
def test_main_matches_feature_flag_and_keeps_name(flag):
    handler = FeatureMainHandler()
    assert handler.matches(["feel_feature", flag, "xy"]) is True
    assert handler.feature_name == "xy"


@pytest.mark.parametrize(
    "argv",
    [["feel_feature", "-f", ""], ["feel_feature", "-x", "x"], ["feel_feature", "-f"]],
)
def test_main_rejects_bad_arguments(argv):
    handler = FeatureMainHandler()
    assert handler.matches(argv) is False
    assert handler.feature_name == ""


def test_missing_feature_is_an_error(capsys):
    handler = FeatureMainHandler()
    assert handler.matches(["feel_feature"]) is True
    assert handler.start(["feel_feature"]) is RetCode.INIT_ERROR
    assert "== ERROR: Missing feature!" in capsys.readouterr().err


def test_feature_x_increments_each_round(capsys):
    router = Router()
    sleeps = []
    handler = _handler(router, 3, sleeps)
    assert handler.matches(["feel_feature", "-f", "X"])
    assert handler.start([]) is RetCode.INIT_OK
    assert router.x.value == 3
    assert router.y.value == 0.0
    assert sleeps == [0.5] * 3
    out = capsys.readouterr().out
    assert "== INFO: starting feature X" in out
    assert "== INFO: Feel Feature shutdowns" in out


def test_feature_y_increments_each_round():
    router = Router()
    handler = _handler(router, 2)
    assert handler.matches(["feel_feature", "--feature", "y"])
    assert handler.start([]) is RetCode.INIT_OK
    assert router.y.value == pytest.approx(2.0)
    assert router.x.value == 0


def test_feature_xy_runs_both():
    router = Router()
    handler = _handler(router, 4)
    assert handler.matches(["feel_feature", "-f", "xy"])
    assert handler.start([]) is RetCode.INIT_OK
    assert router.x.value == 4
    assert router.y.value == pytest.approx(4.0)


def test_runtime_error_is_reported(capsys):
    class Broken:
        def read(self, giid):
            raise RuntimeError("down")

    handler = FeatureMainHandler(reader=Broken(), rounds=1, sleep=lambda _: None)
    assert handler.matches(["feel_feature", "-f", "x"])
    assert handler.start([]) is RetCode.INIT_ERROR
    assert "caught runtime error" in capsys.readouterr().out


def test_main_entry(capsys):
    assert main(["feel_feature", "-h"]) == 0
    assert "Usage:" in capsys.readouterr().out
    assert main(["feel_feature", "--feature", "z"]) == 1
    assert main(["feel_feature"]) == 1
    assert main(["feel_feature", "a", "b", "c", "d"]) == 0