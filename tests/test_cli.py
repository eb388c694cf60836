import pytest

from feel.cli import AppHandler, Application, RetCode


class _Handler(AppHandler):
    def __init__(self, accepts, code=RetCode.INIT_OK):
        self.accepts = accepts
        self.code = code
        self.started_with = None

    def matches(self, argv):
        return self.accepts(argv)

    def start(self, argv):
        self.started_with = list(argv)
        return self.code


def test_app_handler_is_abstract():
    with pytest.raises(TypeError):
        AppHandler()


def test_first_matching_handler_is_chosen():
    first = _Handler(lambda argv: len(argv) == 2)
    second = _Handler(lambda argv: True)
    app = Application(["prog", "-x"])
    app.use_handler(first)
    app.use_handler(second)
    assert app.handler() is first


def test_fallback_used_when_nothing_matches():
    never = _Handler(lambda argv: False)
    fallback = _Handler(lambda argv: False, RetCode.INIT_ERROR)
    app = Application(["prog", "--unknown"])
    app.use_handler(never)
    app.use_fallback_handler(fallback)
    assert app.handler() is fallback
    assert app.fallback_handler is fallback
    assert app.handlers == [never, fallback]
    assert app.start() is RetCode.INIT_ERROR


def test_start_passes_arguments_and_returns_code():
    handler = _Handler(lambda argv: argv[1:] == ["-v"], RetCode.INIT_OK)
    app = Application(["prog", "-v"])
    app.use_handler(handler)
    assert app.start() is RetCode.INIT_OK
    assert handler.started_with == ["prog", "-v"]


def test_none_handlers_are_ignored():
    app = Application(["prog"])
    app.use_handler(None)
    app.use_fallback_handler(None)
    assert app.handlers == []
    assert app.fallback_handler is None


def test_start_without_any_handler_raises():
    app = Application(["prog"])
    with pytest.raises(RuntimeError):
        app.start()


def test_argv_is_copied():
    original = ["prog", "a"]
    app = Application(original)
    original.append("b")
    assert app.argv == ["prog", "a"]


def test_start_returns_exit_status_of_handler():
    ok_app = Application(["prog"])
    ok_app.use_handler(_Handler(lambda argv: True, RetCode.INIT_OK))
    error_app = Application(["prog"])
    error_app.use_handler(_Handler(lambda argv: True, RetCode.INIT_ERROR))
    assert int(ok_app.start()) == 0
    assert int(error_app.start()) != 0
    assert RetCode(0) is RetCode.INIT_OK