import pytest

from feel.logbuffer import (
    DEFAULT_CONTEXT_WIDTH,
    DEFAULT_MESSAGE_LENGTH,
    LogBuffer,
    color_code,
    remove_newlines,
    tail,
)
from feel.logdefs import LogLevel, LogOption

STAMP = "Thu Jan  1 00:00:00 1970"


def make_buffer(**kwargs):
    return LogBuffer(now=lambda: STAMP, **kwargs)


def test_defaults_come_from_source_constants():
    buf = make_buffer()
    assert buf.max_message_length == DEFAULT_MESSAGE_LENGTH == 256
    assert buf.context_width == DEFAULT_CONTEXT_WIDTH == 64


def test_plain_message_layout():
    buf = make_buffer()
    buf.set_context_width(8)
    buf.set_message("hello %s", "world")
    out = buf.plain_message(LogLevel.INFO, LogOption.FILE, "ctx")
    assert out == "Thu Jan  1 00:00:00 1970 |      ctx | INFO | hello world"


def test_plain_message_at_uses_file_function_line():
    buf = make_buffer()
    buf.set_message("boom")
    out = buf.plain_message_at(LogLevel.ERROR, LogOption.FILE, "main.py", "run", 42)
    assert "main.py:run:42 | ERRO | boom" in out
    assert out.startswith(STAMP)


def test_color_wraps_message():
    buf = make_buffer()
    buf.set_message("msg")
    out = buf.plain_message(LogLevel.INFO, LogOption.FILE | LogOption.USE_COLOR, "c")
    assert out.startswith("\x1b[32m")
    assert out.endswith("msg\x1b[0m")


def test_exec_time_included_when_requested():
    ticks = iter([100.0, 105.5, 105.5])
    buf = make_buffer(timer=lambda: next(ticks))
    buf.set_message("m")
    out = buf.plain_message(LogLevel.DEBUG, LogOption.INCLUDE_EXEC_TIME, "c")
    assert out.startswith(STAMP + " | 5 | ")


def test_exec_time_absent_by_default():
    buf = make_buffer()
    buf.set_message("m")
    out = buf.plain_message(LogLevel.DEBUG, LogOption.CONSOLE, "c")
    assert out.startswith(STAMP + " | ")
    assert out.count(" | ") == 3


def test_context_keeps_tail_when_too_wide():
    buf = make_buffer()
    buf.set_context_width(4)
    buf.set_message("m")
    out = buf.plain_message(LogLevel.WARNING, LogOption.FILE, "averylongcontext")
    assert " | text | WARN | m" in out


def test_message_is_cut_to_maximum_length():
    buf = make_buffer()
    buf.set_max_message_length(10)
    text = "abcdefghijklmnop"
    buf.set_message(text)
    result = buf.json_message()
    assert len(result) < 10
    assert text.startswith(result)


def test_rendered_line_respects_maximum_length():
    buf = make_buffer()
    buf.set_max_message_length(30)
    buf.set_message("x" * 100)
    out = buf.plain_message(LogLevel.INFO, LogOption.FILE, "c")
    assert len(out) < 30


def test_newlines_removed_from_output():
    buf = make_buffer()
    buf.set_message("line1\nline2\r\n")
    out = buf.plain_message(LogLevel.INFO, LogOption.FILE, "c")
    assert "\n" not in out and "\r" not in out
    assert out.endswith("line1line2")


def test_json_message_is_raw_text():
    buf = make_buffer()
    buf.set_message("value=%d", 7)
    assert buf.json_message() == "value=7"


def test_message_without_args_is_kept_literally():
    buf = make_buffer()
    buf.set_message("100% done")
    assert buf.json_message() == "100% done"


def test_set_max_message_length_clears_message():
    buf = make_buffer()
    buf.set_message("something")
    buf.set_max_message_length(64)
    assert buf.json_message() == ""


@pytest.mark.parametrize("width", [-1, 256])
def test_context_width_out_of_range(width):
    with pytest.raises(ValueError):
        make_buffer().set_context_width(width)


def test_negative_message_length_rejected():
    with pytest.raises(ValueError):
        make_buffer().set_max_message_length(-1)


def test_remove_newlines():
    assert remove_newlines("a\nb\r\nc") == "abc"


def test_tail():
    assert tail("abcdef", 3) == "def"
    assert tail("ab", 5) == "ab"
    assert tail("ab", 0) == ""


@pytest.mark.parametrize(
    "level, code",
    [
        (LogLevel.DEBUG, 0),
        (LogLevel.INFO, 32),
        (LogLevel.WARNING, 93),
        (LogLevel.ERROR, 91),
        (LogLevel.CRITICAL, 31),
        (LogLevel.INCIDENT, 0),
    ],
)
def test_color_code(level, code):
    assert color_code(level) == code