import io
import os
import time

import pytest

from terseterm import inspect


@pytest.fixture
def pipe():
    read_fd, write_fd = os.pipe()
    yield read_fd, write_fd
    for fd in (read_fd, write_fd):
        try:
            os.close(fd)
        except OSError:
            pass


def test_env_line_shows_value():
    line = inspect.format_env_line("TERM", {"TERM": "xterm"})
    assert line.endswith(" : xterm\n")
    assert line.index(" : ") == 24
    assert line.startswith("TERM ")


def test_env_line_unset():
    line = inspect.format_env_line("KITTY_PID", {})
    assert line.endswith(" : (unset)\n")


def test_env_line_uses_os_environ(monkeypatch):
    monkeypatch.setenv("COLORTERM", "truecolor")
    assert inspect.format_env_line("COLORTERM").endswith(": truecolor\n")


def test_header_format():
    assert inspect.format_header("TTY Status") == "\n=== TTY Status ===\n"


def test_bytes_no_response():
    assert inspect.format_bytes("Primary DA response", b"") == "Primary DA response: (no response)\n"


def test_bytes_escapes_control_bytes():
    text = inspect.format_bytes("Secondary DA response", b"\x1b[>1;10;0c")
    assert text == "Secondary DA response: \\x1B[>1;10;0c\r\n"


def test_bytes_printable_kept():
    data = b"abc 123~"
    assert inspect.format_bytes("L", data) == "L: " + data.decode() + "\r\n"


def test_read_bytes_returns_available_data(pipe):
    read_fd, write_fd = pipe
    os.write(write_fd, b"\x1b[?62c")
    assert inspect.read_bytes_with_timeout(read_fd, 128, 100) == b"\x1b[?62c"


def test_read_bytes_respects_capacity(pipe):
    read_fd, write_fd = pipe
    os.write(write_fd, b"abcdef")
    assert inspect.read_bytes_with_timeout(read_fd, 3, 100) == b"abc"


def test_read_bytes_times_out_empty(pipe):
    read_fd, _ = pipe
    start = time.monotonic()
    assert inspect.read_bytes_with_timeout(read_fd, 16, 60) == b""
    assert time.monotonic() - start < 2.0


def test_read_bytes_stops_at_eof(pipe):
    read_fd, write_fd = pipe
    os.write(write_fd, b"xy")
    os.close(write_fd)
    assert inspect.read_bytes_with_timeout(read_fd, 16, 500) == b"xy"


def test_probe_skips_non_tty(pipe):
    read_fd, write_fd = pipe
    out = io.StringIO()
    inspect.probe_device_attributes(read_fd, write_fd, out)
    assert out.getvalue() == "stdin/stdout are not TTYs; skipping DA probe.\n"


def test_main_prints_sections(monkeypatch, capsys):
    monkeypatch.setenv("TERM", "xterm-256color")
    monkeypatch.delenv("KITTY_PID", raising=False)
    assert inspect.main([]) == 0
    text = capsys.readouterr().out
    assert "=== Environment Hints ===" in text
    assert "=== TTY Status ===" in text
    assert "=== Device Attribute Probes ===" in text
    assert inspect.format_env_line("TERM") in text
    assert "(unset)" in text