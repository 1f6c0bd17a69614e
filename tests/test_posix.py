import fcntl
import os
import struct
import termios
import threading

import pytest

from terseterm import posix
from terseterm.types import CursorPosition, ErrorCode, Size, TerseError


@pytest.fixture
def pipe():
    r, w = os.pipe()
    yield r, w
    for fd in (r, w):
        try:
            os.close(fd)
        except OSError:
            pass


@pytest.fixture
def pty_pair():
    master, slave = os.openpty()
    yield master, slave
    for fd in (master, slave):
        try:
            os.close(fd)
        except OSError:
            pass


def test_default_options_use_standard_streams():
    options = posix.default_options()
    assert (options.input_fd, options.output_fd) == (0, 1)
    assert options.codec_name == "UTF-8"


def test_read_bytes_with_timeout_returns_available_data(pipe):
    r, w = pipe
    os.write(w, b"abc")
    assert posix.read_bytes_with_timeout(r, 10, 50) == b"abc"


def test_read_bytes_with_timeout_respects_capacity(pipe):
    r, w = pipe
    os.write(w, b"abcdef")
    assert posix.read_bytes_with_timeout(r, 2, 50) == b"ab"
    assert posix.read_bytes_with_timeout(r, 10, 50) == b"cdef"


def test_read_bytes_with_timeout_zero_timeout_reads_nothing(pipe):
    r, w = pipe
    os.write(w, b"abc")
    assert posix.read_bytes_with_timeout(r, 10, 0) == b""


def test_read_bytes_with_timeout_empty_pipe(pipe):
    r, _ = pipe
    assert posix.read_bytes_with_timeout(r, 10, 30) == b""


def test_query_fd_size_negative_fd_is_unknown():
    assert posix.query_fd_size(-1) == Size()


def test_query_fd_size_pipe_is_unknown(pipe):
    _, w = pipe
    assert posix.query_fd_size(w).known is False


def test_query_fd_size_reads_pty_window(pty_pair):
    master, slave = pty_pair
    fcntl.ioctl(master, termios.TIOCSWINSZ, struct.pack("HHHH", 24, 80, 0, 0))
    assert posix.query_fd_size(slave) == Size(rows=24, cols=80, known=True)


def test_probe_secondary_da_skips_non_tty(pipe):
    r, w = pipe
    assert posix.probe_secondary_da(r, w, 64) == b""
    assert posix.read_bytes_with_timeout(r, 16, 20) == b""


def test_probe_secondary_da_zero_capacity_and_bad_fds(pty_pair):
    _, slave = pty_pair
    assert posix.probe_secondary_da(slave, slave, 0) == b""
    assert posix.probe_secondary_da(-1, slave, 64) == b""


def test_parse_cursor_report_converts_to_zero_based():
    assert posix.parse_cursor_report(b"\x1b[5;10R") == CursorPosition(4, 9, True)
    assert posix.parse_cursor_report(b"\x1b[1;1R") == CursorPosition(0, 0, True)


@pytest.mark.parametrize(
    "reply",
    [b"\x1b[5R", b"xx[5;10R", b"\x1b[5:10R", b"\x1b[5;10Rx", b""],
)
def test_parse_cursor_report_rejects_malformed(reply):
    with pytest.raises(TerseError) as info:
        posix.parse_cursor_report(reply)
    assert info.value.code == ErrorCode.PROTOCOL


def test_query_cursor_position_invalid_handle():
    with pytest.raises(TerseError) as info:
        posix.query_cursor_position(-1, 1)
    assert info.value.code == ErrorCode.INVALID_HANDLE


def test_query_cursor_position_not_tty(pipe):
    r, w = pipe
    with pytest.raises(TerseError) as info:
        posix.query_cursor_position(r, w)
    assert info.value.code == ErrorCode.NOT_TTY


def test_query_cursor_position_with_responding_terminal(pty_pair):
    master, slave = pty_pair
    seen = bytearray()

    def respond():
        while b"\x1b[6n" not in seen:
            chunk = os.read(master, 64)
            if not chunk:
                return
            seen.extend(chunk)
        os.write(master, b"\x1b[3;7R")

    responder = threading.Thread(target=respond, daemon=True)
    responder.start()
    position = posix.query_cursor_position(slave, slave)
    responder.join(timeout=1)
    assert b"\x1b[6n" in seen
    assert position == CursorPosition(2, 6, True)


def test_query_cursor_position_without_reply_is_protocol_error(pty_pair):
    _, slave = pty_pair
    with pytest.raises(TerseError) as info:
        posix.query_cursor_position(slave, slave)
    assert info.value.code == ErrorCode.PROTOCOL


def test_wait_for_input(pipe):
    r, w = pipe
    assert posix.wait_for_input(r, 0) is False
    os.write(w, b"x")
    assert posix.wait_for_input(r, 50) is True


def test_read_byte_and_eof(pipe):
    r, w = pipe
    os.write(w, b"Zq")
    assert posix.read_byte(r) == b"Z"
    assert posix.read_byte(r) == b"q"
    os.close(w)
    assert posix.read_byte(r) == b""


@pytest.mark.parametrize(
    "rest",
    [b"OP", b"[11~", b"[[A", b"[24;4~"],
)
def test_drain_escape_sequence_reads_complete_sequence(pipe, rest):
    r, w = pipe
    os.write(w, rest)
    assert posix.drain_escape_sequence(r, b"\x1b", 32) == b"\x1b" + rest


def test_drain_escape_sequence_stops_at_final_byte(pipe):
    r, w = pipe
    os.write(w, b"[Axyz")
    assert posix.drain_escape_sequence(r, b"\x1b", 32) == b"\x1b[A"
    assert posix.read_byte(r) == b"x"


def test_drain_escape_sequence_respects_max_length(pipe):
    r, w = pipe
    os.write(w, b"[1234567~")
    assert posix.drain_escape_sequence(r, b"\x1b", 4) == b"\x1b[12"


def test_drain_escape_sequence_lone_escape(pipe):
    r, _ = pipe
    assert posix.drain_escape_sequence(r, b"\x1b", 32) == b"\x1b"


def test_write_bytes_round_trip(pipe):
    r, w = pipe
    posix.write_bytes(w, b"\x1b[?25h")
    assert posix.read_bytes_with_timeout(r, 64, 50) == b"\x1b[?25h"


def test_write_bytes_rejects_none(pipe):
    _, w = pipe
    with pytest.raises(TerseError) as info:
        posix.write_bytes(w, None)
    assert info.value.code == ErrorCode.INVALID_ARGUMENT


def test_write_bytes_bad_fd_is_io_error(pipe):
    _, w = pipe
    os.close(w)
    with pytest.raises(TerseError) as info:
        posix.write_bytes(w, b"data")
    assert info.value.code == ErrorCode.IO


def test_write_bytes_full_nonblocking_pipe_would_block(pipe):
    _, w = pipe
    os.set_blocking(w, False)
    with pytest.raises(TerseError) as info:
        posix.write_bytes(w, b"x" * (1 << 22))
    assert info.value.code == ErrorCode.WOULD_BLOCK