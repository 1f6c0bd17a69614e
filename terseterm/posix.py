"""POSIX terminal I/O primitives: polling, raw reads, size and cursor queries."""

from __future__ import annotations

import errno
import os
import select
import struct
from contextlib import contextmanager

from terseterm.types import CursorPosition, ErrorCode, Options, Size, TerseError

try:
    import fcntl
    import termios
except ImportError:  # pragma: no cover - non-POSIX hosts
    fcntl = None
    termios = None

_HAVE_TERMIOS = termios is not None

ESCAPE_BUFFER_SIZE = 64
_SLICE_MS = 25
_PROBE_TIMEOUT_MS = 200
_DRAIN_WAIT_MS = 10

_SECONDARY_DA_REQUEST = b"\x1b[>0c"
_CURSOR_REPORT_REQUEST = b"\x1b[6n"


def _poll(fd: int, timeout_ms: int | None) -> bool:
    """Wait until ``fd`` is readable; ``None`` waits forever."""
    if hasattr(select, "poll"):
        poller = select.poll()
        poller.register(fd, select.POLLIN)
        return bool(poller.poll(timeout_ms))
    timeout = None if timeout_ms is None else timeout_ms / 1000.0
    readable, _, _ = select.select([fd], [], [], timeout)
    return bool(readable)


def _raw_attributes(attrs: list) -> list:
    iflag, oflag, cflag, lflag, ispeed, ospeed, cc = attrs
    iflag &= ~(
        termios.IGNBRK
        | termios.BRKINT
        | termios.PARMRK
        | termios.ISTRIP
        | termios.INLCR
        | termios.IGNCR
        | termios.ICRNL
        | termios.IXON
    )
    oflag &= ~termios.OPOST
    cflag |= termios.CS8
    lflag &= ~(termios.ECHO | termios.ECHONL | termios.ICANON | termios.ISIG | termios.IEXTEN)
    cc = list(cc)
    cc[termios.VMIN] = 0
    cc[termios.VTIME] = 0
    return [iflag, oflag, cflag, lflag, ispeed, ospeed, cc]


@contextmanager
def _raw_mode(fd: int):
    """Put ``fd`` into non-blocking raw mode for the duration of the block."""
    original = termios.tcgetattr(fd)
    termios.tcsetattr(fd, termios.TCSANOW, _raw_attributes(original))
    try:
        yield
    finally:
        try:
            termios.tcsetattr(fd, termios.TCSANOW, original)
        except (termios.error, OSError):
            pass


def default_options() -> Options:
    """Options that talk to standard input and output in UTF-8."""
    if not _HAVE_TERMIOS:
        return Options(input_fd=-1, output_fd=-1, codec_name="UTF-8")
    return Options(input_fd=0, output_fd=1, codec_name="UTF-8")


def read_bytes_with_timeout(fd: int, capacity: int, timeout_ms: int) -> bytes:
    """Read up to ``capacity`` bytes within ``timeout_ms`` (negative waits forever)."""
    collected = bytearray()
    remaining = timeout_ms
    while len(collected) < capacity:
        if timeout_ms < 0:
            wait = None
        else:
            if remaining <= 0:
                break
            wait = min(_SLICE_MS, remaining)
        try:
            ready = _poll(fd, wait)
        except OSError:
            break
        if not ready:
            if timeout_ms >= 0:
                remaining -= wait
            continue
        try:
            chunk = os.read(fd, capacity - len(collected))
        except OSError:
            break
        if not chunk:
            break
        collected += chunk
        if timeout_ms >= 0:
            remaining -= wait
    return bytes(collected)


def query_fd_size(fd: int) -> Size:
    """The window size of the terminal on ``fd``, or an unknown size."""
    if fd < 0 or not _HAVE_TERMIOS:
        return Size()
    try:
        packed = fcntl.ioctl(fd, termios.TIOCGWINSZ, b"\0" * 8)
    except OSError:
        return Size()
    rows, cols, _, _ = struct.unpack("HHHH", packed)
    if rows > 0 and cols > 0:
        return Size(rows=rows, cols=cols, known=True)
    return Size()


def probe_secondary_da(input_fd: int, output_fd: int, capacity: int) -> bytes:
    """Send a Secondary Device Attributes request and return the raw reply."""
    if capacity <= 0 or input_fd < 0 or output_fd < 0 or not _HAVE_TERMIOS:
        return b""
    try:
        if not os.isatty(input_fd) or not os.isatty(output_fd):
            return b""
    except OSError:
        return b""
    try:
        with _raw_mode(input_fd):
            try:
                os.write(output_fd, _SECONDARY_DA_REQUEST)
            except OSError:
                return b""
            return read_bytes_with_timeout(input_fd, capacity, _PROBE_TIMEOUT_MS)
    except (termios.error, OSError):
        return b""


def _read_number(data: bytes, pos: int) -> tuple[int, int]:
    value = 0
    while pos < len(data) and 0x30 <= data[pos] <= 0x39:
        value = value * 10 + (data[pos] - 0x30)
        pos += 1
    return value, pos


def parse_cursor_report(data: bytes) -> CursorPosition:
    """Parse ``ESC [ row ; col R`` into a 0-based position."""
    if len(data) < 6 or data[0] != 0x1B or data[1:2] != b"[" or data[-1:] != b"R":
        raise TerseError(ErrorCode.PROTOCOL, "malformed cursor position report")
    row, pos = _read_number(data, 2)
    if pos >= len(data) or data[pos:pos + 1] != b";":
        raise TerseError(ErrorCode.PROTOCOL, "cursor report lacks a separator")
    col, pos = _read_number(data, pos + 1)
    if pos >= len(data) or data[pos:pos + 1] != b"R":
        raise TerseError(ErrorCode.PROTOCOL, "cursor report lacks a terminator")
    return CursorPosition(row=row - 1, col=col - 1, known=True)


def query_cursor_position(input_fd: int, output_fd: int) -> CursorPosition:
    """Ask the terminal for the cursor position (CSI 6 n) and parse the reply."""
    if not _HAVE_TERMIOS:
        raise TerseError(ErrorCode.NOT_IMPLEMENTED)
    if input_fd < 0 or output_fd < 0:
        raise TerseError(ErrorCode.INVALID_HANDLE)
    try:
        is_tty = os.isatty(input_fd) and os.isatty(output_fd)
    except OSError:
        is_tty = False
    if not is_tty:
        raise TerseError(ErrorCode.NOT_TTY)

    try:
        original = termios.tcgetattr(input_fd)
        termios.tcsetattr(input_fd, termios.TCSANOW, _raw_attributes(original))
    except (termios.error, OSError) as exc:
        raise TerseError(ErrorCode.IO) from exc

    def restore() -> None:
        try:
            termios.tcsetattr(input_fd, termios.TCSANOW, original)
        except (termios.error, OSError):
            pass

    try:
        os.write(output_fd, _CURSOR_REPORT_REQUEST)
    except OSError as exc:
        restore()
        raise TerseError(ErrorCode.IO) from exc

    reply = bytearray()
    remaining = _PROBE_TIMEOUT_MS
    try:
        while len(reply) < ESCAPE_BUFFER_SIZE:
            wait = max(0, min(remaining, _SLICE_MS))
            try:
                ready = _poll(input_fd, wait)
            except OSError as exc:
                raise TerseError(ErrorCode.IO) from exc
            if not ready:
                remaining -= wait
                if remaining <= 0:
                    break
                continue
            try:
                chunk = os.read(input_fd, ESCAPE_BUFFER_SIZE - len(reply))
            except OSError:
                break
            if not chunk:
                break
            reply += chunk
            remaining -= wait
            if reply.endswith(b"R"):
                break
    finally:
        restore()

    return parse_cursor_report(bytes(reply))


def wait_for_input(fd: int, timeout_ms: int) -> bool:
    """True once ``fd`` is readable, False on timeout (negative waits forever)."""
    try:
        return _poll(fd, None if timeout_ms < 0 else timeout_ms)
    except OSError as exc:
        if exc.errno in (errno.EAGAIN, errno.EWOULDBLOCK):
            raise TerseError(ErrorCode.WOULD_BLOCK) from exc
        raise TerseError(ErrorCode.IO) from exc


def read_byte(fd: int) -> bytes:
    """Read one byte; an empty result means end of input."""
    if not _HAVE_TERMIOS:
        raise TerseError(ErrorCode.UNSUPPORTED)
    return os.read(fd, 1)


def drain_escape_sequence(fd: int, first: bytes, max_length: int) -> bytes:
    """Read the rest of an escape sequence that began with ``first``."""
    sequence = bytearray(first)
    while len(sequence) < max_length:
        try:
            ready = _poll(fd, _DRAIN_WAIT_MS)
        except OSError:
            break
        if not ready:
            break
        try:
            chunk = os.read(fd, 1)
        except OSError:
            break
        if not chunk:
            break
        sequence += chunk
        if len(sequence) >= 3:
            # ESC [ [ (Linux console) needs one more byte before the final one.
            if len(sequence) == 3 and sequence[1:3] == b"[[":
                continue
            if 0x40 <= sequence[-1] <= 0x7E:
                break
    return bytes(sequence)


def write_bytes(fd: int, data: bytes) -> None:
    """Write all of ``data`` to ``fd``."""
    if data is None:
        raise TerseError(ErrorCode.INVALID_ARGUMENT)
    if not _HAVE_TERMIOS:
        raise TerseError(ErrorCode.UNSUPPORTED)
    view = memoryview(bytes(data))
    while view:
        try:
            written = os.write(fd, view)
        except OSError as exc:
            if exc.errno in (errno.EAGAIN, errno.EWOULDBLOCK):
                raise TerseError(ErrorCode.WOULD_BLOCK) from exc
            raise TerseError(ErrorCode.IO) from exc
        if written == 0:
            raise TerseError(ErrorCode.IO, "nothing written")
        view = view[written:]