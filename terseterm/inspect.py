"""Print environment hints, tty status and device-attribute replies for a terminal."""

from __future__ import annotations

import errno
import os
import select
import sys
from collections.abc import Mapping
from typing import TextIO

try:
    import termios
except ImportError:  # pragma: no cover - non-POSIX hosts
    termios = None

_SLICE_MS = 50
_PROBE_TIMEOUT_MS = 500
_PROBE_CAPACITY = 128

ENV_HINTS = (
    "TERM",
    "TERM_PROGRAM",
    "TERM_PROGRAM_VERSION",
    "LC_TERMINAL",
    "LC_TERMINAL_VERSION",
    "COLORTERM",
    "TERMINFO",
    "TERMINFO_DIRS",
    "ITERM_PROFILE",
    "ITERM_SESSION_ID",
    "WEZTERM_EXECUTABLE",
    "KITTY_PID",
    "WT_SESSION",
    "VSCODE_INJECTION",
)

_PROBES = (
    (b"\x1b[c", "Primary DA response", "write primary DA"),
    (b"\x1b[>0c", "Secondary DA response", "write secondary DA"),
    (b"\x1b[?1004$p", "Focus tracking query response", "write focus inquiry"),
)


def format_env_line(name: str, environ: Mapping[str, str] | None = None) -> str:
    """One line naming an environment variable and its value, or ``(unset)``."""
    env = os.environ if environ is None else environ
    value = env.get(name)
    return f"{name:<24} : {value if value is not None else '(unset)'}\n"


def format_header(title: str) -> str:
    return f"\n=== {title} ===\n"


def format_bytes(label: str, data: bytes) -> str:
    """Show a reply with printable ASCII as-is and other bytes as ``\\xNN``."""
    if not data:
        return f"{label}: (no response)\n"
    shown = "".join(chr(b) if 0x20 <= b <= 0x7E else f"\\x{b:02X}" for b in data)
    return f"{label}: {shown}\r\n"


def _readable(fd: int, timeout_ms: int) -> bool:
    readable, _, _ = select.select([fd], [], [], max(timeout_ms, 0) / 1000.0)
    return bool(readable)


def read_bytes_with_timeout(fd: int, capacity: int, timeout_ms: int) -> bytes:
    """Collect up to ``capacity`` bytes, polling in 50 ms steps until the time runs out."""
    collected = bytearray()
    remaining = timeout_ms
    while remaining >= 0 and len(collected) < capacity:
        wait = min(remaining, _SLICE_MS)
        try:
            ready = _readable(fd, wait)
        except InterruptedError:
            continue
        except OSError as exc:
            print(f"poll: {exc.strerror}", file=sys.stderr)
            break
        if not ready:
            remaining -= _SLICE_MS
            continue
        try:
            chunk = os.read(fd, capacity - len(collected))
        except InterruptedError:
            continue
        except OSError as exc:
            if exc.errno == errno.EINTR:
                continue
            print(f"read: {exc.strerror}", file=sys.stderr)
            break
        if not chunk:
            break
        collected += chunk
        remaining -= _SLICE_MS
    return bytes(collected)


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


def _is_tty(fd: int) -> bool:
    try:
        return os.isatty(fd)
    except OSError:
        return False


def probe_device_attributes(input_fd: int, output_fd: int, out: TextIO) -> None:
    """Send the DA and focus queries and write each reply to ``out``."""
    if termios is None:
        out.write("Device attribute probing is not supported on this platform.\n")
        return
    if not _is_tty(input_fd) or not _is_tty(output_fd):
        out.write("stdin/stdout are not TTYs; skipping DA probe.\n")
        return
    try:
        original = termios.tcgetattr(input_fd)
    except (termios.error, OSError) as exc:
        print(f"tcgetattr: {exc}", file=sys.stderr)
        return
    try:
        termios.tcsetattr(input_fd, termios.TCSANOW, _raw_attributes(original))
    except (termios.error, OSError) as exc:
        print(f"tcsetattr: {exc}", file=sys.stderr)
        return
    try:
        for request, label, action in _PROBES:
            try:
                os.write(output_fd, request)
            except OSError as exc:
                print(f"{action}: {exc.strerror}", file=sys.stderr)
                continue
            out.flush()
            reply = read_bytes_with_timeout(input_fd, _PROBE_CAPACITY, _PROBE_TIMEOUT_MS)
            out.write(format_bytes(label, reply))
    finally:
        try:
            termios.tcsetattr(input_fd, termios.TCSANOW, original)
        except (termios.error, OSError) as exc:
            print(f"restore termios: {exc}", file=sys.stderr)


def main(argv=None) -> int:
    """Print environment hints, tty status and device-attribute probe replies."""
    out = sys.stdout
    out.write(format_header("Environment Hints"))
    for name in ENV_HINTS:
        out.write(format_env_line(name))

    out.write(format_header("TTY Status"))
    out.write(f"stdin isatty : {'yes' if _is_tty(0) else 'no'}\n")
    out.write(f"stdout isatty: {'yes' if _is_tty(1) else 'no'}\n")

    out.write(format_header("Device Attribute Probes"))
    out.flush()
    probe_device_attributes(0, 1, out)
    out.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())