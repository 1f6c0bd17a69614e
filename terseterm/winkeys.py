"""Console input translation for the Windows console.

Converts key event records and window rectangles into terminal events and
positions. The record types here mirror what the console input API reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag

from terseterm.types import CursorPosition, Event, EventType, Modifier

_ESCAPE = 0x1B


class VirtualKey(IntEnum):
    """Virtual-key codes for the keys that get their own event type."""

    BACK = 0x08
    TAB = 0x09
    RETURN = 0x0D
    ESCAPE = 0x1B
    PRIOR = 0x21
    NEXT = 0x22
    END = 0x23
    HOME = 0x24
    LEFT = 0x25
    UP = 0x26
    RIGHT = 0x27
    DOWN = 0x28
    INSERT = 0x2D
    DELETE = 0x2E
    F1 = 0x70
    F2 = 0x71
    F3 = 0x72
    F4 = 0x73
    F5 = 0x74
    F6 = 0x75
    F7 = 0x76
    F8 = 0x77
    F9 = 0x78
    F10 = 0x79
    F11 = 0x7A
    F12 = 0x7B


class ControlKeyState(IntFlag):
    """Modifier and lock state bits reported with a key event."""

    RIGHT_ALT_PRESSED = 0x0001
    LEFT_ALT_PRESSED = 0x0002
    RIGHT_CTRL_PRESSED = 0x0004
    LEFT_CTRL_PRESSED = 0x0008
    SHIFT_PRESSED = 0x0010
    NUMLOCK_ON = 0x0020
    SCROLLLOCK_ON = 0x0040
    CAPSLOCK_ON = 0x0080
    ENHANCED_KEY = 0x0100


@dataclass(frozen=True)
class KeyEventRecord:
    """A console key event: press state, virtual key, UTF-16 unit and modifiers."""

    key_down: bool
    virtual_key_code: int = 0
    unicode_char: int = 0
    control_key_state: int = 0


@dataclass(frozen=True)
class WindowRect:
    """The visible console window, inclusive on every edge."""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def rows(self) -> int:
        return self.bottom - self.top + 1

    @property
    def cols(self) -> int:
        return self.right - self.left + 1


_KEY_EVENTS = {
    VirtualKey.RETURN: EventType.ENTER,
    VirtualKey.BACK: EventType.BACKSPACE,
    VirtualKey.TAB: EventType.TAB,
    VirtualKey.UP: EventType.ARROW_UP,
    VirtualKey.DOWN: EventType.ARROW_DOWN,
    VirtualKey.LEFT: EventType.ARROW_LEFT,
    VirtualKey.RIGHT: EventType.ARROW_RIGHT,
    VirtualKey.HOME: EventType.HOME,
    VirtualKey.END: EventType.END,
    VirtualKey.PRIOR: EventType.PAGE_UP,
    VirtualKey.NEXT: EventType.PAGE_DOWN,
    VirtualKey.INSERT: EventType.INSERT,
    VirtualKey.DELETE: EventType.DELETE,
}

_WIDE_RANGES = (
    (0x1100, 0x115F),  # Hangul Jamo
    (0x2E80, 0x9FFF),  # CJK
    (0xAC00, 0xD7AF),  # Hangul syllables
    (0xF900, 0xFAFF),  # CJK compatibility ideographs
    (0xFE10, 0xFE19),  # vertical forms
    (0xFE30, 0xFE6F),  # CJK compatibility forms
    (0xFF00, 0xFF60),  # fullwidth forms
    (0xFFE0, 0xFFE6),  # fullwidth signs
)


def convert_control_key_state(state: int) -> Modifier:
    """Map control key state bits to Shift, Ctrl and Alt modifiers."""
    mods = Modifier(0)
    if state & ControlKeyState.SHIFT_PRESSED:
        mods |= Modifier.SHIFT
    if state & (ControlKeyState.LEFT_CTRL_PRESSED | ControlKeyState.RIGHT_CTRL_PRESSED):
        mods |= Modifier.CTRL
    if state & (ControlKeyState.LEFT_ALT_PRESSED | ControlKeyState.RIGHT_ALT_PRESSED):
        mods |= Modifier.ALT
    return mods


def heuristic_char_width(wch: int) -> int:
    """A rough display width: 2 for CJK, Hangul and fullwidth ranges, else 1."""
    if wch < 0x80:
        return 1
    if any(low <= wch <= high for low, high in _WIDE_RANGES):
        return 2
    return 1


def convert_key_event(record: KeyEventRecord) -> Event | None:
    """Turn a key record into an event, or None when it produces none.

    Key releases and keys with no character (modifiers pressed alone) give None.
    Control characters 0x01-0x1A come back as the letters A-Z with Ctrl held.
    """
    if not record.key_down:
        return None

    mods = convert_control_key_state(record.control_key_state)
    vk = record.virtual_key_code

    if vk in _KEY_EVENTS:
        return Event.key(_KEY_EVENTS[vk], mods)
    if vk == VirtualKey.ESCAPE:
        return Event.character(_ESCAPE, 0, mods)
    if VirtualKey.F1 <= vk <= VirtualKey.F12:
        return Event.function(vk - VirtualKey.F1 + 1, mods)

    wch = record.unicode_char
    if wch == 0:
        return None
    width = heuristic_char_width(wch)
    if 0x01 <= wch <= 0x1A:
        return Event.character(ord("A") + (wch - 1), width, mods | Modifier.CTRL)
    return Event.character(wch, width, mods)


def resize_event(rect: WindowRect) -> Event:
    """A resize event for the given visible window."""
    return Event.resize(rect.rows, rect.cols)


def cursor_relative_to_window(cursor_x: int, cursor_y: int, rect: WindowRect) -> CursorPosition:
    """Convert a buffer-absolute cursor position to a 0-based window position."""
    return CursorPosition(row=cursor_y - rect.top, col=cursor_x - rect.left, known=True)