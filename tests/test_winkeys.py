import pytest

from terseterm.types import EventType, Modifier
from terseterm.winkeys import (
    ControlKeyState,
    KeyEventRecord,
    VirtualKey,
    WindowRect,
    convert_control_key_state,
    convert_key_event,
    cursor_relative_to_window,
    heuristic_char_width,
    resize_event,
)

FUNCTION_KEYS = [
    VirtualKey.F1, VirtualKey.F2, VirtualKey.F3, VirtualKey.F4,
    VirtualKey.F5, VirtualKey.F6, VirtualKey.F7, VirtualKey.F8,
    VirtualKey.F9, VirtualKey.F10, VirtualKey.F11, VirtualKey.F12,
]


def test_no_modifiers():
    assert convert_control_key_state(0) == Modifier(0)


@pytest.mark.parametrize(
    "state, expected",
    [
        (ControlKeyState.SHIFT_PRESSED, Modifier.SHIFT),
        (ControlKeyState.LEFT_CTRL_PRESSED, Modifier.CTRL),
        (ControlKeyState.RIGHT_CTRL_PRESSED, Modifier.CTRL),
        (ControlKeyState.LEFT_ALT_PRESSED, Modifier.ALT),
        (ControlKeyState.RIGHT_ALT_PRESSED, Modifier.ALT),
    ],
)
def test_single_modifiers(state, expected):
    assert convert_control_key_state(state) == expected


def test_lock_keys_are_not_modifiers():
    state = ControlKeyState.CAPSLOCK_ON | ControlKeyState.NUMLOCK_ON | ControlKeyState.ENHANCED_KEY
    assert convert_control_key_state(state) == Modifier(0)


def test_combined_modifiers():
    state = ControlKeyState.SHIFT_PRESSED | ControlKeyState.LEFT_CTRL_PRESSED | ControlKeyState.RIGHT_ALT_PRESSED
    assert convert_control_key_state(state) == Modifier.SHIFT | Modifier.CTRL | Modifier.ALT


@pytest.mark.parametrize("wch", [ord("A"), ord(" "), 0x7F])
def test_ascii_is_narrow(wch):
    assert heuristic_char_width(wch) == 1


@pytest.mark.parametrize("wch", [0x3042, 0x4E2D, 0xAC00, 0xFF21, 0x1100, 0xFFE6])
def test_wide_ranges(wch):
    assert heuristic_char_width(wch) == 2


@pytest.mark.parametrize("wch", [0x00B1, 0x0391, 0x115F + 1, 0xFFE6 + 1])
def test_other_characters_are_narrow(wch):
    assert heuristic_char_width(wch) == 1


def test_key_up_produces_nothing():
    record = KeyEventRecord(key_down=False, virtual_key_code=VirtualKey.RETURN)
    assert convert_key_event(record) is None


def test_modifier_alone_produces_nothing():
    record = KeyEventRecord(key_down=True, virtual_key_code=0x10,
                            control_key_state=ControlKeyState.SHIFT_PRESSED)
    assert convert_key_event(record) is None


@pytest.mark.parametrize(
    "vk, event_type",
    [
        (VirtualKey.RETURN, EventType.ENTER),
        (VirtualKey.BACK, EventType.BACKSPACE),
        (VirtualKey.TAB, EventType.TAB),
        (VirtualKey.UP, EventType.ARROW_UP),
        (VirtualKey.DOWN, EventType.ARROW_DOWN),
        (VirtualKey.LEFT, EventType.ARROW_LEFT),
        (VirtualKey.RIGHT, EventType.ARROW_RIGHT),
        (VirtualKey.HOME, EventType.HOME),
        (VirtualKey.END, EventType.END),
        (VirtualKey.PRIOR, EventType.PAGE_UP),
        (VirtualKey.NEXT, EventType.PAGE_DOWN),
        (VirtualKey.INSERT, EventType.INSERT),
        (VirtualKey.DELETE, EventType.DELETE),
    ],
)
def test_special_keys(vk, event_type):
    record = KeyEventRecord(key_down=True, virtual_key_code=vk,
                            control_key_state=ControlKeyState.LEFT_CTRL_PRESSED)
    event = convert_key_event(record)
    assert event.type == event_type
    assert event.mods == Modifier.CTRL


def test_escape_is_a_zero_width_character():
    record = KeyEventRecord(key_down=True, virtual_key_code=VirtualKey.ESCAPE, unicode_char=0x1B)
    event = convert_key_event(record)
    assert event.type == EventType.CHAR
    assert event.scalar == 0x1B
    assert event.width == 0


@pytest.mark.parametrize("number, vk", list(enumerate(FUNCTION_KEYS, start=1)))
def test_function_keys(number, vk):
    record = KeyEventRecord(key_down=True, virtual_key_code=vk,
                            control_key_state=ControlKeyState.SHIFT_PRESSED)
    event = convert_key_event(record)
    assert event.type == EventType.FUNCTION
    assert event.number == number
    assert event.mods == Modifier.SHIFT


def test_plain_character():
    record = KeyEventRecord(key_down=True, virtual_key_code=0x41, unicode_char=ord("a"))
    event = convert_key_event(record)
    assert event.type == EventType.CHAR
    assert event.scalar == ord("a")
    assert event.width == 1
    assert event.mods == Modifier(0)


def test_wide_character():
    record = KeyEventRecord(key_down=True, unicode_char=0x3042)
    event = convert_key_event(record)
    assert event.scalar == 0x3042
    assert event.width == 2


@pytest.mark.parametrize("offset", [0, 1, 25])
def test_control_characters_become_ctrl_letters(offset):
    record = KeyEventRecord(key_down=True, unicode_char=0x01 + offset)
    event = convert_key_event(record)
    assert event.type == EventType.CHAR
    assert event.scalar == ord("A") + offset
    assert event.mods & Modifier.CTRL


def test_ctrl_letter_keeps_other_modifiers():
    record = KeyEventRecord(key_down=True, unicode_char=0x02,
                            control_key_state=ControlKeyState.SHIFT_PRESSED)
    event = convert_key_event(record)
    assert event.scalar == ord("B")
    assert event.mods == Modifier.SHIFT | Modifier.CTRL


def test_resize_event_uses_inclusive_window():
    rect = WindowRect(left=10, top=5, right=10 + 79, bottom=5 + 23)
    event = resize_event(rect)
    assert event.type == EventType.RESIZE
    assert event.cols == 80
    assert event.rows == 24


def test_window_rect_single_cell():
    rect = WindowRect(left=3, top=3, right=3, bottom=3)
    assert (rect.rows, rect.cols) == (1, 1)


def test_cursor_relative_to_window():
    rect = WindowRect(left=4, top=100, right=83, bottom=124)
    pos = cursor_relative_to_window(4 + 3, 100 + 7, rect)
    assert pos.known
    assert (pos.row, pos.col) == (7, 3)


def test_cursor_at_window_origin():
    rect = WindowRect(left=2, top=50, right=81, bottom=74)
    pos = cursor_relative_to_window(rect.left, rect.top, rect)
    assert (pos.row, pos.col) == (0, 0)