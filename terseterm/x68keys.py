"""Console helpers for the X68000 Human68k platform.

Covers screen-size lookup, cursor-report unpacking, keyboard scancode
translation and chunked console output.
"""

from __future__ import annotations

from collections.abc import Iterator

from terseterm.types import (
    CursorPosition,
    ErrorCode,
    Event,
    EventType,
    Modifier,
    Size,
    TerseError,
)

# Bytes that cannot be decoded as a single Shift_JIS character map to this.
REPLACEMENT_CHARACTER = 0xFFFD

# The console output buffer size; each chunk leaves room for a terminator.
WRITE_BUFFER_SIZE = 512

_HALFWIDTH_KATAKANA_BASE = 0xFF61

_MODIFIER_SCANCODES = frozenset(
    {
        0x70,  # SHIFT
        0x71,  # CTRL
        0x72,  # OPT.1 (Alt)
        0x73,  # OPT.2 (AltGr)
        0x5A,  # kana
        0x5B,  # romaji
        0x5C,  # code input
        0x5D,  # CAPS
        0x5E,  # INS
        0x5F,  # hiragana
        0x60,  # zenkaku
    }
)


def _build_scancode_table() -> tuple[EventType, ...]:
    # Entries not listed stay CHAR, matching a zero-initialised table.
    table = [EventType.CHAR] * 256
    special = {
        0x01: EventType.RAW_SEQUENCE,  # ESC
        0x0F: EventType.BACKSPACE,
        0x10: EventType.TAB,
        0x1D: EventType.ENTER,  # CR
        0x36: EventType.HOME,
        0x37: EventType.DELETE,
        0x38: EventType.PAGE_UP,  # ROLL UP
        0x39: EventType.PAGE_DOWN,  # ROLL DOWN
        0x3A: EventType.RAW_SEQUENCE,  # UNDO
        0x3B: EventType.ARROW_LEFT,
        0x3C: EventType.ARROW_UP,
        0x3D: EventType.ARROW_RIGHT,
        0x3E: EventType.ARROW_DOWN,
        0x3F: EventType.HOME,  # CLR
        0x4E: EventType.ENTER,  # keypad ENTER
    }
    special.update({code: EventType.RAW_SEQUENCE for code in range(0x52, 0x63)})
    special.update({code: EventType.FUNCTION for code in range(0x63, 0x6D)})
    special.update({code: EventType.RAW_SEQUENCE for code in range(0x70, 0x75)})
    for code, event_type in special.items():
        table[code] = event_type
    return tuple(table)


_SCANCODE_EVENT_TYPES = _build_scancode_table()


def size_for_modes(width_mode: int, fnkmod: int) -> Size:
    """Screen size for a console width mode and function-key display mode."""
    if width_mode in (2, 3, 4, 5):
        cols = 64
    else:
        # Modes 0 and 1, and any unknown mode, are 96 columns wide.
        cols = 96
    # Only function-key mode 3 leaves all 32 rows to text.
    rows = 32 if fnkmod == 3 else 31
    return Size(rows=rows, cols=cols, known=True)


def parse_locate_result(result: int) -> CursorPosition:
    """Unpack a cursor-locate result: column in the high half, row in the low."""
    if result == -1:
        raise TerseError(ErrorCode.IO, "cursor position unavailable")
    col = (result >> 16) & 0xFFFF
    row = result & 0xFFFF
    return CursorPosition(row=row, col=col, known=True)


def is_modifier_key(scancode: int) -> bool:
    """True for keys that only change modifier or input-mode state."""
    return scancode in _MODIFIER_SCANCODES


def scancode_to_event_type(scancode: int) -> EventType:
    """The event type a scancode produces; out-of-range codes are raw."""
    if 0 <= scancode < 256:
        return _SCANCODE_EVENT_TYPES[scancode]
    return EventType.RAW_SEQUENCE


def scancode_to_function_number(scancode: int) -> int:
    """1 to 10 for F1 to F10, otherwise 0."""
    if 0x63 <= scancode <= 0x6C:
        return scancode - 0x63 + 1
    return 0


def convert_modifiers(iocs_mods: int) -> Modifier:
    """Map shift-sense bits to modifiers; OPT.2 has no counterpart."""
    mods = Modifier(0)
    if iocs_mods & 0x01:
        mods |= Modifier.SHIFT
    if iocs_mods & 0x02:
        mods |= Modifier.CTRL
    if iocs_mods & 0x04:
        mods |= Modifier.ALT
    return mods


def translate_special_key(keysns: int, iocs_mods: int) -> Event | None:
    """Turn a non-character key sense value into an event.

    Returns None for modifier keys, which produce no event of their own.
    Raises ValueError if the key is an ordinary character key.
    """
    scancode = (keysns >> 8) & 0x7F
    event_type = scancode_to_event_type(scancode)
    if event_type == EventType.CHAR:
        raise ValueError(f"scancode 0x{scancode:02x} is a character key")
    if is_modifier_key(scancode):
        return None
    mods = convert_modifiers(iocs_mods)
    if event_type == EventType.FUNCTION:
        return Event.function(scancode_to_function_number(scancode), mods)
    if event_type == EventType.RAW_SEQUENCE:
        return Event.raw_sequence(bytes([(keysns >> 8) & 0xFF]))
    return Event.key(event_type, mods)


def decode_single_byte(byte: int, iocs_mods: int) -> tuple[int, Modifier]:
    """Decode a one-byte Shift_JIS key into a scalar and its modifiers.

    Control bytes 0x01-0x1A become the letters a-z with Ctrl held.
    """
    if not 0 <= byte <= 0xFF:
        raise ValueError(f"byte must be in 0..255, got {byte}")
    mods = convert_modifiers(iocs_mods)
    if 0x01 <= byte <= 0x1A:
        return ord("a") + (byte - 1), mods | Modifier.CTRL
    if byte <= 0x7F:
        return byte, mods
    if 0xA1 <= byte <= 0xDF:
        return _HALFWIDTH_KATAKANA_BASE + (byte - 0xA1), mods
    return REPLACEMENT_CHARACTER, mods


def chunk_output(data: bytes, chunk_size: int = WRITE_BUFFER_SIZE) -> Iterator[bytes]:
    """Split output into pieces that fit a buffer of ``chunk_size`` with a terminator."""
    if chunk_size < 2:
        raise ValueError("chunk_size must leave room for at least one byte")
    payload = bytes(data)
    step = chunk_size - 1
    for start in range(0, len(payload), step):
        yield payload[start:start + step]