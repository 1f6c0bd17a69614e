"""Core value types shared across the terminal layer: enums, flags and records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag

EVENT_RAW_MAX = 32


class Profile(IntEnum):
    """Feature profile tiers; AUTO asks for detection."""

    AUTO = -1
    P0 = 0
    P1 = 1
    P2 = 2
    P3 = 3


class ClearMode(IntEnum):
    AFTER = 0
    BEFORE = 1
    ALL = 2


class RenderMode(IntEnum):
    IMMEDIATE = 0
    BUFFERED = 1


class ColorSupport(IntEnum):
    NONE = 0
    BASIC4 = 1
    BASIC16 = 2
    PALETTE256 = 3
    TRUECOLOR = 4


class ColorKind(IntEnum):
    DEFAULT = 0
    BASIC16 = 1
    PALETTE256 = 2
    TRUECOLOR = 3


class BasicColor(IntEnum):
    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7


class MouseMode(IntEnum):
    NONE = 0
    X10 = 1
    VT200 = 2
    SGR = 3


class CursorShape(IntEnum):
    DEFAULT = 0
    BLOCK = 1
    UNDERLINE = 2
    BAR = 3


class ImageSupport(IntEnum):
    NONE = 0
    ITERM_INLINE = 1
    SIXEL = 2
    KITTY = 3


class ImageFormat(IntEnum):
    AUTO = 0
    PNG = 1
    JPEG = 2
    SIXEL = 3
    KITTY = 4


class ImageFlag(IntFlag):
    INLINE = 1 << 0
    ALLOW_DEGRADE = 1 << 1


@dataclass
class ImageRequest:
    """An image to display; width and height are optional pixel hints (0 = unset)."""

    data: bytes
    name: str | None = None
    format: ImageFormat = ImageFormat.AUTO
    width: int = 0
    height: int = 0
    flags: ImageFlag = ImageFlag(0)

    @property
    def size(self) -> int:
        return len(self.data)


class NotificationKind(IntEnum):
    BELL = 0
    VISUAL = 1
    DESKTOP = 2


class NotificationSupport(IntFlag):
    BELL = 1 << 0
    VISUAL = 1 << 1
    DESKTOP = 1 << 2


def _check_byte(name: str, value: int) -> None:
    if not 0 <= value <= 255:
        raise ValueError(f"{name} must be in 0..255, got {value}")


@dataclass(frozen=True)
class Color:
    """A terminal colour: default, one of the 16 basic colours, a palette index or RGB."""

    kind: ColorKind = ColorKind.DEFAULT
    index: int = 0
    r: int = 0
    g: int = 0
    b: int = 0
    basic: BasicColor = BasicColor.BLACK
    bright: bool = False

    def __post_init__(self) -> None:
        for name in ("index", "r", "g", "b"):
            _check_byte(name, getattr(self, name))

    @classmethod
    def default(cls) -> Color:
        return cls()

    @classmethod
    def basic(cls, color, bright=False) -> Color:
        return cls(kind=ColorKind.BASIC16, basic=BasicColor(color), bright=bool(bright))

    @classmethod
    def palette(cls, index) -> Color:
        return cls(kind=ColorKind.PALETTE256, index=index)

    @classmethod
    def truecolor(cls, r, g, b) -> Color:
        return cls(kind=ColorKind.TRUECOLOR, r=r, g=g, b=b)


class StyleEffect(IntFlag):
    BOLD = 1 << 0
    FAINT = 1 << 1
    ITALIC = 1 << 2
    UNDERLINE = 1 << 3
    INVERSE = 1 << 4
    BLINK = 1 << 5
    STRIKE = 1 << 6
    ALL_SUPPORTED = BOLD | FAINT | ITALIC | UNDERLINE | INVERSE | BLINK | STRIKE


@dataclass(frozen=True)
class Style:
    foreground: Color = field(default_factory=Color.default)
    background: Color = field(default_factory=Color.default)
    effects: StyleEffect = StyleEffect(0)

    @classmethod
    def default(cls) -> Style:
        return cls()


@dataclass
class Cell:
    """One screen cell of the buffered renderer: a grapheme and its attributes."""

    utf8_char: str = ""
    display_width: int = 1
    is_continuation: bool = False
    fg: Color = field(default_factory=Color.default)
    bg: Color = field(default_factory=Color.default)
    effects: StyleEffect = StyleEffect(0)

    def __post_init__(self) -> None:
        if len(self.utf8_char.encode("utf-8")) > 4:
            raise ValueError("a cell holds at most 4 bytes of UTF-8")

    @property
    def char_len(self) -> int:
        return len(self.utf8_char.encode("utf-8"))

    @property
    def is_empty(self) -> bool:
        return self.char_len == 0


class ResetScope(IntEnum):
    ALL = 0
    COLOR_ONLY = 1
    EFFECTS_ONLY = 2


class KeyboardFeature(IntFlag):
    NONE = 0
    MODIFY_OTHER_KEYS = 1 << 0
    KITTY_PROTOCOL = 1 << 1


@dataclass
class Capabilities:
    """What the terminal is known to support."""

    profile: Profile = Profile.P0
    has_basic_output: bool = False
    has_cursor_visibility: bool = False
    has_move_absolute: bool = False
    has_move_relative: bool = False
    has_clear_line: bool = False
    has_clear_screen: bool = False
    has_size: bool = False
    has_sgr_basic: bool = False
    has_sgr_extended: bool = False
    has_truecolor: bool = False
    has_text_styles: bool = False
    mouse: MouseMode = MouseMode.NONE
    has_bracketed_paste: bool = False
    has_title: bool = False
    has_hyperlinks: bool = False
    has_cursor_shape: bool = False
    colors: ColorSupport = ColorSupport.NONE
    effects: StyleEffect = StyleEffect(0)
    has_clipboard_write: bool = False
    images: ImageSupport = ImageSupport.NONE
    notifications: NotificationSupport = NotificationSupport(0)
    keyboard_features: KeyboardFeature = KeyboardFeature.NONE
    has_alt_screen: bool = False


class CapabilityDisable(IntFlag):
    BASIC_OUTPUT = 1 << 0
    CURSOR_VISIBILITY = 1 << 1
    MOVE_ABSOLUTE = 1 << 2
    MOVE_RELATIVE = 1 << 3
    CLEAR_LINE = 1 << 4
    CLEAR_SCREEN = 1 << 5
    SIZE = 1 << 6
    SGR_BASIC = 1 << 7
    SGR_EXTENDED = 1 << 8
    TRUECOLOR = 1 << 9
    TEXT_STYLES = 1 << 10
    MOUSE = 1 << 11
    BRACKETED_PASTE = 1 << 12
    TITLE = 1 << 13
    HYPERLINK = 1 << 14
    CURSOR_SHAPE = 1 << 15
    CLIPBOARD_WRITE = 1 << 16
    IMAGE_INLINE = 1 << 17
    NOTIFICATION_BELL = 1 << 18
    NOTIFICATION_VISUAL = 1 << 19
    NOTIFICATION_DESKTOP = 1 << 20


class CapabilityEnable(IntFlag):
    SGR_BASIC = 1 << 0
    TEXT_STYLES = 1 << 1
    SGR_EXTENDED = 1 << 2
    TRUECOLOR = 1 << 3
    MOUSE = 1 << 4
    BRACKETED_PASTE = 1 << 5
    TITLE = 1 << 6
    HYPERLINK = 1 << 7
    CURSOR_SHAPE = 1 << 8
    CLIPBOARD_WRITE = 1 << 9
    IMAGE_INLINE = 1 << 10
    NOTIFICATION_BELL = 1 << 11
    NOTIFICATION_VISUAL = 1 << 12
    NOTIFICATION_DESKTOP = 1 << 13


class Feature(IntFlag):
    """Requestable features; colour tiers are satisfied by any higher tier."""

    BASIC_OUTPUT = 1 << 0
    CURSOR_VISIBILITY = 1 << 1
    MOVE_ABSOLUTE = 1 << 2
    MOVE_RELATIVE = 1 << 3
    CLEAR_LINE = 1 << 4
    CLEAR_SCREEN = 1 << 5
    SIZE = 1 << 6
    COLOR_BASIC4 = 1 << 7
    COLOR_BASIC16 = 1 << 8
    COLOR_PALETTE256 = 1 << 9
    COLOR_TRUECOLOR = 1 << 10
    TEXT_STYLES = 1 << 11
    MOUSE = 1 << 12
    BRACKETED_PASTE = 1 << 13
    TITLE = 1 << 14
    HYPERLINK = 1 << 15
    CURSOR_SHAPE = 1 << 16
    CLIPBOARD_WRITE = 1 << 17
    IMAGE_INLINE = 1 << 18
    NOTIFICATION_BELL = 1 << 19
    NOTIFICATION_VISUAL = 1 << 20
    NOTIFICATION_DESKTOP = 1 << 21


@dataclass
class Options:
    """Settings for opening a terminal handle."""

    input_fd: int = 0
    output_fd: int = 1
    codec_name: str = "UTF-8"
    disabled_caps: CapabilityDisable = CapabilityDisable(0)
    enabled_caps: CapabilityEnable = CapabilityEnable(0)
    east_asian_ambiguous_as_wide: bool = False
    render_mode: RenderMode = RenderMode.IMMEDIATE
    use_alt_screen: bool = False
    buffer_origin_row: int = 0
    buffer_origin_col: int = 0
    buffer_rows: int = 0
    buffer_cols: int = 0


@dataclass(frozen=True)
class Size:
    rows: int = 0
    cols: int = 0
    known: bool = False


@dataclass(frozen=True)
class CursorPosition:
    row: int = 0
    col: int = 0
    known: bool = False


@dataclass
class State:
    """Tracked cursor and style state; the defaults are the cleared state."""

    cursor_known: bool = False
    cursor_visible: bool = True
    cursor_row: int = 0
    cursor_col: int = 0
    style_known: bool = False
    style: Style = field(default_factory=Style.default)


class MouseButton(IntEnum):
    NONE = 0
    LEFT = 1
    MIDDLE = 2
    RIGHT = 3
    SCROLL_UP = 4
    SCROLL_DOWN = 5


class ErrorCode(IntEnum):
    OK = 0
    NO_EVENT = 1
    INVALID_ARGUMENT = 2
    UNSUPPORTED = 3
    OVERFLOW = 4
    INVALID_HANDLE = 100
    NOT_IMPLEMENTED = 101
    NOT_SUPPORTED = 102
    STACK_OVERFLOW = 103
    STACK_UNDERFLOW = 104
    IO = 200
    WOULD_BLOCK = 201
    NOT_TTY = 202
    PROTOCOL = 300
    OUT_OF_MEMORY = 400
    INVALID_ENCODING = 500
    BUFFER_TOO_SMALL = 501


class TerseError(Exception):
    """A terminal operation failed; ``code`` says why."""

    def __init__(self, code, message=None):
        self.code = ErrorCode(code)
        super().__init__(message or self.code.name.lower().replace("_", " "))


class Modifier(IntFlag):
    SHIFT = 1 << 0
    CTRL = 1 << 1
    ALT = 1 << 2
    META = 1 << 3


class EventType(IntEnum):
    CHAR = 0
    ENTER = 1
    BACKSPACE = 2
    TAB = 3
    ARROW_UP = 4
    ARROW_DOWN = 5
    ARROW_LEFT = 6
    ARROW_RIGHT = 7
    HOME = 8
    END = 9
    PAGE_UP = 10
    PAGE_DOWN = 11
    INSERT = 12
    DELETE = 13
    FUNCTION = 14
    MOUSE_DOWN = 15
    MOUSE_UP = 16
    MOUSE_MOVE = 17
    MOUSE_SCROLL = 18
    PASTE_BEGIN = 19
    PASTE_END = 20
    RESIZE = 21
    RAW_SEQUENCE = 22


_KEY_EVENT_TYPES = frozenset(
    {
        EventType.ENTER,
        EventType.BACKSPACE,
        EventType.TAB,
        EventType.ARROW_UP,
        EventType.ARROW_DOWN,
        EventType.ARROW_LEFT,
        EventType.ARROW_RIGHT,
        EventType.HOME,
        EventType.END,
        EventType.PAGE_UP,
        EventType.PAGE_DOWN,
        EventType.INSERT,
        EventType.DELETE,
        EventType.PASTE_BEGIN,
        EventType.PASTE_END,
    }
)


@dataclass(frozen=True)
class Event:
    """An input event; which fields are meaningful depends on ``type``."""

    type: EventType
    mods: Modifier = Modifier(0)
    scalar: int = 0
    width: int = 0
    number: int = 0
    rows: int = 0
    cols: int = 0
    button: MouseButton = MouseButton.NONE
    row: int = 0
    col: int = 0
    data: bytes = b""

    @classmethod
    def character(cls, scalar, width, mods=0) -> Event:
        return cls(EventType.CHAR, mods=Modifier(mods), scalar=scalar, width=width)

    @classmethod
    def key(cls, type, mods=0) -> Event:
        event_type = EventType(type)
        if event_type not in _KEY_EVENT_TYPES:
            raise ValueError(f"{event_type.name} is not a key event type")
        return cls(event_type, mods=Modifier(mods))

    @classmethod
    def function(cls, number, mods=0) -> Event:
        return cls(EventType.FUNCTION, mods=Modifier(mods), number=number)

    @classmethod
    def resize(cls, rows, cols) -> Event:
        return cls(EventType.RESIZE, rows=rows, cols=cols)

    @classmethod
    def raw_sequence(cls, data) -> Event:
        """A raw byte sequence, truncated to the raw event capacity."""
        return cls(EventType.RAW_SEQUENCE, data=bytes(data)[:EVENT_RAW_MAX])


class CallType(IntEnum):
    WRITE_TEXT = 0
    MOVE_TO = 1
    CLEAR_SCREEN = 2
    CLEAR_LINE = 3
    SHOW_CURSOR = 4
    SET_STYLE = 5
    ENABLE_MOUSE = 6
    DISABLE_MOUSE = 7
    SET_TITLE = 8
    FLUSH = 9


@dataclass(frozen=True)
class CallRecord:
    """One recorded API call; fields unrelated to ``type`` keep their defaults."""

    type: CallType
    text: str = ""
    row: int = 0
    col: int = 0
    clear_mode: ClearMode = ClearMode.AFTER
    visible: bool = False
    style: Style = field(default_factory=Style.default)
    mouse_mode: MouseMode = MouseMode.NONE
    title: str = ""