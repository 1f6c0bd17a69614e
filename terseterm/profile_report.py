"""Human-readable reports of a terminal's detected profile and capabilities."""

from __future__ import annotations

import os
from collections.abc import Mapping

from terseterm.types import (
    Capabilities,
    ColorSupport,
    ImageSupport,
    MouseMode,
    NotificationSupport,
    Profile,
    Size,
    StyleEffect,
)

_PROFILE_NAMES = {
    Profile.P0: "P0 (Basic output)",
    Profile.P1: "P1 (Colors and styles)",
    Profile.P2: "P2 (Advanced I/O)",
    Profile.P3: "P3 (Extended features)",
    Profile.AUTO: "AUTO (detect)",
}

# BASIC4 has no name of its own and reports as "Unknown".
_COLOR_NAMES = {
    ColorSupport.NONE: "None",
    ColorSupport.BASIC16: "Basic 16 colors",
    ColorSupport.PALETTE256: "256-color palette",
    ColorSupport.TRUECOLOR: "TrueColor (16M colors)",
}

_MOUSE_NAMES = {
    MouseMode.NONE: "None",
    MouseMode.X10: "X10",
    MouseMode.VT200: "VT200",
    MouseMode.SGR: "SGR",
}

_IMAGE_NAMES = {
    ImageSupport.NONE: "None",
    ImageSupport.ITERM_INLINE: "iTerm2 inline",
    ImageSupport.SIXEL: "Sixel",
    ImageSupport.KITTY: "Kitty graphics",
}

_PROFILE_ARGS = {
    "P0": Profile.P0,
    "p0": Profile.P0,
    "P1": Profile.P1,
    "p1": Profile.P1,
    "P2": Profile.P2,
    "p2": Profile.P2,
    "P3": Profile.P3,
    "p3": Profile.P3,
    "AUTO": Profile.AUTO,
    "auto": Profile.AUTO,
}

_NOTIFICATION_NAMES = (
    (NotificationSupport.BELL, "Bell"),
    (NotificationSupport.VISUAL, "Visual"),
    (NotificationSupport.DESKTOP, "Desktop"),
)

_EFFECT_NAMES = (
    (StyleEffect.BOLD, "Bold"),
    (StyleEffect.FAINT, "Faint"),
    (StyleEffect.ITALIC, "Italic"),
    (StyleEffect.UNDERLINE, "Underline"),
    (StyleEffect.BLINK, "Blink"),
    (StyleEffect.INVERSE, "Inverse"),
    (StyleEffect.STRIKE, "Strike"),
)

_OPTIONAL_ENV = ("VTE_VERSION", "ITERM_SESSION_ID", "WEZTERM_EXECUTABLE", "KITTY_PID")


def _lookup(table: dict, value, fallback: str) -> str:
    try:
        return table.get(value, fallback)
    except TypeError:
        return fallback


def profile_name(profile) -> str:
    return _lookup(_PROFILE_NAMES, profile, "UNKNOWN")


def color_support_name(colors) -> str:
    return _lookup(_COLOR_NAMES, colors, "Unknown")


def mouse_mode_name(mode) -> str:
    return _lookup(_MOUSE_NAMES, mode, "Unknown")


def image_support_name(images) -> str:
    return _lookup(_IMAGE_NAMES, images, "Unknown")


def parse_profile_arg(arg: str) -> Profile:
    """Map a command-line profile word to a profile; raises ValueError otherwise."""
    try:
        return _PROFILE_ARGS[arg]
    except KeyError:
        raise ValueError(f"unknown profile {arg!r}; expected P0, P1, P2, P3 or AUTO") from None


def _field(label: str, value: str) -> str:
    return f"  {label:<30} : {value}\n"


def format_yes_no(label: str, value) -> str:
    return _field(label, "yes" if value else "no")


def _joined(flags: int, names) -> str:
    return ", ".join(name for bit, name in names if flags & bit)


def format_notification_support(notifications: int) -> str:
    value = "None" if notifications == 0 else _joined(notifications, _NOTIFICATION_NAMES)
    return _field("Notification support", value)


def format_keyboard_features(features: int) -> str:
    value = "None" if features == 0 else f"0x{int(features):x}"
    return _field("Keyboard features", value)


def format_text_effects(effects: int) -> str:
    value = "None" if effects == 0 else _joined(effects, _EFFECT_NAMES)
    return _field("Text effects", value)


def format_capabilities(caps: Capabilities) -> str:
    """The full capability report, grouped by profile tier."""
    parts = [
        "\n=== Detected Profile ===\n",
        f"Profile: {profile_name(caps.profile)}\n",
        "\n=== P0 Features (Basic output) ===\n",
        format_yes_no("Basic output", caps.has_basic_output),
        format_yes_no("Cursor visibility", caps.has_cursor_visibility),
        format_yes_no("Move absolute", caps.has_move_absolute),
        format_yes_no("Move relative", caps.has_move_relative),
        format_yes_no("Clear line", caps.has_clear_line),
        format_yes_no("Clear screen", caps.has_clear_screen),
        format_yes_no("Terminal size detection", caps.has_size),
        "\n=== P1 Features (Colors and styles) ===\n",
        _field("Color support", color_support_name(caps.colors)),
        format_yes_no("Basic SGR", caps.has_sgr_basic),
        format_yes_no("Extended SGR", caps.has_sgr_extended),
        format_yes_no("TrueColor", caps.has_truecolor),
        format_yes_no("Text styles", caps.has_text_styles),
        format_text_effects(caps.effects),
        "\n=== P2 Features (Advanced I/O) ===\n",
        _field("Mouse mode", mouse_mode_name(caps.mouse)),
        format_yes_no("Bracketed paste", caps.has_bracketed_paste),
        format_yes_no("Window title", caps.has_title),
        format_yes_no("Hyperlinks", caps.has_hyperlinks),
        format_keyboard_features(caps.keyboard_features),
        "\n=== P3 Features (Extended features) ===\n",
        format_yes_no("Cursor shape", caps.has_cursor_shape),
        format_yes_no("Clipboard write", caps.has_clipboard_write),
        _field("Image support", image_support_name(caps.images)),
        format_notification_support(caps.notifications),
    ]
    return "".join(parts)


def format_terminal_info(environ: Mapping[str, str] | None = None) -> str:
    """The terminal-identifying environment variables that are set."""
    env = os.environ if environ is None else environ
    parts = ["\n=== Terminal Environment ===\n"]
    for name in ("TERM", "TERM_PROGRAM", "COLORTERM"):
        value = env.get(name)
        parts.append(_field(name, value if value is not None else "(unset)"))
    for name in _OPTIONAL_ENV:
        value = env.get(name)
        if value is not None:
            parts.append(_field(name, value))
    return "".join(parts)


def format_terminal_size(size: Size) -> str:
    """The size section, or an empty string when the size is unknown."""
    if not size.known:
        return ""
    return f"\n=== Terminal Size ===\n  Rows: {size.rows}, Columns: {size.cols}\n"