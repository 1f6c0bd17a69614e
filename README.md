# terseterm

Building blocks for programs that work with a text terminal directly:

- **`terseterm.types`** holds the shared vocabulary:
  - profiles (`Profile`)
  - colour and style values (`Color`, `Style`, `StyleEffect`)
  - capability records and flag sets (`Capabilities`, `Feature`, `CapabilityEnable`, `CapabilityDisable`)
  - input events (`Event`, `EventType`, `Modifier`, `MouseButton`)
  - screen cells (`Cell`)
  - the `TerseError` exception, which carries an `ErrorCode`
- **`terseterm.posix`** does low-level terminal I/O on POSIX file descriptors:
  - query the window size (`query_fd_size`)
  - ask for the cursor position and parse the reply (`query_cursor_position`, `parse_cursor_report`)
  - probe secondary device attributes (`probe_secondary_da`)
  - wait for input with a timeout (`wait_for_input`)
  - read and write bytes (`read_byte`, `read_bytes_with_timeout`, `write_bytes`)
  - collect the rest of an escape sequence (`drain_escape_sequence`)
- **`terseterm.x68keys`** covers X68000 Human68k console data. It translates keyboard scancodes and shift-sense bits into `Event` values, maps screen modes to sizes, unpacks cursor-locate results and splits console output into chunks.
- **`terseterm.winkeys`** covers Windows console data. It translates key event records (`KeyEventRecord`) and window rectangles (`WindowRect`) into `Event` values and cursor positions.
- **`terseterm.inspect`** and **`terseterm.profile_report`** produce diagnostic text about the terminal environment and about a set of capabilities.

The translation modules are pure functions over plain values. They do not call any platform API, so they run anywhere.

The package has no dependencies outside the standard library.

## Installation

```
pip install terseterm
```

To run the test suite, install the `test` extra and run pytest:

```
pip install "terseterm[test]"
pytest
```

## Inspecting your terminal

```
terse-inspect-terminal
```

This command prints three things:

- the environment variables that terminals use to identify themselves, such as `TERM`, `TERM_PROGRAM`, `COLORTERM`, `KITTY_PID` and `WT_SESSION`
- whether stdin and stdout are ttys
- the replies to three probes, when both stdin and stdout are ttys

The probes are a primary device-attributes request, a secondary device-attributes request and a focus-tracking query. The command switches stdin to raw mode while it waits for the replies, then restores it. Control bytes in the replies are shown as `\xNN`.

## Library use

Colours and styles are immutable values:

```python
from terseterm.types import BasicColor, Color, Style, StyleEffect

style = Style(
    foreground=Color.basic(BasicColor.RED, False),
    background=Color.truecolor(255, 135, 95),
    effects=StyleEffect.BOLD | StyleEffect.UNDERLINE,
)
```

Terminal I/O on POSIX:

```python
import sys

from terseterm.posix import parse_cursor_report, query_cursor_position, read_byte, wait_for_input

fd = sys.stdin.fileno()
if wait_for_input(fd, 1000):      # True when input arrived within 1000 ms
    byte = read_byte(fd)          # b"" at end of input

pos = query_cursor_position(fd, sys.stdout.fileno())
print(pos.row, pos.col)           # 0-based

parse_cursor_report(b"\x1b[5;10R")  # CursorPosition(row=4, col=9, known=True)
```

`query_cursor_position` puts the input descriptor into raw mode for the duration of the query and restores it afterwards.

Failures raise `TerseError`. Its `code` attribute holds an `ErrorCode` that tells the cases apart. For example, the code is `NOT_TTY` when a descriptor is not a terminal and `PROTOCOL` when a reply is malformed.

Translating platform key data:

```python
from terseterm.winkeys import KeyEventRecord, VirtualKey, convert_key_event
from terseterm.x68keys import size_for_modes, translate_special_key

convert_key_event(KeyEventRecord(key_down=True, virtual_key_code=VirtualKey.F5))
# Event(type=EventType.FUNCTION, number=5, ...)

size_for_modes(0, 3)              # Size(rows=32, cols=96, known=True)
translate_special_key(0x6300, 0)  # F1
```

Capability reports:

```python
from terseterm.profile_report import format_capabilities, format_terminal_info
from terseterm.types import Capabilities, Profile

print(format_capabilities(Capabilities(profile=Profile.P1, has_sgr_basic=True)))
print(format_terminal_info())
```

## What this package does not do

terseterm provides types, low-level I/O primitives, translation functions and reports. It has no terminal handle object. That means it does not:

- detect a terminal's profile or capabilities: `Capabilities` is a record you fill in yourself
- emit SGR, cursor-movement or clear sequences for you
- keep a screen buffer
- decode escape sequences typed at a terminal into `Event` values
- offer a general-purpose context manager for putting a terminal into raw mode

There is no command that prints a capability report. `terseterm.profile_report` only formats one from a `Capabilities` value that you supply.