"""Terminal value types, POSIX terminal I/O, key-input translation and diagnostic reports."""

__version__ = "0.1.0"