"""
Line formatting and argument conventions.

Line format (one per log call, always newline-terminated by the router):
    "INFO : 2026/02/12 14:32:05.123456 service.py:42: Security matched"

Argument conventions, applied before the router sees the text:
  - sprint:   concatenate, space only between two non-string operands
  - sprintln: space between every pair, trailing newline
  - sprintf:  printf-style % substitution
"""

from abc import ABC, abstractmethod
from typing import Any

from crosslog.records import Message, Severity


class LogFormatter(ABC):
    """Base formatter. Transforms Message → string (without newline)."""

    @abstractmethod
    def format(self, message: Message) -> str: ...


class LineFormatter(LogFormatter):
    """
    Severity label, date, microsecond time, short call site, text.

    Labels are padded to the width of the longest one so columns line up.
    """

    WIDTH = max(len(s.label) for s in Severity)

    def __init__(self, utc: bool = False):
        self.utc = utc

    def format(self, message: Message) -> str:
        ts = message.timestamp if self.utc else message.timestamp.astimezone()
        stamp = ts.strftime("%Y/%m/%d %H:%M:%S.%f")
        label = message.severity.label.ljust(self.WIDTH)
        return f"{label}: {stamp} {message.locator}: {message.text}"


def _is_string(v: Any) -> bool:
    return isinstance(v, (str, bytes))


def _text(v: Any) -> str:
    if isinstance(v, bytes):
        return v.decode("utf-8", errors="replace")
    return str(v)


def sprint(*args: Any) -> str:
    """Concatenate args, adding a space only between adjacent non-strings."""
    parts: list[str] = []
    for i, arg in enumerate(args):
        if i > 0 and not _is_string(arg) and not _is_string(args[i - 1]):
            parts.append(" ")
        parts.append(_text(arg))
    return "".join(parts)


def sprintln(*args: Any) -> str:
    """Join args with single spaces and append a newline."""
    return " ".join(_text(a) for a in args) + "\n"


def sprintf(fmt: str, *args: Any) -> str:
    """
    printf-style formatting. The format is always interpreted, so "%%"
    renders as "%" with or without args.

    Never raises: a format that does not match its arguments renders
    with a %!(BADFORMAT ...) marker so the log line is not lost.
    """
    values: Any = args[0] if len(args) == 1 and isinstance(args[0], dict) else args
    try:
        return fmt % values
    except (TypeError, ValueError, KeyError) as e:
        marker = f"{fmt} %!(BADFORMAT {e})"
        return f"{marker} {sprint(*args)}" if args else marker
