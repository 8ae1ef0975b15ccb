"""
Severity and message records.

Three fixed severities. The ordinal carries no filtering meaning;
it only selects the label and the destination sink set.
"""

import os
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class Severity(Enum):
    """Log severities. Value is the display label."""
    INFO = "INFO"
    ERROR = "ERROR"
    FATAL = "FATAL"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "Severity":
        """Resolve severity from string name, case-insensitive."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(
                f"Unknown severity '{name}'. "
                f"Valid severities: {', '.join(m.name for m in cls)}"
            )


@dataclass(frozen=True)
class Message:
    """
    Immutable record of one log call. Created by Logger.output(),
    rendered by a formatter, written to a sink.
    """
    timestamp: datetime
    severity: Severity
    text: str
    locator: str = "???:0"

    @classmethod
    def create(cls, severity: Severity, text: str, depth: int = 1) -> "Message":
        """
        Factory with auto-timestamp and call-site capture.

        depth counts frames above the caller of create():
        depth=1 records the function that called create().
        """
        return cls(
            timestamp=datetime.now(timezone.utc),
            severity=severity,
            text=text,
            locator=call_site(depth),
        )


def call_site(depth: int) -> str:
    """Short 'file.py:line' locator, `depth` frames above the caller."""
    try:
        frame = sys._getframe(depth + 1)
    except ValueError:
        return "???:0"
    return f"{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}"
