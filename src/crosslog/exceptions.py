"""
Exception hierarchy.

Configuration errors are raised to the caller. Sink write errors are
raised by sinks and swallowed by the logger. Fatal calls never raise;
they terminate the process.
"""

from __future__ import annotations

from typing import Any


class CrosslogError(Exception):
    """Base class for all crosslog errors."""


class ConfigurationError(CrosslogError, ValueError):
    """Invalid construction arguments (e.g. empty logger name)."""


class PlatformUnsupportedError(CrosslogError):
    """System logging requested on a platform without a backend."""


class SinkWriteError(CrosslogError):
    """A sink failed to accept or flush a line."""

    def __init__(self, sink: Any, cause: BaseException):
        super().__init__(f"write to {sink!r} failed: {cause}")
        self.sink = sink
        self.cause = cause


class AlertError(CrosslogError):
    """Webhook alert could not be delivered."""
