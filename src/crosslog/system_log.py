"""
Platform system log backends.

setup(name) returns an (info, error) pair of sinks bound to the native
facility: syslog on POSIX (one connection per channel), the Event Log on
Windows. Any other platform raises PlatformUnsupportedError.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import SysLogHandler
from typing import Optional

from crosslog.exceptions import PlatformUnsupportedError
from crosslog.sinks import Sink

SyslogAddress = str | tuple[str, int]

_SYSLOG_SOCKETS = ("/dev/log", "/var/run/syslog")


class _StrictSysLogHandler(SysLogHandler):
    """SysLogHandler that lets send failures reach the caller."""

    def handleError(self, record: logging.LogRecord) -> None:
        raise


class SyslogSink(Sink):
    """
    One syslog priority channel with its own connection.

    Each channel carries its own "name[pid]: " ident, so loggers with
    different names never share or overwrite each other's tag.
    """

    def __init__(
        self,
        ident: str,
        level: int,
        address: Optional[SyslogAddress] = None,
        facility: int = SysLogHandler.LOG_USER,
    ):
        self.ident = ident
        self.level = level
        self.facility = facility
        self.address = address or default_address()
        self._handler: Optional[SysLogHandler] = _StrictSysLogHandler(
            address=self.address, facility=facility
        )
        self._handler.ident = f"{ident}[{os.getpid()}]: "

    @property
    def priority(self) -> int:
        """Encoded <PRI> value: facility * 8 + severity."""
        name = SysLogHandler.priority_map.get(logging.getLevelName(self.level), "warning")
        return (self.facility << 3) | SysLogHandler.priority_names[name]

    def write(self, text: str) -> None:
        if self._handler is None:
            raise ValueError(f"write to closed syslog channel {self.ident}")
        record = logging.LogRecord(
            self.ident, self.level, "", 0, text.rstrip("\n"), None, None
        )
        self._handler.emit(record)

    def close(self) -> None:
        if self._handler is not None:
            self._handler.close()
            self._handler = None

    def __repr__(self) -> str:
        return f"SyslogSink({self.ident}, level={logging.getLevelName(self.level)})"


class EventLogSink(Sink):
    """One Windows Event Log channel (information or error)."""

    def __init__(self, source: str, event_type: int):
        import win32evtlogutil

        self._util = win32evtlogutil
        self.source = source
        self.event_type = event_type
        self._closed = False
        try:
            win32evtlogutil.AddSourceToRegistry(source)
        except Exception:
            # Registering needs admin rights; an existing source still works.
            pass

    def write(self, text: str) -> None:
        if self._closed:
            raise ValueError(f"write to closed event log source {self.source}")
        self._util.ReportEvent(
            self.source, 1, eventType=self.event_type, strings=[text.rstrip("\n")]
        )

    def close(self) -> None:
        self._closed = True

    def __repr__(self) -> str:
        return f"EventLogSink({self.source}, type={self.event_type})"


def default_address() -> SyslogAddress:
    """Local syslog socket if present, else the UDP syslog port on localhost."""
    for path in _SYSLOG_SOCKETS:
        if os.path.exists(path):
            return path
    return ("localhost", 514)


def setup(name: str, address: Optional[SyslogAddress] = None) -> tuple[Sink, Sink]:
    """
    Open the native system log for `name`. Returns (info, error).

    `address` overrides the syslog destination (socket path or host/port);
    it is ignored on Windows.
    """
    if sys.platform == "win32":
        return _setup_windows(name)
    if os.name == "posix":
        return _setup_posix(name, address)
    raise PlatformUnsupportedError("system logging not implemented")


def _setup_posix(name: str, address: Optional[SyslogAddress]) -> tuple[Sink, Sink]:
    try:
        info = SyslogSink(name, logging.INFO, address)
    except OSError as e:
        raise PlatformUnsupportedError(f"system logging unavailable: {e}") from e
    try:
        error = SyslogSink(name, logging.ERROR, info.address)
    except OSError as e:
        info.close()
        raise PlatformUnsupportedError(f"system logging unavailable: {e}") from e
    return info, error


def _setup_windows(name: str) -> tuple[Sink, Sink]:
    try:
        import win32evtlog
    except ImportError as e:
        raise PlatformUnsupportedError(
            "system logging not implemented: pywin32 is not installed"
        ) from e
    return (
        EventLogSink(name, win32evtlog.EVENTLOG_INFORMATION_TYPE),
        EventLogSink(name, win32evtlog.EVENTLOG_ERROR_TYPE),
    )
