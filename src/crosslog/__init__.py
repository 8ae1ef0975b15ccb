"""
crosslog: cross-platform multi-sink logging.

One call fans out to a caller-supplied sink, the process error stream,
optionally stdout (verbose) and the native system log (syslog / Event Log).

Module-level functions delegate to the default logger: the first
configure() call installs it; before that, output goes to stderr
with a warning.

Usage:
    import crosslog
    from crosslog.sinks import FileSink

    crosslog.configure("billing", verbose=False, use_system_log=True,
                       primary_sink=FileSink("logs/billing.log"))
    crosslog.info("charged", 42, "cents")
    crosslog.errorf("gateway %s: %s", name, err)
"""

from typing import Any

from crosslog.core import (
    Logger,
    LoggerRegistry,
    configure,
    exit_process,
    new_logger,
)
from crosslog.exceptions import (
    AlertError,
    ConfigurationError,
    CrosslogError,
    PlatformUnsupportedError,
    SinkWriteError,
)
from crosslog.formatters import sprint, sprintf, sprintln
from crosslog.records import Severity
from crosslog.sinks import CombinedSink, FileSink, MemorySink, Sink, StreamSink

__all__ = [
    "Logger",
    "LoggerRegistry",
    "Severity",
    "configure",
    "new_logger",
    "exit_process",
    "Sink",
    "StreamSink",
    "FileSink",
    "MemorySink",
    "CombinedSink",
    "CrosslogError",
    "ConfigurationError",
    "PlatformUnsupportedError",
    "SinkWriteError",
    "AlertError",
    "info",
    "infoln",
    "infof",
    "error",
    "errorln",
    "errorf",
    "fatal",
    "fatalln",
    "fatalf",
    "close",
]


def info(*args: Any) -> None:
    LoggerRegistry.default().log(Severity.INFO, sprint(*args), 2)


def infoln(*args: Any) -> None:
    LoggerRegistry.default().log(Severity.INFO, sprintln(*args), 2)


def infof(fmt: str, *args: Any) -> None:
    LoggerRegistry.default().log(Severity.INFO, sprintf(fmt, *args), 2)


def error(*args: Any) -> None:
    LoggerRegistry.default().log(Severity.ERROR, sprint(*args), 2)


def errorln(*args: Any) -> None:
    LoggerRegistry.default().log(Severity.ERROR, sprintln(*args), 2)


def errorf(fmt: str, *args: Any) -> None:
    LoggerRegistry.default().log(Severity.ERROR, sprintf(fmt, *args), 2)


def fatal(*args: Any) -> None:
    """Log at FATAL on the default logger, close its sinks, exit(1)."""
    LoggerRegistry.default().log(Severity.FATAL, sprint(*args), 2)


def fatalln(*args: Any) -> None:
    LoggerRegistry.default().log(Severity.FATAL, sprintln(*args), 2)


def fatalf(fmt: str, *args: Any) -> None:
    LoggerRegistry.default().log(Severity.FATAL, sprintf(fmt, *args), 2)


def close() -> None:
    """Close the default logger's owned sinks."""
    LoggerRegistry.default().close()
