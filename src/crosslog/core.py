"""
Logger and default-instance registry.

One Logger owns three severity routes built from two combined sinks:
    INFO  → primary (+ stdout if verbose) (+ system log info channel)
    ERROR → primary + stderr (+ system log error channel)
    FATAL → same combined sink as ERROR, different label
A primary that already writes to stdout or stderr replaces that stream
in its set, so no line is printed twice.

Writes are serialized by a per-Logger lock, so lines never interleave.
FATAL writes the line, closes owned closers, then terminates the process.

The registry holds the Logger used by the module-level functions.
It starts with an un-initialized placeholder (output degrades to stderr
with a warning) and is replaced at most once, by the first configure().
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Callable, Iterable, Optional

from crosslog import system_log
from crosslog.exceptions import (
    ConfigurationError,
    PlatformUnsupportedError,
    SinkWriteError,
)
from crosslog.formatters import LineFormatter, LogFormatter, sprint, sprintf, sprintln
from crosslog.records import Message, Severity
from crosslog.sinks import CombinedSink, StreamSink, is_closer, stderr_sink, stdout_sink

Terminator = Callable[[int], Any]

BEFORE_CONFIGURATION = "WARNING: logging used before configuration"

EXIT_FATAL = 1
EXIT_ABORT = 2


def exit_process(code: int) -> None:
    """
    Default termination strategy: flush the process streams and exit
    immediately. os._exit cannot be caught as SystemExit.
    """
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except Exception:
            pass
    os._exit(code)


class Logger:
    """
    Multi-sink logger with Info/Error/Fatal severities.

    Usage:
        log = crosslog.configure("my-service", verbose=True,
                                 use_system_log=False, primary_sink=FileSink("svc.log"))
        log.info("started on port", 8080)
        log.errorf("retry %d failed: %s", attempt, err)
        log.fatal("cannot continue")   # writes, closes, exits(1)
    """

    def __init__(
        self,
        name: str,
        info_sink: CombinedSink,
        error_sink: CombinedSink,
        closers: Iterable[Any] = (),
        terminate: Optional[Terminator] = None,
        formatter: Optional[LogFormatter] = None,
        initialized: bool = True,
    ):
        self.name = name
        self._routes: dict[Severity, CombinedSink] = {
            Severity.INFO: info_sink,
            Severity.ERROR: error_sink,
            Severity.FATAL: error_sink,
        }
        self._closers: tuple[Any, ...] = tuple(closers)
        self._terminate: Terminator = terminate or exit_process
        self._formatter = formatter or LineFormatter()
        self._initialized = initialized
        self._lock = threading.Lock()

    @classmethod
    def placeholder(cls, terminate: Optional[Terminator] = None) -> "Logger":
        """Un-initialized logger used before configure(). Writes to stderr only."""
        fallback = CombinedSink([stderr_sink()])
        return cls(
            name="",
            info_sink=fallback,
            error_sink=fallback,
            terminate=terminate,
            initialized=False,
        )

    # ── Introspection ─────────────────────────────────────────────

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def closers(self) -> tuple[Any, ...]:
        return self._closers

    def sink_for(self, severity: Severity) -> CombinedSink:
        return self._routes[severity]

    # ── Router ────────────────────────────────────────────────────

    def output(self, severity: Severity, text: str, depth: int = 1) -> Optional[SinkWriteError]:
        """
        Format and write one line for `severity`.

        depth counts frames above output() for the call-site locator
        (1 = the direct caller). Returns the first sink failure, or None;
        failures are never raised. An unrecognized severity is a router
        defect and aborts the process.
        """
        if not isinstance(severity, Severity):
            self._abort(severity)
            return None

        message = Message.create(severity, text, depth + 1)
        line = self._formatter.format(message) + "\n"
        if not self._initialized:
            line = BEFORE_CONFIGURATION + "\n" + line

        with self._lock:
            try:
                self._routes[severity].write(line)
            except SinkWriteError as e:
                return e
        return None

    def log(self, severity: Severity, text: str, depth: int = 1) -> None:
        """Write `text` at `severity`; FATAL then closes and terminates."""
        self.output(severity, text, depth + 1)
        if severity is Severity.FATAL:
            self._shutdown()

    def _abort(self, severity: Any) -> None:
        try:
            sys.stderr.write(f"crosslog: unrecognized severity {severity!r}\n")
        except Exception:
            pass
        self._terminate(EXIT_ABORT)

    def _shutdown(self) -> None:
        """Fatal path: flush, close every owned closer, ignoring errors, then exit."""
        self.flush()
        for closer in self._closers:
            try:
                closer.close()
            except Exception:
                pass
        self._terminate(EXIT_FATAL)

    # ── Convenience Methods ───────────────────────────────────────

    def info(self, *args: Any) -> None:
        self.log(Severity.INFO, sprint(*args), 2)

    def infoln(self, *args: Any) -> None:
        self.log(Severity.INFO, sprintln(*args), 2)

    def infof(self, fmt: str, *args: Any) -> None:
        self.log(Severity.INFO, sprintf(fmt, *args), 2)

    def error(self, *args: Any) -> None:
        self.log(Severity.ERROR, sprint(*args), 2)

    def errorln(self, *args: Any) -> None:
        self.log(Severity.ERROR, sprintln(*args), 2)

    def errorf(self, fmt: str, *args: Any) -> None:
        self.log(Severity.ERROR, sprintf(fmt, *args), 2)

    def fatal(self, *args: Any) -> None:
        self.log(Severity.FATAL, sprint(*args), 2)

    def fatalln(self, *args: Any) -> None:
        self.log(Severity.FATAL, sprintln(*args), 2)

    def fatalf(self, fmt: str, *args: Any) -> None:
        self.log(Severity.FATAL, sprintf(fmt, *args), 2)

    # ── Cleanup ───────────────────────────────────────────────────

    def flush(self) -> Optional[SinkWriteError]:
        """Flush both routes. Returns the first failure, or None."""
        first: Optional[SinkWriteError] = None
        with self._lock:
            for sink in dict.fromkeys(self._routes.values()):
                try:
                    sink.flush()
                except SinkWriteError as e:
                    if first is None:
                        first = e
        return first

    def close(self) -> None:
        """Flush, then close owned closers without exiting. Failures go to stderr."""
        failed = self.flush()
        if failed is not None:
            sys.stderr.write(f"crosslog: failed to flush {failed.sink!r}: {failed.cause}\n")
        for closer in self._closers:
            try:
                closer.close()
            except Exception as e:
                sys.stderr.write(f"crosslog: failed to close {closer!r}: {e}\n")

    def __repr__(self) -> str:
        state = "initialized" if self._initialized else "placeholder"
        return f"Logger(name={self.name!r}, {state})"


class LoggerRegistry:
    """
    Process-wide default logger slot.

    Starts with a placeholder. install() replaces it only while the
    occupant is un-initialized, so the first configure() wins.
    reset() restores a fresh placeholder; for tests only.
    """

    _default: Logger = Logger.placeholder()
    _lock = threading.Lock()

    @classmethod
    def default(cls) -> Logger:
        return cls._default

    @classmethod
    def install(cls, logger: Logger) -> bool:
        """Install `logger` if no configured logger is present. Returns True if installed."""
        with cls._lock:
            if cls._default.initialized:
                return False
            cls._default = logger
            return True

    @classmethod
    def reset(cls, terminate: Optional[Terminator] = None) -> None:
        with cls._lock:
            cls._default = Logger.placeholder(terminate)


# ── Construction ──────────────────────────────────────────────────────

_PROCESS_STREAMS = ("stdout", "stderr", "__stdout__", "__stderr__")


def _owned(sink: Any) -> bool:
    """Closable sinks become owned closers; process streams never do."""
    if sink is None or not is_closer(sink):
        return False
    return not any(sink is getattr(sys, name, None) for name in _PROCESS_STREAMS)


def _process_stream(sink: Any) -> Optional[str]:
    """Name of the process stream `sink` already writes to, or None."""
    if isinstance(sink, StreamSink):
        if sink.process_stream is not None:
            return sink.process_stream
        sink = sink.stream
    for name in ("stdout", "stderr"):
        if sink is getattr(sys, name, None) or sink is getattr(sys, f"__{name}__", None):
            return name
    return None


def configure(
    name: str,
    verbose: bool,
    use_system_log: bool,
    primary_sink: Any,
    *,
    terminate: Optional[Terminator] = None,
    formatter: Optional[LogFormatter] = None,
) -> Logger:
    """
    Build a new Logger and make it the default if none is configured yet.

    Every call returns an independent Logger. If the system log is
    requested but unavailable, the failure is logged as FATAL and the
    process terminates.
    """
    sys_info = sys_error = None
    setup_error: Optional[PlatformUnsupportedError] = None
    if use_system_log:
        try:
            sys_info, sys_error = system_log.setup(name)
        except PlatformUnsupportedError as e:
            setup_error = e

    # A primary already bound to a process stream stands in for it.
    primary_stream = _process_stream(primary_sink)
    info_sinks = [primary_sink]
    if verbose and primary_stream != "stdout":
        info_sinks.append(stdout_sink())
    info_sinks.append(sys_info)
    error_sinks = [primary_sink]
    if primary_stream != "stderr":
        error_sinks.append(stderr_sink())
    error_sinks.append(sys_error)

    logger = Logger(
        name=name,
        info_sink=CombinedSink(info_sinks),
        error_sink=CombinedSink(error_sinks),
        closers=[s for s in (primary_sink, sys_info, sys_error) if _owned(s)],
        terminate=terminate,
        formatter=formatter,
    )

    if setup_error is not None:
        logger.log(Severity.FATAL, f"system log setup failed for {name!r}: {setup_error}", 2)
        return logger

    LoggerRegistry.install(logger)
    return logger


def new_logger(
    name: str,
    sink: Any,
    *,
    terminate: Optional[Terminator] = None,
    formatter: Optional[LogFormatter] = None,
) -> Logger:
    """
    Build a standalone Logger writing every severity to `sink` only.

    Raises ConfigurationError for an empty name. Does not touch the
    registry.
    """
    if not isinstance(name, str) or not name:
        raise ConfigurationError("null logger name")
    combined = CombinedSink([sink])
    return Logger(
        name=name,
        info_sink=combined,
        error_sink=combined,
        closers=[sink] if _owned(sink) else [],
        terminate=terminate,
        formatter=formatter,
    )
