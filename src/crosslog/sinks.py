"""
Sinks (output destinations) and the multi-writer combinator.

A sink is anything with write(text). Closing is an optional capability,
detected with is_closer(), never required. Sinks raise on failure;
CombinedSink attempts every member and surfaces the first failure.
"""

import sys
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, Optional, TextIO

from crosslog.exceptions import SinkWriteError


class Sink(ABC):
    """Base sink. Accepts already formatted, newline-terminated text."""

    @abstractmethod
    def write(self, text: str) -> None:
        """Write one formatted line. Raise on failure."""
        ...

    def flush(self) -> None:
        """Flush any buffered output. Override in buffered sinks."""
        pass


def is_closer(obj: Any) -> bool:
    """True if obj exposes a callable close()."""
    return callable(getattr(obj, "close", None))


class StreamSink(Sink):
    """
    Writes to a text stream.

    Pass "stdout" or "stderr" to bind to the process stream by name;
    the stream is looked up at write time, so capture and redirection
    of sys.stdout / sys.stderr are honoured. Process streams are never
    closed by the logger, so this sink has no close().
    """

    def __init__(self, stream: str | TextIO = "stderr"):
        if isinstance(stream, str) and stream not in ("stdout", "stderr"):
            raise ValueError(f"Unknown process stream '{stream}'")
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        if isinstance(self._stream, str):
            return getattr(sys, self._stream)
        return self._stream

    @property
    def process_stream(self) -> Optional[str]:
        """Name of the bound process stream, or None for an explicit stream."""
        return self._stream if isinstance(self._stream, str) else None

    def write(self, text: str) -> None:
        stream = self.stream
        stream.write(text)
        stream.flush()

    def flush(self) -> None:
        self.stream.flush()

    def __repr__(self) -> str:
        name = self._stream if isinstance(self._stream, str) else type(self._stream).__name__
        return f"StreamSink({name})"


def stdout_sink() -> StreamSink:
    return StreamSink("stdout")


def stderr_sink() -> StreamSink:
    return StreamSink("stderr")


class MemorySink(Sink):
    """In-memory sink. Keeps every written chunk; counts complete lines."""

    def __init__(self) -> None:
        self._chunks: list[str] = []
        self._lock = threading.Lock()

    def write(self, text: str) -> None:
        with self._lock:
            self._chunks.append(text)

    def getvalue(self) -> str:
        with self._lock:
            return "".join(self._chunks)

    @property
    def writes(self) -> list[str]:
        with self._lock:
            return list(self._chunks)

    @property
    def lines(self) -> list[str]:
        return self.getvalue().splitlines()

    def clear(self) -> None:
        with self._lock:
            self._chunks.clear()

    def __repr__(self) -> str:
        return f"MemorySink(writes={len(self._chunks)})"


class FileSink(Sink):
    """Appends to a text file. Parent directories are created on open."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file: Optional[TextIO] = open(self.path, "a", encoding="utf-8")
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._file is None

    def write(self, text: str) -> None:
        with self._lock:
            if self._file is None:
                raise ValueError(f"write to closed file {self.path}")
            self._file.write(text)

    def flush(self) -> None:
        with self._lock:
            if self._file:
                self._file.flush()

    def close(self) -> None:
        self.flush()
        with self._lock:
            if self._file:
                self._file.close()
                self._file = None

    def __repr__(self) -> str:
        return f"FileSink({self.path})"


class CombinedSink(Sink):
    """
    Fan-out of one write to several sinks, in insertion order.

    Every member is attempted even when an earlier one fails. The first
    failure is raised as SinkWriteError once all members were tried;
    later failures are dropped. Membership is fixed at construction.
    """

    def __init__(self, sinks: Iterable[Any]):
        self._sinks: tuple[Any, ...] = tuple(s for s in sinks if s is not None)

    @property
    def sinks(self) -> tuple[Any, ...]:
        return self._sinks

    def write(self, text: str) -> None:
        first: Optional[SinkWriteError] = None
        for sink in self._sinks:
            try:
                sink.write(text)
            except Exception as e:
                if first is None:
                    first = SinkWriteError(sink, e)
        if first is not None:
            raise first from first.cause

    def flush(self) -> None:
        """Flush every member that can flush; first failure raised as in write()."""
        first: Optional[SinkWriteError] = None
        for sink in self._sinks:
            flush = getattr(sink, "flush", None)
            if not callable(flush):
                continue
            try:
                flush()
            except Exception as e:
                if first is None:
                    first = SinkWriteError(sink, e)
        if first is not None:
            raise first from first.cause

    def __len__(self) -> int:
        return len(self._sinks)

    def __repr__(self) -> str:
        return f"CombinedSink({', '.join(repr(s) for s in self._sinks)})"
