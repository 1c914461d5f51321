"""Log destinations: a JSON file in development, the console otherwise.

The sink is picked once by :func:`configure_logging` and stays fixed for the
life of the process.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, TextIO

from fantasy_recap.config import RecapSettings


ROOT_LOGGER = "fantasy_recap"


class LogSink(Protocol):
    def write(self, entry: Dict[str, Any]) -> None:
        ...


class ConsoleSink:
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stderr

    def write(self, entry: Dict[str, Any]) -> None:
        self.stream.write(json.dumps(entry, default=str) + "\n")
        self.stream.flush()


class JsonFileSink:
    """Appends entries to a JSON array file.

    A file that does not hold a JSON array is renamed to ``<name>.corrupt`` and a
    new array is started with a note pointing at it, so earlier entries survive.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    @property
    def quarantine_path(self) -> Path:
        return self.path.with_name(self.path.name + ".corrupt")

    def _read(self) -> list:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            data = None
        if isinstance(data, list):
            return data
        self.path.replace(self.quarantine_path)
        return [
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "level": "WARNING",
                "logger": ROOT_LOGGER,
                "message": f"unreadable log file moved to {self.quarantine_path}",
            }
        ]

    def write(self, entry: Dict[str, Any]) -> None:
        with self._lock:
            entries = self._read()
            entries.append(entry)
            self.path.write_text(json.dumps(entries, indent=2, default=str), encoding="utf-8")


class SinkHandler(logging.Handler):
    def __init__(self, sink: LogSink, level: int = logging.NOTSET):
        super().__init__(level)
        self.sink = sink

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            if record.exc_info:
                entry["error"] = self.format(record).splitlines()[-1]
            self.sink.write(entry)
        except Exception:
            self.handleError(record)


def build_sink(settings: RecapSettings) -> LogSink:
    if settings.dev_mode:
        return JsonFileSink(settings.log_file)
    return ConsoleSink()


def configure_logging(settings: RecapSettings, *, sink: Optional[LogSink] = None) -> LogSink:
    """Attach a single sink handler to the package logger and return its sink."""

    sink = sink or build_sink(settings)
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, SinkHandler):
            logger.removeHandler(handler)
    logger.addHandler(SinkHandler(sink))
    logger.setLevel(logging.DEBUG if settings.dev_mode else logging.INFO)
    return sink
