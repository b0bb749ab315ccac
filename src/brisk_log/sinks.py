"""
Sink backends: console and rotating file output.

A Sink wraps a private standard-library logger whose handlers render lines
through structlog's ProcessorFormatter. Sinks are replaced whole on
reconfiguration, never patched in place.
"""

import gzip
import logging
import os
import shutil
import sys
import threading
import time
from datetime import datetime
from logging.handlers import BaseRotatingHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter
from structlog.types import EventDict, Processor

from .levels import LoggerLevel
from .options import FormatFunction, LoggerOptionActual, LogMsg, parse_retention, parse_size

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_METHOD_NAMES = {
    LoggerLevel.debug: "debug",
    LoggerLevel.info: "info",
    LoggerLevel.warn: "warning",
    LoggerLevel.error: "error",
}


def add_severity(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Set ``level`` to the brisk-log label for the calling method."""
    event_dict["level"] = LoggerLevel.from_method_name(method_name).label
    return event_dict


class FormatRenderer:
    """
    Final formatter step: turn an event dict into a line with a format function.
    """

    def __init__(self, format_fn: FormatFunction, region_text: str = ""):
        self.format_fn = format_fn
        self.region_text = region_text

    def __call__(self, logger: Any, method_name: str, event_dict: EventDict) -> str:
        msg = LogMsg(
            level=event_dict.get("level", method_name),
            time_str=event_dict.get("timestamp", ""),
            message=str(event_dict.get("event", "")),
            region=self.region_text,
        )
        return self.format_fn(msg)


def _build_formatter(option: LoggerOptionActual, region_text: str) -> ProcessorFormatter:
    processors: list[Processor] = [
        ProcessorFormatter.remove_processors_meta,
        structlog.processors.TimeStamper(fmt=TIME_FORMAT, utc=False),
        FormatRenderer(option.format, region_text),
    ]
    return ProcessorFormatter(processors=processors)


def _gzip_namer(name: str) -> str:
    return f"{name}.gz"


def _gzip_rotator(source: str, dest: str) -> None:
    with open(source, "rb") as src, gzip.open(dest, "wb") as dst:
        shutil.copyfileobj(src, dst)
    os.remove(source)


class DailyRotatingFileHandler(BaseRotatingHandler):
    """
    A file handler writing to ``<directory>/<prefix>-<date>.log``.

    Rolls over when the date key changes or the current file reaches
    ``max_bytes``. Rolled files are optionally gzipped, and files outside the
    retention window are removed on each rollover.
    """

    def __init__(
        self,
        directory: str | Path,
        prefix: str,
        date_pattern: str = "%Y-%m-%d",
        max_bytes: int = 0,
        retention: tuple[int, bool] = (30, True),
        compress: bool = True,
        encoding: str = "utf-8",
    ):
        """
        Initialize the handler.

        Args:
            directory: Directory holding the log files
            prefix: File name prefix (the severity label)
            date_pattern: strftime pattern used as the daily rotation key
            max_bytes: Size limit per file, 0 disables size rotation
            retention: (amount, is_days) as returned by parse_retention
            compress: Whether to gzip rolled files
            encoding: File encoding
        """
        self.directory = Path(directory)
        self.prefix = prefix
        self.date_pattern = date_pattern
        self.max_bytes = max_bytes
        self.retention = retention
        self._date_key = self._current_key()

        super().__init__(
            str(self._path_for(self._date_key)), mode="a", encoding=encoding, delay=True
        )
        self._set_compress(compress)

    def _set_compress(self, compress: bool) -> None:
        self.namer = _gzip_namer if compress else None
        self.rotator = _gzip_rotator if compress else None

    def reconfigure(
        self,
        date_pattern: str,
        max_bytes: int,
        retention: tuple[int, bool],
        compress: bool,
    ) -> None:
        """
        Change rotation settings in place.

        A new date pattern takes effect at the next write, which rolls the
        current file over.
        """
        with self.lock:
            self.date_pattern = date_pattern
            self.max_bytes = max_bytes
            self.retention = retention
            self._set_compress(compress)

    def _current_key(self) -> str:
        return datetime.now().strftime(self.date_pattern)

    def _path_for(self, key: str, index: int | None = None) -> Path:
        if index is None:
            return self.directory / f"{self.prefix}-{key}.log"
        return self.directory / f"{self.prefix}-{key}.{index}.log"

    def _open(self):
        self.directory.mkdir(parents=True, exist_ok=True)
        return super()._open()

    def shouldRollover(self, record: logging.LogRecord) -> bool:
        if self._current_key() != self._date_key:
            return True
        if self.max_bytes <= 0:
            return False

        if self.stream is not None:
            self.stream.seek(0, os.SEEK_END)
            size = self.stream.tell()
        elif os.path.exists(self.baseFilename):
            size = os.path.getsize(self.baseFilename)
        else:
            size = 0
        # An empty file always takes the record, however large
        if size == 0:
            return False

        line = f"{self.format(record)}{self.terminator}"
        return size + len(line.encode(self.encoding or "utf-8")) >= self.max_bytes

    def doRollover(self) -> None:
        if self.stream:
            self.stream.close()
            self.stream = None

        current = self.baseFilename
        key = self._current_key()

        if os.path.exists(current):
            if key == self._date_key:
                dest = self._next_archive_name(key)
            else:
                dest = self.rotation_filename(current)
            if dest != current:
                self.rotate(current, dest)
                logger.debug("Rotated log file %s -> %s", current, dest)

        self._date_key = key
        self.baseFilename = os.path.abspath(self._path_for(key))
        self._purge()

    def _next_archive_name(self, key: str) -> str:
        index = 1
        while True:
            candidate = str(self._path_for(key, index))
            named = self.rotation_filename(candidate)
            if not os.path.exists(candidate) and not os.path.exists(named):
                return named
            index += 1

    def _archived_files(self) -> list[Path]:
        if not self.directory.exists():
            return []
        current = Path(self.baseFilename).resolve()
        return [
            path
            for path in self.directory.glob(f"{self.prefix}-*.log*")
            if path.resolve() != current
        ]

    def _purge(self) -> None:
        amount, is_days = self.retention
        files = sorted(self._archived_files(), key=lambda p: p.stat().st_mtime, reverse=True)

        if is_days:
            cutoff = time.time() - amount * 86400
            expired = [path for path in files if path.stat().st_mtime < cutoff]
        else:
            expired = files[amount:]

        for path in expired:
            try:
                path.unlink()
                logger.debug("Removed expired log file %s", path)
            except OSError as e:
                logger.warning("Could not remove expired log file %s: %s", path, e)


# (resolved directory, severity label) -> [handler, reference count]
_FILE_HANDLERS: dict[tuple[str, str], list[Any]] = {}
_FILE_HANDLERS_LOCK = threading.Lock()


def _acquire_file_handler(
    option: LoggerOptionActual, level: LoggerLevel
) -> tuple[tuple[str, str], DailyRotatingFileHandler]:
    """
    Get the process-wide writer for one severity file, creating it on first use.

    Every sink writing to the same file shares one handler, so rotation and
    appends go through a single stream and a single lock. The latest caller's
    rotation settings win.
    """
    key = (os.path.abspath(option.file_path), level.label)
    max_bytes = parse_size(option.file_max_size)
    retention = parse_retention(option.file_max_date)

    with _FILE_HANDLERS_LOCK:
        entry = _FILE_HANDLERS.get(key)
        if entry is None:
            handler = DailyRotatingFileHandler(
                directory=key[0],
                prefix=level.label,
                date_pattern=option.file_date_pattern,
                max_bytes=max_bytes,
                retention=retention,
                compress=option.file_zipped_archive,
            )
            entry = _FILE_HANDLERS[key] = [handler, 0]
            logger.debug("Opened shared file handler for %s", key)
        else:
            entry[0].reconfigure(
                option.file_date_pattern, max_bytes, retention, option.file_zipped_archive
            )
        entry[1] += 1
        return key, entry[0]


def _release_file_handler(key: tuple[str, str]) -> None:
    with _FILE_HANDLERS_LOCK:
        entry = _FILE_HANDLERS.get(key)
        if entry is None:
            return
        entry[1] -= 1
        if entry[1] > 0:
            return
        del _FILE_HANDLERS[key]
    entry[0].close()
    logger.debug("Closed shared file handler for %s", key)


class SharedFileHandler(logging.Handler):
    """
    A sink's view of a shared DailyRotatingFileHandler.

    Renders the record with the sink's own formatter, then hands the finished
    line to the shared writer. Closing releases the writer; records arriving
    afterwards are dropped.
    """

    def __init__(self, option: LoggerOptionActual, level: LoggerLevel):
        super().__init__(level.stdlib_level)
        self._key, self.target = _acquire_file_handler(option, level)

    @property
    def prefix(self) -> str:
        return self.target.prefix if self.target is not None else self._key[1]

    def emit(self, record: logging.LogRecord) -> None:
        if self.target is None:
            return
        try:
            line = self.format(record)
        except Exception:
            self.handleError(record)
            return

        rendered = logging.makeLogRecord(record.__dict__)
        rendered.msg = line
        rendered.args = None
        rendered.exc_info = None
        rendered.exc_text = None
        rendered.stack_info = None
        self.target.handle(rendered)

    def close(self) -> None:
        with self.lock:
            if self.target is not None:
                self.target = None
                _release_file_handler(self._key)
        super().close()

    def __repr__(self) -> str:
        level = logging.getLevelName(self.level)
        return f"<SharedFileHandler {self._key[0]} {self._key[1]} ({level})>"


def _build_handlers(option: LoggerOptionActual, region_text: str) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []

    if option.enable_console:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(option.level.stdlib_level)
        console.setFormatter(_build_formatter(option, region_text))
        handlers.append(console)

    if option.enable_file:
        for level in LoggerLevel:
            if level < option.level:
                continue
            handler = SharedFileHandler(option, level)
            handler.setFormatter(_build_formatter(option, region_text))
            handlers.append(handler)

    return handlers


class Sink:
    """
    The write capability of a logger: a set of handlers behind structlog.
    """

    def __init__(self, name: str, handlers: list[logging.Handler]):
        # Built directly so it stays out of the logging manager's hierarchy
        self.backend = logging.Logger(name, level=logging.DEBUG)
        self.backend.propagate = False
        self.closed = False
        for handler in handlers:
            self.backend.addHandler(handler)

        self._bound = structlog.wrap_logger(
            self.backend,
            processors=[add_severity, ProcessorFormatter.wrap_for_formatter],
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    @property
    def handlers(self) -> list[logging.Handler]:
        return list(self.backend.handlers)

    def write(self, level: LoggerLevel, text: str) -> None:
        """Forward a composed message to every handler accepting ``level``."""
        # stdlib falls back to logging.lastResort when a logger has no handlers
        if self.closed or not self.backend.handlers:
            return
        getattr(self._bound, _METHOD_NAMES[level])(text)

    def close(self) -> None:
        """Detach and close all handlers. Later writes are dropped."""
        self.closed = True
        for handler in list(self.backend.handlers):
            self.backend.removeHandler(handler)
            handler.close()

    def __repr__(self) -> str:
        return f"Sink(name={self.backend.name!r}, handlers={len(self.backend.handlers)})"


def build_sink(option: LoggerOptionActual, *, name: str, region_text: str = "") -> Sink:
    """
    Build the sink set for a configuration.

    Args:
        option: Resolved logger configuration
        name: Backend logger name
        region_text: Region display text handed to the format function

    Returns:
        A new Sink; the caller owns it and must close it when replaced
    """
    return Sink(name, _build_handlers(option, region_text))
