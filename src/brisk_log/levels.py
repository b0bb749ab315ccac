"""
Severity levels.
"""

import logging
from enum import IntEnum
from typing import Any


class LoggerLevel(IntEnum):
    """Ordered severity: debug < info < warn < error."""

    debug = 0
    info = 1
    warn = 2
    error = 3

    @property
    def label(self) -> str:
        return self.name

    @property
    def stdlib_level(self) -> int:
        """Matching standard-library level number, used by the handlers."""
        return _STDLIB_LEVELS[self]

    @classmethod
    def parse(cls, value: Any) -> "LoggerLevel":
        """
        Coerce a member, an int or a level name into a LoggerLevel.

        Names are case-insensitive; "warning" is accepted for warn.

        Raises:
            ValueError: If the value does not name a level
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Unknown logger level: {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            name = value.strip().lower()
            name = _ALIASES.get(name, name)
            if name in cls.__members__:
                return cls[name]
        raise ValueError(f"Unknown logger level: {value!r}")

    @classmethod
    def from_method_name(cls, method_name: str) -> "LoggerLevel":
        """Map a stdlib/structlog method name (e.g. "warning") to a level."""
        return cls.parse(method_name)


_ALIASES = {"warning": "warn", "err": "error"}

_STDLIB_LEVELS = {
    LoggerLevel.debug: logging.DEBUG,
    LoggerLevel.info: logging.INFO,
    LoggerLevel.warn: logging.WARNING,
    LoggerLevel.error: logging.ERROR,
}
