"""
Logger instances handed out by the registry.
"""

import threading
from typing import Any

from .identity import Namespace, Region
from .levels import LoggerLevel
from .options import DEFAULT_OPTION, LoggerOptionActual, OptionLike, merge_option, to_option
from .sinks import Sink, build_sink


def compose_message(message: str, meta: tuple[Any, ...]) -> str:
    """
    Append extra arguments to a message, one ``repr`` per line.

    Example:
        compose_message("warn", ("test", {"a": 1})) == "warn\\n'test'\\n{'a': 1}"
    """
    if not meta:
        return str(message)
    return "\n".join([str(message), *(repr(item) for item in meta)])


class Logger:
    """
    A leveled logger bound to a (region, namespace) pair.

    Holds its own configuration snapshot; later changes to the namespace
    default only reach it through the registry's namespace configure.
    """

    def __init__(
        self,
        region: Region,
        namespace: Namespace,
        option: LoggerOptionActual | None = None,
    ):
        """
        Initialize a logger.

        Args:
            region: Region identity
            namespace: Namespace identity
            option: Initial resolved configuration (default record if omitted)
        """
        self._region = region
        self._namespace = namespace
        self._lock = threading.Lock()
        # (option, sink), swapped as one reference
        self._state: tuple[LoggerOptionActual, Sink] | None = None
        self._apply(option if option is not None else DEFAULT_OPTION)

    @property
    def region(self) -> Region:
        return self._region

    @property
    def namespace(self) -> Namespace:
        return self._namespace

    @property
    def option(self) -> LoggerOptionActual:
        """Current effective configuration (immutable)."""
        return self._state[0]

    @property
    def sink(self) -> Sink:
        return self._state[1]

    @property
    def region_text(self) -> str:
        return self._region.description or ""

    @property
    def name(self) -> str:
        namespace = self._namespace.description or ""
        return f"{namespace}.{self.region_text}"

    def configure(self, partial: OptionLike = None, **fields: Any) -> "Logger":
        """
        Reconfigure this logger only.

        The new configuration starts from the global default record, not from
        the current one, so earlier customizations are dropped unless repeated.

        Args:
            partial: LoggerOption, full LoggerOptionActual, or mapping
            **fields: Individual option fields, applied over ``partial``

        Returns:
            Self for method chaining

        Raises:
            InvalidOptionError: If the option fails validation
        """
        option = merge_option(DEFAULT_OPTION, to_option(partial, **fields))
        self._apply(option)
        return self

    def _apply(self, option: LoggerOptionActual) -> None:
        sink = build_sink(option, name=self.name, region_text=self.region_text)
        with self._lock:
            old_state = self._state
            self._state = (option, sink)
        if old_state is not None:
            old_state[1].close()

    def _emit(self, level: LoggerLevel, message: str, meta: tuple[Any, ...]) -> "Logger":
        option, sink = self._state
        if option.level > level:
            return self
        sink.write(level, compose_message(message, meta))
        return self

    def debug(self, message: str, *meta: Any) -> "Logger":
        """Log a debug message."""
        return self._emit(LoggerLevel.debug, message, meta)

    def info(self, message: str, *meta: Any) -> "Logger":
        """Log an info message."""
        return self._emit(LoggerLevel.info, message, meta)

    def warn(self, message: str, *meta: Any) -> "Logger":
        """Log a warning message."""
        return self._emit(LoggerLevel.warn, message, meta)

    warning = warn

    def error(self, message: str, *meta: Any) -> "Logger":
        """Log an error message."""
        return self._emit(LoggerLevel.error, message, meta)

    def log(self, level: LoggerLevel | str | int, message: str, *meta: Any) -> "Logger":
        """
        Log at a specific level.

        Args:
            level: Level member, name (debug, info, warn, error) or number
            message: Message text
            *meta: Extra values appended to the message
        """
        return self._emit(LoggerLevel.parse(level), message, meta)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(region={self._region!r}, "
            f"namespace={self._namespace!r}, level={self.option.level.label!r})"
        )
