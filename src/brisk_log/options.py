"""
Logger option models.

LoggerOptionActual is a fully resolved record; LoggerOption is a partial
patch whose present fields overwrite a record when merged.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .exceptions import InvalidOptionError
from .levels import LoggerLevel


@dataclass(frozen=True)
class LogMsg:
    """A single emitted record as seen by a format function."""

    level: str
    time_str: str
    message: str
    region: str = ""


FormatFunction = Callable[[LogMsg], str]


def default_format(msg: LogMsg) -> str:
    """Render ``[level]: time [region]message``."""
    return f"[{msg.level}]: {msg.time_str} [{msg.region}]{msg.message}"


_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*([kmg]?)\s*$", re.IGNORECASE)
_RETENTION_PATTERN = re.compile(r"^\s*(\d+)\s*(d?)\s*$", re.IGNORECASE)
_SIZE_UNITS = {"": 1, "k": 1024, "m": 1024**2, "g": 1024**3}


def parse_size(spec: str) -> int:
    """
    Parse a size spec such as "20m", "512k", "1g" or "1048576" into bytes.

    Raises:
        ValueError: If the spec is malformed
    """
    match = _SIZE_PATTERN.match(str(spec))
    if not match:
        raise ValueError(f"Invalid size spec: {spec!r}")
    amount, unit = match.groups()
    return int(amount) * _SIZE_UNITS[unit.lower()]


def parse_retention(spec: str) -> tuple[int, bool]:
    """
    Parse a retention spec.

    "30d" keeps thirty days of files; a bare "10" keeps ten files.

    Returns:
        Tuple of (amount, is_days)

    Raises:
        ValueError: If the spec is malformed
    """
    match = _RETENTION_PATTERN.match(str(spec))
    if not match:
        raise ValueError(f"Invalid retention spec: {spec!r}")
    amount, unit = match.groups()
    return int(amount), bool(unit)


class _OptionValidation(BaseModel):
    """Field validators shared by the full record and the partial patch."""

    @field_validator("level", mode="before", check_fields=False)
    @classmethod
    def coerce_level(cls, value: Any) -> Any:
        if value is None:
            return value
        return LoggerLevel.parse(value)

    @field_validator("format", mode="before", check_fields=False)
    @classmethod
    def check_format(cls, value: Any) -> Any:
        if value is not None and not callable(value):
            raise ValueError("format must be callable")
        return value

    @field_validator("file_max_size", mode="after", check_fields=False)
    @classmethod
    def check_file_max_size(cls, value: str | None) -> str | None:
        if value is not None:
            parse_size(value)
        return value

    @field_validator("file_max_date", mode="after", check_fields=False)
    @classmethod
    def check_file_max_date(cls, value: str | None) -> str | None:
        if value is not None:
            parse_retention(value)
        return value


class LoggerOptionActual(_OptionValidation):
    """Fully resolved logger configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: LoggerLevel = LoggerLevel.debug
    format: FormatFunction = default_format
    enable_console: bool = True
    enable_file: bool = False
    file_path: str = "logs"
    file_max_size: str = "20m"
    file_max_date: str = "30d"
    file_date_pattern: str = "%Y-%m-%d"
    file_zipped_archive: bool = True


class LoggerOption(_OptionValidation):
    """
    Partial logger configuration.

    Only fields given explicitly (and not None) are present; merging leaves
    every other field of the target record untouched.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: LoggerLevel | None = None
    format: FormatFunction | None = None
    enable_console: bool | None = None
    enable_file: bool | None = None
    file_path: str | None = None
    file_max_size: str | None = None
    file_max_date: str | None = None
    file_date_pattern: str | None = None
    file_zipped_archive: bool | None = None

    def present_fields(self) -> dict[str, Any]:
        """Get the explicitly given, non-None fields."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }

    def merged_with(self, other: "LoggerOption") -> "LoggerOption":
        """Combine two patches; fields present in ``other`` win."""
        return LoggerOption(**{**self.present_fields(), **other.present_fields()})


OptionLike = LoggerOption | LoggerOptionActual | Mapping[str, Any] | None


def to_option(partial: OptionLike = None, **fields: Any) -> LoggerOption:
    """
    Build a validated LoggerOption.

    Accepts a LoggerOption, a full LoggerOptionActual (every field present),
    a mapping, or keyword fields. Keyword fields win over ``partial``.

    Raises:
        InvalidOptionError: If any field fails validation
    """
    if isinstance(partial, LoggerOption) and not fields:
        return partial

    data: dict[str, Any] = {}
    if isinstance(partial, LoggerOption):
        data.update(partial.present_fields())
    elif isinstance(partial, LoggerOptionActual):
        data.update(dict(partial))
    elif partial is not None:
        data.update(partial)
    data.update(fields)

    try:
        return LoggerOption(**data)
    except ValidationError as e:
        names = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
        raise InvalidOptionError(str(e), fields=names) from e


def merge_option(base: LoggerOptionActual, partial: LoggerOption) -> LoggerOptionActual:
    """Overwrite the fields of ``base`` present in ``partial``."""
    return base.model_copy(update=partial.present_fields())


DEFAULT_OPTION = LoggerOptionActual()
