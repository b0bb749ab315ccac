"""
Configuration system for brisk-log.

Holds the process registry and supports environment variables, config files
and programmatic configuration.
"""

import json
import os
import threading
from pathlib import Path
from typing import Any

from .exceptions import InvalidOptionError
from .identity import Namespace, Region
from .logger import Logger
from .options import LoggerOption, LoggerOptionActual, OptionLike, to_option
from .registry import LoggerRegistry

_REGISTRY: LoggerRegistry | None = None
_REGISTRY_LOCK = threading.Lock()

# Environment variable -> option field
_ENV_FIELDS = {
    "BRISK_LOG_LEVEL": "level",
    "BRISK_LOG_ENABLE_CONSOLE": "enable_console",
    "BRISK_LOG_ENABLE_FILE": "enable_file",
    "BRISK_LOG_FILE_PATH": "file_path",
    "BRISK_LOG_FILE_MAX_SIZE": "file_max_size",
    "BRISK_LOG_FILE_MAX_DATE": "file_max_date",
    "BRISK_LOG_FILE_DATE_PATTERN": "file_date_pattern",
    "BRISK_LOG_FILE_ZIPPED_ARCHIVE": "file_zipped_archive",
}

_BOOL_FIELDS = {"enable_console", "enable_file", "file_zipped_archive"}


def get_registry() -> LoggerRegistry:
    """Get the process registry, creating it on first use."""
    global _REGISTRY
    with _REGISTRY_LOCK:
        if _REGISTRY is None:
            _REGISTRY = LoggerRegistry()
        return _REGISTRY


def reset_registry() -> LoggerRegistry:
    """
    Replace the process registry with a fresh one.

    Sinks of the old registry's loggers are closed. Intended for tests.
    """
    global _REGISTRY
    with _REGISTRY_LOCK:
        old, _REGISTRY = _REGISTRY, LoggerRegistry()
        registry = _REGISTRY
    if old is not None:
        old.close()
    return registry


def get_logger(region: Region | None = None, namespace: Namespace | None = None) -> Logger:
    """
    Get a logger from the process registry.

    Example:
        logger = get_logger()
        logger.info("started")

        orders = Region("orders")
        get_logger(orders).warn("slow query", {"ms": 1200})
    """
    return get_registry().get_logger(region, namespace)


def configure(
    partial: OptionLike = None, namespace: Namespace | None = None, **fields: Any
) -> LoggerOptionActual:
    """Configure a namespace of the process registry (default: global)."""
    return get_registry().configure(partial, namespace, **fields)


def configure_logging(
    namespace: Namespace | None = None,
    config_file: str | Path | None = None,
    use_env: bool = True,
    **fields: Any,
) -> LoggerOptionActual:
    """
    Configure a namespace from a config file, the environment and arguments.

    Sources are layered file < environment < explicit fields; only fields
    present in some source change the namespace default.

    Args:
        namespace: Namespace to configure (default: global)
        config_file: Path to JSON config file
        use_env: Whether to read BRISK_LOG_* environment variables
        **fields: Explicit option fields (highest priority)

    Returns:
        The namespace's new default record

    Raises:
        InvalidOptionError: If any source holds an invalid option
    """
    option = LoggerOption()

    if config_file:
        option = option.merged_with(load_file_option(config_file))

    if use_env:
        option = option.merged_with(load_env_option())

    if fields:
        option = option.merged_with(to_option(**fields))

    return configure(option, namespace)


def load_env_option() -> LoggerOption:
    """Load a partial option from BRISK_LOG_* environment variables."""
    config: dict[str, Any] = {}

    for env_name, field in _ENV_FIELDS.items():
        if value := os.getenv(env_name):
            if field in _BOOL_FIELDS:
                config[field] = value.lower() in ("true", "1", "yes")
            else:
                config[field] = value

    return to_option(config)


def load_file_option(config_file: str | Path) -> LoggerOption:
    """
    Load a partial option from a JSON file.

    A missing file yields an empty option.
    """
    config_path = Path(config_file)
    if not config_path.exists():
        return LoggerOption()

    with open(config_path) as f:
        file_config = json.load(f)

    if not isinstance(file_config, dict):
        raise InvalidOptionError(f"Config file {config_path} must hold a JSON object")

    return to_option(file_config)
