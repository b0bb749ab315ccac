"""
brisk-log: Hierarchical logger registry.

Caches one logger per (namespace, region), resolves configuration through
instance > namespace > global defaults, and pushes namespace changes live to
existing loggers. Output goes through structlog and standard-library handlers.
"""

__version__ = "0.1.0"

from .config import (
    configure,
    configure_logging,
    get_logger,
    get_registry,
    load_env_option,
    load_file_option,
    reset_registry,
)
from .decorator import Log
from .exceptions import BriskLogError, InvalidOptionError
from .identity import GLOBAL_NAMESPACE, GLOBAL_REGION, Namespace, Region
from .levels import LoggerLevel
from .logger import Logger
from .options import LoggerOption, LoggerOptionActual, LogMsg, default_format
from .registry import LoggerRegistry
from .store import ConfigurationStore

__all__ = [
    "ConfigurationStore",
    "LoggerRegistry",
    "Logger",
    "LoggerLevel",
    "LoggerOption",
    "LoggerOptionActual",
    "LogMsg",
    "Log",
    "Namespace",
    "Region",
    "GLOBAL_NAMESPACE",
    "GLOBAL_REGION",
    "BriskLogError",
    "InvalidOptionError",
    "configure",
    "configure_logging",
    "default_format",
    "get_logger",
    "get_registry",
    "load_env_option",
    "load_file_option",
    "reset_registry",
]
