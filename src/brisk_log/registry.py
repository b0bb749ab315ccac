"""
Logger registry: caches one Logger per (namespace, region) and propagates
namespace configuration to every cached instance.
"""

import logging
import threading
from typing import Any

from .identity import GLOBAL_NAMESPACE, GLOBAL_REGION, Namespace, Region
from .logger import Logger
from .options import LoggerOptionActual, OptionLike, to_option
from .store import ConfigurationStore

logger = logging.getLogger(__name__)


class LoggerRegistry:
    """
    Process-scoped owner of logger instances and namespace defaults.

    Example:
        registry = LoggerRegistry()
        api = Namespace("api")
        registry.configure(level="info", namespace=api)
        registry.get_logger(Region("users"), api).info("ready")
    """

    def __init__(self, store: ConfigurationStore | None = None):
        self._store = store or ConfigurationStore()
        self._instances: dict[Namespace, dict[Region, Logger]] = {}
        self._lock = threading.RLock()

    @property
    def store(self) -> ConfigurationStore:
        return self._store

    def get_logger(
        self, region: Region | None = None, namespace: Namespace | None = None
    ) -> Logger:
        """
        Get the logger for a (region, namespace) pair.

        The same object is returned for the same pair; a new logger is seeded
        with the namespace's current default configuration.

        Args:
            region: Region identity (default: GLOBAL_REGION)
            namespace: Namespace identity (default: GLOBAL_NAMESPACE)

        Returns:
            The cached or newly created Logger
        """
        region = region or GLOBAL_REGION
        namespace = namespace or GLOBAL_NAMESPACE

        with self._lock:
            regions = self._instances.setdefault(namespace, {})
            instance = regions.get(region)
            if instance is None:
                option = self._store.get_configuration(namespace)
                instance = Logger(region, namespace, option)
                regions[region] = instance
                logger.debug("Created logger %r", instance)
            return instance

    def configure(
        self,
        partial: OptionLike = None,
        namespace: Namespace | None = None,
        **fields: Any,
    ) -> LoggerOptionActual:
        """
        Update a namespace's defaults and apply them to its existing loggers.

        Present fields overwrite the namespace default; each cached logger of
        the namespace then adopts the merged record in full, losing any
        instance-level customization.

        Args:
            partial: LoggerOption, full LoggerOptionActual, or mapping
            namespace: Namespace identity (default: GLOBAL_NAMESPACE)
            **fields: Individual option fields, applied over ``partial``

        Returns:
            The namespace's new default record

        Raises:
            InvalidOptionError: If the option fails validation
        """
        option = to_option(partial, **fields)
        namespace = namespace or GLOBAL_NAMESPACE

        with self._lock:
            merged = self._store.update(option, namespace)
            instances = list(self._instances.get(namespace, {}).values())
            for instance in instances:
                instance.configure(merged)

        logger.debug("Configured %r, applied to %d logger(s)", namespace, len(instances))
        return merged

    def loggers(self, namespace: Namespace | None = None) -> list[Logger]:
        """Snapshot of cached loggers, optionally limited to one namespace."""
        with self._lock:
            if namespace is not None:
                return list(self._instances.get(namespace, {}).values())
            return [
                instance for regions in self._instances.values() for instance in regions.values()
            ]

    def close(self) -> None:
        """Close the sinks of every cached logger."""
        for instance in self.loggers():
            instance.sink.close()
