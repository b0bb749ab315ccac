"""
Per-namespace default configuration.
"""

import logging
import threading

from .identity import GLOBAL_NAMESPACE, Namespace
from .options import DEFAULT_OPTION, LoggerOption, LoggerOptionActual, merge_option

logger = logging.getLogger(__name__)


class ConfigurationStore:
    """
    Holds the default configuration record of each namespace.

    Records are immutable; updating a namespace replaces its entry. Unseen
    namespaces start from the global default on first read or write.
    """

    def __init__(self):
        self._global_default = DEFAULT_OPTION
        self._defaults: dict[Namespace, LoggerOptionActual] = {}
        self._lock = threading.RLock()

    @property
    def global_default(self) -> LoggerOptionActual:
        return self._global_default

    def get_configuration(self, namespace: Namespace | None = None) -> LoggerOptionActual:
        """Get the namespace's current default record, creating it if needed."""
        namespace = namespace or GLOBAL_NAMESPACE
        with self._lock:
            option = self._defaults.get(namespace)
            if option is None:
                option = self._global_default
                self._defaults[namespace] = option
                logger.debug("Created default configuration for %r", namespace)
            return option

    def update(
        self, partial: LoggerOption, namespace: Namespace | None = None
    ) -> LoggerOptionActual:
        """
        Merge a patch into the namespace's default record.

        Returns:
            The new default record
        """
        namespace = namespace or GLOBAL_NAMESPACE
        with self._lock:
            option = merge_option(self.get_configuration(namespace), partial)
            self._defaults[namespace] = option
            return option

    def namespaces(self) -> list[Namespace]:
        with self._lock:
            return list(self._defaults)

    def __contains__(self, namespace: Namespace) -> bool:
        with self._lock:
            return namespace in self._defaults
