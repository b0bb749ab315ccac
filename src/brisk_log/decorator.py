"""
Lazy logger accessor for classes.
"""

from typing import Any

from .config import get_registry
from .identity import Namespace, Region
from .logger import Logger
from .registry import LoggerRegistry


class Log:
    """
    Read-only class attribute resolving to a registry logger on each access.

    Nothing is cached on the owner; the registry guarantees the same logger
    for the same (region, namespace).

    Example:
        class OrderService:
            logger = Log(Region("orders"))

            def place(self, order):
                self.logger.info("placing order", order)
    """

    def __init__(
        self,
        region: Region | None = None,
        namespace: Namespace | None = None,
        registry: LoggerRegistry | None = None,
    ):
        """
        Initialize the accessor.

        Args:
            region: Region identity (default: GLOBAL_REGION)
            namespace: Namespace identity (default: GLOBAL_NAMESPACE)
            registry: Registry to resolve from (default: the process registry)
        """
        self.region = region
        self.namespace = namespace
        self.registry = registry
        self.attr_name: str | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.attr_name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Logger:
        registry = self.registry or get_registry()
        return registry.get_logger(self.region, self.namespace)

    def __set__(self, instance: Any, value: Any) -> None:
        raise AttributeError(f"Logger attribute {self.attr_name!r} is read-only")
