"""
Identity tokens for logger namespaces and regions.

Tokens compare and hash by identity: two tokens built from the same text
are still different keys.
"""


class Identity:
    """Opaque identity token with an optional display description."""

    __slots__ = ("_description",)

    def __init__(self, description: str | None = None):
        self._description = description

    @property
    def description(self) -> str | None:
        return self._description

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._description!r})"


class Namespace(Identity):
    """Isolation domain for a group of loggers sharing one configuration."""

    __slots__ = ()


class Region(Identity):
    """Sub-identity within a namespace; one logger per (namespace, region)."""

    __slots__ = ()


GLOBAL_NAMESPACE = Namespace("global")
GLOBAL_REGION = Region("global")
