"""Path parameter bindings.

The router binds one ``Param`` per named (``:id``) or catch-all
(``*filepath``) segment when it matches a request path. Bindings keep the
order in which the segments appear in the pattern.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Param:
    """A single ``key=value`` path parameter binding."""

    key: str
    value: str


class Params(tuple[Param, ...]):
    """Ordered, immutable sequence of ``Param`` bindings.

    Behaves as a tuple, with name lookups on top::

        params = Params.of(("user", "alice"), ("id", "42"))
        params.by_name("id")      # "42"
        params.by_name("missing") # ""
        params.to_dict()          # {"user": "alice", "id": "42"}
    """

    __slots__ = ()

    def __new__(cls, items: Iterable[Param] = ()) -> Params:
        return super().__new__(cls, items)

    @classmethod
    def of(cls, *pairs: tuple[str, str]) -> Params:
        """Build params from ``(key, value)`` pairs."""
        return cls(Param(key, value) for key, value in pairs)

    def by_name(self, name: str) -> str:
        """Return the value of the first binding named *name*, or ``""``."""
        for param in self:
            if param.key == name:
                return param.value
        return ""

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the value bound to *name*, or *default* if unbound."""
        for param in self:
            if param.key == name:
                return param.value
        return default

    def keys(self) -> list[str]:
        return [param.key for param in self]

    def to_dict(self) -> dict[str, str]:
        return {param.key: param.value for param in self}

    def __repr__(self) -> str:
        items = ", ".join(f"{p.key}={p.value!r}" for p in self)
        return f"Params({items})"


EMPTY_PARAMS = Params()


def params(request: Any) -> Params:
    """Return the path parameters the router bound to *request*.

    Absence is not an error: requests that were never routed, or whose
    route has no named segments, yield an empty ``Params``.
    """
    bound = getattr(request, "path_params", None)
    if isinstance(bound, Params):
        return bound
    return EMPTY_PARAMS
