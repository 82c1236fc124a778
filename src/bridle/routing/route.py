"""Route, RouteMatch, and PathSegment frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from bridle.routing.params import Params


class SegmentKind(Enum):
    STATIC = "static"
    PARAM = "param"
    CATCH_ALL = "catch_all"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Static:    ``/users``      (kind=STATIC, value="users")
    Param:     ``/:id``        (kind=PARAM, name="id")
    Catch-all: ``/*filepath``  (kind=CATCH_ALL, name="filepath")

    A trailing slash is a static segment with an empty value, so
    ``/users`` and ``/users/`` are different routes.
    """

    value: str
    kind: SegmentKind = SegmentKind.STATIC
    name: str = ""


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route: one handler for one ``(method, path)`` pair."""

    method: str
    path: str
    handler: Callable[..., Any]


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful lookup."""

    route: Route
    params: Params
