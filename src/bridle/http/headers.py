"""Immutable, case-insensitive HTTP request headers.

Built once from the raw ASGI ``(name, value)`` byte pairs. Names are
lower-cased on construction; values are decoded as latin-1.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``headers["Content-Type"]`` returns the first value for the name.
    ``get_list`` returns every value (e.g. repeated ``Accept`` lines).
    """

    __slots__ = ("_index", "_raw")

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        index: dict[str, list[str]] = {}
        for name, value in raw:
            index.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
        self._raw = raw
        self._index = index

    @classmethod
    def from_dict(cls, headers: Mapping[str, str]) -> Headers:
        """Build headers from a plain ``{name: value}`` mapping."""
        return cls(
            tuple(
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in headers.items()
            )
        )

    def __getitem__(self, key: str) -> str:
        return self._index[key.lower()][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*, in the order they were received."""
        return list(self._index.get(key.lower(), ()))

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Raw header byte pairs as received from ASGI."""
        return self._raw
