"""Case-insensitive, read-only request headers.

Built from the raw ASGI byte pairs; names are lower-cased and values
decoded once at construction.
"""

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only request headers.

    ``headers["x-token"]`` returns the first value; ``get_list`` returns
    every value sent under that name.
    """

    __slots__ = ("_items", "_values")

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        items = tuple(
            (name.decode("latin-1").lower(), value.decode("latin-1")) for name, value in raw
        )
        values: dict[str, list[str]] = {}
        for name, value in items:
            values.setdefault(name, []).append(value)
        self._items = items
        self._values = values

    def __getitem__(self, key: str) -> str:
        return self._values[key.lower()][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"

    def get_list(self, key: str) -> list[str]:
        return list(self._values.get(key.lower(), ()))

    def to_dict(self) -> dict[str, str]:
        """First value per header, for logging or echo handlers."""
        return {name: values[0] for name, values in self._values.items()}

    @property
    def raw(self) -> tuple[tuple[str, str], ...]:
        """Decoded header pairs in the order they were received."""
        return self._items
