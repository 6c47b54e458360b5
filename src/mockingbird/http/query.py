"""Read-only query string parameters."""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class QueryParams(Mapping[str, str]):
    """Parsed query string.

    ``query["page"]`` returns the first value; ``get_list`` all of them.
    Blank values are kept (``?flag=`` gives ``{"flag": ""}``).
    """

    __slots__ = ("_data", "raw")

    def __init__(self, query_string: bytes | str = b"") -> None:
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        self.raw = query_string
        self._data = parse_qs(query_string, keep_blank_values=True)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"QueryParams({self.raw!r})"

    def get_list(self, key: str) -> list[str]:
        return list(self._data.get(key, ()))

    def to_dict(self) -> dict[str, str | list[str]]:
        """Single values as strings, repeated keys as lists."""
        return {key: values[0] if len(values) == 1 else list(values) for key, values in self._data.items()}
