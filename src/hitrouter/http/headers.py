"""Immutable, case-insensitive HTTP headers.

Decoded once from the raw ASGI byte pairs; lookups are case-insensitive.
"""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns every value sent for a header.
    """

    __slots__ = ("_pairs",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        self._pairs: tuple[tuple[str, str], ...] = tuple(
            (name.decode("latin-1").lower(), value.decode("latin-1")) for name, value in raw
        )

    def __getitem__(self, key: str) -> str:
        wanted = key.lower()
        for name, value in self._pairs:
            if name == wanted:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._pairs))

    def __len__(self) -> int:
        return len({name for name, _ in self._pairs})

    def __repr__(self) -> str:
        return f"Headers({dict(self)!r})"

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        wanted = key.lower()
        return [value for name, value in self._pairs if name == wanted]
