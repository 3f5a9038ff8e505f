"""
=============================================================================
RESPONSE HEADERS
=============================================================================

A small multi-valued header map used by every response writer.

=============================================================================
WHY NOT A PLAIN DICT?
=============================================================================

HTTP header names are case-insensitive, and some headers legitimately
appear more than once in a response:

    Set-Cookie: session=abc; Path=/
    Set-Cookie: theme=dark; Path=/

A Dict[str, str] can hold only one value per name, and "content-type"
and "Content-Type" would be two different keys. Headers stores a list of
values per CANONICAL name:

    "content-type"  ──┐
    "CONTENT-TYPE"  ──┼──►  "Content-Type": ["text/plain"]
    "Content-Type"  ──┘

Canonical form capitalizes the first letter of each dash-separated part.

=============================================================================
"""

from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union


HeaderValues = Union[str, Sequence[str]]


def canonical_header_name(name: str) -> str:
    """
    Return the canonical form of a header name.

    Examples:
        >>> canonical_header_name("content-type")
        'Content-Type'
        >>> canonical_header_name("X-REQUEST-ID")
        'X-Request-Id'
    """
    return "-".join(part.capitalize() for part in name.strip().split("-"))


class Headers:
    """
    Case-insensitive, multi-valued mapping of header names to values.

    Usage:
        headers = Headers({"Content-Type": "text/plain"})
        headers.add("Set-Cookie", "a=1")
        headers.add("Set-Cookie", "b=2")
        headers.get_all("set-cookie")   # ["a=1", "b=2"]
        headers.set("Content-Type", "text/html")
        headers.delete("set-cookie")
    """

    def __init__(self, initial: Optional[Mapping[str, HeaderValues]] = None):
        self._values: Dict[str, List[str]] = {}
        if initial:
            for name, values in initial.items():
                for value in _as_list(values):
                    self.add(name, value)

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value of a header, or `default`."""
        values = self._values.get(canonical_header_name(name))
        return values[0] if values else default

    def get_all(self, name: str) -> List[str]:
        """Return every value of a header (empty list if missing)."""
        return list(self._values.get(canonical_header_name(name), []))

    def items(self) -> Iterator[Tuple[str, str]]:
        """Yield (name, value) pairs, one per value, in insertion order."""
        for name, values in self._values.items():
            for value in values:
                yield name, value

    def keys(self) -> List[str]:
        return list(self._values)

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: list(values) for name, values in self._values.items()}

    def copy(self) -> "Headers":
        return Headers(self.to_dict())

    # =========================================================================
    # WRITE ACCESS
    # =========================================================================

    def set(self, name: str, value: str) -> None:
        """Replace all values of a header with a single value."""
        self._values[canonical_header_name(name)] = [value]

    def add(self, name: str, value: str) -> None:
        """Append a value to a header, keeping existing values."""
        self._values.setdefault(canonical_header_name(name), []).append(value)

    def delete(self, name: str) -> None:
        """Remove a header entirely. Missing headers are ignored."""
        self._values.pop(canonical_header_name(name), None)

    # =========================================================================
    # PROTOCOL METHODS
    # =========================================================================

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and canonical_header_name(name) in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._values == other._values
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({self._values!r})"


def _as_list(values: HeaderValues) -> List[str]:
    if isinstance(values, str):
        return [values]
    return list(values)
