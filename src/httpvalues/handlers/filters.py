"""
=============================================================================
ACCESS FILTERS
=============================================================================

A filter decides whether a resolved file path may be served by a Dir.

    Dir("static", filter=Dirs(["static/public", "static/assets"]))

    static/public/logo.png    ──►  allowed
    static/private/keys.txt   ──►  denied (404, same as a missing file)

Filters always receive forward-slash paths, whatever the host OS uses,
so one filter behaves the same on every platform.

=============================================================================
CONTAINMENT, NOT STRING PREFIX
=============================================================================

Dirs checks that a path is INSIDE one of its directories:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   dirs = ["one"]                                                    │
    │                                                                      │
    │   "one/two"   allowed      "one" followed by "/"                    │
    │   "one/"      allowed                                               │
    │   "one"       denied       the directory itself                     │
    │   "onetwo"    denied       shares the prefix, different directory   │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple


class Filter(ABC):
    """Predicate over forward-slash file paths."""

    @abstractmethod
    def allow(self, path: str) -> bool:
        """True if the file at `path` may be served."""


@dataclass(frozen=True, init=False)
class Dirs(Filter):
    """
    Allow-list of directories. A path is allowed iff it lies inside one
    of them. An empty list denies everything.
    """

    dirs: Tuple[str, ...]

    def __init__(self, dirs: Iterable[str] = ()):
        object.__setattr__(self, "dirs", tuple(dirs))

    def allow(self, path: str) -> bool:
        return any(is_subpath(sup, path) for sup in self.dirs)


@dataclass(frozen=True)
class FilterFunc(Filter):
    """
    Adapts a plain function to the Filter interface.

    A missing function denies everything.
    """

    func: Optional[Callable[[str], bool]] = None

    def allow(self, path: str) -> bool:
        if self.func is None:
            return False
        return bool(self.func(path))


def is_subpath(sup: str, sub: str) -> bool:
    """
    True if `sub` is `sup` followed by "/" and anything.

    Examples:
        >>> is_subpath("one", "one/two")
        True
        >>> is_subpath("one", "one")
        False
        >>> is_subpath("one", "onetwo")
        False
    """
    return len(sub) > len(sup) and sub.startswith(sup) and sub[len(sup)] == "/"


def as_filter(value) -> Optional[Filter]:
    """
    Coerce a Dir filter argument.

    Filters pass through, None stays None, callables become FilterFunc.
    """
    if value is None or isinstance(value, Filter):
        return value
    if callable(value):
        return FilterFunc(value)
    raise TypeError(f"expected Filter or callable, got {type(value).__name__}")
