"""Row/column selectors: "any" or an explicit set of indices."""

import enum
from typing import Any


ANY_OPT = "any"


class AnyMarker(enum.Enum):
    """Sentinel selecting every row or column."""
    ANY = ANY_OPT


ANY = AnyMarker.ANY


class IndexSet:
    """An explicit, ordered set of row or column indices."""

    def __init__(self, indices: tuple):
        self.indices = indices

    def __iter__(self):
        return iter(self.indices)

    def __len__(self) -> int:
        return len(self.indices)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, IndexSet) and self.indices == other.indices

    def __hash__(self) -> int:
        return hash(self.indices)

    def __repr__(self) -> str:
        return f"IndexSet({list(self.indices)!r})"


Selector = AnyMarker | IndexSet


def normalize(value: Any) -> Selector:
    """Fully qualify a user preference for which rows or columns to use.

    ``None`` and the literal ``"any"`` select everything, a list or tuple is
    taken as given and any other scalar becomes a one-element set. Already
    normalized selectors are returned unchanged.
    """
    if isinstance(value, (AnyMarker, IndexSet)):
        return value
    if value is None or (isinstance(value, str) and value == ANY_OPT):
        return ANY
    if isinstance(value, (list, tuple)):
        return IndexSet(tuple(value))
    return IndexSet((value,))


def matches(selector: Selector, index: int) -> bool:
    """Check if an index falls within the selector."""
    if selector is ANY:
        return True
    return index in selector.indices


def in_bounds(selector: IndexSet, length: int) -> list[int]:
    """Return the selected indices that exist in a line of the given length.

    Non-integer and negative indices never address a position.
    """
    return [
        i for i in selector.indices
        if isinstance(i, int) and not isinstance(i, bool) and 0 <= i < length
    ]
