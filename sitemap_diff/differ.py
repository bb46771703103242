"""Sequence comparison helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Sequence

from .errors import InvalidArgumentError


@dataclass
class SequenceDiff:
    """Result of :func:`diff_sequences`.

    Every list keeps the order (and duplicates) of the sequence its
    elements were taken from.
    """

    common_elements: List[Any] = field(default_factory=list)
    elements_1_not_in_2: List[Any] = field(default_factory=list)
    elements_2_not_in_1: List[Any] = field(default_factory=list)


def _membership(items: Sequence[Any]) -> Callable[[Any], bool]:
    try:
        lookup = set(items)
    except TypeError:
        # unhashable elements: fall back to a linear scan
        return lambda element: element in items

    def contains(element: Any) -> bool:
        try:
            return element in lookup
        except TypeError:
            return element in items

    return contains


def diff_sequences(seq_a: Sequence[Any], seq_b: Sequence[Any]) -> SequenceDiff:
    """Compare two sequences element by element.

    ``common_elements`` holds the elements of *seq_a* that appear anywhere in
    *seq_b*; ``elements_1_not_in_2`` the rest of *seq_a*; and
    ``elements_2_not_in_1`` the elements of *seq_b* absent from *seq_a*.
    Membership is a plain ``in`` test, not a multiset count.

    Raises:
        InvalidArgumentError: If either argument is not a list or tuple.
    """
    if not isinstance(seq_a, (list, tuple)) or not isinstance(seq_b, (list, tuple)):
        raise InvalidArgumentError("Both inputs must be sequences (list or tuple)")

    in_a = _membership(seq_a)
    in_b = _membership(seq_b)

    return SequenceDiff(
        common_elements=[element for element in seq_a if in_b(element)],
        elements_1_not_in_2=[element for element in seq_a if not in_b(element)],
        elements_2_not_in_1=[element for element in seq_b if not in_a(element)],
    )


def strip_prefix(items: Sequence[str], prefix: str) -> List[str]:
    """Remove *prefix* from every string in *items* that starts with it."""
    return [item[len(prefix):] if item.startswith(prefix) else item for item in items]
