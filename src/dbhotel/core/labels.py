"""Label selectors for database schemas.

A label filter is a mapping of label key to expected value. A value of
None means the key only has to be present, whatever its value. Every
multi-schema lookup in the hotel goes through these selectors, so they
are kept pure and side-effect free.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, Mapping

if TYPE_CHECKING:
    from dbhotel.core.schemas import DatabaseSchema


class SchemaSelector(ABC):
    """Base class for schema selectors."""

    @abstractmethod
    def matches(self, labels: Mapping[str, str | None]) -> bool:
        """
        Determine whether a label set satisfies this selector.

        Args:
            labels: Labels of the schema (or instance) being evaluated.

        Returns:
            True if the labels match, False otherwise.
        """
        ...


class LabelSelector(SchemaSelector):
    """
    Selector for a single label key.

    With a value the label must be present and equal to it; without one
    the key only has to exist.
    """

    def __init__(self, key: str, value: str | None = None):
        self.key = key
        self.value = value

    def matches(self, labels: Mapping[str, str | None]) -> bool:
        if self.key not in labels:
            return False
        if self.value is None:
            return True
        return labels[self.key] == self.value


class AndSelector(SchemaSelector):
    """Matches only if all child selectors match. Empty means match all."""

    def __init__(self, selectors: list[SchemaSelector]):
        self.selectors = selectors

    def matches(self, labels: Mapping[str, str | None]) -> bool:
        return all(s.matches(labels) for s in self.selectors)


def selector_for(labels_to_match: Mapping[str, str | None]) -> SchemaSelector:
    """Build the selector equivalent of a label filter mapping."""
    return AndSelector([LabelSelector(k, v) for k, v in labels_to_match.items()])


def matches_labels(
    labels: Mapping[str, str | None] | None,
    labels_to_match: Mapping[str, str | None],
) -> bool:
    """Return True if `labels` satisfies every entry of `labels_to_match`."""
    return selector_for(labels_to_match).matches(labels or {})


def find_all_matching_schemas(
    schemas: Iterable[DatabaseSchema],
    labels_to_match: Mapping[str, str | None],
) -> set[DatabaseSchema]:
    """Return the schemas whose labels satisfy the filter."""
    selector = selector_for(labels_to_match)
    return {s for s in schemas if selector.matches(s.labels or {})}
