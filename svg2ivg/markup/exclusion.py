"""Element exclusion rules.

Icon sets routinely ship invisible helper shapes (``fill="none"`` bounding
boxes, full-canvas background paths).  Before a source element contributes
geometry, it is checked against an ordered tuple of predicates and dropped
on the first match.

Predicates are plain values (``FillIsNone``, ``ExactMatch``) so that rule
sets compare, hash and load from YAML.  Anything exposing a
``matches(element) -> bool`` method is accepted as well.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable

from svg2ivg.markup.elements import NO_FILL, Element, Path

logger = logging.getLogger(__name__)


@runtime_checkable
class ElementPredicate(Protocol):
    """Capability interface for exclusion rules."""

    def matches(self, element: Element) -> bool:
        ...


@dataclass(frozen=True, slots=True)
class FillIsNone:
    """Drop any element whose fill token is exactly ``"none"``."""

    def matches(self, element: Element) -> bool:
        return element.fill == NO_FILL


@dataclass(frozen=True, slots=True)
class ExactMatch:
    """Drop elements structurally equal to *element* (opacity ignored)."""

    element: Element

    def matches(self, element: Element) -> bool:
        return element == self.element


FULL_CANVAS_BACKGROUND = Path(d="M0 0h24v24H0V0z")
"""The invisible 24x24 bounding box common in material-style icon sets."""

DEFAULT_EXCLUSIONS: tuple[ElementPredicate, ...] = (
    FillIsNone(),
    ExactMatch(FULL_CANVAS_BACKGROUND),
)


def is_excluded(element: Element, predicates: Sequence[ElementPredicate]) -> bool:
    """Return ``True`` if any predicate matches *element* (first match wins)."""
    for predicate in predicates:
        if predicate.matches(element):
            logger.debug(
                "Excluded %s by %s", type(element).__name__, predicate
            )
            return True
    return False
