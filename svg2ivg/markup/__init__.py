"""
Markup module.

Turns an SVG document into canvas metadata plus a flat, ordered list of
canonical ``Path`` elements, applying the exclusion rules on the way.
"""

from svg2ivg.markup.elements import (
    Circle,
    Element,
    Ellipse,
    Path,
    Polygon,
    Rect,
    to_path,
)
from svg2ivg.markup.exclusion import (
    DEFAULT_EXCLUSIONS,
    ElementPredicate,
    ExactMatch,
    FillIsNone,
    is_excluded,
)
from svg2ivg.markup.normalizer import Canvas, Drawing, normalize

__all__ = [
    "Canvas",
    "Circle",
    "DEFAULT_EXCLUSIONS",
    "Drawing",
    "Element",
    "ElementPredicate",
    "Ellipse",
    "ExactMatch",
    "FillIsNone",
    "Path",
    "Polygon",
    "Rect",
    "is_excluded",
    "normalize",
    "to_path",
]
