"""Markup elements -- the closed set of SVG shapes we understand.

Each shape is a frozen dataclass.  Equality is structural over geometry
and the ``fill`` token; ``fill_opacity`` and ``opacity`` are declared with
``compare=False`` so that an exclusion template written without opacity
still matches a translucent source element.

Only ``Path`` survives normalization: the other variants are rewritten into
an equivalent path-data string by ``to_path``.

All numeric fields hold float32 values (see ``svg2ivg.utils.float32``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from svg2ivg.utils.float32 import f32, to_text

NO_FILL = "none"


# ---------------------------------------------------------------------------
# Element variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Path:
    """``<path>`` -- also the canonical form every other shape becomes.

    Parameters
    ----------
    d : str
        Path-data string with commas already replaced by spaces.
    fill : str
        Fill token as written (``""`` when absent, ``"none"`` allowed).
    fill_opacity, opacity : float | None
        Optional opacity attributes; excluded from equality.
    """

    d: str
    fill: str = ""
    fill_opacity: float | None = field(default=None, compare=False)
    opacity: float | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Circle:
    """``<circle>``."""

    cx: float
    cy: float
    r: float
    fill: str = ""
    fill_opacity: float | None = field(default=None, compare=False)
    opacity: float | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Ellipse:
    """``<ellipse>``."""

    cx: float
    cy: float
    rx: float
    ry: float
    fill: str = ""
    fill_opacity: float | None = field(default=None, compare=False)
    opacity: float | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Rect:
    """``<rect>`` (rounded corners are not supported)."""

    x: float
    y: float
    width: float
    height: float
    fill: str = ""
    fill_opacity: float | None = field(default=None, compare=False)
    opacity: float | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Polygon:
    """``<polygon>``, or ``<polyline>`` when ``closed`` is ``False``."""

    points: tuple[tuple[float, float], ...]
    closed: bool = True
    fill: str = ""
    fill_opacity: float | None = field(default=None, compare=False)
    opacity: float | None = field(default=None, compare=False)


Element = Union[Path, Circle, Ellipse, Rect, Polygon]
"""Closed set of source shapes."""


def clean_path_data(d: str) -> str:
    """Replace commas with spaces and collapse whitespace runs.

    Applied to every ``d`` attribute on load so exact-match templates do
    not depend on the separator style of the source file.
    """
    return " ".join(d.replace(",", " ").split())


# ---------------------------------------------------------------------------
# Conversion to canonical paths
# ---------------------------------------------------------------------------


def to_path(element: Element) -> Path:
    """Rewrite *element* as an equivalent ``Path``, keeping fill and opacity.

    Raises
    ------
    TypeError
        If *element* is not one of the known variants.
    """
    if isinstance(element, Path):
        return element
    if isinstance(element, Rect):
        d = _rect_d(element)
    elif isinstance(element, Circle):
        d = _ellipse_d(element.cx, element.cy, element.r, element.r)
    elif isinstance(element, Ellipse):
        d = _ellipse_d(element.cx, element.cy, element.rx, element.ry)
    elif isinstance(element, Polygon):
        d = _polygon_d(element)
    else:
        raise TypeError(f"not an SVG element: {type(element).__name__}")
    return Path(
        d=d,
        fill=element.fill,
        fill_opacity=element.fill_opacity,
        opacity=element.opacity,
    )


def _rect_d(r: Rect) -> str:
    t = to_text
    return f"M{t(r.x)} {t(r.y)} h{t(r.width)} v{t(r.height)} h{t(-r.width)} Z"


def _ellipse_d(cx: float, cy: float, rx: float, ry: float) -> str:
    # Two half-turn arcs: a single full-turn arc has coincident end points
    # and is degenerate.
    t = to_text
    radii = f"{t(rx)} {t(ry)}"
    diameter = f32(2 * rx)
    return (
        f"M{t(f32(cx - rx))} {t(cy)} "
        f"a{radii} 0 1 0 {t(diameter)} 0 "
        f"a{radii} 0 1 0 {t(-diameter)} 0 Z"
    )


def _polygon_d(p: Polygon) -> str:
    parts: list[str] = []
    for i, (x, y) in enumerate(p.points):
        parts.append(f"{'M' if i == 0 else 'L'}{to_text(x)} {to_text(y)}")
    if p.closed and parts:
        parts.append("Z")
    return " ".join(parts)
