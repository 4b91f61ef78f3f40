"""Shape normalizer -- SVG markup to a flat list of canonical paths.

Walks the document depth-first in source order.  Groups are flattened in
place, descriptive elements are skipped, every shape is checked against
the exclusion rules and, if kept, rewritten as a ``Path``.

Supported elements:
    path, rect, circle, ellipse, polygon, polyline, g,
    and the ignored title / desc / metadata.

Any other element aborts the conversion with ``UnsupportedElementError``;
there is no partial-success mode.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Sequence

from lxml import etree

from svg2ivg.errors import EmptyDrawingError, MarkupParseError, UnsupportedElementError
from svg2ivg.markup.elements import (
    Circle,
    Element,
    Ellipse,
    Path,
    Polygon,
    Rect,
    clean_path_data,
    to_path,
)
from svg2ivg.markup.exclusion import DEFAULT_EXCLUSIONS, ElementPredicate, is_excluded
from svg2ivg.utils.float32 import f32, is_finite_f32

logger = logging.getLogger(__name__)

_LIST_SPLIT_RE = re.compile(r"[\s,]+")
_IGNORED_TAGS = frozenset({"title", "desc", "metadata"})


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Canvas:
    """Nominal size and coordinate system of the source document.

    ``view_box`` is ``(min_x, min_y, width, height)``; width and height are
    always positive.
    """

    width: float
    height: float
    view_box: tuple[float, float, float, float]


@dataclass(frozen=True, slots=True)
class Drawing:
    """Normalized document: canvas metadata plus canonical paths in order."""

    canvas: Canvas
    paths: tuple[Path, ...]


# ---------------------------------------------------------------------------
# Attribute parsing
# ---------------------------------------------------------------------------


def _local_name(tag: str) -> str:
    return etree.QName(tag).localname


def _parse_number(text: str, what: str) -> float:
    value = text.strip()
    if value.endswith("px"):
        value = value[:-2]
    try:
        result = f32(float(value))
    except ValueError as exc:
        raise MarkupParseError(f"invalid number for {what}: {text!r}") from exc
    if not is_finite_f32(result):
        raise MarkupParseError(f"number out of range for {what}: {text!r}")
    return result


def _number(elem: etree._Element, name: str, default: float = 0.0) -> float:
    raw = elem.get(name)
    if raw is None or not raw.strip():
        return default
    return _parse_number(raw, f"{_local_name(elem.tag)}@{name}")


def _optional_number(elem: etree._Element, name: str) -> float | None:
    raw = elem.get(name)
    if raw is None or not raw.strip():
        return None
    return _parse_number(raw, f"{_local_name(elem.tag)}@{name}")


def _number_list(text: str, what: str) -> list[float]:
    tokens = [t for t in _LIST_SPLIT_RE.split(text.strip()) if t]
    return [_parse_number(t, what) for t in tokens]


def _paint(elem: etree._Element) -> dict:
    return {
        "fill": (elem.get("fill") or "").strip(),
        "fill_opacity": _optional_number(elem, "fill-opacity"),
        "opacity": _optional_number(elem, "opacity"),
    }


# ---------------------------------------------------------------------------
# Per-element parsers
# ---------------------------------------------------------------------------


def _parse_path(elem: etree._Element) -> Path:
    return Path(d=clean_path_data(elem.get("d") or ""), **_paint(elem))


def _parse_rect(elem: etree._Element) -> Rect:
    return Rect(
        x=_number(elem, "x"),
        y=_number(elem, "y"),
        width=_number(elem, "width"),
        height=_number(elem, "height"),
        **_paint(elem),
    )


def _parse_circle(elem: etree._Element) -> Circle:
    return Circle(
        cx=_number(elem, "cx"),
        cy=_number(elem, "cy"),
        r=_number(elem, "r"),
        **_paint(elem),
    )


def _parse_ellipse(elem: etree._Element) -> Ellipse:
    return Ellipse(
        cx=_number(elem, "cx"),
        cy=_number(elem, "cy"),
        rx=_number(elem, "rx"),
        ry=_number(elem, "ry"),
        **_paint(elem),
    )


def _parse_polygon(elem: etree._Element) -> Polygon:
    tag = _local_name(elem.tag)
    values = _number_list(elem.get("points") or "", f"{tag}@points")
    if len(values) % 2:
        raise MarkupParseError(
            f"{tag}@points needs an even number of values, got {len(values)}"
        )
    points = tuple(zip(values[0::2], values[1::2]))
    return Polygon(points=points, closed=tag == "polygon", **_paint(elem))


_SHAPE_PARSERS: dict[str, Callable[[etree._Element], Element]] = {
    "path": _parse_path,
    "rect": _parse_rect,
    "circle": _parse_circle,
    "ellipse": _parse_ellipse,
    "polygon": _parse_polygon,
    "polyline": _parse_polygon,
}


# ---------------------------------------------------------------------------
# Tree walk
# ---------------------------------------------------------------------------


def _collect(
    parent: etree._Element,
    exclusions: Sequence[ElementPredicate],
    out: list[Path],
) -> None:
    """Append the canonical paths of *parent*'s children to *out*."""
    for child in parent:
        if not isinstance(child.tag, str):
            continue
        tag = _local_name(child.tag)
        if tag == "g":
            _collect(child, exclusions, out)
            continue
        if tag in _IGNORED_TAGS:
            continue
        parse = _SHAPE_PARSERS.get(tag)
        if parse is None:
            raise UnsupportedElementError(tag)
        element = parse(child)
        if is_excluded(element, exclusions):
            continue
        path = to_path(element)
        if not path.d.strip():
            logger.debug("Dropped <%s> with no path data", tag)
            continue
        out.append(path)


def _parse_canvas(root: etree._Element) -> Canvas:
    width = _number(root, "width")
    height = _number(root, "height")

    raw_vb = root.get("viewBox")
    if raw_vb is not None and raw_vb.strip():
        values = _number_list(raw_vb, "svg@viewBox")
        if len(values) != 4:
            raise MarkupParseError(
                f"svg@viewBox needs 4 values, got {len(values)}: {raw_vb!r}"
            )
        view_box = (values[0], values[1], values[2], values[3])
    else:
        view_box = (0.0, 0.0, 0.0, 0.0)

    if view_box[2] == 0 and view_box[3] == 0:
        view_box = (0.0, 0.0, width, height)
    if view_box[2] <= 0 or view_box[3] <= 0:
        raise MarkupParseError(
            f"view box must have positive width and height, got {view_box}"
        )
    return Canvas(width=width, height=height, view_box=view_box)


def normalize(
    content: bytes | str,
    exclusions: Sequence[ElementPredicate] = DEFAULT_EXCLUSIONS,
) -> Drawing:
    """Parse SVG markup into canvas metadata and canonical paths.

    Parameters
    ----------
    content : bytes | str
        SVG document.
    exclusions : Sequence[ElementPredicate]
        Rules evaluated, in order, against every source shape.

    Returns
    -------
    Drawing
        Canvas plus the kept paths, in document order.

    Raises
    ------
    MarkupParseError
        If the XML is malformed, the root is not ``<svg>``, or an
        attribute holds an invalid number.
    UnsupportedElementError
        On any element outside the supported subset.
    EmptyDrawingError
        If no shape survives exclusion.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    parser = etree.XMLParser(
        remove_comments=True,
        remove_pis=True,
        resolve_entities=False,
        no_network=True,
    )
    try:
        root = etree.fromstring(content, parser)
    except etree.XMLSyntaxError as exc:
        raise MarkupParseError(f"invalid SVG document: {exc}") from exc

    if _local_name(root.tag) != "svg":
        raise MarkupParseError(
            f"root element must be <svg>, got <{_local_name(root.tag)}>"
        )

    canvas = _parse_canvas(root)
    paths: list[Path] = []
    _collect(root, exclusions, paths)
    if not paths:
        raise EmptyDrawingError("no drawable element left after exclusions")

    logger.debug(
        "Normalized %d paths, view box %s", len(paths), canvas.view_box
    )
    return Drawing(canvas=canvas, paths=tuple(paths))
