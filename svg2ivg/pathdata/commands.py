"""Path-data commands -- the vocabulary between the parser and the encoder.

Every drawing instruction of the SVG path mini-language is an immutable,
slotted dataclass.  The parser resolves all operands to **absolute**
float32 coordinates, so the encoder never has to replay relative offsets
or smooth-curve reflections itself.  ``relative`` records how the command
was written in the source string; it does not change the meaning of the
stored coordinates.

Families
--------
Smooth curves only reflect the previous control point when the previous
command belongs to the same ``CurveFamily`` (``cubic`` for C/S, ``quad``
for Q/T).
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass
from typing import Literal

CurveFamily = Literal["cubic", "quad"]


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Command(ABC):
    """Base class for all path-data commands."""

    pass


# ---------------------------------------------------------------------------
# Subpath structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MoveTo(Command):
    """Start a new subpath at ``(x, y)``."""

    x: float
    y: float
    relative: bool = False


@dataclass(frozen=True, slots=True)
class ClosePath(Command):
    """Close the current subpath; the pen returns to the subpath start."""

    pass


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LineTo(Command):
    """Straight segment to ``(x, y)``."""

    x: float
    y: float
    relative: bool = False


@dataclass(frozen=True, slots=True)
class HLineTo(Command):
    """Horizontal segment to absolute ``x``; y is unchanged."""

    x: float
    relative: bool = False


@dataclass(frozen=True, slots=True)
class VLineTo(Command):
    """Vertical segment to absolute ``y``; x is unchanged."""

    y: float
    relative: bool = False


# ---------------------------------------------------------------------------
# Curves
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CubicTo(Command):
    """Cubic Bezier with control points ``(x1, y1)``, ``(x2, y2)``."""

    x1: float
    y1: float
    x2: float
    y2: float
    x: float
    y: float
    relative: bool = False


@dataclass(frozen=True, slots=True)
class SmoothCubicTo(Command):
    """Cubic Bezier written with the ``S``/``s`` shorthand.

    Parameters
    ----------
    x1, y1 : float
        Implicit first control point, resolved by the parser: the
        reflection of the previous cubic's second control point, or the
        current point when the previous command was not a cubic.
    x2, y2 : float
        Second control point.
    x, y : float
        End point.
    """

    x1: float
    y1: float
    x2: float
    y2: float
    x: float
    y: float
    relative: bool = False


@dataclass(frozen=True, slots=True)
class QuadTo(Command):
    """Quadratic Bezier with control point ``(x1, y1)``."""

    x1: float
    y1: float
    x: float
    y: float
    relative: bool = False


@dataclass(frozen=True, slots=True)
class SmoothQuadTo(Command):
    """Quadratic Bezier written with the ``T``/``t`` shorthand.

    ``(x1, y1)`` is the implicit control point resolved by the parser.
    """

    x1: float
    y1: float
    x: float
    y: float
    relative: bool = False


# ---------------------------------------------------------------------------
# Arcs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ArcTo(Command):
    """Elliptical arc to ``(x, y)``.

    Parameters
    ----------
    rx, ry : float
        Ellipse radii, as written.
    rotation : float
        X-axis rotation in **degrees**.
    large_arc, sweep : bool
        SVG arc flags.
    x, y : float
        End point.
    """

    rx: float
    ry: float
    rotation: float
    large_arc: bool
    sweep: bool
    x: float
    y: float
    relative: bool = False

