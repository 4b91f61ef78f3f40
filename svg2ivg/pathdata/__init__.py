"""
Path-data module.

Parses the SVG path mini-language into immutable, absolute ``Command``
dataclasses.  This vocabulary is the contract between the markup
normalizer and the IconVG encoder.
"""

from svg2ivg.pathdata.commands import (
    ArcTo,
    ClosePath,
    Command,
    CubicTo,
    HLineTo,
    LineTo,
    MoveTo,
    QuadTo,
    SmoothCubicTo,
    SmoothQuadTo,
    VLineTo,
)
from svg2ivg.pathdata.parser import parse_path_data

__all__ = [
    "ArcTo",
    "ClosePath",
    "Command",
    "CubicTo",
    "HLineTo",
    "LineTo",
    "MoveTo",
    "QuadTo",
    "SmoothCubicTo",
    "SmoothQuadTo",
    "VLineTo",
    "parse_path_data",
]
