"""
svg2ivg Package.

Compiles SVG icon markup into the compact IconVG binary vector format.
A structural normalizer collapses the supported shapes into canonical paths
and drops invisible helper shapes; the encoder then emits a size-optimized
IconVG instruction stream.

Subpackages:
    markup: SVG element model, exclusion rules, normalizer
    pathdata: Path-data command vocabulary and parser
    iconvg: Numeric encodings and the binary encoder
    configs: YAML configuration loading and validation
    utils: float32 helpers, filesystem, validators, logging setup
"""

from svg2ivg.converter import ConverterOptions, convert_file, from_content, from_file
from svg2ivg.errors import (
    ConversionError,
    EmptyDrawingError,
    EncodingError,
    InputReadError,
    MalformedPathDataError,
    MarkupParseError,
    UnsupportedElementError,
)

__version__ = "0.1.0"

__all__ = [
    "ConversionError",
    "ConverterOptions",
    "EmptyDrawingError",
    "EncodingError",
    "InputReadError",
    "MalformedPathDataError",
    "MarkupParseError",
    "UnsupportedElementError",
    "convert_file",
    "from_content",
    "from_file",
]
