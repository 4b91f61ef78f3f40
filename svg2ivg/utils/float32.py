"""Single-precision helpers shared by the parser, normalizer and encoder.

IconVG decoders do all their arithmetic in float32.  To predict exactly
what a decoder reconstructs, every coordinate we compute is rounded through
``numpy.float32`` before it is stored or compared.  Python floats are kept
as the storage type; they hold float32 values exactly.

A double-precision add/sub/mul followed by rounding to float32 gives the
same result as the float32 operation itself, so ``f32(a + b)`` matches a
decoder's ``a + b`` bit for bit.
"""

from __future__ import annotations

import math

import numpy as np


def f32(value: float) -> float:
    """Round *value* to the nearest float32 and return it as a Python float."""
    with np.errstate(over="ignore"):
        return float(np.float32(value))


def is_finite_f32(value: float) -> bool:
    """Return ``True`` if *value* is finite after rounding to float32."""
    return math.isfinite(f32(value))


def to_text(value: float) -> str:
    """Shortest decimal text that parses back to the same float32.

    Used when shapes are rewritten as path-data strings, so the rewritten
    string carries no more (and no fewer) digits than the source value.
    """
    text = np.format_float_positional(np.float32(value), trim="-")
    if text == "-0":
        return "0"
    return text
