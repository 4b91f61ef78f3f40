"""
IconVG module.

Encodes normalized drawings into the IconVG binary format: variable-width
number tiers plus a size-optimizing instruction encoder.
"""

from svg2ivg.iconvg.encoder import IconVGEncoder

__all__ = ["IconVGEncoder"]
