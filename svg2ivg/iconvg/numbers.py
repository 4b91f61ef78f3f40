"""IconVG variable-width number encodings.

Every encoder picks the narrowest tier that reproduces the value exactly;
decoders tell the tiers apart by the low bits of the first byte::

    xxxxxxx0                      1 byte
    xxxxxx01 xxxxxxxx             2 bytes
    xxxxxx11 xxxxxxxx x8 x8       4 bytes

Naturals (counts, flags)
    1 byte ``n < 2**7``, 2 bytes ``n < 2**14``, else 4 bytes ``n < 2**30``.

Coordinates
    1 byte for integers in [-64, 64), 2 bytes for multiples of 1/64 in
    [-128, 128), else a 4-byte real.

Zero-to-one numbers and angles
    1 byte for multiples of 1/120 in [0, 1), 2 bytes for multiples of
    1/15120, else a 4-byte real.  Angles are fractions of a full turn.

4-byte reals
    float32 bits whose mantissa is rounded to a multiple of 4; the two
    freed low bits carry the ``11`` tier tag.  Decoding clears them.

All multi-byte forms are little-endian.
"""

from __future__ import annotations

import math
import struct

from svg2ivg.utils.float32 import f32

ZERO_TO_ONE_DENOMINATOR = 15120
_ZERO_TO_ONE_1BYTE_STEP = 126  # 15120 / 120


def _float_bits(value: float) -> int:
    return struct.unpack("<I", struct.pack("<f", value))[0]


def _bits_float(bits: int) -> float:
    return struct.unpack("<f", struct.pack("<I", bits))[0]


# ---------------------------------------------------------------------------
# Naturals
# ---------------------------------------------------------------------------


def encode_natural(n: int) -> bytes:
    """Encode a non-negative integer below ``2**30``."""
    if n < 0 or n >= 1 << 30:
        raise ValueError(f"natural number out of range: {n}")
    if n < 1 << 7:
        return bytes((n << 1,))
    if n < 1 << 14:
        return struct.pack("<H", (n << 2) | 0x01)
    return struct.pack("<I", (n << 2) | 0x03)


# ---------------------------------------------------------------------------
# Reals
# ---------------------------------------------------------------------------


def encode_4byte_real(value: float) -> bytes:
    """Encode *value* in the 4-byte tier, rounding off two mantissa bits."""
    bits = _float_bits(value)
    mantissa = bits & 0x7FFFFF
    # Round to the nearest multiple of 4 without carrying into the exponent.
    if mantissa < 0x7FFFFE:
        mantissa += 2
    bits = (bits & 0xFF800000) | mantissa | 0x03
    return struct.pack("<I", bits)


def decode_4byte_real(data: bytes) -> float:
    """Inverse of ``encode_4byte_real``."""
    bits = struct.unpack("<I", data[:4])[0]
    return _bits_float(bits & ~0x03 & 0xFFFFFFFF)


# ---------------------------------------------------------------------------
# Coordinates
# ---------------------------------------------------------------------------


def encode_coordinate(value: float) -> bytes:
    """Encode a coordinate using the smallest exact tier."""
    if -64 <= value < 64 and value == int(value):
        return bytes(((int(value) + 64) << 1,))
    if -128 <= value < 128:
        scaled = value * 64
        if scaled == int(scaled):
            return struct.pack("<H", ((int(scaled) + 128 * 64) << 2) | 0x01)
    return encode_4byte_real(value)


def coordinate_size(value: float) -> int:
    """Number of bytes ``encode_coordinate(value)`` produces."""
    if -64 <= value < 64 and value == int(value):
        return 1
    if -128 <= value < 128 and value * 64 == int(value * 64):
        return 2
    return 4


def quantize_coordinate(value: float) -> float:
    """The float32 a decoder reconstructs from ``encode_coordinate(value)``.

    Identity for the 1- and 2-byte tiers; the 4-byte tier loses the two
    lowest mantissa bits.
    """
    value = f32(value)
    if coordinate_size(value) < 4 or not math.isfinite(value):
        return value
    return decode_4byte_real(encode_4byte_real(value))


# ---------------------------------------------------------------------------
# Zero-to-one numbers and angles
# ---------------------------------------------------------------------------


def encode_zero_to_one(value: float) -> bytes:
    """Encode a number in [0, 1) using the smallest exact tier."""
    scaled = f32(value * ZERO_TO_ONE_DENOMINATOR)
    if 0 <= scaled < ZERO_TO_ONE_DENOMINATOR and scaled == int(scaled):
        u = int(scaled)
        if u % _ZERO_TO_ONE_1BYTE_STEP == 0:
            return bytes(((u // _ZERO_TO_ONE_1BYTE_STEP) << 1,))
        return struct.pack("<H", (u << 2) | 0x01)
    return encode_4byte_real(value)


def encode_angle(degrees: float) -> bytes:
    """Encode an angle given in degrees as a fraction of a full turn."""
    turns = degrees / 360.0
    return encode_zero_to_one(f32(turns - math.floor(turns)))
