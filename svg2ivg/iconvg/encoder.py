"""IconVG encoder -- canonical paths to an IconVG byte stream.

Stream layout::

    magic  "\\x89IVG"
    metadata: chunk count, then (length, MID, payload) per chunk
        MID 0  view box (only when it differs from -32,-32,+32,+32)
        MID 1  suggested palette: one opaque-black foreground placeholder
    per path (styling mode):
        [SetCReg]  only for translucent paths
        StartPath  -> drawing mode
        drawing ops ...
        ClosePathEndPath -> back to styling mode

Opcode selection:
    Every drawing command is re-expressed from the decoder's point of view.
    The encoder mirrors the decoder's float32 pen, last control point and
    curve family, builds every valid form of the command (H/V for
    axis-aligned lines, the smooth shorthand when the decoder's reflected
    control point is exactly the one needed, absolute and relative) and
    keeps the one with the fewest operand bytes.  Relative wins ties.
    Runs of the same op share one opcode byte with a repeat count.

Colour:
    Fill colours are left to the consuming widget, which substitutes
    custom palette colour 0.  Opacity is baked in: a translucent path is
    filled from a colour register holding a blend of transparent and
    palette colour 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from svg2ivg.errors import EncodingError
from svg2ivg.iconvg.numbers import (
    encode_angle,
    encode_coordinate,
    encode_natural,
    quantize_coordinate,
)
from svg2ivg.markup.elements import Path
from svg2ivg.markup.normalizer import Canvas, Drawing
from svg2ivg.pathdata.commands import (
    ArcTo,
    ClosePath,
    Command,
    CubicTo,
    CurveFamily,
    HLineTo,
    LineTo,
    MoveTo,
    QuadTo,
    SmoothCubicTo,
    SmoothQuadTo,
    VLineTo,
)
from svg2ivg.pathdata.parser import parse_path_data
from svg2ivg.utils.float32 import f32

logger = logging.getLogger(__name__)

MAGIC = b"\x89IVG"
DEFAULT_VIEW_BOX = (-32.0, -32.0, 32.0, 32.0)

MID_VIEW_BOX = 0
MID_SUGGESTED_PALETTE = 1

# Suggested palette: 1 colour (low 6 bits = count - 1), 1-byte colour
# format (high 2 bits = 0), colour 0x00 = opaque black.
PALETTE_PLACEHOLDER = bytes((0x00, 0x00))

# Styling opcodes
OP_SET_CREG_INDIRECT = 0xA0
OP_START_PATH = 0xC0

# Drawing opcodes
OP_CLOSE_END_PATH = 0xE1
OP_CLOSE_ABS_MOVE_TO = 0xE2

# 1-byte colour codes used in blends
COLOR_TRANSPARENT = 0x7F
COLOR_CUSTOM_PALETTE_0 = 0x80

MAX_COLOR_ADJ = 6

DRAW_OPS: dict[str, tuple[int, int]] = {
    # letter: (opcode base, max repeat count)
    "L": (0x00, 32),
    "l": (0x20, 32),
    "T": (0x40, 16),
    "t": (0x50, 16),
    "Q": (0x60, 16),
    "q": (0x70, 16),
    "S": (0x80, 16),
    "s": (0x90, 16),
    "C": (0xA0, 16),
    "c": (0xB0, 16),
    "A": (0xC0, 16),
    "a": (0xD0, 16),
    "H": (0xE6, 1),
    "h": (0xE7, 1),
    "V": (0xE8, 1),
    "v": (0xE9, 1),
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


Point = tuple[float, float]


def _coords(*values: float) -> bytes:
    return b"".join(encode_coordinate(v) for v in values)


def _points(points: list[Point]) -> bytes:
    return b"".join(encode_coordinate(x) + encode_coordinate(y) for x, y in points)


@dataclass
class _Pen:
    """Decoder-visible drawing state, in float32."""

    x: float = 0.0
    y: float = 0.0
    start_x: float = 0.0
    start_y: float = 0.0
    ctrl_x: float = 0.0
    ctrl_y: float = 0.0
    family: CurveFamily | None = None

    def move(self, x: float, y: float) -> None:
        self.x, self.y = x, y
        self.start_x, self.start_y = x, y
        self.family = None

    def reflected(self) -> Point:
        return f32(2 * self.x - self.ctrl_x), f32(2 * self.y - self.ctrl_y)

    def relative(self, points: list[Point]) -> list[Point] | None:
        """Offsets from the pen that decode back to exactly *points*."""
        offsets: list[Point] = []
        for px, py in points:
            dx, dy = f32(px - self.x), f32(py - self.y)
            if quantize_coordinate(dx) != dx or quantize_coordinate(dy) != dy:
                return None
            if f32(self.x + dx) != px or f32(self.y + dy) != py:
                return None
            offsets.append((dx, dy))
        return offsets


class _OpRun:
    """Coalesces consecutive identical drawing ops into one opcode."""

    def __init__(self, buf: bytearray) -> None:
        self._buf = buf
        self._letter: str | None = None
        self._payloads: list[bytes] = []

    def add(self, letter: str, payload: bytes) -> None:
        if self._letter is not None and (
            letter != self._letter
            or len(self._payloads) == DRAW_OPS[self._letter][1]
        ):
            self.flush()
        self._letter = letter
        self._payloads.append(payload)

    def flush(self) -> None:
        if self._letter is None:
            return
        base, _ = DRAW_OPS[self._letter]
        self._buf.append(base + len(self._payloads) - 1)
        for payload in self._payloads:
            self._buf += payload
        self._letter = None
        self._payloads = []


# ---------------------------------------------------------------------------
# Encoder
# ---------------------------------------------------------------------------


class IconVGEncoder:
    """Compile a normalized ``Drawing`` into IconVG bytes.

    Parameters
    ----------
    output_size : float | None
        Size of the icon coordinate space.  ``None`` keeps the source
        view-box units.  Otherwise all geometry (and the view box written to
        the header) is scaled by ``output_size / max(view box w, h)``.

    Notes
    -----
    The encoder holds per-call state only; ``encode`` resets it, so one
    instance may be reused for many drawings (but not concurrently).
    """

    def __init__(self, output_size: float | None = None) -> None:
        if output_size is not None and not output_size > 0:
            raise ValueError(f"output_size must be positive, got {output_size}")
        self._output_size = output_size
        self._scale: float = 1.0
        self._alpha_adj: dict[int, int] = {}
        self._next_adj: int = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def encode(self, drawing: Drawing) -> bytes:
        """Encode *drawing* as a complete IconVG file.

        Raises
        ------
        MalformedPathDataError
            If any path's ``d`` string does not parse.
        """
        buf = bytearray()
        self._reset_state(drawing.canvas)
        self._write_header(drawing.canvas, buf)

        emitted = 0
        for path in drawing.paths:
            if self._encode_path(path, buf):
                emitted += 1

        logger.info(
            "Encoded %d/%d paths into %d bytes",
            emitted, len(drawing.paths), len(buf),
        )
        return bytes(buf)

    # ------------------------------------------------------------------
    # State / header
    # ------------------------------------------------------------------

    def _reset_state(self, canvas: Canvas) -> None:
        _, _, vb_w, vb_h = canvas.view_box
        if self._output_size is None:
            self._scale = 1.0
        else:
            self._scale = f32(self._output_size / max(vb_w, vb_h))
        self._alpha_adj = {}
        self._next_adj = 0

    def _coord(self, value: float) -> float:
        if self._scale != 1.0:
            value = f32(value * self._scale)
        return quantize_coordinate(value)

    def _point(self, x: float, y: float) -> Point:
        return self._coord(x), self._coord(y)

    def _write_header(self, canvas: Canvas, buf: bytearray) -> None:
        buf += MAGIC

        min_x, min_y, vb_w, vb_h = canvas.view_box
        view_box = (
            self._coord(min_x),
            self._coord(min_y),
            self._coord(f32(min_x + vb_w)),
            self._coord(f32(min_y + vb_h)),
        )

        chunks: list[bytes] = []
        if view_box != DEFAULT_VIEW_BOX:
            chunks.append(encode_natural(MID_VIEW_BOX) + _coords(*view_box))
        chunks.append(encode_natural(MID_SUGGESTED_PALETTE) + PALETTE_PLACEHOLDER)

        buf += encode_natural(len(chunks))
        for chunk in chunks:
            buf += encode_natural(len(chunk))
            buf += chunk

    # ------------------------------------------------------------------
    # Colour registers
    # ------------------------------------------------------------------

    def _color_adj(self, path: Path, buf: bytearray) -> int:
        """Return the CREG adjustment filling *path*, emitting SetCReg if new.

        Opaque paths use adj 0 (palette colour 0 itself).  Each distinct
        alpha gets one of the registers adj 1..6, recycled round-robin.
        """
        opacity = 1.0
        if path.opacity is not None:
            opacity *= path.opacity
        if path.fill_opacity is not None:
            opacity *= path.fill_opacity
        alpha = round(min(max(opacity, 0.0), 1.0) * 0xFF)
        if alpha == 0xFF:
            return 0

        adj = self._alpha_adj.get(alpha)
        if adj is not None:
            return adj

        adj = self._next_adj % MAX_COLOR_ADJ + 1
        self._next_adj += 1
        for stale in [a for a, r in self._alpha_adj.items() if r == adj]:
            del self._alpha_adj[stale]
        self._alpha_adj[alpha] = adj

        # CREG[CSEL-adj] = blend(alpha, transparent, palette[0])
        buf.append(OP_SET_CREG_INDIRECT | adj)
        buf += bytes((alpha, COLOR_TRANSPARENT, COLOR_CUSTOM_PALETTE_0))
        return adj

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def _encode_path(self, path: Path, buf: bytearray) -> bool:
        """Append one path group to *buf*; return ``False`` if it was empty."""
        commands = parse_path_data(path.d)
        if not commands:
            logger.warning("Skipping path with empty path data")
            return False

        adj = self._color_adj(path, buf)
        first = commands[0]
        assert isinstance(first, MoveTo)

        pen = _Pen()
        x, y = self._point(first.x, first.y)
        buf.append(OP_START_PATH | adj)
        buf += _coords(x, y)
        pen.move(x, y)

        run = _OpRun(buf)
        closed = False
        for cmd in commands[1:]:
            if isinstance(cmd, ClosePath):
                closed = True
                continue
            if isinstance(cmd, MoveTo):
                run.flush()
                self._close_and_move(buf, pen, *self._point(cmd.x, cmd.y))
                closed = False
                continue
            if closed:
                # Drawing straight after Z starts a new subpath at the old start.
                run.flush()
                self._close_and_move(buf, pen, pen.start_x, pen.start_y)
                closed = False
            letter, payload = self._select(cmd, pen)
            run.add(letter, payload)

        run.flush()
        buf.append(OP_CLOSE_END_PATH)
        return True

    def _close_and_move(self, buf: bytearray, pen: _Pen, x: float, y: float) -> None:
        buf.append(OP_CLOSE_ABS_MOVE_TO)
        buf += _coords(x, y)
        pen.move(x, y)

    # ------------------------------------------------------------------
    # Opcode selection
    # ------------------------------------------------------------------

    def _select(self, cmd: Command, pen: _Pen) -> tuple[str, bytes]:
        """Pick the smallest encoding of *cmd* and advance *pen*."""
        if isinstance(cmd, (LineTo, HLineTo, VLineTo)):
            return self._select_line(cmd, pen)
        if isinstance(cmd, (CubicTo, SmoothCubicTo)):
            return self._select_curve(
                pen, "cubic",
                [self._point(cmd.x1, cmd.y1), self._point(cmd.x2, cmd.y2),
                 self._point(cmd.x, cmd.y)],
            )
        if isinstance(cmd, (QuadTo, SmoothQuadTo)):
            return self._select_curve(
                pen, "quad",
                [self._point(cmd.x1, cmd.y1), self._point(cmd.x, cmd.y)],
            )
        if isinstance(cmd, ArcTo):
            return self._select_arc(cmd, pen)
        raise EncodingError(f"Unsupported command: {type(cmd).__name__}")

    @staticmethod
    def _cheapest(candidates: list[tuple[str, bytes]]) -> tuple[str, bytes]:
        # min() keeps the first of equal candidates; relative forms come first.
        return min(candidates, key=lambda c: len(c[1]))

    def _select_line(
        self, cmd: LineTo | HLineTo | VLineTo, pen: _Pen,
    ) -> tuple[str, bytes]:
        if isinstance(cmd, HLineTo):
            end = (self._coord(cmd.x), pen.y)
        elif isinstance(cmd, VLineTo):
            end = (pen.x, self._coord(cmd.y))
        else:
            end = self._point(cmd.x, cmd.y)

        rel = pen.relative([end])
        candidates: list[tuple[str, bytes]] = []
        if end[1] == pen.y:
            if rel is not None:
                candidates.append(("h", encode_coordinate(rel[0][0])))
            candidates.append(("H", encode_coordinate(end[0])))
        if end[0] == pen.x:
            if rel is not None:
                candidates.append(("v", encode_coordinate(rel[0][1])))
            candidates.append(("V", encode_coordinate(end[1])))
        if rel is not None:
            candidates.append(("l", _points(rel)))
        candidates.append(("L", _points([end])))

        pen.x, pen.y = end
        pen.family = None
        return self._cheapest(candidates)

    def _select_curve(
        self, pen: _Pen, family: CurveFamily, points: list[Point],
    ) -> tuple[str, bytes]:
        """Encode a quad (ctrl, end) or cubic (ctrl1, ctrl2, end) segment."""
        explicit, smooth = ("c", "s") if family == "cubic" else ("q", "t")

        candidates: list[tuple[str, bytes]] = []
        if pen.family == family and pen.reflected() == points[0]:
            implicit = points[1:]
            rel = pen.relative(implicit)
            if rel is not None:
                candidates.append((smooth, _points(rel)))
            candidates.append((smooth.upper(), _points(implicit)))
        rel = pen.relative(points)
        if rel is not None:
            candidates.append((explicit, _points(rel)))
        candidates.append((explicit.upper(), _points(points)))

        # Second control point for cubics, the only one for quads.
        pen.ctrl_x, pen.ctrl_y = points[-2]
        pen.x, pen.y = points[-1]
        pen.family = family
        return self._cheapest(candidates)

    def _select_arc(self, cmd: ArcTo, pen: _Pen) -> tuple[str, bytes]:
        flags = (0x01 if cmd.large_arc else 0) | (0x02 if cmd.sweep else 0)
        prefix = (
            _coords(self._coord(cmd.rx), self._coord(cmd.ry))
            + encode_angle(cmd.rotation)
            + encode_natural(flags)
        )
        end = self._point(cmd.x, cmd.y)

        candidates: list[tuple[str, bytes]] = []
        rel = pen.relative([end])
        if rel is not None:
            candidates.append(("a", prefix + _points(rel)))
        candidates.append(("A", prefix + _points([end])))

        pen.x, pen.y = end
        pen.family = None
        return self._cheapest(candidates)
