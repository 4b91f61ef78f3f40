"""Path-data parser -- SVG ``d`` strings to absolute ``Command`` lists.

Grammar handled
---------------
- Command letters ``M L H V C S Q T A Z`` in both cases; uppercase is
  absolute, lowercase relative to the current point.
- Numbers are scanned greedily: ``10-5`` is two numbers, ``.5.5`` is two
  numbers, and a command letter ends a number without a separator.
- Commas and runs of whitespace are interchangeable separators.
- Arc flags are single ``0``/``1`` characters and may be packed together
  (``a1 1 0 01 5 5``).
- Implicit repetition: operand groups after a command repeat it.  Extra
  pairs after a move-to are line-tos with the same case.
- ``Z`` returns the current point to the start of the subpath.

The cursor state (current point, subpath start, last control point, last
curve family) is a private dataclass created per call, so parsing is a
pure function of the input string.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from svg2ivg.errors import MalformedPathDataError
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
from svg2ivg.utils.float32 import f32

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_SEPARATORS = frozenset(" \t\r\n\f,")
_COMMAND_LETTERS = frozenset("MmZzLlHhVvCcSsQqTtAa")

_FRAGMENT_LEN = 12


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


class _Scanner:
    """Character cursor over a ``d`` string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def error(self, message: str, pos: int | None = None) -> MalformedPathDataError:
        at = self.pos if pos is None else pos
        return MalformedPathDataError(
            message, at, self.text[at:at + _FRAGMENT_LEN]
        )

    def skip_separators(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _SEPARATORS:
            self.pos += 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def at_command(self) -> bool:
        return not self.at_end() and self.text[self.pos] in _COMMAND_LETTERS

    def read_command(self) -> str:
        if not self.at_command():
            raise self.error("expected a path command letter")
        letter = self.text[self.pos]
        self.pos += 1
        return letter

    def read_number(self) -> float:
        self.skip_separators()
        match = _NUMBER_RE.match(self.text, self.pos)
        if match is None:
            if self.at_end():
                raise self.error("unexpected end of path data, expected a number")
            raise self.error("expected a number")
        value = f32(float(match.group()))
        if value in (float("inf"), float("-inf")):
            raise self.error("number out of float32 range")
        self.pos = match.end()
        return value

    def read_flag(self) -> bool:
        self.skip_separators()
        if self.at_end() or self.text[self.pos] not in "01":
            raise self.error("expected an arc flag (0 or 1)")
        flag = self.text[self.pos] == "1"
        self.pos += 1
        return flag


# ---------------------------------------------------------------------------
# Cursor state
# ---------------------------------------------------------------------------


@dataclass
class _ParserState:
    x: float = 0.0
    y: float = 0.0
    start_x: float = 0.0
    start_y: float = 0.0
    ctrl_x: float = 0.0
    ctrl_y: float = 0.0
    family: CurveFamily | None = None

    def absolute(self, dx: float, dy: float, relative: bool) -> tuple[float, float]:
        if relative:
            return f32(self.x + dx), f32(self.y + dy)
        return dx, dy

    def reflected(self, family: CurveFamily) -> tuple[float, float]:
        """Implicit control point of a smooth curve of *family*."""
        if self.family != family:
            return self.x, self.y
        return f32(2 * self.x - self.ctrl_x), f32(2 * self.y - self.ctrl_y)

    def advance(
        self,
        x: float,
        y: float,
        family: CurveFamily | None = None,
        ctrl: tuple[float, float] | None = None,
    ) -> None:
        self.x, self.y = x, y
        self.family = family
        if ctrl is not None:
            self.ctrl_x, self.ctrl_y = ctrl


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_path_data(d: str) -> list[Command]:
    """Parse an SVG path-data string into absolute commands.

    Parameters
    ----------
    d : str
        Contents of a ``<path d="...">`` attribute.

    Returns
    -------
    list[Command]
        Fully materialized command list (empty for a blank string).

    Raises
    ------
    MalformedPathDataError
        On an unknown character, a missing operand, a bad arc flag, an
        out-of-range number, or path data not starting with a move-to.
    """
    scanner = _Scanner(d)
    state = _ParserState()
    commands: list[Command] = []

    scanner.skip_separators()
    while not scanner.at_end():
        letter_pos = scanner.pos
        letter = scanner.read_command()
        if not commands and letter not in "Mm":
            raise scanner.error("path data must begin with a move-to", letter_pos)

        if letter in "Zz":
            commands.append(ClosePath())
            state.advance(state.start_x, state.start_y)
            scanner.skip_separators()
            if not scanner.at_end() and not scanner.at_command():
                raise scanner.error("close-path takes no operands")
            continue

        # First operand group is mandatory, further groups repeat the command.
        op = letter
        while True:
            commands.append(_read_group(scanner, state, op))
            if op in "Mm":
                op = "L" if op == "M" else "l"
            scanner.skip_separators()
            if scanner.at_end() or scanner.at_command():
                break

    logger.debug("Parsed %d path commands from %d chars", len(commands), len(d))
    return commands


def _read_group(scanner: _Scanner, state: _ParserState, letter: str) -> Command:
    """Read one operand group for *letter* and resolve it against *state*."""
    relative = letter.islower()
    kind = letter.upper()

    if kind == "M":
        x, y = state.absolute(scanner.read_number(), scanner.read_number(), relative)
        state.advance(x, y)
        state.start_x, state.start_y = x, y
        return MoveTo(x, y, relative)

    if kind == "L":
        x, y = state.absolute(scanner.read_number(), scanner.read_number(), relative)
        state.advance(x, y)
        return LineTo(x, y, relative)

    if kind == "H":
        value = scanner.read_number()
        x = f32(state.x + value) if relative else value
        state.advance(x, state.y)
        return HLineTo(x, relative)

    if kind == "V":
        value = scanner.read_number()
        y = f32(state.y + value) if relative else value
        state.advance(state.x, y)
        return VLineTo(y, relative)

    if kind == "C":
        x1, y1 = state.absolute(scanner.read_number(), scanner.read_number(), relative)
        x2, y2 = state.absolute(scanner.read_number(), scanner.read_number(), relative)
        x, y = state.absolute(scanner.read_number(), scanner.read_number(), relative)
        state.advance(x, y, "cubic", (x2, y2))
        return CubicTo(x1, y1, x2, y2, x, y, relative)

    if kind == "S":
        x1, y1 = state.reflected("cubic")
        x2, y2 = state.absolute(scanner.read_number(), scanner.read_number(), relative)
        x, y = state.absolute(scanner.read_number(), scanner.read_number(), relative)
        state.advance(x, y, "cubic", (x2, y2))
        return SmoothCubicTo(x1, y1, x2, y2, x, y, relative)

    if kind == "Q":
        x1, y1 = state.absolute(scanner.read_number(), scanner.read_number(), relative)
        x, y = state.absolute(scanner.read_number(), scanner.read_number(), relative)
        state.advance(x, y, "quad", (x1, y1))
        return QuadTo(x1, y1, x, y, relative)

    if kind == "T":
        x1, y1 = state.reflected("quad")
        x, y = state.absolute(scanner.read_number(), scanner.read_number(), relative)
        state.advance(x, y, "quad", (x1, y1))
        return SmoothQuadTo(x1, y1, x, y, relative)

    # kind == "A"
    rx = scanner.read_number()
    ry = scanner.read_number()
    rotation = scanner.read_number()
    large_arc = scanner.read_flag()
    sweep = scanner.read_flag()
    x, y = state.absolute(scanner.read_number(), scanner.read_number(), relative)
    state.advance(x, y)
    return ArcTo(rx, ry, rotation, large_arc, sweep, x, y, relative)
