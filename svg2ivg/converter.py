"""Conversion entry points.

Usage::

    from svg2ivg import from_content, from_file, ConverterOptions

    icon = from_content(svg_bytes)
    icon = from_file("home.svg", ConverterOptions(output_size=48))

Every call is independent: options are immutable and the encoder keeps no
state between calls, so conversions may run concurrently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Union

from svg2ivg.errors import InputReadError
from svg2ivg.iconvg.encoder import IconVGEncoder
from svg2ivg.markup.elements import Element
from svg2ivg.markup.exclusion import DEFAULT_EXCLUSIONS, ElementPredicate, ExactMatch
from svg2ivg.markup.normalizer import normalize
from svg2ivg.utils.fs import atomic_write_bytes
from svg2ivg.utils.logging_config import log_context

logger = logging.getLogger(__name__)

ExclusionLike = Union[Element, ElementPredicate]
"""A literal element (matched exactly) or any predicate object."""


def _as_predicates(rules: tuple[ExclusionLike, ...]) -> tuple[ElementPredicate, ...]:
    return tuple(
        rule if isinstance(rule, ElementPredicate) else ExactMatch(rule)
        for rule in rules
    )


@dataclass(frozen=True)
class ConverterOptions:
    """Immutable conversion settings.

    Parameters
    ----------
    output_size : float | None
        Size of the IconVG coordinate space.  ``None`` keeps the source
        view-box units.
    exclusions : tuple[ElementPredicate, ...]
        Rules dropping source elements before encoding, evaluated in order.
    """

    output_size: float | None = None
    exclusions: tuple[ElementPredicate, ...] = DEFAULT_EXCLUSIONS

    def with_output_size(self, output_size: float | None) -> ConverterOptions:
        return replace(self, output_size=output_size)

    def with_exclusions(self, *rules: ExclusionLike) -> ConverterOptions:
        """Replace all exclusion rules (defaults included) with *rules*."""
        return replace(self, exclusions=_as_predicates(rules))

    def add_exclusions(self, *rules: ExclusionLike) -> ConverterOptions:
        """Append *rules* after the current ones."""
        return replace(self, exclusions=self.exclusions + _as_predicates(rules))


def from_content(content: bytes | str, options: ConverterOptions | None = None) -> bytes:
    """Convert SVG markup to IconVG bytes.

    Raises
    ------
    ConversionError
        Any subclass; see ``svg2ivg.errors``.
    """
    options = options or ConverterOptions()
    drawing = normalize(content, options.exclusions)
    return IconVGEncoder(options.output_size).encode(drawing)


def from_file(path: str | Path, options: ConverterOptions | None = None) -> bytes:
    """Read an SVG file and convert it with ``from_content``.

    The file name is added to the logging context for the duration of the
    call.

    Raises
    ------
    InputReadError
        If the file cannot be read.
    """
    path = Path(path)
    with log_context(source=path.name):
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise InputReadError(f"cannot read {path}: {exc}") from exc
        logger.debug("Read %d bytes from %s", len(content), path)
        return from_content(content, options)


def convert_file(
    source: str | Path,
    destination: str | Path,
    options: ConverterOptions | None = None,
) -> int:
    """Convert *source* and write the IconVG bytes to *destination*.

    The destination is written atomically, so it never holds a partial
    icon.  Returns the number of bytes written.
    """
    data = from_file(source, options)
    atomic_write_bytes(destination, data)
    logger.info("Wrote %s (%d bytes)", destination, len(data))
    return len(data)
