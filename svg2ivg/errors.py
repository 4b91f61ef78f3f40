"""Exception hierarchy for SVG -> IconVG conversion.

Every failure is terminal for a single conversion call: nothing is retried
and there is no partial output.  Callers catch ``ConversionError`` to treat
any of them as "this icon could not be converted".
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for all conversion failures."""

    pass


class InputReadError(ConversionError):
    """Raised when the source document cannot be read from storage."""

    pass


class MarkupParseError(ConversionError):
    """Raised when the markup document is structurally invalid."""

    pass


class UnsupportedElementError(ConversionError):
    """Raised when the markup contains an element we cannot convert.

    Parameters
    ----------
    tag : str
        Local (namespace-stripped) name of the offending element.
    """

    def __init__(self, tag: str) -> None:
        super().__init__(f"unsupported SVG element: <{tag}>")
        self.tag = tag


class EmptyDrawingError(ConversionError):
    """Raised when no drawable element survives normalization."""

    pass


class MalformedPathDataError(ConversionError):
    """Raised when a path ``d`` string violates the path-data grammar.

    Parameters
    ----------
    message : str
        Human-readable description of the violation.
    position : int
        Character offset of the offending token in the ``d`` string.
    fragment : str
        Up to a dozen characters of source text starting at *position*.
    """

    def __init__(self, message: str, position: int, fragment: str) -> None:
        super().__init__(f"{message} at offset {position}: {fragment!r}")
        self.position = position
        self.fragment = fragment


class EncodingError(ConversionError):
    """Raised when a parsed drawing cannot be expressed as IconVG."""

    pass
