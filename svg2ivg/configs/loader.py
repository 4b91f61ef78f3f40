"""Configuration loader for the converter.

Loads ``converter.yaml``, validates it against ``ConverterV1`` and turns it
into frozen runtime objects: ``ConverterOptions`` for the conversion and a
``LoggingConfig`` for ``setup_logging``.

Usage::

    from svg2ivg.configs.loader import load_config
    cfg = load_config()                          # shipped default.yaml
    cfg = load_config("/custom/converter.yaml")  # explicit path
    setup_logging(**cfg.logging.as_kwargs())
    icon = from_content(svg, cfg.options)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from svg2ivg.converter import ConverterOptions
from svg2ivg.markup.elements import (
    Circle,
    Element,
    Ellipse,
    Path as PathElement,
    Polygon,
    Rect,
    clean_path_data,
)
from svg2ivg.markup.exclusion import (
    DEFAULT_EXCLUSIONS,
    ElementPredicate,
    ExactMatch,
    FillIsNone,
)
from svg2ivg.utils.float32 import f32
from svg2ivg.utils.fs import load_yaml
from svg2ivg.utils.validators import ConverterV1, ExactRule, FillNoneRule

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingConfig:
    """Logging settings, in ``setup_logging`` terms."""

    log_level: str = "INFO"
    json: bool = False
    log_file: str | None = None

    def as_kwargs(self) -> dict[str, Any]:
        return {"log_level": self.log_level, "log_file": self.log_file, "json": self.json}


@dataclass(frozen=True)
class ConverterConfig:
    """Top-level configuration object."""

    options: ConverterOptions
    logging: LoggingConfig


# ---------------------------------------------------------------------------
# Rule conversion
# ---------------------------------------------------------------------------


def _exact_element(rule: ExactRule) -> Element:
    """Build the literal template element an ``exact`` rule describes.

    Numbers go through float32 so templates compare equal to parsed source
    elements.
    """
    paint = {"fill": rule.fill}
    if rule.element == "path":
        return PathElement(d=clean_path_data(rule.d or ""), **paint)
    if rule.element == "rect":
        return Rect(
            x=f32(rule.x), y=f32(rule.y),
            width=f32(rule.width), height=f32(rule.height), **paint,
        )
    if rule.element == "circle":
        return Circle(cx=f32(rule.cx), cy=f32(rule.cy), r=f32(rule.r), **paint)
    if rule.element == "ellipse":
        return Ellipse(
            cx=f32(rule.cx), cy=f32(rule.cy), rx=f32(rule.rx), ry=f32(rule.ry), **paint,
        )
    points = tuple((f32(x), f32(y)) for x, y in rule.points or ())
    return Polygon(points=points, closed=rule.element == "polygon", **paint)


def _build_exclusions(model: ConverterV1) -> tuple[ElementPredicate, ...]:
    rules: list[ElementPredicate] = []
    for rule in model.exclusions.rules:
        if isinstance(rule, FillNoneRule):
            rules.append(FillIsNone())
        else:
            rules.append(ExactMatch(_exact_element(rule)))

    if model.exclusions.mode == "replace":
        return tuple(rules)
    return DEFAULT_EXCLUSIONS + tuple(rules)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def parse_config(data: dict[str, Any] | None) -> ConverterConfig:
    """Validate an already-loaded mapping and build a ``ConverterConfig``.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping, got {type(data).__name__}")

    try:
        model = ConverterV1.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid converter configuration: {exc}") from exc

    options = ConverterOptions(
        output_size=model.output_size,
        exclusions=_build_exclusions(model),
    )
    log_cfg = LoggingConfig(
        log_level=model.logging.log_level,
        json=model.logging.json_format,
        log_file=model.logging.log_file,
    )
    return ConverterConfig(options=options, logging=log_cfg)


def load_config(path: str | Path | None = None) -> ConverterConfig:
    """Load and validate converter configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to a ``converter.yaml``.  ``None`` loads ``default.yaml``
        shipped alongside this module.

    Returns
    -------
    ConverterConfig
        Validated, frozen configuration.

    Raises
    ------
    ConfigError
        If the file is missing, is not valid YAML, or fails validation.
    """
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)
    logger.info("Loading configuration from %s", path)

    try:
        data = load_yaml(path)
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc

    cfg = parse_config(data)
    logger.debug(
        "Configuration: output_size=%s, %d exclusion rules",
        cfg.options.output_size, len(cfg.options.exclusions),
    )
    return cfg
