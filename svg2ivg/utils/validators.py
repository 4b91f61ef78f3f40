"""YAML schema validation for converter configuration.

Schema (``converter.v1``)::

    output_size: null | <positive number>
    exclusions:
      mode: append | replace
      rules:
        - kind: fill_none
        - kind: exact
          element: path | rect | circle | ellipse | polygon | polyline
          <geometry attributes, SVG spelling>
          fill: <token>
    logging:
      log_level: INFO
      json: false
      log_file: null

Models only validate shape and ranges.  Conversion into the runtime
dataclasses (``ConverterOptions`` and the exclusion predicates) is done by
``svg2ivg.configs.loader``.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ============================================================================
# EXCLUSION RULES
# ============================================================================


class FillNoneRule(BaseModel):
    """Drop every element with ``fill="none"``."""
    model_config = ConfigDict(extra="forbid")

    kind: Literal["fill_none"]


class ExactRule(BaseModel):
    """Drop elements equal to a literal template.

    Geometry keys use the SVG attribute names; which ones are required
    depends on ``element``.
    """
    model_config = ConfigDict(extra="forbid")

    kind: Literal["exact"]
    element: Literal["path", "rect", "circle", "ellipse", "polygon", "polyline"]
    fill: str = Field("", description="Fill token as written in the source")

    d: Optional[str] = None
    x: float = 0.0
    y: float = 0.0
    width: Optional[float] = None
    height: Optional[float] = None
    cx: float = 0.0
    cy: float = 0.0
    r: Optional[float] = None
    rx: Optional[float] = None
    ry: Optional[float] = None
    points: Optional[List[Tuple[float, float]]] = None

    @model_validator(mode="after")
    def check_geometry(self) -> "ExactRule":
        required = {
            "path": ("d",),
            "rect": ("width", "height"),
            "circle": ("r",),
            "ellipse": ("rx", "ry"),
            "polygon": ("points",),
            "polyline": ("points",),
        }[self.element]
        missing = [name for name in required if getattr(self, name) is None]
        if missing:
            raise ValueError(
                f"exact rule for <{self.element}> needs {', '.join(missing)}"
            )
        return self


ExclusionRule = Annotated[Union[FillNoneRule, ExactRule], Field(discriminator="kind")]


class ExclusionSection(BaseModel):
    """Exclusion rules and how they combine with the built-in defaults."""
    model_config = ConfigDict(extra="forbid")

    mode: Literal["append", "replace"] = Field(
        "append", description="append to or replace the default rules"
    )
    rules: List[ExclusionRule] = Field(default_factory=list)


# ============================================================================
# LOGGING
# ============================================================================


class LoggingSection(BaseModel):
    """Arguments forwarded to ``setup_logging``."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    log_level: str = "INFO"
    json_format: bool = Field(False, alias="json")
    log_file: Optional[str] = None

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        if v.upper() not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {list(_LOG_LEVELS)}, got '{v}'")
        return v.upper()


# ============================================================================
# TOP LEVEL
# ============================================================================


class ConverterV1(BaseModel):
    """Converter configuration schema v1."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    schema_version: str = Field("converter.v1", alias="schema")
    output_size: Optional[float] = Field(
        None, gt=0.0, description="Icon coordinate space size; null keeps source units"
    )
    exclusions: ExclusionSection = Field(default_factory=ExclusionSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)

    @field_validator("schema_version")
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "converter.v1":
            raise ValueError(f"Expected schema 'converter.v1', got '{v}'")
        return v
