"""Tests for config loading and logging setup.

Validates that:
    - default.yaml loads and matches the built-in defaults
    - exclusion rules from YAML append to or replace the defaults
    - invalid documents raise ConfigError with the cause attached
    - the context formatter renders contextual fields
"""

from __future__ import annotations

import json
import logging
from pathlib import Path as FsPath

import pytest

from svg2ivg.configs import ConfigError, ConverterConfig, load_config, parse_config
from svg2ivg.markup import (
    DEFAULT_EXCLUSIONS,
    Circle,
    ExactMatch,
    FillIsNone,
    Path,
    Polygon,
    Rect,
)
from svg2ivg.utils.float32 import f32
from svg2ivg.utils.fs import load_yaml
from svg2ivg.utils.logging_config import (
    ContextFormatter,
    current_context,
    log_context,
    pop_context,
    push_context,
    setup_logging,
    teardown_logging,
)


def _write(tmp_path: FsPath, text: str) -> FsPath:
    path = tmp_path / "converter.yaml"
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> ConverterConfig:
    """Load the default.yaml shipped with the package."""
    return load_config()


@pytest.fixture()
def restore_root_logger():
    level = logging.getLogger().level
    yield
    teardown_logging()
    logging.getLogger().setLevel(level)


# ---------------------------------------------------------------------------
# Default config
# ---------------------------------------------------------------------------


class TestDefaultConfig:
    def test_output_size_unset(self, config: ConverterConfig) -> None:
        assert config.options.output_size is None

    def test_default_exclusions(self, config: ConverterConfig) -> None:
        assert config.options.exclusions == DEFAULT_EXCLUSIONS

    def test_logging(self, config: ConverterConfig) -> None:
        assert config.logging.log_level == "INFO"
        assert config.logging.json is False
        assert config.logging.as_kwargs() == {
            "log_level": "INFO", "log_file": None, "json": False,
        }

    def test_empty_mapping_is_default(self) -> None:
        assert parse_config(None).options.exclusions == DEFAULT_EXCLUSIONS


# ---------------------------------------------------------------------------
# Exclusion rules
# ---------------------------------------------------------------------------


class TestExclusionRules:
    def test_append(self, tmp_path: FsPath) -> None:
        path = _write(tmp_path, """
exclusions:
  mode: append
  rules:
    - kind: exact
      element: path
      d: "M0,0 L1,1"
""")
        cfg = load_config(path)
        assert cfg.options.exclusions == DEFAULT_EXCLUSIONS + (ExactMatch(Path(d="M0 0 L1 1")),)

    def test_replace(self, tmp_path: FsPath) -> None:
        path = _write(tmp_path, """
output_size: 48
exclusions:
  mode: replace
  rules:
    - kind: fill_none
    - kind: exact
      element: rect
      width: 24
      height: 24
      fill: "#fff"
""")
        cfg = load_config(path)
        assert cfg.options.output_size == 48
        assert cfg.options.exclusions == (
            FillIsNone(),
            ExactMatch(Rect(0, 0, 24, 24, fill="#fff")),
        )

    def test_shape_templates(self) -> None:
        cfg = parse_config({
            "exclusions": {
                "mode": "replace",
                "rules": [
                    {"kind": "exact", "element": "circle", "cx": 12, "cy": 12, "r": 10},
                    {"kind": "exact", "element": "polyline", "points": [[0, 0], [4, 0]]},
                ],
            }
        })
        assert cfg.options.exclusions == (
            ExactMatch(Circle(12, 12, 10)),
            ExactMatch(Polygon(points=((0, 0), (4, 0)), closed=False)),
        )

    def test_template_values_are_float32(self) -> None:
        cfg = parse_config({
            "exclusions": {
                "mode": "replace",
                "rules": [{"kind": "exact", "element": "rect", "width": 0.1, "height": 1}],
            }
        })
        assert cfg.options.exclusions[0].element.width == f32(0.1)


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------


class TestValidationErrors:
    @pytest.mark.parametrize(
        "data",
        [
            {"schema": "converter.v2"},
            {"output_size": -1},
            {"unknown_key": 1},
            {"exclusions": {"mode": "merge"}},
            {"exclusions": {"rules": [{"kind": "regex"}]}},
            {"exclusions": {"rules": [{"kind": "exact", "element": "path"}]}},
            {"exclusions": {"rules": [{"kind": "exact", "element": "circle", "cx": 1}]}},
            {"logging": {"log_level": "LOUD"}},
        ],
    )
    def test_invalid(self, data: dict) -> None:
        with pytest.raises(ConfigError):
            parse_config(data)

    def test_non_mapping_root(self) -> None:
        with pytest.raises(ConfigError, match="mapping"):
            parse_config(["a", "b"])  # type: ignore[arg-type]

    def test_missing_file(self, tmp_path: FsPath) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_malformed_yaml(self, tmp_path: FsPath) -> None:
        with pytest.raises(ConfigError, match="Malformed"):
            load_config(_write(tmp_path, "exclusions: [unclosed"))

    def test_log_level_normalized(self) -> None:
        assert parse_config({"logging": {"log_level": "debug"}}).logging.log_level == "DEBUG"

    def test_load_yaml_missing(self, tmp_path: FsPath) -> None:
        with pytest.raises(FileNotFoundError):
            load_yaml(tmp_path / "nope.yaml")


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("svg2ivg.test", logging.INFO, __file__, 1, msg, None, None)


class TestLogging:
    def test_json_formatter_includes_context(self) -> None:
        with log_context(source="home.svg"):
            line = ContextFormatter("json").format(_record())
        entry = json.loads(line)
        assert entry["msg"] == "hello"
        assert entry["lvl"] == "INFO"
        assert entry["source"] == "home.svg"

    def test_human_formatter(self) -> None:
        with log_context(source="home.svg"):
            line = ContextFormatter("human", use_color=False).format(_record())
        assert "| source=home.svg |" in line
        assert line.endswith("hello")

    def test_unknown_format_mode(self) -> None:
        with pytest.raises(ValueError):
            ContextFormatter("xml")

    def test_log_context_restores_previous(self) -> None:
        push_context(app="icons")
        try:
            with log_context(app="inner", source="a.svg"):
                assert current_context() == {"app": "inner", "source": "a.svg"}
            assert current_context() == {"app": "icons"}
        finally:
            pop_context(["app"])
        assert current_context() == {}

    def test_setup_logging_idempotent(self, restore_root_logger, tmp_path: FsPath) -> None:
        log_file = tmp_path / "logs" / "convert.log"
        setup_logging("DEBUG", str(log_file), json=True, to_stderr=False)
        handlers = setup_logging("DEBUG", str(log_file), json=True, to_stderr=False)
        root = logging.getLogger()
        assert len(handlers) == 1
        assert handlers[0] in root.handlers
        assert sum(isinstance(h, logging.FileHandler) for h in root.handlers) == 1
        assert root.level == logging.DEBUG
        logging.getLogger("svg2ivg.test").info("written")
        teardown_logging()
        assert handlers[0] not in root.handlers
        assert json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])["msg"] == "written"

    def test_setup_logging_bad_level(self, restore_root_logger) -> None:
        with pytest.raises(ValueError):
            setup_logging("LOUD")
