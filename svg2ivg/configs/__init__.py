"""Converter configuration loading and validation."""

from svg2ivg.configs.loader import (
    ConfigError,
    ConverterConfig,
    LoggingConfig,
    load_config,
    parse_config,
)

__all__ = [
    "ConfigError",
    "ConverterConfig",
    "LoggingConfig",
    "load_config",
    "parse_config",
]
