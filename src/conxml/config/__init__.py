"""Conxml configuration loading."""

from conxml.config.settings import ConfigError, ConxmlConfig, load_config

__all__ = [
    "ConfigError",
    "ConxmlConfig",
    "load_config",
]
