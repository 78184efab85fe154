"""Conxml config model and loading helpers."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from conxml.document_validator import DocumentValidator, default_validator
from conxml.schema_registry import DEFAULT_REGISTRY, ContainerSchemaRegistry

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConxmlConfig(BaseModel):
    """Root conxml configuration model."""

    model_config = ConfigDict(extra="forbid")

    schema_dir: Path | None = None
    default_schema: str | None = None
    log_level: str = "INFO"

    @field_validator("default_schema")
    @classmethod
    def _validate_default_schema(cls, value: str | None) -> str | None:
        if value is not None and not DEFAULT_REGISTRY.is_known(value):
            raise ValueError(f"unknown container schema {value!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unsupported log level {value!r}")
        return level

    def build_registry(self) -> ContainerSchemaRegistry:
        """Return the schema registry honoring default_schema."""
        if self.default_schema is None:
            return DEFAULT_REGISTRY
        return DEFAULT_REGISTRY.with_default(self.default_schema)

    def build_validator(self) -> DocumentValidator:
        """Return a validator for schema_dir, or the shared one."""
        if self.schema_dir is None:
            return default_validator()
        return DocumentValidator(self.schema_dir)

    @property
    def logging_level(self) -> int:
        """Numeric logging level."""
        return logging.getLevelNamesMapping()[self.log_level]


class ConfigError(RuntimeError):
    """Raised when config cannot be decoded or validated."""


def _decode_config_payload(path: Path) -> dict[str, object]:
    """Decode config payload from JSON or YAML.

    Args:
        path: Config file path.

    Returns:
        Parsed mapping payload.

    Raises:
        ConfigError: If decode fails or payload is not an object.
    """
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid config JSON: {exc}") from exc
    else:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid config YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError("Invalid config payload: root must be an object")
    return payload


def load_config(path: Path) -> ConxmlConfig:
    """Load conxml config from disk, defaulting when missing.

    Relative schema_dir values resolve against the config file's directory.

    Args:
        path: Config file path.

    Returns:
        Parsed config payload, or defaults when file does not exist.

    Raises:
        ConfigError: If payload decode or validation fails.
    """
    if not path.exists():
        return ConxmlConfig()
    payload = _decode_config_payload(path)
    try:
        config = ConxmlConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config payload: {exc}") from exc
    if config.schema_dir is not None and not config.schema_dir.is_absolute():
        config = config.model_copy(
            update={"schema_dir": path.resolve().parent / config.schema_dir}
        )
    return config
