"""DocumentValidator — structural XSD validation of assembled container documents."""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock

from lxml import etree

from conxml.errors import SchemaValidationError, UnknownSchemaError
from conxml.paths import get_schema_dir, resolve_schema_path

_LOGGER = logging.getLogger(__name__)


class DocumentValidator:
    """Validates documents against <schema_id>.xsd from a fixed schema directory.

    Parsed schemas are cached per schema id and shared by every caller; a
    per-validator lock serializes validation so each caller reads its own
    error log. Relative includes inside a schema resolve against the schema
    file itself, so the working directory is never consulted or changed.
    """

    def __init__(self, schema_dir: Path | None = None) -> None:
        """Store schema directory.

        Args:
            schema_dir: Directory with XSD files; defaults to the shipped schemas.
        """
        self._schema_dir = (schema_dir or get_schema_dir()).resolve()
        self._schemas: dict[str, etree.XMLSchema] = {}
        self._lock = Lock()

    @property
    def schema_dir(self) -> Path:
        """Directory schema definitions are loaded from."""
        return self._schema_dir

    def load_schema(self, schema_id: str) -> etree.XMLSchema:
        """Return parsed schema for schema_id, loading it on first use.

        Args:
            schema_id: Schema identifier; the file is <schema_id>.xsd.

        Returns:
            Parsed XML schema.

        Raises:
            UnknownSchemaError: If no definition exists for schema_id.
        """
        with self._lock:
            return self._load_schema(schema_id)

    def _load_schema(self, schema_id: str) -> etree.XMLSchema:
        cached = self._schemas.get(schema_id)
        if cached is not None:
            return cached
        try:
            path = resolve_schema_path(self._schema_dir, schema_id)
        except ValueError as exc:
            raise UnknownSchemaError(schema_id) from exc
        if not path.is_file():
            raise UnknownSchemaError(schema_id)
        _LOGGER.debug("Loading schema definition %s", path)
        schema = etree.XMLSchema(etree.parse(str(path)))
        self._schemas[schema_id] = schema
        return schema

    def errors_for(
        self, document: etree._Element | etree._ElementTree, schema_id: str
    ) -> list[str]:
        """Return every structural complaint for document under schema_id."""
        with self._lock:
            schema = self._load_schema(schema_id)
            if schema.validate(document):
                return []
            errors = [entry.message for entry in schema.error_log]
        return errors or [f"document is not valid against {schema_id}"]

    def validate(
        self, document: etree._Element | etree._ElementTree, schema_id: str
    ) -> None:
        """Validate document; all-or-nothing.

        Raises:
            SchemaValidationError: If the document has any structural error.
            UnknownSchemaError: If no definition exists for schema_id.
        """
        errors = self.errors_for(document, schema_id)
        if errors:
            _LOGGER.warning(
                "Document rejected by %s with %d error(s)", schema_id, len(errors)
            )
            raise SchemaValidationError(schema_id, errors)
        _LOGGER.debug("Document valid against %s", schema_id)


_DEFAULT_VALIDATOR: DocumentValidator | None = None
_DEFAULT_VALIDATOR_LOCK = Lock()


def default_validator() -> DocumentValidator:
    """Return the process-wide validator for the shipped schemas."""
    global _DEFAULT_VALIDATOR  # noqa: PLW0603
    with _DEFAULT_VALIDATOR_LOCK:
        if _DEFAULT_VALIDATOR is None:
            _DEFAULT_VALIDATOR = DocumentValidator()
    return _DEFAULT_VALIDATOR
