"""Container: assembles payment messages into a hashed, schema-validated envelope."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from functools import cached_property
from typing import Any

from lxml import etree
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from conxml.canonical import XSI_NAMESPACE, EmbeddedMessage, bind_message, parse_xml
from conxml.converters import convert_text
from conxml.document_validator import DocumentValidator, default_validator
from conxml.errors import ContainerValidationError, SchemaIncompatibleError
from conxml.messages import WRAPPER_TAGS, Message, MessageVariant
from conxml.schema_registry import (
    DEFAULT_REGISTRY,
    ContainerSchemaRegistry,
    container_namespace,
)

_LOGGER = logging.getLogger(__name__)

BLANK = "can't be blank"
INVALID = "is invalid"


class ContainerIdentity(BaseModel):
    """Identity block fields and their length constraints."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    sender_id: str = Field(min_length=1, max_length=22)
    id_type: str = Field(min_length=1, max_length=4)


def _describe(error: Mapping[str, Any]) -> str:
    """Render one pydantic error as a short field message."""
    ctx = error.get("ctx", {})
    if error["type"] == "string_too_long":
        return f"is too long (maximum is {ctx['max_length']} characters)"
    return BLANK


def _humanize(field: str) -> str:
    return field.replace("_", " ").capitalize()


def _child(
    parent: etree._Element, namespace: str, tag: str, text: str | None = None
) -> etree._Element:
    element = etree.SubElement(parent, f"{{{namespace}}}{tag}")
    if text is not None:
        element.text = text
    return element


class Container:
    """Envelope bundling homogeneous payment messages for one sender.

    Messages are appended with add_message and rendered in insertion order.
    Not safe for concurrent mutation; use one instance per assembly.
    """

    def __init__(
        self,
        sender_id: str | None = None,
        id_type: str | None = None,
        *,
        registry: ContainerSchemaRegistry | None = None,
        validator: DocumentValidator | None = None,
    ) -> None:
        """Create an empty container.

        Args:
            sender_id: Sender identification, at most 22 characters.
            id_type: Identification type, 1 to 4 characters.
            registry: Schema registry; defaults to the shipped mapping.
            validator: Final-document validator; defaults to the shipped schemas.
        """
        self.sender_id = convert_text(sender_id)
        self.id_type = convert_text(id_type)
        self._registry = registry or DEFAULT_REGISTRY
        self._validator = validator
        self._messages: list[Message] = []

    @property
    def messages(self) -> tuple[Message, ...]:
        """Messages in insertion order."""
        return tuple(self._messages)

    @property
    def registry(self) -> ContainerSchemaRegistry:
        """Schema registry used for compatibility resolution."""
        return self._registry

    def add_message(self, message: Message) -> None:
        """Append message to the batch."""
        self._messages.append(message)
        _LOGGER.debug(
            "Added %s message (%d in container)", message.variant, len(self._messages)
        )

    @cached_property
    def creation_date_time(self) -> str:
        """ISO-8601 creation timestamp; fixed at first read."""
        return datetime.now().astimezone().replace(microsecond=0).isoformat()

    def _time_stamp(self) -> str:
        created = datetime.fromisoformat(self.creation_date_time)
        return f"{created:%H%M%S}{created.microsecond // 1000:03d}"

    # Validation

    @property
    def errors(self) -> dict[str, list[str]]:
        """Field name to error messages; empty when valid."""
        errors: dict[str, list[str]] = {}
        try:
            ContainerIdentity(sender_id=self.sender_id, id_type=self.id_type)
        except ValidationError as exc:
            for error in exc.errors():
                field = str(error["loc"][0])
                errors.setdefault(field, []).append(_describe(error))

        if not self._messages:
            errors.setdefault("messages", []).append(BLANK)
            return errors

        # One aggregated entry per failed rule, not one per message.
        variant = self._messages[0].variant
        if any(m.variant != variant for m in self._messages):
            errors.setdefault("messages", []).append(INVALID)
        if any(not m.is_valid() for m in self._messages):
            errors.setdefault("messages", []).append(INVALID)
        return errors

    def errors_on(self, field: str) -> list[str]:
        """Return error messages for one field."""
        return self.errors.get(field, [])

    def full_messages(self) -> list[str]:
        """Return human-readable messages such as 'Messages is invalid'."""
        return [
            f"{_humanize(field)} {message}"
            for field, messages in self.errors.items()
            for message in messages
        ]

    def is_valid(self) -> bool:
        """Return whether identity fields and all messages are valid."""
        return not self.errors

    # Schema compatibility

    def message_schema_for(self, schema_id: str, message: Message) -> str:
        """Return the message schema id message must satisfy under schema_id."""
        return self._registry.message_schema_for(schema_id, message.variant)

    def is_schema_compatible(self, schema_id: str) -> bool:
        """Return whether every message satisfies its schema under schema_id.

        Raises:
            UnknownSchemaError: If schema_id is not a known container schema.
        """
        self._registry.require_known(schema_id)
        return all(
            m.is_schema_compatible(self.message_schema_for(schema_id, m))
            for m in self._messages
        )

    # Rendering

    def render(self, schema_id: str | None = None) -> str:
        """Assemble, validate and serialize the container document.

        Args:
            schema_id: Container schema id; the registry default when omitted.

        Returns:
            Serialized container XML.

        Raises:
            ContainerValidationError: If the container or a message is invalid.
            UnknownSchemaError: If schema_id is not a known container schema.
            SchemaIncompatibleError: If a message cannot satisfy its schema.
            SchemaValidationError: If the assembled document fails the XSD.
        """
        if schema_id is None:
            schema_id = self._registry.default_schema
        errors = self.errors
        if errors:
            _LOGGER.warning("Container rejected: %d invalid field(s)", len(errors))
            raise ContainerValidationError(errors, self.full_messages())
        if not self.is_schema_compatible(schema_id):
            _LOGGER.warning("Container incompatible with %s", schema_id)
            raise SchemaIncompatibleError(schema_id)

        document = self._build_document(schema_id)
        self.validate_final_document(document, schema_id)
        return etree.tostring(document, xml_declaration=True, encoding="UTF-8").decode(
            "utf-8"
        )

    def to_xml(self, schema_id: str | None = None) -> str:
        """Alias of render, matching the message serializer interface."""
        return self.render(schema_id)

    def validate_final_document(
        self, document: etree._Element | etree._ElementTree, schema_id: str
    ) -> None:
        """Validate an assembled document against the container schema.

        Raises:
            SchemaValidationError: If the document has any structural error.
        """
        validator = self._validator or default_validator()
        validator.validate(document, schema_id)

    def embed_messages(self, schema_id: str) -> list[EmbeddedMessage]:
        """Serialize, canonicalize and hash every message for schema_id."""
        embedded: list[EmbeddedMessage] = []
        for message in self._messages:
            message_schema = self.message_schema_for(schema_id, message)
            record = bind_message(message.to_xml(message_schema))
            _LOGGER.debug(
                "Embedded %s message as %s, hash %s",
                message.variant,
                message_schema,
                record.hash_value,
            )
            embedded.append(record)
        return embedded

    def _batch_variant(self) -> MessageVariant:
        variant = self._messages[0].variant
        if any(m.variant != variant for m in self._messages):
            errors = {"messages": [INVALID]}
            raise ContainerValidationError(errors, [f"Messages {INVALID}"])
        return variant

    def _build_document(self, schema_id: str) -> etree._Element:
        namespace = container_namespace(schema_id)
        root = etree.Element(
            f"{{{namespace}}}conxml", nsmap={None: namespace, "xsi": XSI_NAMESPACE}
        )
        root.set(f"{{{XSI_NAMESPACE}}}schemaLocation", f"{namespace} {schema_id}.xsd")

        container_id = _child(root, namespace, "ContainerId")
        _child(container_id, namespace, "SenderId", self.sender_id)
        _child(container_id, namespace, "IdType", self.id_type)
        _child(container_id, namespace, "TimeStamp", self._time_stamp())
        _child(root, namespace, "CreDtTm", self.creation_date_time)

        wrapper_tag = WRAPPER_TAGS[self._batch_variant()]
        for record in self.embed_messages(schema_id):
            wrapper = _child(root, namespace, wrapper_tag)
            _child(wrapper, namespace, "HashValue", record.hash_value)
            _child(wrapper, namespace, "HashAlgorithm", record.hash_algorithm)
            wrapper.append(parse_xml(record.canonical_xml))
        return root
