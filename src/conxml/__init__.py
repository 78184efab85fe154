"""Conxml: multi-message payment container assembly with hashed, schema-validated payloads."""

from conxml.canonical import (
    HASH_ALGORITHM,
    EmbeddedMessage,
    bind_message,
    canonicalize,
    sha256_hex,
)
from conxml.container import Container
from conxml.document_validator import DocumentValidator
from conxml.errors import (
    ContainerError,
    ContainerErrorCode,
    ContainerValidationError,
    SchemaIncompatibleError,
    SchemaValidationError,
    UnknownSchemaError,
)
from conxml.messages import (
    PAIN_001_001_03,
    PAIN_001_001_09,
    PAIN_008_001_02,
    PAIN_008_001_08,
    Message,
    MessageVariant,
    XmlDocumentMessage,
)
from conxml.schema_registry import (
    CONTAINER_NNN_001_02,
    CONTAINER_NNN_001_04,
    CONTAINER_NNN_001_GBIC4,
    DEFAULT_REGISTRY,
    ContainerSchemaRegistry,
)
from conxml.verifier import MessageDigestCheck, verify_container

__all__ = [
    "CONTAINER_NNN_001_02",
    "CONTAINER_NNN_001_04",
    "CONTAINER_NNN_001_GBIC4",
    "DEFAULT_REGISTRY",
    "HASH_ALGORITHM",
    "PAIN_001_001_03",
    "PAIN_001_001_09",
    "PAIN_008_001_02",
    "PAIN_008_001_08",
    "Container",
    "ContainerError",
    "ContainerErrorCode",
    "ContainerSchemaRegistry",
    "ContainerValidationError",
    "DocumentValidator",
    "EmbeddedMessage",
    "Message",
    "MessageDigestCheck",
    "MessageVariant",
    "SchemaIncompatibleError",
    "SchemaValidationError",
    "UnknownSchemaError",
    "XmlDocumentMessage",
    "bind_message",
    "canonicalize",
    "sha256_hex",
    "verify_container",
]
