"""Canonical XML serialization and hash binding for embedded messages (deterministic)."""

from __future__ import annotations

import copy
import hashlib
from typing import Literal

from lxml import etree
from pydantic import BaseModel, ConfigDict, Field

XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
HASH_ALGORITHM = "SHA256"

_SCHEMA_LOCATION = f"{{{XSI_NAMESPACE}}}schemaLocation"
_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)


class EmbeddedMessage(BaseModel):
    """One message as embedded in a container: canonical bytes plus digest."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    canonical_xml: bytes
    hash_value: str = Field(pattern=r"^[0-9A-F]{64}$")
    hash_algorithm: Literal["SHA256"] = HASH_ALGORITHM


def parse_xml(xml: str | bytes) -> etree._Element:
    """Parse XML text into an element without entity expansion or network access.

    Args:
        xml: XML text; str input may carry an encoding declaration.

    Returns:
        Root element.

    Raises:
        etree.XMLSyntaxError: If xml is not well-formed.
    """
    raw = xml.encode("utf-8") if isinstance(xml, str) else xml
    return etree.fromstring(raw, _PARSER)


def strip_namespace_noise(element: etree._Element) -> etree._Element:
    """Remove xsi:schemaLocation hints and the then-unused xmlns:xsi declaration.

    The element keeps its own namespace. Mutates element in place.

    Args:
        element: Root of the message tree.

    Returns:
        The same element.
    """
    for node in element.iter():
        if _SCHEMA_LOCATION in node.attrib:
            del node.attrib[_SCHEMA_LOCATION]
    etree.cleanup_namespaces(element)
    return element


def canonical_xml_bytes(element: etree._Element) -> bytes:
    """Return C14N 1.0 bytes (comments excluded) for element after noise removal.

    Works on a detached copy, so element may sit inside a larger document:
    ancestor namespace declarations do not leak into the result.

    Args:
        element: Message root element.

    Returns:
        Canonical UTF-8 bytes.
    """
    detached = strip_namespace_noise(copy.deepcopy(element))
    detached.tail = None
    return etree.tostring(detached, method="c14n", with_comments=False)


def canonicalize(xml: str | bytes) -> bytes:
    """Parse serialized message XML and return its canonical bytes."""
    return canonical_xml_bytes(parse_xml(xml))


def sha256_hex(data: bytes) -> str:
    """Return uppercase hex-encoded SHA-256 hash of data.

    Args:
        data: Raw bytes to hash.

    Returns:
        64-character uppercase hex digest.
    """
    return hashlib.sha256(data).hexdigest().upper()


def bind_message(xml: str | bytes) -> EmbeddedMessage:
    """Canonicalize serialized message XML and bind it to its digest.

    Args:
        xml: Message XML as produced by the message serializer.

    Returns:
        Embedded message record.
    """
    canonical = canonicalize(xml)
    return EmbeddedMessage(canonical_xml=canonical, hash_value=sha256_hex(canonical))
