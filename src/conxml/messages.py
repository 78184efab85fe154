"""Payment message interface, variant tags and the pre-rendered message adapter."""

from __future__ import annotations

from enum import StrEnum
from typing import Protocol

from lxml import etree

PAIN_001_001_03 = "pain.001.001.03"
PAIN_001_001_09 = "pain.001.001.09"
PAIN_008_001_02 = "pain.008.001.02"
PAIN_008_001_08 = "pain.008.001.08"

ISO20022_NAMESPACE_PREFIX = "urn:iso:std:iso:20022:tech:xsd:"


class MessageVariant(StrEnum):
    """Closed set of message kinds a container can carry."""

    CREDIT_TRANSFER = "credit_transfer"
    DIRECT_DEBIT = "direct_debit"


# Envelope wrapper element per variant.
WRAPPER_TAGS: dict[MessageVariant, str] = {
    MessageVariant.CREDIT_TRANSFER: "MsgPain001",
    MessageVariant.DIRECT_DEBIT: "MsgPain008",
}

_VARIANT_BY_PAIN_FAMILY: dict[str, MessageVariant] = {
    "pain.001": MessageVariant.CREDIT_TRANSFER,
    "pain.008": MessageVariant.DIRECT_DEBIT,
}


class Message(Protocol):
    """Capability interface every embeddable payment message implements."""

    variant: MessageVariant

    @property
    def errors(self) -> list[str]:
        """Aggregated human-readable validation messages."""
        ...

    def is_valid(self) -> bool:
        """Return whether the message passes its own validation."""
        ...

    def is_schema_compatible(self, schema_id: str) -> bool:
        """Return whether the message can be rendered as schema_id."""
        ...

    def to_xml(self, schema_id: str) -> str:
        """Serialize the message as schema_id.

        The output may carry an ``xmlns:xsi`` declaration and an
        ``xsi:schemaLocation`` hint; the container strips both before hashing.
        """
        ...


def message_namespace(schema_id: str) -> str:
    """Return the ISO 20022 namespace URI for a message schema id."""
    return f"{ISO20022_NAMESPACE_PREFIX}{schema_id}"


def variant_for_schema(schema_id: str) -> MessageVariant:
    """Return the message variant a pain schema id belongs to.

    Raises:
        ValueError: If schema_id is not a pain.001 or pain.008 id.
    """
    family = ".".join(schema_id.split(".")[:2])
    try:
        return _VARIANT_BY_PAIN_FAMILY[family]
    except KeyError:
        raise ValueError(
            f"Not a pain.001 or pain.008 schema id: {schema_id!r}"
        ) from None


class XmlDocumentMessage:
    """Already-serialized pain document wrapped as a container message.

    Schema id and variant are read from the root element namespace, so a
    ``pain.001.001.09`` document is a credit transfer compatible only with
    ``pain.001.001.09``.
    """

    def __init__(self, xml: str | bytes) -> None:
        """Parse and classify a pre-rendered pain document.

        Args:
            xml: Serialized pain document.

        Raises:
            ValueError: If the XML cannot be parsed or its namespace is not a
                pain.001 / pain.008 namespace.
        """
        raw = xml.encode("utf-8") if isinstance(xml, str) else xml
        try:
            root = etree.fromstring(raw)
        except etree.XMLSyntaxError as exc:
            raise ValueError(f"Invalid message XML: {exc}") from exc
        qname = etree.QName(root)
        namespace = qname.namespace or ""
        if not namespace.startswith(ISO20022_NAMESPACE_PREFIX):
            raise ValueError(f"Not an ISO 20022 message namespace: {namespace!r}")
        self.schema_id = namespace.removeprefix(ISO20022_NAMESPACE_PREFIX)
        self.variant = variant_for_schema(self.schema_id)
        self._root = root

    @property
    def errors(self) -> list[str]:
        """Validation messages for this document."""
        errors: list[str] = []
        root_name = etree.QName(self._root).localname
        if root_name != "Document":
            errors.append(f"Root element must be Document, got {root_name}")
        if len(self._root) == 0:
            errors.append("Document is empty")
        return errors

    def is_valid(self) -> bool:
        """Return whether the document has a populated Document root."""
        return not self.errors

    def is_schema_compatible(self, schema_id: str) -> bool:
        """Return whether schema_id matches the document namespace."""
        return schema_id == self.schema_id

    def to_xml(self, schema_id: str) -> str:
        """Return the document serialized as text.

        Raises:
            ValueError: If schema_id differs from the document schema.
        """
        if not self.is_schema_compatible(schema_id):
            raise ValueError(
                f"Message is {self.schema_id}, cannot render as {schema_id}"
            )
        return etree.tostring(self._root, encoding="unicode")

    def __repr__(self) -> str:
        return f"XmlDocumentMessage(schema_id={self.schema_id!r})"
