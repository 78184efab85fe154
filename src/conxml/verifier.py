"""Container verifier: recompute embedded message digests of an assembled document."""

from __future__ import annotations

import logging

from lxml import etree
from pydantic import BaseModel, ConfigDict

from conxml.canonical import HASH_ALGORITHM, canonical_xml_bytes, parse_xml, sha256_hex
from conxml.messages import WRAPPER_TAGS

_LOGGER = logging.getLogger(__name__)

_WRAPPER_NAMES = frozenset(WRAPPER_TAGS.values())


class MessageDigestCheck(BaseModel):
    """Outcome of re-hashing one embedded message."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int
    wrapper: str
    expected: str
    actual: str

    @property
    def matches(self) -> bool:
        """Whether the recomputed digest equals the declared HashValue."""
        return self.expected == self.actual


def _child_text(wrapper: etree._Element, namespace: str | None, tag: str) -> str:
    element = wrapper.find(f"{{{namespace}}}{tag}" if namespace else tag)
    if element is None or element.text is None:
        raise ValueError(f"{etree.QName(wrapper).localname} is missing {tag}")
    return element.text.strip()


def _embedded_document(
    wrapper: etree._Element, namespace: str | None
) -> etree._Element:
    for child in wrapper:
        if not isinstance(child.tag, str):
            continue
        if etree.QName(child).namespace != namespace:
            return child
    raise ValueError(
        f"{etree.QName(wrapper).localname} does not embed a message document"
    )


def verify_container(xml: str | bytes) -> list[MessageDigestCheck]:
    """Recompute the digest of every embedded message and compare it to HashValue.

    The embedded element is canonicalized the same way it was before hashing,
    so a container straight from Container.render verifies cleanly.

    Args:
        xml: Serialized container document.

    Returns:
        One check per embedded message, in document order.

    Raises:
        ValueError: On unknown HashAlgorithm or a wrapper without a document.
        etree.XMLSyntaxError: If xml is not well-formed.
    """
    root = parse_xml(xml)
    namespace = etree.QName(root).namespace
    checks: list[MessageDigestCheck] = []
    for wrapper in root:
        if not isinstance(wrapper.tag, str):
            continue
        name = etree.QName(wrapper).localname
        if name not in _WRAPPER_NAMES:
            continue
        algorithm = _child_text(wrapper, namespace, "HashAlgorithm")
        if algorithm != HASH_ALGORITHM:
            raise ValueError(f"Unsupported hash algorithm: {algorithm!r}")
        expected = _child_text(wrapper, namespace, "HashValue")
        actual = sha256_hex(canonical_xml_bytes(_embedded_document(wrapper, namespace)))
        check = MessageDigestCheck(
            index=len(checks), wrapper=name, expected=expected, actual=actual
        )
        if not check.matches:
            _LOGGER.warning("Digest mismatch for %s #%d", name, check.index)
        checks.append(check)
    return checks
