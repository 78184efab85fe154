"""Canonical XML serialization and hash binding."""

import hashlib

import pytest
from pydantic import ValidationError

from conxml.canonical import (
    HASH_ALGORITHM,
    EmbeddedMessage,
    bind_message,
    canonical_xml_bytes,
    canonicalize,
    parse_xml,
    sha256_hex,
)
from tests.unit.message_fixtures import pain_document


@pytest.mark.unit
def test_canonicalize_strips_schema_location_and_xsi_declaration():
    """xsi:schemaLocation and xmlns:xsi are removed; the message namespace stays."""
    canonical = canonicalize(pain_document("pain.001.001.09"))
    assert canonical.startswith(
        b'<Document xmlns="urn:iso:std:iso:20022:tech:xsd:pain.001.001.09">'
    )
    assert b"schemaLocation" not in canonical
    assert b"xmlns:xsi" not in canonical
    assert b"<?xml" not in canonical


@pytest.mark.unit
def test_canonicalize_ignores_xsi_noise():
    """Documents differing only in xsi noise canonicalize identically."""
    with_xsi = canonicalize(pain_document("pain.008.001.08", with_xsi=True))
    without_xsi = canonicalize(pain_document("pain.008.001.08", with_xsi=False))
    assert with_xsi == without_xsi


@pytest.mark.unit
def test_canonicalize_normalizes_attribute_order_and_empty_elements():
    """C14N orders attributes and expands empty elements."""
    a = canonicalize('<Doc xmlns="urn:x"><Amt b="2" a="1"/></Doc>')
    b = canonicalize('<Doc xmlns="urn:x"><Amt a="1" b="2"></Amt></Doc>')
    assert a == b
    assert a == b'<Doc xmlns="urn:x"><Amt a="1" b="2"></Amt></Doc>'


@pytest.mark.unit
def test_canonicalize_drops_comments():
    """Comments do not contribute to the canonical form."""
    assert canonicalize('<a xmlns="urn:x"><!-- note --><b>1</b></a>') == canonicalize(
        '<a xmlns="urn:x"><b>1</b></a>'
    )


@pytest.mark.unit
def test_canonicalize_keeps_xsi_when_still_used():
    """xmlns:xsi stays when another xsi attribute still needs it."""
    xml = (
        '<a xmlns="urn:x" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
        'xsi:schemaLocation="urn:x x.xsd"><b xsi:nil="true"/></a>'
    )
    canonical = canonicalize(xml)
    assert b"schemaLocation" not in canonical
    assert b'xsi:nil="true"' in canonical


@pytest.mark.unit
def test_canonical_xml_bytes_ignores_ancestor_namespaces():
    """A nested element canonicalizes as if it were standalone."""
    outer = parse_xml(
        '<outer xmlns="urn:outer" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
        '<Doc xmlns="urn:x"><b>1</b></Doc></outer>'
    )
    nested = outer[0]
    assert canonical_xml_bytes(nested) == canonicalize('<Doc xmlns="urn:x"><b>1</b></Doc>')
    assert nested.getparent() is outer



@pytest.mark.unit
def test_sha256_hex_is_uppercase():
    """sha256_hex returns the uppercase hex digest."""
    digest = sha256_hex(b"hello")
    assert digest == hashlib.sha256(b"hello").hexdigest().upper()
    assert len(digest) == 64


@pytest.mark.unit
def test_bind_message_is_deterministic():
    """Binding the same XML twice yields identical records."""
    xml = pain_document("pain.001.001.03")
    first = bind_message(xml)
    second = bind_message(xml)
    assert first == second
    assert first.hash_value == sha256_hex(first.canonical_xml)
    assert first.hash_algorithm == HASH_ALGORITHM == "SHA256"


@pytest.mark.unit
def test_bind_message_hash_changes_with_content():
    """Different message content yields a different digest."""
    a = bind_message(pain_document("pain.001.001.09", msg_id="MSG-1"))
    b = bind_message(pain_document("pain.001.001.09", msg_id="MSG-2"))
    assert a.hash_value != b.hash_value


@pytest.mark.unit
def test_embedded_message_rejects_lowercase_digest():
    """EmbeddedMessage only accepts 64 uppercase hex characters."""
    with pytest.raises(ValidationError):
        EmbeddedMessage(canonical_xml=b"<a/>", hash_value="ab" * 32)
    with pytest.raises(ValidationError):
        EmbeddedMessage(canonical_xml=b"<a/>", hash_value="AB" * 32, hash_algorithm="MD5")
