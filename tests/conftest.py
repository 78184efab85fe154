"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from conxml.container import Container
from conxml.document_validator import DocumentValidator


class SpyValidator(DocumentValidator):
    """DocumentValidator recording every validate call."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []

    def validate(self, document, schema_id: str) -> None:  # type: ignore[no-untyped-def]
        self.calls.append(schema_id)
        super().validate(document, schema_id)


@pytest.fixture
def spy_validator() -> SpyValidator:
    """Validator over the shipped schemas that records calls."""
    return SpyValidator()


@pytest.fixture
def container(spy_validator: SpyValidator) -> Container:
    """Empty container with valid identity fields."""
    return Container(sender_id="ABCDEFGH", id_type="EBIC", validator=spy_validator)
