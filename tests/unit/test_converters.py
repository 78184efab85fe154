"""Text conversion for identity fields."""

import pytest

from conxml.converters import convert_text


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [
        ("Jörg Müßig", "Joerg Muessig"),
        ("ÄÖÜ äöü", "AeOeUe aeoeue"),
        ("Café François", "Cafe Francois"),
        ("Smith & Sons", "Smith + Sons"),
        ("Rechnung 123/2026 (Teil 1)", "Rechnung 123/2026 (Teil 1)"),
        ("a\tb\n\nc", "a b c"),
        ("  padded  ", "padded"),
        ("x € y", "x y"),
        ("#!@", ""),
        (12345, "12345"),
    ],
)
def test_convert_text(value: object, expected: str) -> None:
    """Characters are transliterated, filtered and whitespace-collapsed."""
    assert convert_text(value) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [
        ("Suite ¼", "Suite"),
        ("Area 12m²", "Area 12m"),
        ("ﬁnance", "nance"),
    ],
)
def test_convert_text_drops_compatibility_characters(
    value: str, expected: str
) -> None:
    """Fractions, superscripts and ligatures are dropped, never expanded."""
    assert convert_text(value) == expected


@pytest.mark.unit
def test_convert_text_keeps_none() -> None:
    """None is passed through unchanged."""
    assert convert_text(None) is None


@pytest.mark.unit
def test_convert_text_keeps_permitted_punctuation() -> None:
    """The permitted punctuation set survives conversion."""
    assert convert_text("a'b:c?d,e-f(g+h.i)j/k") == "a'b:c?d,e-f(g+h.i)j/k"
