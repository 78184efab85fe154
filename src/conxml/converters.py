"""Text conversion into the character set permitted in payment documents."""

from __future__ import annotations

import re
import unicodedata

_TRANSLITERATIONS = {
    "Ä": "Ae",
    "Ö": "Oe",
    "Ü": "Ue",
    "ä": "ae",
    "ö": "oe",
    "ü": "ue",
    "ß": "ss",
    "&": "+",
}
_DISALLOWED = re.compile(r"[^A-Za-z0-9 ':?,\-(+.)/]")
_WHITESPACE = re.compile(r"\s+")


def convert_text(value: object) -> str | None:
    """Convert value to permitted payment text; None stays None.

    Umlauts and sharp s are transliterated, remaining diacritics are dropped
    to their base letter, other characters outside the permitted set are
    removed and whitespace is collapsed.

    Args:
        value: Raw value; non-strings are stringified.

    Returns:
        Converted text, or None.
    """
    if value is None:
        return None
    text = str(value)
    for source, target in _TRANSLITERATIONS.items():
        text = text.replace(source, target)
    text = unicodedata.normalize("NFD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = _DISALLOWED.sub("", _WHITESPACE.sub(" ", text))
    return _WHITESPACE.sub(" ", text).strip()
