"""
Text utilities for handling Spanish text with accents.

Used for catalog search and audience filtering.
"""

import unicodedata
from typing import Optional


def fold_text(text: Optional[str]) -> str:
    """
    Fold text for accent- and case-insensitive comparison.

    - "Niña" → "nina"
    - "  Vestido Algodón " → "vestido algodon"
    - None → ""

    Args:
        text: Original text (may have accents, mixed case)

    Returns:
        Lower-case ASCII-ish string, empty for empty input
    """
    if not text:
        return ""

    # Normalize unicode (NFD decomposition separates base chars from accents)
    normalized = unicodedata.normalize('NFD', text.strip())

    # Remove accent marks (combining characters in Unicode category 'Mn')
    stripped = ''.join(
        c for c in normalized
        if unicodedata.category(c) != 'Mn'
    )

    return stripped.lower()
