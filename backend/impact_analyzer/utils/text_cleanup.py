"""
Text cleanup utilities for user-supplied job details.

Job titles and descriptions are usually pasted from job boards or documents
and carry smart quotes, dashes, non-breaking and zero-width spaces. Left in,
they fail the title charset check and make the same job produce different
query fingerprints, so stored analyses would not be found again.
"""

from __future__ import annotations

import re
import unicodedata

_REPLACEMENTS = {
    "\u2019": "'",   # right single quote
    "\u2018": "'",   # left single quote
    "\u201c": '"',   # left double quote
    "\u201d": '"',   # right double quote
    "\u2013": "-",   # en-dash
    "\u2014": "-",   # em-dash
    "\u2026": "...", # ellipsis
    "\u00a0": " ",   # non-breaking space
    "\u200b": "",    # zero-width space
    "\ufeff": "",    # BOM
}


def normalize_text(text: str) -> str:
    """Normalize unicode punctuation and whitespace in pasted free text."""
    text = unicodedata.normalize("NFKC", text)

    for old, new in _REPLACEMENTS.items():
        text = text.replace(old, new)

    # Collapse runs of spaces/tabs, keep paragraph breaks
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)

    lines = [line.strip() for line in text.splitlines()]
    return "\n".join(lines).strip()


def collapse_whitespace(text: str) -> str:
    """Single-line form: every whitespace run becomes one space."""
    return re.sub(r"\s+", " ", normalize_text(text)).strip()
