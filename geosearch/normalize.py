from __future__ import annotations

"""
Text normalisation helpers shared by the catalog lookups and the search
ranker.

Public helpers:

* normalize(text) -> str
    Canonical decomposition with combining marks (U+0300-U+036F) removed.
    Case is preserved.

* fold(text) -> str
    normalize() plus lower-casing; the form used at every comparison site.
"""

import re
import unicodedata

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")

# Letters that have no canonical decomposition but are written as a
# separate letter in the catalog's language.
_UNDECOMPOSABLE = str.maketrans({"ı": "i"})


def normalize(text: str | None) -> str:
    """Strip diacritics; 'İstanbul' -> 'Istanbul', 'Kadıköy' -> 'Kadıkoy'."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    return _COMBINING_MARKS.sub("", decomposed)


def fold(text: str | None) -> str:
    """Comparison form: diacritic-free and lower-cased.

    'Kadıköy' -> 'kadikoy'. Dotless i is folded after lower-casing so the
    result does not depend on where the letter came from.
    """
    return normalize(text).lower().translate(_UNDECOMPOSABLE)
