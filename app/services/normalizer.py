# app/services/normalizer.py
import re
import unicodedata

_WHITESPACE_RUN = re.compile(r"\s+")
_NON_ALNUM = re.compile(r"[^A-Z0-9]+")

def strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)

def normalize(text: str | None) -> str:
    """
    Canonical form used for every word comparison and cache key:
    trimmed, lower-cased, without diacritics, inner whitespace collapsed.
    "  Éléphant " -> "elephant". Idempotent.
    """
    if not text:
        return ""
    lowered = strip_diacritics(text).lower()
    # Some characters only decompose after lower-casing (e.g. "İ")
    lowered = strip_diacritics(lowered)
    return _WHITESPACE_RUN.sub(" ", lowered).strip()

def normalize_category_name(name: str | None) -> str:
    """Internal category name: "Métier " -> "METIER", "fast food" -> "FAST_FOOD"."""
    if not name:
        return ""
    upper = strip_diacritics(name.strip()).upper()
    return _NON_ALNUM.sub("_", upper).strip("_")

def starts_with_letter(word: str | None, letter: str | None) -> bool:
    normalized_word = normalize(word)
    normalized_letter = normalize(letter)
    if not normalized_word or not normalized_letter:
        return False
    return normalized_word.startswith(normalized_letter)
