"""Helpers for turning loosely-typed provider fields into Article values."""

import re
from typing import Any, Iterable, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

SNIPPET_MAX_LENGTH = 300

_SPACE_RE = re.compile(r"\s+")
_YEAR_RE = re.compile(r"\b(1[89]\d{2}|20\d{2})\b")
_WORD_RE = re.compile(r"[^\W\d_]+")

_LANGUAGE_CODES = {
    "pt": "pt",
    "por": "pt",
    "portuguese": "pt",
    "português": "pt",
    "portugues": "pt",
    "pt-br": "pt",
    "pt_br": "pt",
    "en": "en",
    "eng": "en",
    "english": "en",
    "es": "es",
    "spa": "es",
    "spanish": "es",
    "fr": "fr",
    "fre": "fr",
    "fra": "fr",
    "de": "de",
    "ger": "de",
    "deu": "de",
}

# Function words frequent in Portuguese and rare in English or Spanish.
_PORTUGUESE_MARKERS = {
    "não", "nao", "em", "uma", "dos", "das", "ao", "aos", "à", "às", "são",
    "também", "pacientes", "sangue", "transfusão", "cirurgia", "tratamento",
    "estudo", "resultados", "com", "para", "pelo", "pela", "foram", "entre",
}
_PORTUGUESE_SUFFIXES = ("ção", "ções", "ão", "ões")


def strip_markup(text: str) -> str:
    """Text content of an HTML fragment, with entities decoded."""
    if "<" not in text and "&" not in text:
        return text
    return BeautifulSoup(text, "html.parser").get_text(" ")


def clean_text(value: Any, markup: bool = False) -> str:
    """Collapse whitespace, stripping HTML first when the field carries markup.

    Plain-text fields are left alone so clinical thresholds such as
    ``Hb < 7 g/dL`` survive intact.
    """
    text = first_str(value)
    if not text:
        return ""
    if markup:
        text = strip_markup(text)
    return _SPACE_RE.sub(" ", text).strip()


def truncate_snippet(
    value: Any, max_length: int = SNIPPET_MAX_LENGTH, markup: bool = False
) -> str:
    """Clean a summary and bound it for display."""
    text = clean_text(value, markup=markup)
    if len(text) > max_length:
        return text[:max_length].rstrip() + "..."
    return text


def first_str(value: Any) -> Optional[str]:
    """First non-empty string from a scalar or list field."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        for item in value:
            found = first_str(item)
            if found:
                return found
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


def is_http_url(url: Optional[str]) -> bool:
    """Check for an absolute http(s) URL with a host."""
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)


def host_label(url: Optional[str]) -> str:
    """Short host label for a URL, without ``www.``."""
    if not url:
        return "unknown"
    try:
        domain = urlparse(url).hostname or "unknown"
    except ValueError:
        return "unknown"
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


def language_code(value: Any) -> Optional[str]:
    """Map provider language fields (``por``, ``Portuguese``, ``PT``) to ISO-639-1."""
    text = first_str(value)
    if not text:
        return None
    text = text.lower()
    if text in _LANGUAGE_CODES:
        return _LANGUAGE_CODES[text]
    if len(text) == 2 and text.isalpha():
        return text
    return None


def language_codes(values: Optional[Iterable[Any]]) -> list:
    """Normalize a list of provider language fields, dropping unknowns."""
    codes = []
    for value in values or []:
        code = language_code(value)
        if code and code not in codes:
            codes.append(code)
    return codes


def detect_portuguese(text: str) -> bool:
    """Heuristic Portuguese detection for providers without a language field."""
    words = _WORD_RE.findall(text.lower())
    if len(words) < 3:
        return False
    markers = sum(1 for w in words if w in _PORTUGUESE_MARKERS)
    suffixes = sum(1 for w in words if w.endswith(_PORTUGUESE_SUFFIXES))
    return (markers + suffixes) / len(words) >= 0.12


def extract_year(value: Optional[str]) -> int:
    """First plausible 4-digit year in a date string, or 0."""
    if not value:
        return 0
    match = _YEAR_RE.search(str(value))
    return int(match.group(1)) if match else 0


def to_int(value: Any) -> Optional[int]:
    """Coerce a count field, returning None for missing or negative values."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number >= 0 else None
