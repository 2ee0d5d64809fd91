"""Shared text utilities for content fingerprinting."""

from __future__ import annotations

import hashlib
import re

from bs4 import BeautifulSoup  # type: ignore

_DIGITS_RE = re.compile(r"\d+")
_WHITESPACE_RE = re.compile(r"\s+")
_IATA_RE = re.compile(r"[A-Z]{3}")
_NAME_RE = re.compile(r"[A-Z][a-z]+")

HASH_LENGTH = 16


def _digest(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def normalize_for_hash(text: str) -> str:
    """Strip digits, collapse whitespace and lower-case ``text``."""

    stripped = _DIGITS_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", stripped).strip().lower()


def generate_content_hash(text: str) -> str:
    """Return a 16 hex character fingerprint that ignores numbers and spacing."""

    return _digest(normalize_for_hash(text))


def pattern_hash(text: str) -> str:
    """Fingerprint where numbers become a ``[NUM]`` placeholder."""

    normalized = _DIGITS_RE.sub("[NUM]", text.lower())
    return _digest(_WHITESPACE_RE.sub(" ", normalized).strip())


def sentence_structure(sentence: str) -> str:
    """Reduce a sentence to its template by masking numbers, codes and names."""

    structure = _DIGITS_RE.sub("[num]", sentence)
    structure = _IATA_RE.sub("[IATA]", structure)
    structure = _NAME_RE.sub("[NAME]", structure)
    return structure.lower().strip()


def extract_text(html: str) -> str:
    """Return the visible text of an HTML fragment.

    Plain text passes through unchanged apart from whitespace handling.
    """

    if not html or "<" not in html:
        return html

    try:
        soup = BeautifulSoup(html, "lxml")
    except Exception:
        # Fallback to html.parser if lxml isn't installed
        soup = BeautifulSoup(html, "html.parser")

    for node in soup(["script", "style"]):
        node.decompose()
    return soup.get_text(" ")
