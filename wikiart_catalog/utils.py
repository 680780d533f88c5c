"""Utility helpers for title normalization and storage file names."""

from __future__ import annotations

import html
import re
import unicodedata

WHITESPACE_PATTERN = re.compile(r"\s+")
APOSTROPHE_PATTERN = re.compile("[‘’‚‛′`´]")
QUOTE_PATTERN = re.compile("[“”„‟″]")
UNSAFE_FILENAME_PATTERN = re.compile(r"[/\\]")


def collapse_whitespace(value: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", value).strip()


def decode_title(value: str) -> str:
    """Decode HTML character references and tidy whitespace for display."""
    decoded = html.unescape(value)
    # Raw titles are occasionally double-encoded ("&amp;#39;").
    if "&" in decoded:
        decoded = html.unescape(decoded)
    return collapse_whitespace(decoded)


def normalize_title(value: str) -> str:
    """Canonical catalog key for a title; stable across encoding differences."""
    normalized = unicodedata.normalize("NFC", decode_title(value))
    normalized = APOSTROPHE_PATTERN.sub("'", normalized)
    normalized = QUOTE_PATTERN.sub('"', normalized)
    return normalized


def safe_filename_part(value: str) -> str:
    """Keep a title from introducing extra storage key segments."""
    return UNSAFE_FILENAME_PATTERN.sub("-", value).strip()
