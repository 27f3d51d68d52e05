"""Transport-safe text helpers for payee names and payment notes."""

from __future__ import annotations

import re
import unicodedata

DEFAULT_MAX_LENGTH = 40

# Characters that make bank payouts reject the transaction note.
_NOTE_UNSAFE = re.compile(r"[.@#$%^&*!;:'\"~`?=+()]")
_WHITESPACE = re.compile(r"\s+")


def _is_printable_ascii(char: str) -> bool:
    return " " <= char <= "~"


def sanitize_text(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Reduce *text* to trimmed printable ASCII of at most *max_length* chars.

    Diacritics are removed through compatibility decomposition, so ``"Café"``
    becomes ``"Cafe"``; other non-ASCII characters are dropped.
    """

    if not text:
        return ""

    decomposed = unicodedata.normalize("NFKD", str(text))
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    spaced = _WHITESPACE.sub(" ", stripped)
    ascii_only = "".join(char for char in spaced if _is_printable_ascii(char))
    collapsed = _WHITESPACE.sub(" ", ascii_only).strip()
    return collapsed[: max(max_length, 0)].rstrip()


def sanitize_note(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Sanitize a payment note, also dropping punctuation banks refuse."""

    if not text:
        return ""
    return sanitize_text(_NOTE_UNSAFE.sub("", str(text)), max_length)
