"""Scheme normalization for scanned payment codes."""

from __future__ import annotations

from ..models.payment import CANONICAL_PREFIX

# Vendor prefixes that open the same UPI intent as the canonical scheme.
SCHEME_ALIASES = {
    "paytm://": CANONICAL_PREFIX,
    "phonepe://": CANONICAL_PREFIX,
    CANONICAL_PREFIX: CANONICAL_PREFIX,
}


def normalize_scheme(raw: str) -> str:
    """Rewrite a known alternate scheme prefix to ``upi://``.

    Only the prefix changes; unknown input is returned untouched.
    """

    lowered = raw[:16].lower()
    for prefix, replacement in SCHEME_ALIASES.items():
        if lowered.startswith(prefix):
            return replacement + raw[len(prefix):]
    return raw
