"""Merchant QR detection."""

from __future__ import annotations

from typing import Iterable, Tuple

# Query keys that only appear in signed merchant codes.
MERCHANT_MARKERS = ("sign", "orgid", "mid", "msid", "mtid", "tid", "paytmqr", "mc")


def detect_merchant_markers(params: Iterable[str]) -> Tuple[str, ...]:
    """Return the marker keys present in *params*, in vocabulary order.

    *params* may be a mapping or any iterable of keys. Values are never
    inspected, this is not a signature check.
    """

    keys = set(params)
    return tuple(marker for marker in MERCHANT_MARKERS if marker in keys)


def has_merchant_markers(params: Iterable[str]) -> bool:
    return bool(detect_merchant_markers(params))
