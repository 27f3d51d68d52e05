"""UPI QR payload parsing.

Parsing runs as two explicit stages that each return a :class:`ParseResult`:

* :func:`decode_structured` treats the text as a ``upi://pay?...`` URI and
  reads its query string the way a browser would.
* :func:`decode_fallback` pattern-matches the fields directly in the raw
  text. It runs when the structured stage reports ``MALFORMED`` or when the
  text carries no URI scheme at all.

:func:`recover_payee_address` is the best-effort backfill the scanning flow
applies to name-only descriptors.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, unquote, urlsplit

from ..core.logging import get_logger
from ..models.payment import (
    CANONICAL_PREFIX,
    CANONICAL_SCHEME,
    DEFAULT_CURRENCY,
    PaymentDescriptor,
    ParseErrorKind,
    ParseResult,
    is_vpa,
)
from .merchant import detect_merchant_markers
from .schemes import normalize_scheme

logger = get_logger(__name__)

_OTHER_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")

# Query key -> descriptor field, shared by both stages.
FIELD_KEYS = {
    "pn": "payee_name",
    "am": "amount",
    "tn": "note",
    "cu": "currency_code",
    "mc": "merchant_code",
    "tr": "transaction_ref",
}

_ADDRESS_TOKEN = re.compile(r"(?:^|[?&;\s])pa=([^&#\s]+)", re.IGNORECASE)


def _field_pattern(key: str) -> re.Pattern:
    return re.compile(rf"(?:^|[?&;\s]){key}=([^&#\r\n]*)", re.IGNORECASE)


_FIELD_PATTERNS = {key: _field_pattern(key) for key in FIELD_KEYS}


def _descriptor(payload: str, fields: Dict[str, Optional[str]], markers: Tuple[str, ...] = ()) -> PaymentDescriptor:
    descriptor = PaymentDescriptor(
        payee_address=fields.get("pa") or "",
        original_payload=payload,
        **{attr: fields.get(key) for key, attr in FIELD_KEYS.items()},
    )
    descriptor._merchant_markers = markers
    return descriptor


def _decode_address(segments: List[str]) -> str:
    """Strictly decode the last ``pa`` segment; undecodable bytes give ``""``."""

    values = [segment.partition("=")[2] for segment in segments if unquote(segment.partition("=")[0]).strip() == "pa"]
    if not values:
        return ""
    try:
        return unquote(values[-1].replace("+", " "), errors="strict").strip()
    except UnicodeDecodeError:
        return ""


def decode_structured(payload: str) -> ParseResult:
    """Decode a canonical ``upi://pay`` URI.

    Only a broken URI or a host other than ``pay`` reports ``MALFORMED``.
    Valueless keys (``&mid``) are kept with an empty value and badly encoded
    display fields are decoded with replacement characters, so marker
    detection never depends on how the values are written.
    """

    try:
        parts = urlsplit(payload)
    except ValueError as exc:
        return ParseResult.failure(ParseErrorKind.MALFORMED, f"URI could not be split: {exc}")

    if parts.scheme.lower() != CANONICAL_SCHEME or parts.netloc.lower() != "pay":
        return ParseResult.failure(ParseErrorKind.MALFORMED, "not a upi://pay URI")

    # Stray separators ("a=1&&b=2", trailing "&") are common in printed codes.
    segments = [segment for segment in parts.query.split("&") if segment]
    markers = detect_merchant_markers(unquote(segment.partition("=")[0]).strip() for segment in segments)

    # Last occurrence wins for duplicated keys.
    pairs = parse_qsl("&".join(segments), keep_blank_values=True, errors="replace")
    params = {key.strip(): value.strip() for key, value in pairs}

    fields: Dict[str, Optional[str]] = {key: params.get(key) or None for key in FIELD_KEYS}
    fields["cu"] = fields["cu"] or DEFAULT_CURRENCY

    address = _decode_address(segments)
    if address and not is_vpa(address):
        logger.info("qr_address_malformed", length=len(address))
        address = ""
    fields["pa"] = address

    if not address and not fields["pn"]:
        return ParseResult.failure(ParseErrorKind.MISSING_PAYEE_ADDRESS, "payment code has no payee address")

    return ParseResult.success(_descriptor(payload, fields, markers))


def _find_addresses(text: str) -> List[str]:
    candidates = []
    for match in _ADDRESS_TOKEN.finditer(text):
        value = unquote(match.group(1)).strip()
        if is_vpa(value):
            candidates.append(value)
    return candidates


def decode_fallback(payload: str) -> ParseResult:
    """Extract fields with tolerant patterns straight from the raw text.

    Descriptors produced here never count as merchant codes: without a
    trustworthy parameter set the markers cannot be relied on.
    """

    addresses = _find_addresses(payload)
    if not addresses:
        return ParseResult.failure(ParseErrorKind.UNPARSEABLE, "no payee address found")

    fields: Dict[str, Optional[str]] = {"pa": addresses[0]}
    for key, pattern in _FIELD_PATTERNS.items():
        match = pattern.search(payload)
        fields[key] = unquote(match.group(1).replace("+", " ")).strip() if match else None
    fields["cu"] = fields["cu"] or DEFAULT_CURRENCY

    return ParseResult.success(_descriptor(payload, fields))


def parse_qr_payload(raw: str) -> ParseResult:
    """Turn raw scanned text into a :class:`PaymentDescriptor` or a failure."""

    payload = normalize_scheme((raw or "").strip())

    if payload.startswith(CANONICAL_PREFIX):
        result = decode_structured(payload)
        if result.error is not ParseErrorKind.MALFORMED:
            return result
        logger.info("qr_structured_decode_failed", detail=result.detail)
    elif _OTHER_SCHEME.match(payload):
        return ParseResult.failure(ParseErrorKind.UNRECOGNIZED_SCHEME, "not a UPI payment code")

    return decode_fallback(payload)


def recover_payee_address(descriptor: PaymentDescriptor) -> PaymentDescriptor:
    """Backfill a missing address from ``original_payload`` when possible.

    Running this on its own output returns the same descriptor.
    """

    if descriptor.payee_address:
        return descriptor

    addresses = _find_addresses(descriptor.original_payload)
    if not addresses:
        return descriptor

    logger.info("qr_address_recovered")
    return descriptor.model_copy(update={"payee_address": addresses[0]})
