"""UPI deep-link construction.

Merchant codes are signed by the acquiring bank, so their query string is
re-emitted segment by segment with only ``cu`` and ``tn`` allowed to change.
Peer-to-peer codes carry no signature and are rebuilt from scratch.
"""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import quote, unquote, urlsplit

from ..core.logging import get_logger
from ..models.payment import CANONICAL_PREFIX, CANONICAL_SCHEME, DEFAULT_CURRENCY, PaymentDescriptor
from .amounts import is_payable_amount, normalize_amount
from .errors import InvalidAmountError, MissingPayeeError
from .sanitize import DEFAULT_MAX_LENGTH, sanitize_note, sanitize_text

logger = get_logger(__name__)

REF_MAX_LENGTH = 35

# Fields a merchant rebuild may touch; everything else is signed.
UNSIGNED_KEYS = ("cu", "tn")


class MerchantRebuildError(ValueError):
    """The signed payload could not be re-emitted safely."""


def _encode(value: str) -> str:
    return quote(value, safe="")


def build_peer_link(
    payee_address: str,
    amount: str,
    payee_name: Optional[str] = None,
    currency: str = DEFAULT_CURRENCY,
    note: Optional[str] = None,
    txn_ref: Optional[str] = None,
    name_max_length: int = DEFAULT_MAX_LENGTH,
    note_max_length: int = DEFAULT_MAX_LENGTH,
) -> str:
    """Build the minimal ``upi://pay`` link for an unsigned payee."""

    parts = [f"pa={quote(payee_address.strip(), safe='@')}"]

    name = sanitize_text(payee_name or "", name_max_length)
    if name:
        parts.append(f"pn={_encode(name)}")

    parts.append(f"am={normalize_amount(amount)}")
    parts.append(f"cu={_encode(currency or DEFAULT_CURRENCY)}")

    clean_note = sanitize_note(note or "", note_max_length)
    if clean_note:
        parts.append(f"tn={_encode(clean_note)}")

    ref = sanitize_text(txn_ref or "", REF_MAX_LENGTH)
    if ref:
        parts.append(f"tr={_encode(ref)}")

    return f"{CANONICAL_PREFIX}pay?" + "&".join(parts)


def _segment_key(segment: str) -> str:
    return unquote(segment.split("=", 1)[0]).strip()


def _segment_value(segment: str) -> str:
    _, _, value = segment.partition("=")
    return unquote(value.replace("+", " ")).strip()


def rebuild_merchant_link(
    descriptor: PaymentDescriptor,
    amount: str,
    note: Optional[str] = None,
    note_max_length: int = DEFAULT_MAX_LENGTH,
) -> str:
    """Re-emit a signed merchant payload, updating only unsigned fields.

    A fixed amount inside the signed payload is kept as is; the *amount*
    argument is only added when the merchant left it open.
    """

    parts = urlsplit(descriptor.original_payload)
    if parts.scheme.lower() != CANONICAL_SCHEME:
        raise MerchantRebuildError("original payload is not a UPI URI")

    segments = [segment for segment in parts.query.split("&") if segment]
    if not segments:
        raise MerchantRebuildError("original payload has no query string")

    addresses = [_segment_value(s) for s in segments if _segment_key(s) == "pa"]
    if not addresses or addresses[-1] != descriptor.payee_address:
        raise MerchantRebuildError("signed payee address does not match the descriptor")

    clean_note = sanitize_note(note, note_max_length) if note is not None else ""
    replacements = {"cu": f"cu={_encode(descriptor.currency_code)}"}
    if clean_note:
        replacements["tn"] = f"tn={_encode(clean_note)}"

    rebuilt: List[str] = []
    seen = set()
    has_amount = False
    for segment in segments:
        key = _segment_key(segment)
        seen.add(key)
        if key == "am":
            has_amount = True
            if not _segment_value(segment):
                # An open amount slot is filled in place.
                segment = f"am={normalize_amount(amount)}"
        rebuilt.append(replacements.get(key, segment))

    if not has_amount:
        rebuilt.append(f"am={normalize_amount(amount)}")
    for key in UNSIGNED_KEYS:
        if key in replacements and key not in seen:
            rebuilt.append(replacements[key])

    return f"{CANONICAL_PREFIX}pay?" + "&".join(rebuilt)


def build_payment_link(
    descriptor: PaymentDescriptor,
    amount: str,
    note: Optional[str] = None,
    *,
    name_max_length: int = DEFAULT_MAX_LENGTH,
    note_max_length: int = DEFAULT_MAX_LENGTH,
) -> str:
    """Turn a parsed descriptor plus the user's amount into a launchable link.

    *note* overrides the scanned note when given. Callers must validate the
    amount first; an unpayable amount or a descriptor without an address is
    a programming error and raises ``ValueError``.
    """

    if not is_payable_amount(amount):
        raise InvalidAmountError(f"amount {amount!r} must be a positive number")
    if not descriptor.payee_address:
        raise MissingPayeeError("descriptor has no payee address")

    if descriptor.is_merchant:
        try:
            return rebuild_merchant_link(descriptor, amount, note, note_max_length)
        except (ValueError, UnicodeError) as exc:
            logger.warning(
                "merchant_rebuild_failed",
                error=str(exc),
                markers=list(descriptor.merchant_markers),
            )

    return build_peer_link(
        payee_address=descriptor.payee_address,
        amount=amount,
        payee_name=descriptor.payee_name,
        currency=descriptor.currency_code,
        note=note if note is not None else descriptor.note,
        txn_ref=descriptor.transaction_ref,
        name_max_length=name_max_length,
        note_max_length=note_max_length,
    )
