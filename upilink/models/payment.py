"""Payment descriptor and parse result models."""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, PrivateAttr, computed_field, field_validator, model_validator

from ..services.errors import InvalidPaymentCodeError

CANONICAL_SCHEME = "upi"
CANONICAL_PREFIX = "upi://"
DEFAULT_CURRENCY = "INR"

_VPA_PATTERN = re.compile(r"^[^@\s&?#=]+@[^@\s&?#=]+$")


def is_vpa(value: Optional[str]) -> bool:
    """Return True when *value* looks like a ``local@handle`` payment address."""

    return bool(value) and bool(_VPA_PATTERN.match(value))


class ParseErrorKind(str, Enum):
    UNRECOGNIZED_SCHEME = "UNRECOGNIZED_SCHEME"
    MISSING_PAYEE_ADDRESS = "MISSING_PAYEE_ADDRESS"
    UNPARSEABLE = "UNPARSEABLE"
    # Internal: structured decoding gave up, try the pattern stage.
    MALFORMED = "MALFORMED"


class PaymentDescriptor(BaseModel):
    """Structured, validated representation of a scanned payment code."""

    model_config = ConfigDict(frozen=True)

    payee_address: str = ""
    payee_name: Optional[str] = None
    amount: Optional[str] = None
    note: Optional[str] = None
    currency_code: str = DEFAULT_CURRENCY
    merchant_code: Optional[str] = None
    transaction_ref: Optional[str] = None
    original_payload: str
    # Filled by the QR parser only; see upilink.services.qr_parser.
    _merchant_markers: Tuple[str, ...] = PrivateAttr(default=())

    @field_validator("payee_name", "amount", "note", "merchant_code", "transaction_ref", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("payee_address", mode="before")
    @classmethod
    def _strip_address(cls, value):
        return (value or "").strip()

    @field_validator("currency_code", mode="before")
    @classmethod
    def _default_currency(cls, value):
        value = (value or "").strip()
        return value.upper() if value else DEFAULT_CURRENCY

    @model_validator(mode="after")
    def _check_identity(self) -> "PaymentDescriptor":
        if self.payee_address and not is_vpa(self.payee_address):
            raise ValueError(f"payee_address {self.payee_address!r} is not a local@handle address")
        if not self.payee_address and not self.payee_name:
            raise ValueError("a payment descriptor needs a payee address or a payee name")
        return self

    @property
    def merchant_markers(self) -> Tuple[str, ...]:
        """Merchant marker keys found in the structured query, if any."""
        return self._merchant_markers

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_merchant(self) -> bool:
        return bool(self._merchant_markers)


class ParseResult(BaseModel):
    """Tagged outcome of one parsing stage: a descriptor or a failure kind."""

    descriptor: Optional[PaymentDescriptor] = None
    error: Optional[ParseErrorKind] = None
    detail: Optional[str] = None

    @classmethod
    def success(cls, descriptor: PaymentDescriptor) -> "ParseResult":
        return cls(descriptor=descriptor)

    @classmethod
    def failure(cls, kind: ParseErrorKind, detail: str) -> "ParseResult":
        return cls(error=kind, detail=detail)

    @property
    def ok(self) -> bool:
        return self.descriptor is not None

    def unwrap(self) -> PaymentDescriptor:
        """Return the descriptor or raise :class:`InvalidPaymentCodeError`."""

        if self.descriptor is not None:
            return self.descriptor
        raise InvalidPaymentCodeError(self.error or ParseErrorKind.UNPARSEABLE, self.detail)
