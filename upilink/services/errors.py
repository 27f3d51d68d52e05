"""Domain exceptions raised by the parsing and link building services."""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - models import this module
    from ..models.payment import ParseErrorKind


class UpiLinkError(Exception):
    """Base class for every error raised by the upilink services."""


class InvalidPaymentCodeError(UpiLinkError):
    """The scanned text is not a usable UPI payment code."""

    def __init__(self, kind: "ParseErrorKind", detail: Optional[str] = None):
        self.kind = kind
        self.detail = detail or "Not a valid UPI payment code"
        super().__init__(f"{kind.value}: {self.detail}")


class InvalidAmountError(UpiLinkError, ValueError):
    """An amount was handed to the builder without being validated first."""


class MissingPayeeError(UpiLinkError, ValueError):
    """A link was requested for a descriptor that has no payee address."""
