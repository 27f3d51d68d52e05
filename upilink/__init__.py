"""UPI QR parsing and payment link service."""

from .models.payment import PaymentDescriptor, ParseErrorKind, ParseResult
from .services.link_builder import build_payment_link
from .services.qr_parser import parse_qr_payload, recover_payee_address

__all__ = [
    "PaymentDescriptor",
    "ParseErrorKind",
    "ParseResult",
    "build_payment_link",
    "parse_qr_payload",
    "recover_payee_address",
]
