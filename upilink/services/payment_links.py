"""Settings-aware facade over the parser, builder and launcher."""

from __future__ import annotations

from typing import List, Optional

from ..core.config import Settings
from ..core.logging import get_logger
from ..models.payment import PaymentDescriptor, ParseResult
from .launcher import LaunchCandidate, launch_candidates
from .link_builder import build_payment_link, build_peer_link
from .qr_parser import parse_qr_payload, recover_payee_address

logger = get_logger(__name__)


class PaymentLinkService:
    """Parse scanned codes and produce launchable UPI links."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def parse(self, raw: str) -> ParseResult:
        """Parse *raw* and apply the caller-side address recovery."""

        result = parse_qr_payload(raw)
        if not result.ok:
            logger.info("qr_parse_failed", kind=result.error.value, length=len(raw or ""))
            return result

        descriptor = recover_payee_address(result.descriptor)
        logger.info(
            "qr_parsed",
            merchant=descriptor.is_merchant,
            has_address=bool(descriptor.payee_address),
        )
        return ParseResult.success(descriptor)

    def _note(self, note: Optional[str], descriptor: Optional[PaymentDescriptor] = None) -> Optional[str]:
        if note is not None:
            return note
        if descriptor is not None and descriptor.note:
            return None
        return self.settings.default_note

    def build(self, descriptor: PaymentDescriptor, amount: str, note: Optional[str] = None) -> str:
        return build_payment_link(
            descriptor,
            amount,
            self._note(note, descriptor),
            name_max_length=self.settings.name_max_length,
            note_max_length=self.settings.note_max_length,
        )

    def build_manual(
        self,
        payee_address: str,
        amount: str,
        payee_name: Optional[str] = None,
        currency: Optional[str] = None,
        note: Optional[str] = None,
        txn_ref: Optional[str] = None,
    ) -> str:
        """Peer-to-peer link for a payee typed in by hand."""

        return build_peer_link(
            payee_address=payee_address,
            amount=amount,
            payee_name=payee_name,
            currency=currency or self.settings.default_currency,
            note=self._note(note),
            txn_ref=txn_ref,
            name_max_length=self.settings.name_max_length,
            note_max_length=self.settings.note_max_length,
        )

    def candidates(self, link: str) -> List[LaunchCandidate]:
        return launch_candidates(link)
