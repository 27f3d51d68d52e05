"""Scan-to-pay state machine owned by the calling app.

The parsing and building services stay stateless; this class holds the
scan-armed flag and which step of the flow the user is in.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Callable, Optional

from ..core.logging import get_logger
from ..models.payment import PaymentDescriptor, ParseResult
from ..services.amounts import is_payable_amount
from ..services.errors import InvalidAmountError, MissingPayeeError, UpiLinkError
from ..services.launcher import LaunchOutcome, UriOpener, launch_payment_link
from ..services.payment_links import PaymentLinkService

logger = get_logger(__name__)


class ScanState(str, Enum):
    IDLE = "idle"
    SCANNED = "scanned"
    AWAITING_PAYMENT = "awaiting_payment"
    LAUNCHING = "launching"


class InvalidTransitionError(UpiLinkError):
    """An action was requested from a state that does not allow it."""


class ScanSession:
    """Drives one scan -> amount entry -> app launch cycle.

    Transitions::

        IDLE --valid scan--> SCANNED --begin_payment--> AWAITING_PAYMENT
        AWAITING_PAYMENT --submit--> LAUNCHING
        any --reset--> IDLE

    An invalid scan keeps the session in IDLE but disarms scanning for
    ``debounce_seconds`` so the same frame is not rejected over and over.
    """

    def __init__(
        self,
        service: PaymentLinkService,
        debounce_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.service = service
        self.debounce_seconds = (
            service.settings.scan_debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self._clock = clock
        self.state = ScanState.IDLE
        self.descriptor: Optional[PaymentDescriptor] = None
        self.link: Optional[str] = None
        self.last_result: Optional[ParseResult] = None
        self._rearm_at = 0.0

    @property
    def armed(self) -> bool:
        return self.state is ScanState.IDLE and self._clock() >= self._rearm_at

    def _require(self, *states: ScanState) -> None:
        if self.state not in states:
            expected = ", ".join(state.value for state in states)
            raise InvalidTransitionError(f"cannot do that while {self.state.value} (needs {expected})")

    def on_scan(self, raw: str) -> Optional[ParseResult]:
        """Handle one detected code. Returns None when the scan was ignored."""

        if not self.armed:
            return None

        result = self.service.parse(raw)
        self.last_result = result
        if not result.ok:
            self._rearm_at = self._clock() + self.debounce_seconds
            logger.info("scan_rejected", kind=result.error.value, rearm_in=self.debounce_seconds)
            return result

        self.descriptor = result.descriptor
        self.state = ScanState.SCANNED
        return result

    def begin_payment(self) -> PaymentDescriptor:
        self._require(ScanState.SCANNED)
        self.state = ScanState.AWAITING_PAYMENT
        return self.descriptor

    def submit(self, amount: str, note: Optional[str] = None) -> str:
        """Validate the user's amount and build the link to launch."""

        self._require(ScanState.AWAITING_PAYMENT)
        if not is_payable_amount(amount):
            raise InvalidAmountError("please enter a valid amount")
        if not self.descriptor.payee_address:
            raise MissingPayeeError("this code does not carry a payee address")

        self.link = self.service.build(self.descriptor, amount, note)
        self.state = ScanState.LAUNCHING
        return self.link

    async def launch(self, opener: UriOpener) -> LaunchOutcome:
        self._require(ScanState.LAUNCHING)
        return await launch_payment_link(self.link, opener)

    def reset(self) -> None:
        self.state = ScanState.IDLE
        self.descriptor = None
        self.link = None
        self.last_result = None
        self._rearm_at = 0.0
