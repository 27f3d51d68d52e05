"""UPI deeplink endpoints."""

from __future__ import annotations

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends
from pydantic import AfterValidator, BaseModel, Field, field_validator

from ...models.payment import ParseErrorKind, is_vpa
from ...services.amounts import is_payable_amount
from ...services.errors import InvalidPaymentCodeError
from ...services.launcher import LaunchCandidate
from ...services.payment_links import PaymentLinkService
from ..deps import get_payment_link_service

router = APIRouter()


def _check_amount(value: str) -> str:
    if not is_payable_amount(value):
        raise ValueError("amount must be a positive number")
    return value.strip()


PayableAmount = Annotated[str, AfterValidator(_check_amount)]


class PayLinkRequest(BaseModel):
    payload: str = Field(max_length=4096)
    amount: PayableAmount
    note: Optional[str] = Field(default=None, max_length=200)


class PayLinkResponse(BaseModel):
    deeplink: str
    is_merchant: bool
    launch_candidates: List[LaunchCandidate]


class UPIDeeplinkRequest(BaseModel):
    upi_id: str
    payee_name: Optional[str] = None
    amount: PayableAmount
    currency: Optional[str] = None
    note: Optional[str] = Field(default=None, max_length=200)
    txn_ref: Optional[str] = None

    @field_validator("upi_id")
    @classmethod
    def _check_upi_id(cls, value: str) -> str:
        value = value.strip()
        if not is_vpa(value):
            raise ValueError("upi_id must look like name@bank")
        return value


class UPIDeeplinkResponse(BaseModel):
    deeplink: str
    qr_payload: str


@router.post("/upi/pay-link", response_model=PayLinkResponse)
async def create_pay_link(
    payload: PayLinkRequest,
    service: PaymentLinkService = Depends(get_payment_link_service),
) -> PayLinkResponse:
    """Parse a scanned code and build the link for the entered amount."""

    descriptor = service.parse(payload.payload).unwrap()
    if not descriptor.payee_address:
        # Name-only codes can be shown to the user but not paid.
        raise InvalidPaymentCodeError(ParseErrorKind.MISSING_PAYEE_ADDRESS, "payment code has no payee address")

    deeplink = service.build(descriptor, payload.amount, payload.note)
    return PayLinkResponse(
        deeplink=deeplink,
        is_merchant=descriptor.is_merchant,
        launch_candidates=service.candidates(deeplink),
    )


@router.post("/upi/deeplink", response_model=UPIDeeplinkResponse)
async def create_upi_deeplink(
    payload: UPIDeeplinkRequest,
    service: PaymentLinkService = Depends(get_payment_link_service),
) -> UPIDeeplinkResponse:
    """Build a peer-to-peer link for a manually entered payee."""

    deeplink = service.build_manual(
        payee_address=payload.upi_id,
        amount=payload.amount,
        payee_name=payload.payee_name,
        currency=payload.currency,
        note=payload.note,
        txn_ref=payload.txn_ref,
    )
    # A static UPI QR encodes the same URI as the deeplink.
    return UPIDeeplinkResponse(deeplink=deeplink, qr_payload=deeplink)
