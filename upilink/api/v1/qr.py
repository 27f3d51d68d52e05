"""QR payload parsing endpoint."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ...models.payment import PaymentDescriptor
from ...services.payment_links import PaymentLinkService
from ..deps import get_payment_link_service

router = APIRouter()


class QRParseRequest(BaseModel):
    payload: str = Field(max_length=4096)


class DescriptorOut(BaseModel):
    """Wire form of a descriptor; merchant flags are plain fields here."""

    payee_address: str
    payee_name: Optional[str] = None
    amount: Optional[str] = None
    note: Optional[str] = None
    currency_code: str
    merchant_code: Optional[str] = None
    transaction_ref: Optional[str] = None
    original_payload: str
    is_merchant: bool
    merchant_markers: List[str] = []

    @classmethod
    def from_descriptor(cls, descriptor: PaymentDescriptor) -> "DescriptorOut":
        return cls(**descriptor.model_dump(), merchant_markers=list(descriptor.merchant_markers))


class QRParseResponse(BaseModel):
    descriptor: DescriptorOut


@router.post("/qr/parse", response_model=QRParseResponse)
async def parse_qr(
    payload: QRParseRequest,
    service: PaymentLinkService = Depends(get_payment_link_service),
) -> QRParseResponse:
    descriptor = service.parse(payload.payload).unwrap()
    return QRParseResponse(descriptor=DescriptorOut.from_descriptor(descriptor))
