"""Request-scoped dependencies"""
from fastapi import Request

from ..services.payment_links import PaymentLinkService


def get_payment_link_service(request: Request) -> PaymentLinkService:
    """Get the payment link service from app state"""
    return request.app.state.payment_link_service
