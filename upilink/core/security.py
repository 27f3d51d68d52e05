"""Optional shared-secret check for the mobile client."""

from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from .config import get_settings


async def enforce_api_key(x_api_key: Optional[str] = Header(default=None)) -> None:
    """Reject the request when an API key is configured and does not match."""

    expected = get_settings().api_key
    if not expected:
        return
    if x_api_key is None or not secrets.compare_digest(x_api_key.encode(), expected.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )
