"""Hand a payment link over to an installed UPI app.

The platform supplies a :class:`UriOpener`; this module only decides the
order in which app-specific URIs are tried.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from pydantic import BaseModel

from ..core.logging import get_logger
from ..models.payment import CANONICAL_PREFIX

logger = get_logger(__name__)

# Probe order: Google Pay, PhonePe, Paytm.
UPI_APPS: Tuple[Tuple[str, str], ...] = (
    ("gpay", "tez://upi/"),
    ("phonepe", "phonepe://"),
    ("paytm", "paytmmp://"),
)


class LaunchCandidate(BaseModel):
    app: str
    uri: str


class LaunchOutcome(BaseModel):
    launched: bool
    app: Optional[str] = None
    uri: Optional[str] = None
    attempts: List[str] = []


class UriOpener(ABC):
    """Platform hook that can check for and open a URI."""

    @abstractmethod
    async def can_open(self, uri: str) -> bool:
        """Return True when some installed app handles *uri*"""
        raise NotImplementedError()

    @abstractmethod
    async def open(self, uri: str) -> bool:
        """Open *uri*; return True once the handoff succeeded"""
        raise NotImplementedError()


def launch_candidates(link: str) -> List[LaunchCandidate]:
    """App-specific rewrites of *link*, followed by the canonical link."""

    if not link.startswith(CANONICAL_PREFIX):
        raise ValueError("payment links must use the upi:// scheme")

    rest = link[len(CANONICAL_PREFIX):]
    candidates = [LaunchCandidate(app=app, uri=prefix + rest) for app, prefix in UPI_APPS]
    candidates.append(LaunchCandidate(app="upi", uri=link))
    return candidates


async def _attempt(opener: UriOpener, candidate: LaunchCandidate, check: bool) -> bool:
    try:
        if check and not await opener.can_open(candidate.uri):
            return False
        return bool(await opener.open(candidate.uri))
    except Exception as exc:  # the platform bridge may raise anything
        logger.warning("upi_launch_attempt_failed", app=candidate.app, error=str(exc))
        return False


async def launch_payment_link(link: str, opener: UriOpener) -> LaunchOutcome:
    """Try each UPI app in order, then the generic ``upi://`` handler.

    Attempts run one after another; the first successful handoff wins.
    """

    *apps, fallback = launch_candidates(link)
    attempts: List[str] = []

    for candidate in apps:
        attempts.append(candidate.app)
        if await _attempt(opener, candidate, check=True):
            logger.info("upi_launch_succeeded", app=candidate.app, attempts=len(attempts))
            return LaunchOutcome(launched=True, app=candidate.app, uri=candidate.uri, attempts=attempts)

    attempts.append(fallback.app)
    if await _attempt(opener, fallback, check=False):
        logger.info("upi_launch_succeeded", app=fallback.app, attempts=len(attempts))
        return LaunchOutcome(launched=True, app=fallback.app, uri=fallback.uri, attempts=attempts)

    logger.warning("upi_launch_exhausted", attempts=len(attempts))
    return LaunchOutcome(launched=False, attempts=attempts)
