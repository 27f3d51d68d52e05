import asyncio

import pytest

from upilink.core.config import Settings
from upilink.flow.scan_session import InvalidTransitionError, ScanSession, ScanState
from upilink.models.payment import ParseErrorKind
from upilink.services.errors import InvalidAmountError, MissingPayeeError
from upilink.services.launcher import UriOpener
from upilink.services.payment_links import PaymentLinkService


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class AlwaysOpens(UriOpener):
    async def can_open(self, uri):
        return True

    async def open(self, uri):
        return True


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def session(clock):
    service = PaymentLinkService(Settings(scan_debounce_seconds=0.5))
    return ScanSession(service, clock=clock)


def test_happy_path(session):
    result = session.on_scan("upi://pay?pa=shop@bank&pn=Shop&mid=123")
    assert result.ok
    assert session.state is ScanState.SCANNED
    assert not session.armed

    descriptor = session.begin_payment()
    assert descriptor.is_merchant
    assert session.state is ScanState.AWAITING_PAYMENT

    link = session.submit("250", note="Snacks")
    assert "mid=123" in link
    assert session.state is ScanState.LAUNCHING

    outcome = asyncio.run(session.launch(AlwaysOpens()))
    assert outcome.launched
    assert session.state is ScanState.LAUNCHING

    session.reset()
    assert session.state is ScanState.IDLE
    assert session.armed
    assert session.descriptor is None


def test_invalid_code_debounces_scanning(session, clock):
    result = session.on_scan("hello world")
    assert result.error is ParseErrorKind.UNPARSEABLE
    assert session.state is ScanState.IDLE
    assert not session.armed
    assert session.on_scan("upi://pay?pa=a@b") is None

    clock.now += 0.5
    assert session.armed
    assert session.on_scan("upi://pay?pa=a@b").ok


def test_scans_are_ignored_once_a_code_was_accepted(session):
    session.on_scan("upi://pay?pa=a@b")
    assert session.on_scan("upi://pay?pa=c@d") is None
    assert session.descriptor.payee_address == "a@b"


def test_name_only_code_gets_address_recovered(session):
    session.on_scan("upi://pay?pa=shop@bank&pn=Shop&pa=")
    assert session.descriptor.payee_address == "shop@bank"


def test_name_only_code_without_address_cannot_be_paid(session):
    assert session.on_scan("upi://pay?pn=Shop").ok
    session.begin_payment()
    with pytest.raises(MissingPayeeError):
        session.submit("10")
    assert session.state is ScanState.AWAITING_PAYMENT


def test_submit_validates_amount(session):
    session.on_scan("upi://pay?pa=a@b")
    session.begin_payment()
    with pytest.raises(InvalidAmountError):
        session.submit("0")
    assert session.state is ScanState.AWAITING_PAYMENT


def test_illegal_transitions(session):
    with pytest.raises(InvalidTransitionError):
        session.begin_payment()
    with pytest.raises(InvalidTransitionError):
        session.submit("10")
    with pytest.raises(InvalidTransitionError):
        asyncio.run(session.launch(AlwaysOpens()))
