import asyncio

import pytest

from upilink.services.launcher import UriOpener, launch_candidates, launch_payment_link

LINK = "upi://pay?pa=x@y&am=1.00&cu=INR"


class FakeOpener(UriOpener):
    def __init__(self, installed=(), open_result=True, broken=()):
        self.installed = tuple(installed)
        self.open_result = open_result
        self.broken = tuple(broken)
        self.calls = []

    async def can_open(self, uri):
        self.calls.append(("can_open", uri))
        if uri.startswith(self.broken):
            raise RuntimeError("bridge crashed")
        return uri.startswith(self.installed)

    async def open(self, uri):
        self.calls.append(("open", uri))
        return self.open_result


def test_candidates_follow_priority_order():
    uris = [candidate.uri for candidate in launch_candidates(LINK)]
    assert uris == [
        "tez://upi/pay?pa=x@y&am=1.00&cu=INR",
        "phonepe://pay?pa=x@y&am=1.00&cu=INR",
        "paytmmp://pay?pa=x@y&am=1.00&cu=INR",
        LINK,
    ]


def test_candidates_reject_non_upi_links():
    with pytest.raises(ValueError):
        launch_candidates("https://example.com")


def test_first_installed_app_wins():
    opener = FakeOpener(installed=("phonepe://", "paytmmp://"))
    outcome = asyncio.run(launch_payment_link(LINK, opener))

    assert outcome.launched
    assert outcome.app == "phonepe"
    assert outcome.attempts == ["gpay", "phonepe"]
    assert ("open", "phonepe://pay?pa=x@y&am=1.00&cu=INR") in opener.calls
    assert not any(uri.startswith("paytmmp://") for _, uri in opener.calls)


def test_falls_back_to_canonical_opener_without_capability_check():
    opener = FakeOpener(installed=())
    outcome = asyncio.run(launch_payment_link(LINK, opener))

    assert outcome.launched
    assert outcome.app == "upi"
    assert opener.calls[-1] == ("open", LINK)
    assert ("can_open", LINK) not in opener.calls


def test_opener_errors_count_as_failed_attempts():
    opener = FakeOpener(installed=("tez://", "paytmmp://"), broken=("tez://",))
    outcome = asyncio.run(launch_payment_link(LINK, opener))
    assert outcome.app == "paytm"


def test_reports_when_nothing_opens():
    opener = FakeOpener(installed=("tez://",), open_result=False)
    outcome = asyncio.run(launch_payment_link(LINK, opener))
    assert not outcome.launched
    assert outcome.attempts == ["gpay", "phonepe", "paytm", "upi"]
