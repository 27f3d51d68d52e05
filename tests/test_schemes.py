from upilink.services.merchant import detect_merchant_markers, has_merchant_markers
from upilink.services.schemes import normalize_scheme


def test_vendor_prefixes_map_to_upi():
    assert normalize_scheme("paytm://pay?pa=x@y&am=50") == "upi://pay?pa=x@y&am=50"
    assert normalize_scheme("phonepe://pay?pa=x@y") == "upi://pay?pa=x@y"


def test_prefix_match_ignores_case_but_keeps_the_rest():
    assert normalize_scheme("UPI://pay?pn=ABC") == "upi://pay?pn=ABC"


def test_canonical_input_is_unchanged():
    raw = "upi://pay?pa=shop@bank&pn=Shop"
    assert normalize_scheme(raw) == raw
    assert normalize_scheme(normalize_scheme("paytm://pay?pa=a@b")) == normalize_scheme("paytm://pay?pa=a@b")


def test_unknown_input_passes_through():
    assert normalize_scheme("https://example.com") == "https://example.com"
    assert normalize_scheme("not a url") == "not a url"
    assert normalize_scheme("") == ""


def test_markers_are_presence_only():
    assert has_merchant_markers({"pa": "a@b", "mid": ""})
    assert detect_merchant_markers({"sign": "x", "mc": "5411", "pn": "Shop"}) == ("sign", "mc")


def test_no_markers():
    assert not has_merchant_markers({"pa": "a@b", "pn": "Friend", "am": "10"})
    assert not has_merchant_markers([])
