import pytest

from upilink.services.amounts import is_payable_amount, normalize_amount


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("10", "10.00"),
        ("10.005", "10.01"),
        ("0", "0.00"),
        ("2.004", "2.00"),
        (" 99.9 ", "99.90"),
        ("1e2", "100.00"),
    ],
)
def test_normalize_amount(raw, expected):
    assert normalize_amount(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "", "NaN", "Infinity", None])
def test_normalize_rejects_non_numbers(raw):
    with pytest.raises(ValueError):
        normalize_amount(raw)


@pytest.mark.parametrize("raw", ["1", "0.01", "250.50"])
def test_payable_amounts(raw):
    assert is_payable_amount(raw)


@pytest.mark.parametrize("raw", ["0", "-5", "0.001", "", "ten", None])
def test_unpayable_amounts(raw):
    assert not is_payable_amount(raw)


@pytest.mark.parametrize("raw", ["1e30", "100000000000000000000000000000"])
def test_amounts_beyond_decimal_precision(raw):
    with pytest.raises(ValueError):
        normalize_amount(raw)
    assert not is_payable_amount(raw)
