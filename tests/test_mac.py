import pytest

from pdimg_core.errors import MalformedAddress, VendorPrefixMismatch
from pdimg_core.mac import is_valid_mac, validate_mac


def test_vendor_address_strict():
    validate_mac("00:50:43:12:34:56", strict=True)


def test_wrong_first_octet_names_token_one():
    with pytest.raises(VendorPrefixMismatch) as exc:
        validate_mac("01:50:43:12:34:56", strict=True)
    assert exc.value.index == 1
    assert exc.value.expected == "00"
    assert exc.value.found == "01"
    assert "01:50:43:12:34:56" in str(exc.value)


@pytest.mark.parametrize(
    "address,index,expected",
    [("00:51:43:12:34:56", 2, "50"), ("00:50:44:12:34:56", 3, "43")],
)
def test_wrong_prefix_octet(address, index, expected):
    with pytest.raises(VendorPrefixMismatch) as exc:
        validate_mac(address, strict=True)
    assert (exc.value.index, exc.value.expected) == (index, expected)


def test_non_strict_ignores_prefix():
    validate_mac("01:50:43:12:34:56", strict=False)
    validate_mac("aa:bb:cc:dd:ee:ff", strict=False)


@pytest.mark.parametrize(
    "address",
    [
        "00:50:43:12:34",
        "00:50:43:12:34:56:78",
        "00:50:43:12:34:",
        "00:50:43:12:34:56:",
        "00:50::43:12:34",
        ":00:50:43:12:34",
        "",
        "005043123456",
    ],
)
@pytest.mark.parametrize("strict", [True, False])
def test_shape_rejected(address, strict):
    with pytest.raises(MalformedAddress):
        validate_mac(address, strict=strict)


def test_length_must_be_17():
    with pytest.raises(MalformedAddress):
        validate_mac("0:50:43:12:34:56", strict=False)
    with pytest.raises(MalformedAddress):
        validate_mac("00:50:43:12:34:567", strict=True)


def test_input_left_untouched():
    address = "00:50:43:12:34:56"
    validate_mac(address)
    assert address == "00:50:43:12:34:56"


def test_is_valid_mac():
    assert is_valid_mac("00:50:43:12:34:56")
    assert not is_valid_mac("01:50:43:12:34:56")
    assert is_valid_mac("01:50:43:12:34:56", strict=False)
    assert not is_valid_mac("01:50:43", strict=False)
