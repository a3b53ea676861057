import pytest

from smsverify.utils.phone_utils import internationalize, is_valid_phone_number, normalize, numerize


def test_numerize_removes_all_but_digits():
    assert numerize("1-2-3-4-5") == "12345"
    assert numerize("1 2 3 4 5") == "12345"
    assert numerize("1,2(3)4.5") == "12345"
    assert numerize("1-2(3)4.5") == "12345"


def test_numerize_none_is_empty():
    assert numerize(None) == ""
    assert numerize("what?") == ""


def test_internationalize_prefixes_plus_on_11_digits():
    assert internationalize("12345678901") == "+12345678901"
    assert internationalize("72345678901") == "+72345678901"


def test_internationalize_prefixes_plus_one_on_10_digits():
    assert internationalize("2345678901") == "+12345678901"
    assert internationalize("7345678901") == "+17345678901"
    assert internationalize("(234) 567-8901") == "+12345678901"


@pytest.mark.parametrize("number", ["+" + "3" * 11, "+" + "8" * 11, "+" + "4" * 11])
def test_internationalize_leaves_plus_prefixed_numbers_unchanged(number):
    assert internationalize(number) == number


def test_internationalize_does_not_prefix_12_digit_numbers():
    assert internationalize("123456789012") is None


@pytest.mark.parametrize("number", [None, "nil", "1234", "1" * 23, "what?"])
def test_internationalize_returns_none_for_bad_numbers(number):
    assert internationalize(number) is None


def test_normalize_matches_internationalize():
    assert normalize("234.567.8901") == "+12345678901"
    assert normalize("1234") is None
    assert is_valid_phone_number("234.567.8901")
    assert not is_valid_phone_number("")
