"""Unit tests for VIN validation and decoding"""

import pytest

from autoloan_engine.domain.vin import (
    calculate_check_digit,
    decode_manufacturer,
    decode_model_year,
    decode_vin,
    validate_vin,
)

HONDA_VIN = "1HGBH41JXMN109186"
CHECK_DIGIT_X_VIN = "1M8GDM9AXKP042788"
ALL_ONES_VIN = "11111111111111111"


def with_check_digit(body: str) -> str:
    """Replace position 9 with the computed check digit"""
    return body[:8] + calculate_check_digit(body) + body[9:]


def test_validate_vin_accepts_known_vin():
    """Test well-known valid VINs pass"""
    assert validate_vin(HONDA_VIN).is_valid is True
    assert validate_vin(CHECK_DIGIT_X_VIN).is_valid is True
    assert validate_vin(ALL_ONES_VIN).is_valid is True


def test_calculate_check_digit_remainder_ten_is_x():
    """Test remainder 10 maps to 'X'"""
    assert calculate_check_digit(HONDA_VIN) == "X"
    assert calculate_check_digit(ALL_ONES_VIN) == "1"


def test_validate_vin_rejects_any_other_check_digit():
    """Test every other symbol in position 9 fails"""
    for symbol in "0123456789ABCDEFGHJKLMNPRSTUVWYZ":
        vin = HONDA_VIN[:8] + symbol + HONDA_VIN[9:]
        result = validate_vin(vin)
        assert result.is_valid is False, symbol
        assert result.code == "checksum_mismatch"


@pytest.mark.parametrize("letter", ["I", "O", "Q"])
@pytest.mark.parametrize("position", [0, 4, 8, 9, 16])
def test_validate_vin_forbidden_letters(letter: str, position: int):
    """Test I, O, Q are rejected as invalid characters wherever they appear"""
    vin = HONDA_VIN[:position] + letter + HONDA_VIN[position + 1:]
    result = validate_vin(vin)

    assert result.is_valid is False
    assert result.code == "invalid_characters"


def test_validate_vin_required():
    """Test empty and missing VINs"""
    assert validate_vin("").code == "required"
    assert validate_vin(None).code == "required"


def test_validate_vin_length():
    """Test length must be exactly 17"""
    assert validate_vin(HONDA_VIN[:16]).code == "length"
    assert validate_vin(HONDA_VIN + "1").code == "length"


def test_validate_vin_lowercase_is_invalid():
    """Test lowercase characters are not normalized"""
    result = validate_vin(HONDA_VIN.lower())
    assert result.code == "invalid_characters"
    assert result.reason is not None


def test_decode_manufacturer():
    """Test WMI lookup"""
    assert decode_manufacturer(HONDA_VIN) == "Honda"
    assert decode_manufacturer(CHECK_DIGIT_X_VIN) is None  # 1M8 not in table
    assert decode_manufacturer(HONDA_VIN[:8] + "1" + HONDA_VIN[9:]) is None  # invalid


def test_decode_model_year_digit_cycle():
    """Test digits map to 2001-2009"""
    assert decode_model_year(ALL_ONES_VIN, reference_year=2026) == 2001
    vin = with_check_digit(ALL_ONES_VIN[:9] + "9" + ALL_ONES_VIN[10:])
    assert decode_model_year(vin, reference_year=2026) == 2009


def test_decode_model_year_prefers_recent_cycle():
    """Test letter cycle selection against the reference year"""
    # 'M' is 2021 or 1991
    assert decode_model_year(HONDA_VIN, reference_year=2026) == 2021
    assert decode_model_year(HONDA_VIN, reference_year=2019) == 2021  # 2021 <= 2019 + 2
    assert decode_model_year(HONDA_VIN, reference_year=2018) == 1991

    # 'K' is 2019 or 1989
    assert decode_model_year(CHECK_DIGIT_X_VIN, reference_year=2026) == 2019
    assert decode_model_year(CHECK_DIGIT_X_VIN, reference_year=2010) == 1989


def test_decode_model_year_cycle_ends():
    """Test first and last letters of both cycles"""
    vin_a = with_check_digit(ALL_ONES_VIN[:9] + "A" + ALL_ONES_VIN[10:])
    vin_y = with_check_digit(ALL_ONES_VIN[:9] + "Y" + ALL_ONES_VIN[10:])

    assert decode_model_year(vin_a, reference_year=2026) == 2010
    assert decode_model_year(vin_y, reference_year=2026) == 2000
    assert decode_model_year(vin_y, reference_year=2028) == 2030


@pytest.mark.parametrize("year_char", ["0", "U", "Z"])
def test_decode_model_year_unassigned_characters(year_char: str):
    """Test characters outside both cycles decode to None"""
    vin = with_check_digit(ALL_ONES_VIN[:9] + year_char + ALL_ONES_VIN[10:])
    assert validate_vin(vin).is_valid is True
    assert decode_model_year(vin, reference_year=2026) is None


def test_decode_model_year_depends_only_on_tenth_character():
    """Test changing any other position leaves the year unchanged"""
    for year_char in "ABCDEFGHJKLMNPRSTVWXY123456789":
        base = with_check_digit(ALL_ONES_VIN[:9] + year_char + ALL_ONES_VIN[10:])
        variant = with_check_digit("JM1" + "ZZ7" + "K2" + "0" + year_char + "P" + "999999")
        assert decode_model_year(base, 2026) == decode_model_year(variant, 2026)


def test_decode_vin_combines_decodes():
    """Test decode_vin wraps manufacturer and year, None when invalid"""
    decoded = decode_vin(HONDA_VIN, reference_year=2026)

    assert decoded.vin == HONDA_VIN
    assert decoded.manufacturer == "Honda"
    assert decoded.model_year == 2021
    assert decode_vin("NOT-A-VIN") is None
