"""VIN validation and decoding - check digit, manufacturer and model year"""

import re
from types import MappingProxyType
from typing import Mapping, Optional

from autoloan_engine.domain.models import DecodedVin, VinValidation
from autoloan_engine.utils.date_utils import current_year

VIN_LENGTH = 17
CHECK_DIGIT_INDEX = 8
MODEL_YEAR_INDEX = 9

VIN_PATTERN = re.compile(r"^[A-HJ-NPR-Z0-9]{17}$")

# Position weights; the check digit slot carries weight 0
WEIGHTS = (8, 7, 6, 5, 4, 3, 2, 10, 0, 9, 8, 7, 6, 5, 4, 3, 2)

TRANSLITERATION: Mapping[str, int] = MappingProxyType({
    "A": 1, "B": 2, "C": 3, "D": 4, "E": 5, "F": 6, "G": 7, "H": 8,
    "J": 1, "K": 2, "L": 3, "M": 4, "N": 5, "P": 7, "R": 9,
    "S": 2, "T": 3, "U": 4, "V": 5, "W": 6, "X": 7, "Y": 8, "Z": 9,
    **{str(digit): digit for digit in range(10)},
})

# Partial World Manufacturer Identifier table
MANUFACTURERS: Mapping[str, str] = MappingProxyType({
    "1G1": "Chevrolet",
    "1G6": "Cadillac",
    "1FA": "Ford",
    "1FT": "Ford",
    "1GC": "Chevrolet",
    "1HG": "Honda",
    "1J4": "Jeep",
    "1N4": "Nissan",
    "2G1": "Chevrolet",
    "2HG": "Honda",
    "3FA": "Ford",
    "3G1": "Chevrolet",
    "4F2": "Mazda",
    "4T1": "Toyota",
    "JM1": "Mazda",
    "JTD": "Toyota",
    "KM8": "Hyundai",
    "KNA": "Kia",
    "VWV": "Volkswagen",
    "WBA": "BMW",
    "WDB": "Mercedes-Benz",
    "YV1": "Volvo",
})

# Year letters skip I, O, Q, U, Z and 0
YEAR_LETTERS = "ABCDEFGHJKLMNPRSTVWXY"

YEARS_1980_TO_2000: Mapping[str, int] = MappingProxyType(
    {letter: 1980 + offset for offset, letter in enumerate(YEAR_LETTERS)}
)
YEARS_2001_TO_2009: Mapping[str, int] = MappingProxyType(
    {str(digit): 2000 + digit for digit in range(1, 10)}
)
YEARS_2010_TO_2030: Mapping[str, int] = MappingProxyType(
    {letter: 2010 + offset for offset, letter in enumerate(YEAR_LETTERS)}
)

# Newer letter cycle is accepted up to this many years beyond the current year
MODEL_YEAR_LOOKAHEAD = 2


def calculate_check_digit(vin: str) -> str:
    """
    Compute the expected check digit for a 17-character VIN.

    Weighted sum of transliterated values over every position except the
    check digit slot, modulo 11. A remainder of 10 is written as 'X'.
    """
    total = sum(
        TRANSLITERATION[char] * weight
        for index, (char, weight) in enumerate(zip(vin, WEIGHTS))
        if index != CHECK_DIGIT_INDEX
    )
    remainder = total % 11
    return "X" if remainder == 10 else str(remainder)


def validate_vin(vin: Optional[str]) -> VinValidation:
    """
    Validate VIN format and check digit.

    Checks run in order and the first failure is reported:
    required -> length -> invalid_characters -> checksum_mismatch
    """
    if not vin:
        return VinValidation(False, "required", "VIN is required")

    if len(vin) != VIN_LENGTH:
        return VinValidation(False, "length", "VIN must be exactly 17 characters long")

    if not VIN_PATTERN.match(vin):
        return VinValidation(
            False,
            "invalid_characters",
            "VIN contains invalid characters (I, O, Q are not allowed)",
        )

    if vin[CHECK_DIGIT_INDEX] != calculate_check_digit(vin):
        return VinValidation(
            False,
            "checksum_mismatch",
            "VIN check digit validation failed. The 9th character (check digit) "
            "does not match the calculated value for this VIN.",
        )

    return VinValidation(True)


def decode_manufacturer(vin: str) -> Optional[str]:
    """Resolve the manufacturer from the WMI prefix; None when invalid or unknown"""
    if not validate_vin(vin).is_valid:
        return None
    return MANUFACTURERS.get(vin[:3])


def decode_model_year(vin: str, reference_year: Optional[int] = None) -> Optional[int]:
    """
    Read the model year from the 10th character.

    Digits map to 2001-2009. Letters are shared by two 30-year cycles; the
    2010-2030 cycle wins when its year is at most reference_year + 2,
    otherwise the 1980-2000 cycle is used. Vehicles a full cycle apart
    cannot be told apart.
    """
    if not validate_vin(vin).is_valid:
        return None

    year_char = vin[MODEL_YEAR_INDEX]

    if year_char in YEARS_2001_TO_2009:
        return YEARS_2001_TO_2009[year_char]

    if reference_year is None:
        reference_year = current_year()

    recent = YEARS_2010_TO_2030.get(year_char)
    if recent is not None and recent <= reference_year + MODEL_YEAR_LOOKAHEAD:
        return recent

    return YEARS_1980_TO_2000.get(year_char)


def decode_vin(vin: str, reference_year: Optional[int] = None) -> Optional[DecodedVin]:
    """Decode manufacturer and model year together; None for an invalid VIN"""
    if not validate_vin(vin).is_valid:
        return None
    return DecodedVin(
        vin=vin,
        manufacturer=decode_manufacturer(vin),
        model_year=decode_model_year(vin, reference_year),
    )
