"""
Validators for healthcare identifiers.
- ATC: Anatomical Therapeutic Chemical classification code
- National ID: Swedish personal identity number (personnummer)
- Prescription number: RX- followed by 8 uppercase hex characters
"""

import re
from typing import Optional, Tuple

from django.core.exceptions import ValidationError


class ATCCodeValidator:
    """
    ATC code validator.

    Full codes have five levels, e.g. N02BE01:
    - 1 letter  (anatomical main group)
    - 2 digits  (therapeutic subgroup)
    - 2 letters (pharmacological / chemical subgroups)
    - 2 digits  (chemical substance)

    Shorter prefixes (N, N02, N02B, N02BE) are valid group codes.
    """

    ATC_PATTERN = re.compile(r"^[A-Z](\d{2}([A-Z]([A-Z](\d{2})?)?)?)?$")

    @classmethod
    def validate(cls, code: str) -> Tuple[bool, Optional[str]]:
        if not code:
            return False, "ATC code is required"

        code = cls.normalize(code)

        if not cls.ATC_PATTERN.match(code):
            return False, f"Invalid ATC code format: {code}. Expected format like 'N02BE01'"

        return True, None

    @classmethod
    def normalize(cls, code: str) -> str:
        if not code:
            return code
        return code.strip().upper()


def validate_atc_code(value: str) -> str:
    """Django validator function for ATC codes."""
    is_valid, error = ATCCodeValidator.validate(value)
    if not is_valid:
        raise ValidationError(error)
    return ATCCodeValidator.normalize(value)


class NationalIdValidator:
    """
    Swedish personnummer validator.

    Accepts YYMMDD-XXXX, YYMMDDXXXX, YYYYMMDD-XXXX or YYYYMMDDXXXX.
    The last digit is a Luhn checksum over the 10-digit form.
    """

    PATTERN = re.compile(r"^(\d{2})?(\d{6})[-+]?(\d{4})$")

    @classmethod
    def validate(cls, value: str) -> Tuple[bool, Optional[str]]:
        if not value:
            return False, "National ID is required"

        match = cls.PATTERN.match(str(value).strip())
        if not match:
            return False, "National ID must look like YYYYMMDD-XXXX"

        digits = match.group(2) + match.group(3)
        if not cls._luhn_ok(digits):
            return False, "National ID checksum is invalid"

        return True, None

    @staticmethod
    def _luhn_ok(digits: str) -> bool:
        total = 0
        for index, char in enumerate(digits):
            value = int(char) * (2 if index % 2 == 0 else 1)
            total += value - 9 if value > 9 else value
        return total % 10 == 0


def validate_national_id(value: str) -> str:
    """Django validator function for national ids."""
    is_valid, error = NationalIdValidator.validate(value)
    if not is_valid:
        raise ValidationError(error)
    return value


PRESCRIPTION_NUMBER_PATTERN = re.compile(r"^RX-[0-9A-F]{8}$")


def validate_prescription_number(value: str) -> str:
    if not value or not PRESCRIPTION_NUMBER_PATTERN.match(value):
        raise ValidationError("Prescription number must look like RX-1A2B3C4D")
    return value
