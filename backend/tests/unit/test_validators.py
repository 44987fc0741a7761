"""
Unit tests for validators.
"""

import pytest
from django.core.exceptions import ValidationError

from apps.core.validators import (
    ATCCodeValidator,
    NationalIdValidator,
    validate_atc_code,
    validate_national_id,
    validate_prescription_number,
)


class TestATCCodeValidator:
    @pytest.mark.parametrize("code", ["N02BE01", "N", "N02", "N02B", "N02BE", " b01ac06 "])
    def test_valid_codes(self, code):
        is_valid, error = ATCCodeValidator.validate(code)
        assert is_valid, error

    @pytest.mark.parametrize("code", ["", "02BE01", "N2BE01", "N02BE1", "N02BE011", "NN2"])
    def test_invalid_codes(self, code):
        is_valid, error = ATCCodeValidator.validate(code)
        assert not is_valid
        assert error

    def test_normalize(self):
        assert ATCCodeValidator.normalize(" n02be01 ") == "N02BE01"

    def test_django_validator(self):
        assert validate_atc_code("n02be01") == "N02BE01"
        with pytest.raises(ValidationError):
            validate_atc_code("not-a-code")


class TestNationalIdValidator:
    @pytest.mark.parametrize("value", ["19121212-1212", "121212-1212", "191212121212", "811218-9876", "19900101-1239"])
    def test_valid(self, value):
        is_valid, error = NationalIdValidator.validate(value)
        assert is_valid, error

    def test_bad_checksum(self):
        is_valid, error = NationalIdValidator.validate("19121212-1213")
        assert not is_valid
        assert "checksum" in error

    @pytest.mark.parametrize("value", ["", "1912-1212", "abcdefgh-ijkl"])
    def test_bad_format(self, value):
        is_valid, _ = NationalIdValidator.validate(value)
        assert not is_valid

    def test_django_validator(self):
        with pytest.raises(ValidationError):
            validate_national_id("19121212-1213")


class TestPrescriptionNumber:
    def test_valid(self):
        assert validate_prescription_number("RX-1A2B3C4D") == "RX-1A2B3C4D"

    @pytest.mark.parametrize("value", ["", "RX-1a2b3c4d", "RX-1A2B3C4", "PX-1A2B3C4D", "RX-1A2B3C4DE"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            validate_prescription_number(value)
