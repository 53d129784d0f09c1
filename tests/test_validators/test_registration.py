"""Tests unitaires de la validation des numéros d'enregistrement."""

import pytest

from ubl_peppol.models.enums import RegistrationErrorCode
from ubl_peppol.validators import (
    get_supported_countries,
    is_supported_country,
    validate_registration_number,
)
from ubl_peppol.validators.registration import clean_number, kbo_checksum


class TestBelgium:
    """Tests KBO/BCE (mod 97)."""

    @pytest.mark.parametrize("number", ["0681845662", "0203201340", "0861574685"])
    def test_valid_numbers(self, number: str) -> None:
        result = validate_registration_number(number, "BE")
        assert result.valid
        assert result.kind == "kbo"
        assert result.error_code is None

    @pytest.mark.parametrize("number", ["0861574636", "0681845663"])
    def test_invalid_checksum(self, number: str) -> None:
        result = validate_registration_number(number, "BE")
        assert not result.valid
        assert result.error_code is RegistrationErrorCode.INVALID_CHECKSUM
        assert "mod 97" in result.error

    def test_checksum_message_gives_expected_value(self) -> None:
        result = validate_registration_number("0861574636", "BE")
        assert "attendu 85" in result.error
        assert "reçu 36" in result.error

    def test_formatted(self) -> None:
        result = validate_registration_number("0681.845.662", "be")
        assert result.number == "0681845662"
        assert result.formatted == "0681.845.662"
        assert result.country == "BE"
        assert result.country_name == "Belgium"

    def test_wrong_length_is_format_error(self) -> None:
        result = validate_registration_number("068184566", "BE")
        assert result.error_code is RegistrationErrorCode.INVALID_FORMAT

    def test_kbo_checksum(self) -> None:
        assert kbo_checksum(6818456) == 62


class TestNetherlands:
    """Tests KVK."""

    def test_valid(self) -> None:
        result = validate_registration_number("1234 5678", "NL")
        assert result.valid
        assert result.kind == "kvk"
        assert result.formatted == "12345678"

    @pytest.mark.parametrize("number", ["1234567", "123456789", "1234567A"])
    def test_invalid(self, number: str) -> None:
        result = validate_registration_number(number, "NL")
        assert not result.valid
        assert result.error_code is RegistrationErrorCode.INVALID_FORMAT


class TestLuxembourg:
    """Tests RCS."""

    def test_valid(self) -> None:
        result = validate_registration_number("b123456", "LU")
        assert result.valid
        assert result.formatted == "B123456"
        assert result.kind == "rcs"

    def test_invalid(self) -> None:
        result = validate_registration_number("12345678", "LU")
        assert result.error_code is RegistrationErrorCode.INVALID_FORMAT


class TestFrance:
    """Tests SIREN / SIRET."""

    def test_siren(self) -> None:
        result = validate_registration_number("732 829 320", "FR")
        assert result.valid
        assert result.kind == "siren"
        assert result.formatted == "732 829 320"

    def test_siret_details(self) -> None:
        result = validate_registration_number("73282932000074", "FR")
        assert result.valid
        assert result.kind == "siret"
        assert result.details == {"siren": "732829320", "nic": "00074"}

    def test_invalid_length(self) -> None:
        result = validate_registration_number("7328293200", "FR")
        assert not result.valid
        assert result.error_code is RegistrationErrorCode.INVALID_FORMAT


class TestGermany:
    """Tests Handelsregister."""

    def test_hrb(self) -> None:
        result = validate_registration_number("hrb-12345", "DE")
        assert result.valid
        assert result.formatted == "HRB 12345"
        assert result.kind == "hrb"

    def test_hra(self) -> None:
        result = validate_registration_number("HRA 1", "DE")
        assert result.kind == "hra"

    @pytest.mark.parametrize("number", ["HRC 123", "HRB 1234567", "12345"])
    def test_invalid(self, number: str) -> None:
        result = validate_registration_number(number, "DE")
        assert result.error_code is RegistrationErrorCode.INVALID_FORMAT


class TestDispatch:
    """Tests de la sélection du validateur."""

    def test_unsupported_country(self) -> None:
        result = validate_registration_number("12345", "IT")
        assert not result.valid
        assert result.error_code is RegistrationErrorCode.UNSUPPORTED_COUNTRY
        assert result.country == "IT"

    def test_empty_number(self) -> None:
        result = validate_registration_number(" - ", "NL")
        assert result.error_code is RegistrationErrorCode.EMPTY

    def test_is_supported_country(self) -> None:
        assert is_supported_country("be")
        assert not is_supported_country("IT")

    def test_supported_countries(self) -> None:
        countries = get_supported_countries()
        assert set(countries) == {"NL", "BE", "LU", "FR", "DE"}
        assert countries["DE"]["example"] == "HRB 12345"

    def test_supported_country_examples_are_valid(self) -> None:
        for code, info in get_supported_countries().items():
            example = info["example"].split(" / ")[0]
            assert validate_registration_number(example, code).valid

    def test_clean_number(self) -> None:
        assert clean_number("0681.845-662 ") == "0681845662"
