"""Validation des numéros d'enregistrement d'entreprise (NL, BE, LU, FR, DE).

FR: Un validateur par juridiction, sélectionné par ``CountryValidator``.
    Les pays non supportés produisent un résultat typé
    ``UNSUPPORTED_COUNTRY`` plutôt qu'un échec générique.
EN: One validator per jurisdiction, selected by ``CountryValidator``.
    Unsupported countries yield a typed ``UNSUPPORTED_COUNTRY`` result
    rather than a generic failure.
"""

import re
from collections.abc import Callable

from pydantic import BaseModel, Field

from ubl_peppol.models.enums import CountryValidator, RegistrationErrorCode

_CLEAN_RE = re.compile(r"[\s.\-]")
_DE_RE = re.compile(r"^(HR[AB])(\d{1,6})$")
_LU_RE = re.compile(r"^([A-Z])(\d{6})$")

COUNTRY_NAMES: dict[CountryValidator, str] = {
    CountryValidator.NL: "Netherlands",
    CountryValidator.BE: "Belgium",
    CountryValidator.LU: "Luxembourg",
    CountryValidator.FR: "France",
    CountryValidator.DE: "Germany",
}

# Schéma ICD de l'identifiant légal -> juridiction et type attendu
ICD_SCHEMES: dict[str, tuple[CountryValidator, str | None]] = {
    "0106": (CountryValidator.NL, "kvk"),
    "0208": (CountryValidator.BE, "kbo"),
    "0002": (CountryValidator.FR, "siren"),
    "0009": (CountryValidator.FR, "siret"),
}


class RegistrationResult(BaseModel):
    """Résultat de la validation d'un numéro d'enregistrement.

    FR: ``formatted`` est la forme normalisée du numéro ; ``details``
        contient les composants (SIREN / NIC pour un SIRET).
    EN: ``formatted`` is the normalized number; ``details`` holds its
        components (SIREN / NIC for a SIRET).
    """

    valid: bool
    country: str
    country_name: str | None = None
    number: str = Field(..., description="Numéro nettoyé / Cleaned number")
    formatted: str | None = None
    kind: str | None = Field(default=None, description="kvk, kbo, rcs, siren...")
    kind_name: str | None = None
    error: str | None = None
    error_code: RegistrationErrorCode | None = None
    details: dict[str, str] = Field(default_factory=dict)


def clean_number(number: str) -> str:
    """Retire espaces, points et tirets."""
    return _CLEAN_RE.sub("", number or "")


def _failure(
    country: CountryValidator,
    number: str,
    code: RegistrationErrorCode,
    error: str,
    kind: str | None = None,
) -> RegistrationResult:
    return RegistrationResult(
        valid=False,
        country=str(country),
        country_name=COUNTRY_NAMES[country],
        number=number,
        kind=kind,
        error=error,
        error_code=code,
    )


def _validate_nl(number: str) -> RegistrationResult:
    if not re.fullmatch(r"\d{8}", number):
        return _failure(
            CountryValidator.NL,
            number,
            RegistrationErrorCode.INVALID_FORMAT,
            "Un numéro KVK doit comporter exactement 8 chiffres.",
            kind="kvk",
        )
    return RegistrationResult(
        valid=True,
        country="NL",
        country_name=COUNTRY_NAMES[CountryValidator.NL],
        number=number,
        formatted=number,
        kind="kvk",
        kind_name="Kamer van Koophandel",
    )


def kbo_checksum(basis: int) -> int:
    """Calcule la clé mod 97 d'un numéro KBO à partir des 8 premiers chiffres."""
    return 97 - (basis % 97)


def _validate_be(number: str) -> RegistrationResult:
    if not re.fullmatch(r"\d{10}", number):
        return _failure(
            CountryValidator.BE,
            number,
            RegistrationErrorCode.INVALID_FORMAT,
            "Un numéro KBO/BCE doit comporter exactement 10 chiffres.",
            kind="kbo",
        )
    basis, checksum = int(number[:8]), int(number[8:])
    if checksum != kbo_checksum(basis):
        return _failure(
            CountryValidator.BE,
            number,
            RegistrationErrorCode.INVALID_CHECKSUM,
            (
                "Clé de contrôle invalide : le numéro KBO/BCE échoue à la "
                f"vérification mod 97 (attendu {kbo_checksum(basis):02d}, "
                f"reçu {checksum:02d})."
            ),
            kind="kbo",
        )
    return RegistrationResult(
        valid=True,
        country="BE",
        country_name=COUNTRY_NAMES[CountryValidator.BE],
        number=number,
        formatted=f"{number[:4]}.{number[4:7]}.{number[7:]}",
        kind="kbo",
        kind_name="Kruispuntbank van Ondernemingen",
    )


def _validate_lu(number: str) -> RegistrationResult:
    match = _LU_RE.fullmatch(number.upper())
    if not match:
        return _failure(
            CountryValidator.LU,
            number,
            RegistrationErrorCode.INVALID_FORMAT,
            "Un numéro RCS doit comporter une lettre suivie de 6 chiffres.",
            kind="rcs",
        )
    return RegistrationResult(
        valid=True,
        country="LU",
        country_name=COUNTRY_NAMES[CountryValidator.LU],
        number=number,
        formatted=number.upper(),
        kind="rcs",
        kind_name="Registre de Commerce et des Sociétés",
    )


def _validate_fr(number: str) -> RegistrationResult:
    if re.fullmatch(r"\d{9}", number):
        return RegistrationResult(
            valid=True,
            country="FR",
            country_name=COUNTRY_NAMES[CountryValidator.FR],
            number=number,
            formatted=f"{number[:3]} {number[3:6]} {number[6:]}",
            kind="siren",
            kind_name="SIREN",
        )
    if re.fullmatch(r"\d{14}", number):
        return RegistrationResult(
            valid=True,
            country="FR",
            country_name=COUNTRY_NAMES[CountryValidator.FR],
            number=number,
            formatted=f"{number[:3]} {number[3:6]} {number[6:9]} {number[9:]}",
            kind="siret",
            kind_name="SIRET",
            details={"siren": number[:9], "nic": number[9:]},
        )
    return _failure(
        CountryValidator.FR,
        number,
        RegistrationErrorCode.INVALID_FORMAT,
        "Un numéro français doit être un SIREN (9 chiffres) ou un SIRET (14 chiffres).",
    )


def _validate_de(number: str) -> RegistrationResult:
    match = _DE_RE.fullmatch(number.upper())
    if not match:
        return _failure(
            CountryValidator.DE,
            number,
            RegistrationErrorCode.INVALID_FORMAT,
            "Un numéro Handelsregister doit être HRA ou HRB suivi de 1 à 6 chiffres.",
        )
    prefix, digits = match.groups()
    kind_name = (
        "Handelsregister Abteilung A (Einzelkaufleute, Personengesellschaften)"
        if prefix == "HRA"
        else "Handelsregister Abteilung B (Kapitalgesellschaften)"
    )
    return RegistrationResult(
        valid=True,
        country="DE",
        country_name=COUNTRY_NAMES[CountryValidator.DE],
        number=number,
        formatted=f"{prefix} {digits}",
        kind=prefix.lower(),
        kind_name=kind_name,
    )


_VALIDATORS: dict[CountryValidator, Callable[[str], RegistrationResult]] = {
    CountryValidator.NL: _validate_nl,
    CountryValidator.BE: _validate_be,
    CountryValidator.LU: _validate_lu,
    CountryValidator.FR: _validate_fr,
    CountryValidator.DE: _validate_de,
}


def validate_registration_number(number: str, country_code: str) -> RegistrationResult:
    """Valide un numéro d'enregistrement pour le pays donné.

    Args:
        number: Le numéro saisi (espaces, points et tirets tolérés).
        country_code: Le code pays ISO 3166-1 alpha-2.

    Returns:
        Le résultat typé, jamais d'exception pour une saisie invalide.
    """
    country_code = (country_code or "").strip().upper()
    cleaned = clean_number(number)
    try:
        country = CountryValidator(country_code)
    except ValueError:
        return RegistrationResult(
            valid=False,
            country=country_code,
            number=cleaned,
            error=f"Pays non supporté : {country_code}",
            error_code=RegistrationErrorCode.UNSUPPORTED_COUNTRY,
        )
    if not cleaned:
        return _failure(
            country,
            cleaned,
            RegistrationErrorCode.EMPTY,
            "Le numéro d'enregistrement est vide.",
        )
    return _VALIDATORS[country](cleaned)


def is_supported_country(country_code: str) -> bool:
    return (country_code or "").strip().upper() in CountryValidator.__members__


def get_supported_countries() -> dict[str, dict[str, str]]:
    """Pays supportés avec un exemple de numéro valide."""
    examples = {
        CountryValidator.NL: ("KVK", "12345678"),
        CountryValidator.BE: ("KBO/BCE", "0681845662"),
        CountryValidator.LU: ("RCS", "B123456"),
        CountryValidator.FR: ("SIREN/SIRET", "732829320 / 73282932000074"),
        CountryValidator.DE: ("Handelsregister", "HRB 12345"),
    }
    return {
        str(country): {
            "name": COUNTRY_NAMES[country],
            "type": label,
            "example": example,
        }
        for country, (label, example) in examples.items()
    }
