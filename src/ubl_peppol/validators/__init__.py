"""Validateurs : numéros d'enregistrement, IBAN/BIC, TVA et documents."""

from ubl_peppol.validators.document import DocumentValidationResult, validate_document
from ubl_peppol.validators.iban import is_valid_bic, is_valid_iban, normalize_iban
from ubl_peppol.validators.registration import (
    RegistrationResult,
    get_supported_countries,
    is_supported_country,
    validate_registration_number,
)
from ubl_peppol.validators.vat import is_valid_vat_number, vat_number_errors

__all__ = [
    "DocumentValidationResult",
    "RegistrationResult",
    "get_supported_countries",
    "is_supported_country",
    "is_valid_bic",
    "is_valid_iban",
    "is_valid_vat_number",
    "normalize_iban",
    "validate_document",
    "validate_registration_number",
    "vat_number_errors",
]
