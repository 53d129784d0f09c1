"""Listes de codes de référence et registre interrogeable."""

from ubl_peppol.codelists.registry import (
    DEFAULT_REGISTRY,
    CodelistRegistry,
    lookup,
    normalize_code,
)
from ubl_peppol.codelists.tables import (
    CLASSIFICATION_SCHEMES,
    COUNTRY_CODES,
    TAX_CATEGORIES,
    UNIT_CODES,
    VAT_COUNTRY_PREFIXES,
)
from ubl_peppol.codelists.usage import CodeUsage

__all__ = [
    "CLASSIFICATION_SCHEMES",
    "COUNTRY_CODES",
    "DEFAULT_REGISTRY",
    "TAX_CATEGORIES",
    "UNIT_CODES",
    "VAT_COUNTRY_PREFIXES",
    "CodeUsage",
    "CodelistRegistry",
    "lookup",
    "normalize_code",
]
