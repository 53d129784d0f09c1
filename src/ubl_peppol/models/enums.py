"""Énumérations pour les documents UBL / PEPPOL.

FR: Types de documents, profils de personnalisation, catégories de TVA,
    pays supportés pour les numéros d'enregistrement et statuts d'envoi.
EN: Document kinds, customization profiles, VAT categories, countries
    supported for registration numbers and delivery statuses.
"""

from enum import StrEnum


class DocumentKind(StrEnum):
    """Type de document UBL (élément racine).

    FR: Détermine l'espace de noms racine et le code de type (380 / 381).
    EN: Determines the root namespace and the type code (380 / 381).
    """

    INVOICE = "Invoice"
    """Facture / Invoice"""

    CREDIT_NOTE = "CreditNote"
    """Avoir / Credit note"""

    @property
    def type_code(self) -> str:
        """Code UNTDID 1001 du document."""
        return "381" if self is DocumentKind.CREDIT_NOTE else "380"


class UBLProfile(StrEnum):
    """Profil ciblé (CustomizationID / ProfileID)."""

    PEPPOL = "PEPPOL"
    """PEPPOL BIS Billing 3.0"""

    NLCIUS = "NLCIUS"
    """SI-UBL 2.0 (Pays-Bas) / Dutch CIUS"""

    UBL_BE = "UBL_BE"
    """UBL.BE (Belgique) / Belgian CIUS"""

    EN16931 = "EN16931"
    """Norme européenne seule / Plain European norm"""


class TaxCategory(StrEnum):
    """Catégorie de TVA (UNTDID 5305).

    FR: Codes de catégorie TVA conformes au standard européen.
    EN: VAT category codes conforming to the European standard.
    """

    STANDARD = "S"
    """Taux normal / Standard rate"""

    ZERO_RATED = "Z"
    """Taux zéro / Zero rated"""

    EXEMPT = "E"
    """Exonéré / Exempt"""

    REVERSE_CHARGE = "AE"
    """Autoliquidation / Reverse charge"""

    INTRA_COMMUNITY = "K"
    """Intracommunautaire / Intra-community"""

    EXPORT = "G"
    """Export hors UE / Export outside EU"""

    OUTSIDE_SCOPE = "O"
    """Hors champ / Outside scope of VAT"""

    CANARY_ISLANDS = "L"
    """IGIC (Canaries) / Canary Islands general indirect tax"""

    CEUTA_MELILLA = "M"
    """IPSI (Ceuta et Melilla) / Ceuta and Melilla tax"""


class CountryValidator(StrEnum):
    """Juridictions supportées pour les numéros d'enregistrement."""

    NL = "NL"
    """Kamer van Koophandel (KVK)"""

    BE = "BE"
    """Banque-Carrefour des Entreprises (KBO/BCE)"""

    LU = "LU"
    """Registre de Commerce et des Sociétés (RCS)"""

    FR = "FR"
    """SIREN / SIRET"""

    DE = "DE"
    """Handelsregister (HRA/HRB)"""


class RegistrationErrorCode(StrEnum):
    """Motif d'invalidité d'un numéro d'enregistrement."""

    EMPTY = "empty"
    INVALID_FORMAT = "invalid_format"
    INVALID_CHECKSUM = "invalid_checksum"
    UNSUPPORTED_COUNTRY = "unsupported_country"


class DeliveryStatus(StrEnum):
    """Statut d'envoi d'un document vers un point d'accès."""

    PENDING = "pending"
    """En attente / Pending"""

    SUCCESS = "success"
    """Transmis / Delivered"""

    ERROR = "error"
    """Échec / Failed"""
