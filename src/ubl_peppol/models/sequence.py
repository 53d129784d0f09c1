"""Ordre des éléments imposé par le schéma UBL 2.1.

FR: Les sections racine sont ordonnées par ``DocumentSection`` ; l'ordre
    des enfants des agrégats est donné par ``CHILD_SEQUENCES``. Le
    constructeur s'appuie sur ces tables pour refuser tout ajout hors
    séquence.
EN: Root sections are ordered by ``DocumentSection``; aggregate children
    order is given by ``CHILD_SEQUENCES``. The builder relies on these
    tables to refuse any out-of-sequence append.
"""

from enum import IntEnum


class DocumentSection(IntEnum):
    """Sections racine, dans l'ordre du schéma Invoice-2 / CreditNote-2."""

    HEADER = 1
    BUYER_REFERENCE = 2
    ORDER_REFERENCE = 3
    BILLING_REFERENCE = 4
    ADDITIONAL_DOCUMENT_REFERENCE = 5
    SUPPLIER = 6
    CUSTOMER = 7
    DELIVERY = 8
    PAYMENT_MEANS = 9
    PAYMENT_TERMS = 10
    ALLOWANCE_CHARGE = 11
    TAX_TOTAL = 12
    LEGAL_MONETARY_TOTAL = 13
    LINE = 14

    @property
    def repeatable(self) -> bool:
        return self in _REPEATABLE


_REPEATABLE = frozenset(
    {
        DocumentSection.ADDITIONAL_DOCUMENT_REFERENCE,
        DocumentSection.PAYMENT_MEANS,
        DocumentSection.ALLOWANCE_CHARGE,
        DocumentSection.LINE,
    }
)

HEADER_SEQUENCE = (
    "CustomizationID",
    "ProfileID",
    "ID",
    "IssueDate",
    "DueDate",
    "InvoiceTypeCode",
    "CreditNoteTypeCode",
    "Note",
    "DocumentCurrencyCode",
    "AccountingCost",
)

_LINE_SEQUENCE = (
    "ID",
    "Note",
    "InvoicedQuantity",
    "CreditedQuantity",
    "LineExtensionAmount",
    "AccountingCost",
    "InvoicePeriod",
    "OrderLineReference",
    "AllowanceCharge",
    "Item",
    "Price",
)

_TAX_CATEGORY_SEQUENCE = (
    "ID",
    "Name",
    "Percent",
    "TaxExemptionReasonCode",
    "TaxExemptionReason",
    "TaxScheme",
)

CHILD_SEQUENCES: dict[str, tuple[str, ...]] = {
    "Party": (
        "EndpointID",
        "PartyIdentification",
        "PartyName",
        "PostalAddress",
        "PartyTaxScheme",
        "PartyLegalEntity",
        "Contact",
    ),
    "PostalAddress": (
        "StreetName",
        "AdditionalStreetName",
        "CityName",
        "PostalZone",
        "Country",
    ),
    "Address": (
        "StreetName",
        "AdditionalStreetName",
        "CityName",
        "PostalZone",
        "Country",
    ),
    "PartyTaxScheme": ("CompanyID", "TaxScheme"),
    "PartyLegalEntity": ("RegistrationName", "CompanyID"),
    "Contact": ("Name", "Telephone", "ElectronicMail"),
    "InvoiceDocumentReference": ("ID", "IssueDate"),
    "AdditionalDocumentReference": ("ID", "DocumentDescription"),
    "Delivery": ("ActualDeliveryDate", "DeliveryLocation", "DeliveryParty"),
    "DeliveryLocation": ("ID", "Address"),
    "PaymentMeans": (
        "PaymentMeansCode",
        "PaymentID",
        "PayeeFinancialAccount",
    ),
    "PayeeFinancialAccount": ("ID", "Name", "FinancialInstitutionBranch"),
    "AllowanceCharge": (
        "ChargeIndicator",
        "AllowanceChargeReasonCode",
        "AllowanceChargeReason",
        "Amount",
        "TaxCategory",
    ),
    "TaxTotal": ("TaxAmount", "TaxSubtotal"),
    "TaxSubtotal": ("TaxableAmount", "TaxAmount", "TaxCategory"),
    "TaxCategory": _TAX_CATEGORY_SEQUENCE,
    "ClassifiedTaxCategory": _TAX_CATEGORY_SEQUENCE,
    "LegalMonetaryTotal": (
        "LineExtensionAmount",
        "TaxExclusiveAmount",
        "TaxInclusiveAmount",
        "AllowanceTotalAmount",
        "ChargeTotalAmount",
        "PrepaidAmount",
        "PayableRoundingAmount",
        "PayableAmount",
    ),
    "InvoiceLine": _LINE_SEQUENCE,
    "CreditNoteLine": _LINE_SEQUENCE,
    "Item": (
        "Description",
        "Name",
        "SellersItemIdentification",
        "StandardItemIdentification",
        "OriginCountry",
        "CommodityClassification",
        "ClassifiedTaxCategory",
    ),
    "Price": ("PriceAmount", "BaseQuantity"),
}
