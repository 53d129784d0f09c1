"""Modèles de données Pydantic pour les documents UBL / PEPPOL."""

from ubl_peppol.models.document import (
    AllowanceCharge,
    BillingReference,
    Delivery,
    DocumentReference,
    Header,
    InvoiceDocument,
    InvoiceLine,
    MonetaryTotals,
    PaymentMeans,
    PaymentTerms,
    TaxSubtotal,
)
from ubl_peppol.models.party import Address, Contact, Party

__all__ = [
    "Address",
    "AllowanceCharge",
    "BillingReference",
    "Contact",
    "Delivery",
    "DocumentReference",
    "Header",
    "InvoiceDocument",
    "InvoiceLine",
    "MonetaryTotals",
    "Party",
    "PaymentMeans",
    "PaymentTerms",
    "TaxSubtotal",
]
