"""Fixtures partagées : parties, lignes, totaux et documents de test."""

from datetime import date
from decimal import Decimal

import pytest

from ubl_peppol.models import (
    Address,
    BillingReference,
    Contact,
    Header,
    InvoiceDocument,
    InvoiceLine,
    MonetaryTotals,
    Party,
    PaymentMeans,
    PaymentTerms,
    TaxSubtotal,
)
from ubl_peppol.models.enums import DocumentKind


@pytest.fixture
def supplier() -> Party:
    """Fournisseur belge avec numéro KBO valide."""
    return Party(
        endpoint_id="0681845662",
        endpoint_scheme="0208",
        party_id="SUP-001",
        name="Darvis BV",
        address=Address(
            street="Wetstraat 16",
            city="Brussel",
            postal_code="1000",
            country_code="BE",
        ),
        vat_number="BE0681845662",
        legal_id="0681845662",
        legal_id_scheme="0208",
        contact=Contact(
            name="Jan Peeters",
            phone="+32 2 123 45 67",
            email="facturen@darvis.be",
        ),
    )


@pytest.fixture
def customer() -> Party:
    """Client néerlandais avec numéro KVK."""
    return Party(
        endpoint_id="12345678",
        endpoint_scheme="0106",
        party_id="CUS-001",
        name="Klant BV",
        address=Address(
            street="Keizersgracht 1",
            additional_street="2e verdieping",
            city="Amsterdam",
            postal_code="1015 AA",
            country_code="NL",
        ),
        vat_number="NL853848932B01",
        legal_id="12345678",
        legal_id_scheme="0106",
    )


@pytest.fixture
def invoice_lines() -> list[InvoiceLine]:
    """Deux lignes au taux normal de 21 %."""
    return [
        InvoiceLine(
            id="1",
            quantity=Decimal("2"),
            unit_code="C62",
            line_extension_amount=Decimal("200.00"),
            description="Licence logicielle annuelle",
            name="Licence",
            price_amount=Decimal("100.00"),
            currency="EUR",
            standard_item_id="5412345000013",
            classification_code="72268000",
            classification_scheme="CPV",
        ),
        InvoiceLine(
            id="2",
            quantity=Decimal("3"),
            unit_code="HUR",
            line_extension_amount=Decimal("150.00"),
            description="Installation sur site",
            name="Installation",
            price_amount=Decimal("50.00"),
            currency="EUR",
        ),
    ]


@pytest.fixture
def tax_subtotals() -> list[TaxSubtotal]:
    return [
        TaxSubtotal(
            taxable_amount=Decimal("350.00"),
            tax_amount=Decimal("73.50"),
            currency="EUR",
            category_id="S",
            percent=Decimal("21"),
        )
    ]


@pytest.fixture
def monetary_totals() -> MonetaryTotals:
    return MonetaryTotals(
        line_extension_amount=Decimal("350.00"),
        tax_exclusive_amount=Decimal("350.00"),
        tax_inclusive_amount=Decimal("423.50"),
        payable_amount=Decimal("423.50"),
        currency="EUR",
    )


@pytest.fixture
def invoice_document(
    supplier: Party,
    customer: Party,
    invoice_lines: list[InvoiceLine],
    tax_subtotals: list[TaxSubtotal],
    monetary_totals: MonetaryTotals,
) -> InvoiceDocument:
    """Facture complète et équilibrée."""
    return InvoiceDocument(
        kind=DocumentKind.INVOICE,
        header=Header(
            number="INV-2025-0042",
            issue_date=date(2025, 3, 1),
            due_date=date(2025, 3, 31),
            currency="EUR",
        ),
        buyer_reference="PO-7781",
        order_reference="ORD-2025-12",
        supplier=supplier,
        customer=customer,
        payment_means=[
            PaymentMeans(
                payment_id="INV-2025-0042",
                iban="NL91ABNA0417164300",
                account_name="Darvis BV",
                bic="ABNANL2A",
            )
        ],
        payment_terms=PaymentTerms(note="Paiement à 30 jours"),
        tax_subtotals=tax_subtotals,
        monetary_totals=monetary_totals,
        lines=invoice_lines,
    )


@pytest.fixture
def credit_note_document(
    supplier: Party,
    customer: Party,
) -> InvoiceDocument:
    """Avoir d'une ligne saisie en négatif (-5 x 100.00)."""
    return InvoiceDocument(
        kind=DocumentKind.CREDIT_NOTE,
        header=Header(number="CN-2025-0007", issue_date=date(2025, 4, 2)),
        billing_reference=BillingReference(
            invoice_id="INV-2025-0042", issue_date=date(2025, 3, 1)
        ),
        supplier=supplier,
        customer=customer,
        tax_subtotals=[
            TaxSubtotal(
                taxable_amount=Decimal("500.00"),
                tax_amount=Decimal("105.00"),
                currency="EUR",
                percent=Decimal("21"),
            )
        ],
        monetary_totals=MonetaryTotals(
            line_extension_amount=Decimal("500.00"),
            tax_exclusive_amount=Decimal("500.00"),
            tax_inclusive_amount=Decimal("605.00"),
            payable_amount=Decimal("605.00"),
            currency="EUR",
        ),
        lines=[
            InvoiceLine(
                id="1",
                quantity=Decimal("-5"),
                unit_code="C62",
                description="Retour de marchandise",
                name="Retour",
                price_amount=Decimal("100.00"),
                currency="EUR",
            )
        ],
    )
