"""Modèles des sections d'un document UBL (facture ou avoir).

FR: Un enregistrement typé par section : en-tête, références, livraison,
    paiement, remises/frais, lignes, sous-totaux de TVA et totaux
    monétaires. ``InvoiceDocument`` regroupe le tout pour la génération
    en une passe.
EN: One typed record per section: header, references, delivery,
    payment, allowances/charges, lines, VAT subtotals and monetary
    totals. ``InvoiceDocument`` groups everything for one-pass generation.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from ubl_peppol.conf import get_setting
from ubl_peppol.models.enums import DocumentKind
from ubl_peppol.models.party import Address, Party


def _default_currency() -> str:
    return str(get_setting("CURRENCY"))


class Header(BaseModel):
    """En-tête du document.

    FR: Les dates acceptent un objet ``date`` ou une chaîne ``YYYY-MM-DD`` ;
        leur validité est contrôlée à l'ajout de l'en-tête.
    EN: Dates accept a ``date`` or a ``YYYY-MM-DD`` string; their validity
        is checked when the header is added.
    """

    number: str = Field(..., description="Numéro du document / Document number")
    issue_date: date | str = Field(..., description="Date d'émission / Issue date")
    due_date: date | str | None = Field(
        default=None,
        description="Date d'échéance (défaut : émission + 30 j) / Due date",
    )
    currency: str = Field(
        default_factory=_default_currency,
        description="Devise ISO 4217 / Document currency",
    )
    accounting_cost: str | None = Field(
        default=None,
        description="Référence comptable de l'acheteur / Buyer accounting cost",
    )
    note: str | None = Field(default=None, description="Note libre / Free text note")


class BillingReference(BaseModel):
    """Référence à la facture d'origine (obligatoire pour un avoir, BR-55)."""

    invoice_id: str = Field(..., description="Numéro de la facture d'origine")
    issue_date: date | str | None = Field(
        default=None,
        description="Date de la facture d'origine / Original issue date",
    )


class DocumentReference(BaseModel):
    """Document additionnel (AdditionalDocumentReference)."""

    id: str = Field(..., description="Identifiant du document / Document ID")
    description: str | None = Field(
        default=None,
        description="Type ou description du document / Document description",
    )


class Delivery(BaseModel):
    """Informations de livraison."""

    delivery_date: date | str | None = Field(
        default=None,
        description="Date de livraison effective / Actual delivery date",
    )
    location_id: str | None = Field(
        default=None,
        description="Identifiant du lieu de livraison / Location ID",
    )
    location_scheme: str = Field(
        default="0088",
        description="Schéma de l'identifiant du lieu (GLN) / Location scheme",
    )
    address: Address | None = Field(
        default=None,
        description="Adresse de livraison / Delivery address",
    )
    party_name: str | None = Field(
        default=None,
        description="Nom de la partie livrée / Delivery party name",
    )


class PaymentMeans(BaseModel):
    """Moyen de paiement (UNTDID 4461)."""

    code: str = Field(default="30", description="Code moyen de paiement / Means code")
    name: str | None = Field(
        default="Credit transfer",
        description="Libellé du moyen de paiement / Means name",
    )
    payment_id: str | None = Field(
        default=None,
        description="Référence de paiement / Payment reference",
    )
    iban: str | None = Field(default=None, description="IBAN du bénéficiaire")
    account_name: str | None = Field(
        default=None,
        description="Titulaire du compte / Account holder name",
    )
    bic: str | None = Field(default=None, description="BIC du bénéficiaire")


class PaymentTerms(BaseModel):
    """Conditions de paiement."""

    note: str = Field(..., description="Conditions de paiement / Payment terms")


class AllowanceCharge(BaseModel):
    """Remise ou frais au niveau du document."""

    is_charge: bool = Field(..., description="True = frais, False = remise")
    amount: Decimal = Field(..., ge=0, description="Montant / Amount")
    reason: str = Field(..., description="Motif / Reason")
    tax_category_id: str = Field(default="S", description="Catégorie de TVA")
    tax_percent: Decimal = Field(
        default=Decimal("21.00"),
        ge=0,
        le=100,
        description="Taux de TVA en % / VAT rate",
    )
    currency: str = Field(
        default_factory=_default_currency,
        min_length=3,
        max_length=3,
        description="Devise / Currency",
    )


class InvoiceLine(BaseModel):
    """Ligne de facture ou d'avoir.

    FR: Pour un avoir, quantité et prix sont ramenés en valeur absolue et le
        montant de ligne est calculé s'il est absent. Pour une facture, le
        montant de ligne est obligatoire.
    EN: For a credit note, quantity and price are made absolute and the
        line amount is computed when absent. For an invoice, the line
        amount is required.
    """

    id: str = Field(..., description="Identifiant de ligne / Line ID")
    quantity: Decimal = Field(..., description="Quantité / Quantity")
    unit_code: str = Field(..., description="Code unité UN/ECE Rec. 20 / Unit code")
    line_extension_amount: Decimal | None = Field(
        default=None,
        description="Montant net de la ligne / Line net amount",
    )
    description: str = Field(..., description="Description de l'article")
    name: str = Field(..., description="Nom de l'article / Item name")
    price_amount: Decimal = Field(..., description="Prix unitaire net / Net price")
    currency: str = Field(
        default_factory=_default_currency,
        description="Devise / Currency",
    )
    accounting_cost: str | None = Field(default=None, description="Imputation")
    order_line_reference: str | None = Field(
        default=None,
        description="Référence de ligne de commande / Order line reference",
    )
    sellers_item_id: str | None = Field(
        default=None,
        description="Référence article vendeur / Seller's item ID",
    )
    standard_item_id: str | None = Field(
        default=None,
        description="Identifiant standard (GTIN) / Standard item ID",
    )
    standard_item_scheme: str = Field(
        default="0160",
        description="Schéma de l'identifiant standard (0160 = GTIN)",
    )
    origin_country: str | None = Field(
        default=None,
        description="Pays d'origine ISO 3166-1 / Origin country",
    )
    tax_category_id: str = Field(default="S", description="Catégorie de TVA")
    tax_percent: Decimal = Field(
        default=Decimal("21.00"),
        description="Taux de TVA en % / VAT rate",
    )
    tax_scheme_id: str = Field(default="VAT", description="Schéma fiscal")
    classification_code: str | None = Field(
        default=None,
        description="Code de classification / Commodity classification code",
    )
    classification_scheme: str = Field(
        default="STD",
        description="Schéma UNTDID 7143 de la classification / Scheme",
    )


class TaxSubtotal(BaseModel):
    """Sous-total de TVA par catégorie et taux."""

    taxable_amount: Decimal = Field(..., ge=0, description="Base HT / Taxable amount")
    tax_amount: Decimal = Field(..., ge=0, description="Montant de TVA / Tax amount")
    currency: str = Field(
        default_factory=_default_currency,
        min_length=3,
        max_length=3,
        description="Devise / Currency",
    )
    category_id: str = Field(default="S", description="Catégorie de TVA")
    percent: Decimal = Field(..., ge=0, le=100, description="Taux de TVA en %")
    scheme_id: str = Field(default="VAT", description="Schéma fiscal")
    exemption_reason_code: str | None = Field(
        default=None,
        description="Code motif d'exonération / Exemption reason code",
    )
    exemption_reason: str | None = Field(
        default=None,
        description="Motif d'exonération / Exemption reason",
    )


class MonetaryTotals(BaseModel):
    """Totaux monétaires du document (LegalMonetaryTotal)."""

    line_extension_amount: Decimal = Field(..., ge=0, description="Somme des lignes")
    tax_exclusive_amount: Decimal = Field(..., ge=0, description="Total HT")
    tax_inclusive_amount: Decimal = Field(..., ge=0, description="Total TTC")
    allowance_total_amount: Decimal = Field(
        default=Decimal("0"), ge=0, description="Total des remises"
    )
    charge_total_amount: Decimal = Field(
        default=Decimal("0"), ge=0, description="Total des frais"
    )
    prepaid_amount: Decimal = Field(
        default=Decimal("0"), ge=0, description="Montant déjà payé"
    )
    payable_amount: Decimal = Field(..., ge=0, description="Net à payer")
    currency: str = Field(
        default_factory=_default_currency,
        min_length=3,
        max_length=3,
        description="Devise / Currency",
    )


class InvoiceDocument(BaseModel):
    """Document complet (facture ou avoir) prêt à être généré.

    FR: Regroupe toutes les sections dans l'ordre du schéma UBL.
    EN: Groups every section in UBL schema order.
    """

    kind: DocumentKind = Field(default=DocumentKind.INVOICE, description="Type")
    header: Header
    buyer_reference: str | None = None
    order_reference: str | None = None
    billing_reference: BillingReference | None = None
    additional_document_references: list[DocumentReference] = Field(
        default_factory=list
    )
    supplier: Party
    customer: Party
    delivery: Delivery | None = None
    payment_means: list[PaymentMeans] = Field(default_factory=list)
    payment_terms: PaymentTerms | None = None
    allowance_charges: list[AllowanceCharge] = Field(default_factory=list)
    tax_subtotals: list[TaxSubtotal] = Field(default_factory=list)
    monetary_totals: MonetaryTotals
    lines: list[InvoiceLine] = Field(..., min_length=1)

    @property
    def allowance_total(self) -> Decimal:
        """Somme des remises de document."""
        return sum(
            (ac.amount for ac in self.allowance_charges if not ac.is_charge),
            Decimal("0"),
        )

    @property
    def charge_total(self) -> Decimal:
        """Somme des frais de document."""
        return sum(
            (ac.amount for ac in self.allowance_charges if ac.is_charge),
            Decimal("0"),
        )
