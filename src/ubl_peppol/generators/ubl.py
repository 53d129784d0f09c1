"""Générateur UBL 2.1 à partir d'un ``InvoiceDocument``.

FR: Produit en une passe un XML conforme au standard OASIS UBL 2.1,
    compatible PEPPOL BIS Billing 3.0 et profils nationaux (NLCIUS,
    UBL.BE). Supporte les factures (Invoice) et les avoirs (CreditNote).
EN: Produces, in one pass, an XML conforming to the OASIS UBL 2.1
    standard, compatible with PEPPOL BIS Billing 3.0 and national
    profiles (NLCIUS, UBL.BE). Supports invoices and credit notes.
"""

import logging
from collections.abc import Mapping
from typing import Any

from ubl_peppol.codelists.registry import CodelistRegistry
from ubl_peppol.errors import ReconciliationError
from ubl_peppol.generators.base import GenerationResult
from ubl_peppol.generators.builder import DocumentBuilder, coerce_model
from ubl_peppol.models.document import InvoiceDocument
from ubl_peppol.models.enums import UBLProfile
from ubl_peppol.reconciliation.reconciler import reconcile_document

logger = logging.getLogger(__name__)


class UBLGenerator:
    """Générateur de documents au format UBL 2.1.

    FR: Pilote un ``DocumentBuilder`` neuf par document, dans l'ordre des
        sections, puis rapproche les montants. Le rapprochement n'est
        bloquant que si ``require_balanced`` est demandé.
    EN: Drives a fresh ``DocumentBuilder`` per document, in section order,
        then reconciles amounts. Reconciliation only blocks generation when
        ``require_balanced`` is requested.
    """

    def __init__(
        self,
        profile: UBLProfile | str | None = None,
        registry: CodelistRegistry | None = None,
    ) -> None:
        self.profile = profile
        self.registry = registry

    def generate(
        self,
        document: InvoiceDocument | Mapping[str, Any],
        require_balanced: bool = False,
    ) -> GenerationResult:
        """Génère le document UBL.

        Args:
            document: Le document typé ou ses données brutes.
            require_balanced: Lève ``ReconciliationError`` si les montants
                ne se rapprochent pas.

        Returns:
            GenerationResult contenant le XML et le rapprochement.
        """
        document = coerce_model(InvoiceDocument, document, "Document")
        reconciliation = reconcile_document(document)
        if require_balanced and not reconciliation.valid:
            raise ReconciliationError(reconciliation)

        builder = self._assemble(document)
        xml = builder.build()
        logger.info(
            "%s %s généré (%d ligne(s), profil %s)",
            document.kind,
            document.header.number,
            len(document.lines),
            builder.profile,
        )
        return GenerationResult(
            xml=xml,
            kind=document.kind,
            profile=builder.profile,
            reconciliation=reconciliation,
            sign_corrections=list(builder.sign_corrections),
        )

    def generate_xml(self, document: InvoiceDocument | Mapping[str, Any]) -> bytes:
        """Génère uniquement le XML du document, en octets."""
        return self.generate(document).xml_bytes

    def _assemble(self, document: InvoiceDocument) -> DocumentBuilder:
        builder = DocumentBuilder(profile=self.profile, registry=self.registry)
        builder.create(document.kind)
        header = document.header
        builder.add_header(
            header.number,
            header.issue_date,
            header.due_date,
            currency=header.currency,
            accounting_cost=header.accounting_cost,
            note=header.note,
        )
        if document.buyer_reference is not None:
            builder.add_buyer_reference(document.buyer_reference)
        if document.order_reference:
            builder.add_order_reference(document.order_reference)
        if document.billing_reference is not None:
            builder.add_billing_reference(document.billing_reference)
        for reference in document.additional_document_references:
            builder.add_additional_document_reference(reference)
        builder.add_supplier(document.supplier)
        builder.add_customer(document.customer)
        if document.delivery is not None:
            builder.add_delivery(document.delivery)
        for means in document.payment_means:
            builder.add_payment_means(means)
        if document.payment_terms is not None:
            builder.add_payment_terms(document.payment_terms)
        for allowance in document.allowance_charges:
            builder.add_allowance_charge(allowance)
        builder.add_tax_total(document.tax_subtotals)
        builder.add_legal_monetary_total(document.monetary_totals)
        for line in document.lines:
            builder.add_line(line)
        return builder
