"""Validation préalable d'un document complet, sans génération.

FR: Agrège toutes les violations de toutes les sections et le
    rapprochement des montants dans un résultat unique, sans lever
    d'exception. Utile pour une validation côté interface avant envoi.
EN: Aggregates every violation of every section and the amount
    reconciliation into a single result, without raising. Useful for
    UI pre-flight validation.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ubl_peppol.codelists.registry import CodelistRegistry
from ubl_peppol.errors import InvalidArgumentError, MissingBillingReferenceError
from ubl_peppol.models.document import InvoiceDocument
from ubl_peppol.models.enums import DocumentKind
from ubl_peppol.reconciliation.models import ReconciliationResult
from ubl_peppol.reconciliation.reconciler import reconcile_document
from ubl_peppol.validators import fields


class DocumentValidationResult(BaseModel):
    """Résultat de la validation préalable.

    FR: ``errors`` bloque la génération ; les écarts de montants sont
        rapportés dans ``warnings`` et détaillés dans ``reconciliation``.
    EN: ``errors`` blocks generation; amount mismatches are reported in
        ``warnings`` and detailed in ``reconciliation``.
    """

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    reconciliation: ReconciliationResult | None = None

    @classmethod
    def success(cls) -> DocumentValidationResult:
        return cls(is_valid=True)

    @classmethod
    def from_exception(cls, exc: Exception) -> DocumentValidationResult:
        """Construit un résultat en échec à partir d'une exception du paquet."""
        if isinstance(exc, InvalidArgumentError) and exc.errors:
            return cls(is_valid=False, errors=list(exc.errors))
        return cls(is_valid=False, errors=[str(exc)])

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
        }
        if self.reconciliation is not None:
            data["corrections"] = self.reconciliation.corrections.model_dump(
                mode="json"
            )
        return data


def validate_document(
    data: InvoiceDocument | Mapping[str, Any],
    registry: CodelistRegistry | None = None,
) -> DocumentValidationResult:
    """Valide un document complet sans le générer.

    Args:
        data: Le document typé ou ses données brutes.
        registry: Registre externe de codes (mode strict).

    Returns:
        Le résultat agrégé ; aucune exception pour une saisie invalide.
    """
    if isinstance(data, InvoiceDocument):
        document = data
    else:
        try:
            document = InvoiceDocument.model_validate(data)
        except ValidationError as exc:
            return DocumentValidationResult(
                is_valid=False,
                errors=[
                    f"{'.'.join(str(p) for p in err['loc'])} : {err['msg']}"
                    for err in exc.errors()
                ],
            )

    kind = document.kind
    errors: list[str] = []
    errors.extend(fields.check_header(document.header))
    if kind is DocumentKind.CREDIT_NOTE and document.billing_reference is None:
        errors.append(str(MissingBillingReferenceError()))
    errors.extend(
        fields.check_party(document.supplier, "Fournisseur", registry, require_vat=True)
    )
    errors.extend(fields.check_party(document.customer, "Client", registry))
    if document.delivery is not None:
        errors.extend(fields.check_delivery(document.delivery, registry))
    for means in document.payment_means:
        errors.extend(fields.check_payment_means(means))
    if document.payment_terms is not None:
        errors.extend(fields.check_payment_terms(document.payment_terms))
    for allowance in document.allowance_charges:
        errors.extend(fields.check_allowance_charge(allowance, registry))
    errors.extend(fields.check_tax_subtotals(document.tax_subtotals, registry))
    errors.extend(fields.check_monetary_totals(document.monetary_totals))
    for line in document.lines:
        errors.extend(fields.check_line(line, kind, registry))

    reconciliation = reconcile_document(document)
    return DocumentValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=[str(issue) for issue in reconciliation.errors],
        reconciliation=reconciliation,
    )
