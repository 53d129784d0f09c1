"""Rapprochement des montants (règles de calcul EN16931)."""

from ubl_peppol.reconciliation.models import (
    Corrections,
    ReconciliationIssue,
    ReconciliationResult,
    SubtotalCorrection,
)
from ubl_peppol.reconciliation.reconciler import (
    AmountReconciler,
    normalize_credit_line,
    reconcile,
    reconcile_document,
    round_amount,
)

__all__ = [
    "AmountReconciler",
    "Corrections",
    "ReconciliationIssue",
    "ReconciliationResult",
    "SubtotalCorrection",
    "normalize_credit_line",
    "reconcile",
    "reconcile_document",
    "round_amount",
]
