"""Modèles du rapprochement des montants (EN16931).

FR: Résultat structuré : validité, écarts par règle et corrections
    proposées (valeurs satisfaisant toutes les règles).
EN: Structured result: validity, per-rule mismatches and suggested
    corrections (values satisfying every rule).
"""

from decimal import Decimal

from pydantic import BaseModel, Field


class ReconciliationIssue(BaseModel):
    """Écart constaté pour une règle de calcul."""

    rule: str = Field(..., description="Code de règle (BR-CO-10...) / Rule code")
    message: str
    expected: Decimal | None = None
    actual: Decimal | None = None

    def __str__(self) -> str:
        return f"[{self.rule}] {self.message}"


class SubtotalCorrection(BaseModel):
    """Sous-total de TVA recalculé pour un couple (catégorie, taux)."""

    category_id: str
    percent: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal


class Corrections(BaseModel):
    """Valeurs recalculées indépendamment des montants fournis.

    FR: Permet à l'appelant de proposer « appliquer la correction » sans
        refaire les calculs.
    EN: Lets the caller offer "apply suggested fix" without redoing the math.
    """

    line_amounts: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Montant par identifiant, cumulé si répété / Amount per line id",
    )
    line_extension_amount: Decimal
    allowance_total_amount: Decimal
    charge_total_amount: Decimal
    tax_exclusive_amount: Decimal
    tax_subtotals: list[SubtotalCorrection] = Field(default_factory=list)
    tax_amount: Decimal
    tax_inclusive_amount: Decimal
    prepaid_amount: Decimal
    payable_amount: Decimal


class ReconciliationResult(BaseModel):
    """Résultat du rapprochement des montants."""

    valid: bool
    errors: list[ReconciliationIssue] = Field(default_factory=list)
    corrections: Corrections

    @property
    def rules_failed(self) -> list[str]:
        """Codes des règles en échec, sans doublon, dans l'ordre de détection."""
        return list(dict.fromkeys(issue.rule for issue in self.errors))
