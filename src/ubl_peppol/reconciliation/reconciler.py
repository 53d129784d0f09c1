"""Rapprochement des montants selon les règles EN16931.

FR: Vérifie la cohérence lignes / TVA / totaux (BR-CALC-01, BR-CO-10,
    BR-CO-13, BR-CO-15, BR-CO-16 et sous-totaux par catégorie) avec une
    tolérance fixe de 0,01 et calcule systématiquement les valeurs
    corrigées.
EN: Checks lines / VAT / totals consistency (BR-CALC-01, BR-CO-10,
    BR-CO-13, BR-CO-15, BR-CO-16 and per-category subtotals) with a fixed
    0.01 tolerance and always computes corrected values.
"""

import logging
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from ubl_peppol.models.document import (
    InvoiceDocument,
    InvoiceLine,
    MonetaryTotals,
    TaxSubtotal,
)
from ubl_peppol.models.enums import DocumentKind
from ubl_peppol.reconciliation.models import (
    Corrections,
    ReconciliationIssue,
    ReconciliationResult,
    SubtotalCorrection,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0")


def round_amount(amount: Decimal) -> Decimal:
    """Arrondit un montant à 2 décimales (demi vers le haut)."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def _group_key(category_id: str, percent: Decimal) -> tuple[str, Decimal]:
    return (category_id.strip().upper(), round_amount(percent))


class AmountReconciler:
    """Contrôleur des montants d'un document.

    FR: Sans état hormis la tolérance ; une instance peut être partagée.
    EN: Stateless apart from the tolerance; an instance can be shared.
    """

    def __init__(self, tolerance: Decimal = CENT) -> None:
        self.tolerance = tolerance

    def _matches(self, expected: Decimal, actual: Decimal) -> bool:
        return abs(expected - actual) <= self.tolerance

    def reconcile(
        self,
        lines: Sequence[InvoiceLine],
        totals: MonetaryTotals,
        tax_subtotals: Sequence[TaxSubtotal],
        allowance_total: Decimal = ZERO,
        charge_total: Decimal = ZERO,
        prepaid_amount: Decimal = ZERO,
    ) -> ReconciliationResult:
        """Rapproche lignes, sous-totaux de TVA et totaux monétaires.

        Args:
            lines: Les lignes du document.
            totals: Les totaux monétaires fournis.
            tax_subtotals: Les sous-totaux de TVA fournis.
            allowance_total: Total des remises de document.
            charge_total: Total des frais de document.
            prepaid_amount: Montant déjà payé.

        Returns:
            Le résultat, toujours accompagné des corrections calculées.
        """
        issues: list[ReconciliationIssue] = []

        # 1. Montants de ligne
        line_amounts: list[tuple[str, Decimal]] = []
        groups: dict[tuple[str, Decimal], Decimal] = {}
        for line in lines:
            computed = round_amount(line.price_amount * line.quantity)
            provided = line.line_extension_amount
            if provided is None:
                amount = computed
            elif self._matches(computed, provided):
                amount = provided
            else:
                issues.append(
                    ReconciliationIssue(
                        rule="BR-CALC-01",
                        message=(
                            f"Ligne {line.id} : montant {provided} différent de "
                            f"prix × quantité = {computed}"
                        ),
                        expected=computed,
                        actual=provided,
                    )
                )
                amount = computed
            line_amounts.append((line.id, amount))
            key = _group_key(line.tax_category_id, line.tax_percent)
            groups[key] = groups.get(key, ZERO) + amount

        # 2. BR-CO-10 : somme des lignes
        line_total = sum((amount for _, amount in line_amounts), ZERO)
        self._check(
            issues,
            "BR-CO-10",
            "Somme des montants de ligne",
            line_total,
            totals.line_extension_amount,
        )

        # 3. BR-CO-13 : total HT
        self._check(
            issues,
            "BR-CO-13",
            "Total HT (lignes - remises + frais)",
            totals.line_extension_amount - allowance_total + charge_total,
            totals.tax_exclusive_amount,
        )

        # 4. Sous-totaux par (catégorie, taux)
        expected_subtotals = [
            SubtotalCorrection(
                category_id=category,
                percent=percent,
                taxable_amount=round_amount(taxable),
                tax_amount=round_amount(taxable * percent / 100),
            )
            for (category, percent), taxable in groups.items()
        ]
        provided_by_key = {
            _group_key(s.category_id, s.percent): s for s in tax_subtotals
        }
        for expected in expected_subtotals:
            key = (expected.category_id, expected.percent)
            provided = provided_by_key.pop(key, None)
            label = f"{expected.category_id} {expected.percent}%"
            if provided is None:
                issues.append(
                    ReconciliationIssue(
                        rule="TAX-SUBTOTAL-MISSING",
                        message=f"Sous-total de TVA manquant pour {label}",
                        expected=expected.tax_amount,
                    )
                )
                continue
            self._check(
                issues,
                "TAX-SUBTOTAL-TAXABLE",
                f"Base HT du sous-total {label}",
                expected.taxable_amount,
                provided.taxable_amount,
            )
            self._check(
                issues,
                "TAX-SUBTOTAL-AMOUNT",
                f"Montant de TVA du sous-total {label}",
                expected.tax_amount,
                provided.tax_amount,
            )
        for category, percent in provided_by_key:
            issues.append(
                ReconciliationIssue(
                    rule="TAX-SUBTOTAL-UNEXPECTED",
                    message=(
                        f"Sous-total de TVA {category} {percent}% "
                        "sans ligne correspondante"
                    ),
                )
            )
        self._check(
            issues,
            "TAXABLE-TOTAL",
            "Somme des bases HT des sous-totaux",
            totals.line_extension_amount,
            sum((s.taxable_amount for s in tax_subtotals), ZERO),
        )

        # 5. BR-CO-15 : total TTC
        provided_tax = sum((s.tax_amount for s in tax_subtotals), ZERO)
        self._check(
            issues,
            "BR-CO-15",
            "Total TTC (HT + TVA)",
            totals.tax_exclusive_amount + provided_tax,
            totals.tax_inclusive_amount,
        )

        # 6. BR-CO-16 : net à payer
        self._check(
            issues,
            "BR-CO-16",
            "Net à payer (TTC - acompte)",
            totals.tax_inclusive_amount - prepaid_amount,
            totals.payable_amount,
        )

        corrections = self._corrections(
            line_amounts,
            expected_subtotals,
            allowance_total,
            charge_total,
            prepaid_amount,
        )
        if issues:
            logger.warning(
                "Rapprochement en échec (%d écart(s)) : %s",
                len(issues),
                ", ".join(dict.fromkeys(i.rule for i in issues)),
            )
        return ReconciliationResult(
            valid=not issues,
            errors=issues,
            corrections=corrections,
        )

    def _check(
        self,
        issues: list[ReconciliationIssue],
        rule: str,
        label: str,
        expected: Decimal,
        actual: Decimal,
    ) -> None:
        if not self._matches(expected, actual):
            issues.append(
                ReconciliationIssue(
                    rule=rule,
                    message=f"{label} : attendu {round_amount(expected)}, reçu {actual}",
                    expected=round_amount(expected),
                    actual=actual,
                )
            )

    @staticmethod
    def _corrections(
        line_amounts: list[tuple[str, Decimal]],
        subtotals: list[SubtotalCorrection],
        allowance_total: Decimal,
        charge_total: Decimal,
        prepaid_amount: Decimal,
    ) -> Corrections:
        by_id: dict[str, Decimal] = {}
        for line_id, amount in line_amounts:
            by_id[line_id] = by_id.get(line_id, ZERO) + amount
        line_extension = round_amount(sum((a for _, a in line_amounts), ZERO))
        tax_exclusive = round_amount(line_extension - allowance_total + charge_total)
        tax_amount = round_amount(sum((s.tax_amount for s in subtotals), ZERO))
        tax_inclusive = tax_exclusive + tax_amount
        return Corrections(
            line_amounts={k: round_amount(v) for k, v in by_id.items()},
            line_extension_amount=line_extension,
            allowance_total_amount=round_amount(allowance_total),
            charge_total_amount=round_amount(charge_total),
            tax_exclusive_amount=tax_exclusive,
            tax_subtotals=subtotals,
            tax_amount=tax_amount,
            tax_inclusive_amount=tax_inclusive,
            prepaid_amount=round_amount(prepaid_amount),
            payable_amount=round_amount(tax_inclusive - prepaid_amount),
        )


def normalize_credit_line(line: InvoiceLine) -> InvoiceLine:
    """Ramène quantité, prix et montant d'une ligne d'avoir en valeur absolue."""
    quantity = abs(line.quantity)
    price = abs(line.price_amount)
    amount = (
        abs(line.line_extension_amount)
        if line.line_extension_amount is not None
        else round_amount(quantity * price)
    )
    return line.model_copy(
        update={
            "quantity": quantity,
            "price_amount": price,
            "line_extension_amount": amount,
        }
    )


def reconcile(
    lines: Sequence[InvoiceLine],
    totals: MonetaryTotals,
    tax_subtotals: Sequence[TaxSubtotal],
    allowance_total: Decimal = ZERO,
    charge_total: Decimal = ZERO,
    prepaid_amount: Decimal = ZERO,
) -> ReconciliationResult:
    """Raccourci vers ``AmountReconciler().reconcile``."""
    return AmountReconciler().reconcile(
        lines,
        totals,
        tax_subtotals,
        allowance_total=allowance_total,
        charge_total=charge_total,
        prepaid_amount=prepaid_amount,
    )


def reconcile_document(document: InvoiceDocument) -> ReconciliationResult:
    """Rapproche les montants d'un document complet.

    FR: Les lignes d'avoir sont normalisées comme à la génération ; les
        totaux de remises et frais proviennent des AllowanceCharge du
        document, ou à défaut des totaux monétaires.
    EN: Credit note lines are normalized as during generation; allowance
        and charge totals come from the document's AllowanceCharge
        entries, or else from the monetary totals.
    """
    lines = document.lines
    if document.kind is DocumentKind.CREDIT_NOTE:
        lines = [normalize_credit_line(line) for line in lines]
    totals = document.monetary_totals
    if document.allowance_charges:
        allowance_total = document.allowance_total
        charge_total = document.charge_total
    else:
        allowance_total = totals.allowance_total_amount
        charge_total = totals.charge_total_amount
    return reconcile(
        lines,
        totals,
        document.tax_subtotals,
        allowance_total=allowance_total,
        charge_total=charge_total,
        prepaid_amount=totals.prepaid_amount,
    )
