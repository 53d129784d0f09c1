"""Tests unitaires du rapprochement des montants EN16931."""

from decimal import Decimal

import pytest

from ubl_peppol.models import (
    AllowanceCharge,
    InvoiceDocument,
    InvoiceLine,
    MonetaryTotals,
    TaxSubtotal,
)
from ubl_peppol.reconciliation import (
    AmountReconciler,
    normalize_credit_line,
    reconcile,
    reconcile_document,
    round_amount,
)
from ubl_peppol.reconciliation.models import Corrections


def _line(line_id: str, quantity: str, price: str, amount: str | None, **kw) -> InvoiceLine:
    return InvoiceLine(
        id=line_id,
        quantity=Decimal(quantity),
        unit_code="C62",
        line_extension_amount=Decimal(amount) if amount is not None else None,
        description="Article",
        name="Article",
        price_amount=Decimal(price),
        **kw,
    )


def _totals(**amounts: str) -> MonetaryTotals:
    return MonetaryTotals(**{k: Decimal(v) for k, v in amounts.items()})


def _apply(corrections: Corrections) -> tuple[MonetaryTotals, list[TaxSubtotal]]:
    totals = MonetaryTotals(
        line_extension_amount=corrections.line_extension_amount,
        tax_exclusive_amount=corrections.tax_exclusive_amount,
        tax_inclusive_amount=corrections.tax_inclusive_amount,
        allowance_total_amount=corrections.allowance_total_amount,
        charge_total_amount=corrections.charge_total_amount,
        prepaid_amount=corrections.prepaid_amount,
        payable_amount=corrections.payable_amount,
    )
    subtotals = [
        TaxSubtotal(
            category_id=s.category_id,
            percent=s.percent,
            taxable_amount=s.taxable_amount,
            tax_amount=s.tax_amount,
        )
        for s in corrections.tax_subtotals
    ]
    return totals, subtotals


class TestRoundAmount:
    """Tests de l'arrondi."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("2.005", "2.01"), ("2.004", "2.00"), ("-2.005", "-2.01"), ("10", "10.00")],
    )
    def test_half_up(self, value: str, expected: str) -> None:
        assert str(round_amount(Decimal(value))) == expected


class TestBalancedDocument:
    """Tests d'un document équilibré."""

    def test_valid(
        self,
        invoice_lines: list[InvoiceLine],
        monetary_totals: MonetaryTotals,
        tax_subtotals: list[TaxSubtotal],
    ) -> None:
        result = reconcile(invoice_lines, monetary_totals, tax_subtotals)
        assert result.valid
        assert result.errors == []
        assert result.rules_failed == []

    def test_corrections_always_computed(
        self,
        invoice_lines: list[InvoiceLine],
        monetary_totals: MonetaryTotals,
        tax_subtotals: list[TaxSubtotal],
    ) -> None:
        corrections = reconcile(invoice_lines, monetary_totals, tax_subtotals).corrections
        assert corrections.line_extension_amount == Decimal("350.00")
        assert corrections.tax_amount == Decimal("73.50")
        assert corrections.tax_inclusive_amount == Decimal("423.50")
        assert corrections.payable_amount == Decimal("423.50")
        assert len(corrections.tax_subtotals) == 1

    def test_tolerance_of_one_cent(self) -> None:
        lines = [_line("1", "1", "100.00", "100.01")]
        totals = _totals(
            line_extension_amount="100.01",
            tax_exclusive_amount="100.01",
            tax_inclusive_amount="121.01",
            payable_amount="121.01",
        )
        subtotals = [TaxSubtotal(taxable_amount=100, tax_amount=21, percent=21)]
        assert reconcile(lines, totals, subtotals).valid


class TestRules:
    """Tests de chaque règle de calcul."""

    def test_line_amount_mismatch(self) -> None:
        lines = [_line("1", "3", "10.00", "31.00")]
        totals = _totals(
            line_extension_amount="30.00",
            tax_exclusive_amount="30.00",
            tax_inclusive_amount="36.30",
            payable_amount="36.30",
        )
        subtotals = [TaxSubtotal(taxable_amount=30, tax_amount="6.30", percent=21)]
        result = reconcile(lines, totals, subtotals)
        assert result.rules_failed == ["BR-CALC-01"]
        issue = result.errors[0]
        assert issue.expected == Decimal("30.00")
        assert issue.actual == Decimal("31.00")
        assert result.corrections.line_amounts == {"1": Decimal("30.00")}

    def test_line_total_mismatch(self) -> None:
        lines = [_line("1", "1", "50", "50"), _line("2", "1", "50", "50")]
        totals = _totals(
            line_extension_amount="90",
            tax_exclusive_amount="90",
            tax_inclusive_amount="111",
            payable_amount="111",
        )
        subtotals = [TaxSubtotal(taxable_amount=100, tax_amount=21, percent=21)]
        result = reconcile(lines, totals, subtotals)
        assert "BR-CO-10" in result.rules_failed
        assert "TAXABLE-TOTAL" in result.rules_failed

    def test_allowances_and_charges(self) -> None:
        lines = [_line("1", "1", "100", "100")]
        totals = _totals(
            line_extension_amount="100",
            tax_exclusive_amount="95",
            tax_inclusive_amount="116.00",
            payable_amount="116.00",
        )
        subtotals = [TaxSubtotal(taxable_amount=100, tax_amount=21, percent=21)]
        result = reconcile(
            lines,
            totals,
            subtotals,
            allowance_total=Decimal("10"),
            charge_total=Decimal("5"),
        )
        assert result.valid
        assert result.corrections.tax_exclusive_amount == Decimal("95.00")

    def test_tax_exclusive_mismatch(self) -> None:
        lines = [_line("1", "1", "100", "100")]
        totals = _totals(
            line_extension_amount="100",
            tax_exclusive_amount="100",
            tax_inclusive_amount="121",
            payable_amount="121",
        )
        subtotals = [TaxSubtotal(taxable_amount=100, tax_amount=21, percent=21)]
        result = reconcile(lines, totals, subtotals, allowance_total=Decimal("10"))
        assert result.rules_failed == ["BR-CO-13"]

    def test_subtotal_per_category(self) -> None:
        lines = [
            _line("1", "1", "100", "100"),
            _line("2", "1", "50", "50", tax_percent=Decimal("6")),
        ]
        totals = _totals(
            line_extension_amount="150",
            tax_exclusive_amount="150",
            tax_inclusive_amount="174",
            payable_amount="174",
        )
        subtotals = [
            TaxSubtotal(taxable_amount=100, tax_amount=21, percent=21),
            TaxSubtotal(taxable_amount=50, tax_amount=3, percent=6),
        ]
        assert reconcile(lines, totals, subtotals).valid

    def test_missing_and_unexpected_subtotal(self) -> None:
        lines = [_line("1", "1", "100", "100")]
        totals = _totals(
            line_extension_amount="100",
            tax_exclusive_amount="100",
            tax_inclusive_amount="106",
            payable_amount="106",
        )
        subtotals = [TaxSubtotal(taxable_amount=100, tax_amount=6, percent=6)]
        result = reconcile(lines, totals, subtotals)
        assert result.rules_failed == [
            "TAX-SUBTOTAL-MISSING",
            "TAX-SUBTOTAL-UNEXPECTED",
        ]
        assert result.corrections.tax_amount == Decimal("21.00")
        assert result.corrections.tax_inclusive_amount == Decimal("121.00")

    def test_subtotal_amounts(self) -> None:
        lines = [_line("1", "1", "100", "100")]
        totals = _totals(
            line_extension_amount="100",
            tax_exclusive_amount="100",
            tax_inclusive_amount="120",
            payable_amount="120",
        )
        subtotals = [TaxSubtotal(taxable_amount=100, tax_amount=20, percent=21)]
        result = reconcile(lines, totals, subtotals)
        assert result.rules_failed == ["TAX-SUBTOTAL-AMOUNT"]

    def test_tax_inclusive_mismatch(self) -> None:
        lines = [_line("1", "1", "100", "100")]
        totals = _totals(
            line_extension_amount="100",
            tax_exclusive_amount="100",
            tax_inclusive_amount="122",
            payable_amount="122",
        )
        subtotals = [TaxSubtotal(taxable_amount=100, tax_amount=21, percent=21)]
        result = reconcile(lines, totals, subtotals)
        assert result.rules_failed == ["BR-CO-15"]
        assert str(result.errors[0]).startswith("[BR-CO-15]")

    def test_payable_with_prepaid(self) -> None:
        lines = [_line("1", "1", "100", "100")]
        totals = _totals(
            line_extension_amount="100",
            tax_exclusive_amount="100",
            tax_inclusive_amount="121",
            prepaid_amount="21",
            payable_amount="100",
        )
        subtotals = [TaxSubtotal(taxable_amount=100, tax_amount=21, percent=21)]
        result = reconcile(lines, totals, subtotals, prepaid_amount=Decimal("21"))
        assert result.valid
        assert result.corrections.payable_amount == Decimal("100.00")

    def test_custom_tolerance(self) -> None:
        lines = [_line("1", "1", "100", "100.05")]
        totals = _totals(
            line_extension_amount="100.05",
            tax_exclusive_amount="100.05",
            tax_inclusive_amount="121.05",
            payable_amount="121.05",
        )
        subtotals = [TaxSubtotal(taxable_amount=100, tax_amount=21, percent=21)]
        assert not reconcile(lines, totals, subtotals).valid
        reconciler = AmountReconciler(tolerance=Decimal("0.10"))
        assert reconciler.reconcile(lines, totals, subtotals).valid

    def test_mismatch_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        lines = [_line("1", "1", "100", "100")]
        totals = _totals(
            line_extension_amount="100",
            tax_exclusive_amount="100",
            tax_inclusive_amount="121",
            payable_amount="120",
        )
        subtotals = [TaxSubtotal(taxable_amount=100, tax_amount=21, percent=21)]
        with caplog.at_level("WARNING", logger="ubl_peppol.reconciliation.reconciler"):
            reconcile(lines, totals, subtotals)
        assert "BR-CO-16" in caplog.text


class TestDocumentReconciliation:
    """Tests du rapprochement d'un document complet."""

    def test_credit_note_lines_normalized(
        self, credit_note_document: InvoiceDocument
    ) -> None:
        result = reconcile_document(credit_note_document)
        assert result.valid
        assert result.corrections.line_amounts == {"1": Decimal("500.00")}

    def test_allowance_charges_from_document(
        self, invoice_document: InvoiceDocument
    ) -> None:
        document = invoice_document.model_copy(
            update={
                "allowance_charges": [
                    AllowanceCharge(is_charge=False, amount=Decimal("50"), reason="Remise"),
                ]
            }
        )
        result = reconcile_document(document)
        assert "BR-CO-13" in result.rules_failed
        assert result.corrections.tax_exclusive_amount == Decimal("300.00")

    def test_normalize_credit_line(self) -> None:
        line = normalize_credit_line(_line("1", "-2", "-10", None))
        assert line.quantity == Decimal("2")
        assert line.price_amount == Decimal("10")
        assert line.line_extension_amount == Decimal("20.00")


class TestCorrections:
    """Tests des corrections proposées : réinjectées, elles équilibrent le document."""

    def test_repeated_line_ids_balanced(self) -> None:
        lines = [_line("1", "1", "100.00", "100.00"), _line("1", "1", "100.00", "100.00")]
        totals = _totals(
            line_extension_amount="200",
            tax_exclusive_amount="200",
            tax_inclusive_amount="242",
            payable_amount="242",
        )
        subtotals = [TaxSubtotal(taxable_amount=200, tax_amount=42, percent=21)]
        result = reconcile(lines, totals, subtotals)
        assert result.valid
        assert result.corrections.line_extension_amount == Decimal("200.00")
        assert result.corrections.line_amounts == {"1": Decimal("200.00")}
        assert result.corrections.payable_amount == Decimal("242.00")

    def test_repeated_line_ids_corrected(self) -> None:
        lines = [_line("1", "1", "100.00", "100.00"), _line("1", "1", "100.00", "100.00")]
        totals = _totals(
            line_extension_amount="100",
            tax_exclusive_amount="100",
            tax_inclusive_amount="121",
            payable_amount="121",
        )
        subtotals = [TaxSubtotal(taxable_amount=100, tax_amount=21, percent=21)]
        result = reconcile(lines, totals, subtotals)
        assert "BR-CO-10" in result.rules_failed

        fixed_totals, fixed_subtotals = _apply(result.corrections)
        assert fixed_totals.payable_amount == Decimal("242.00")
        assert reconcile(lines, fixed_totals, fixed_subtotals).valid

    def test_every_rule_satisfied_after_correction(self) -> None:
        lines = [
            _line("1", "3", "10.00", "31.00"),
            _line("2", "1", "50.00", "50.00", tax_percent=Decimal("6")),
        ]
        totals = _totals(
            line_extension_amount="90",
            tax_exclusive_amount="90",
            tax_inclusive_amount="100",
            prepaid_amount="10",
            payable_amount="95",
        )
        subtotals = [TaxSubtotal(taxable_amount=90, tax_amount=10, percent=21)]
        amounts = {
            "allowance_total": Decimal("5"),
            "charge_total": Decimal("2"),
            "prepaid_amount": Decimal("10"),
        }
        result = reconcile(lines, totals, subtotals, **amounts)
        assert not result.valid

        corrections = result.corrections
        assert corrections.line_amounts == {"1": Decimal("30.00"), "2": Decimal("50.00")}
        assert corrections.tax_exclusive_amount == Decimal("77.00")
        assert corrections.tax_amount == Decimal("9.30")
        assert corrections.payable_amount == Decimal("76.30")

        fixed_lines = [
            line.model_copy(
                update={"line_extension_amount": corrections.line_amounts[line.id]}
            )
            for line in lines
        ]
        fixed_totals, fixed_subtotals = _apply(corrections)
        fixed = reconcile(fixed_lines, fixed_totals, fixed_subtotals, **amounts)
        assert fixed.valid, fixed.rules_failed

    def test_tolerance_not_read_from_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("UBL_PEPPOL_AMOUNT_TOLERANCE", "5")
        assert AmountReconciler().tolerance == Decimal("0.01")
