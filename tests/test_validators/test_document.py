"""Tests unitaires de la validation préalable d'un document complet."""

from decimal import Decimal

from ubl_peppol.errors import InvalidArgumentError
from ubl_peppol.models import InvoiceDocument
from ubl_peppol.validators import DocumentValidationResult, validate_document


class TestValidateDocument:
    """Tests de ``validate_document``."""

    def test_valid_invoice(self, invoice_document: InvoiceDocument) -> None:
        result = validate_document(invoice_document)
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []
        assert result.reconciliation.valid

    def test_valid_credit_note(self, credit_note_document: InvoiceDocument) -> None:
        result = validate_document(credit_note_document)
        assert result.is_valid

    def test_credit_note_without_billing_reference(
        self, credit_note_document: InvoiceDocument
    ) -> None:
        document = credit_note_document.model_copy(update={"billing_reference": None})
        result = validate_document(document)
        assert not result.is_valid
        assert any(e.startswith("[BR-55]") for e in result.errors)

    def test_errors_from_every_section(self, invoice_document: InvoiceDocument) -> None:
        supplier = invoice_document.supplier.model_copy(update={"vat_number": None})
        lines = [
            invoice_document.lines[0].model_copy(update={"unit_code": "ZZZ"}),
            invoice_document.lines[1],
        ]
        header = invoice_document.header.model_copy(update={"number": ""})
        document = invoice_document.model_copy(
            update={"supplier": supplier, "lines": lines, "header": header}
        )
        result = validate_document(document)
        assert not result.is_valid
        assert result.errors == [
            "Le numéro du document est obligatoire",
            "Fournisseur : numéro de TVA obligatoire",
            "Ligne 1 : code unité inconnu 'ZZZ'",
        ]

    def test_reconciliation_is_a_warning(self, invoice_document: InvoiceDocument) -> None:
        totals = invoice_document.monetary_totals.model_copy(
            update={"tax_inclusive_amount": Decimal("420.00")}
        )
        result = validate_document(
            invoice_document.model_copy(update={"monetary_totals": totals})
        )
        assert result.is_valid
        assert result.warnings[0].startswith("[BR-CO-15]")
        assert result.reconciliation.rules_failed == ["BR-CO-15", "BR-CO-16"]

    def test_raw_mapping(self, invoice_document: InvoiceDocument) -> None:
        result = validate_document(invoice_document.model_dump(mode="json"))
        assert result.is_valid

    def test_structural_errors_do_not_raise(self) -> None:
        result = validate_document({"header": {"number": "INV-1"}})
        assert not result.is_valid
        assert any(e.startswith("header.issue_date") for e in result.errors)
        assert any(e.startswith("lines") for e in result.errors)
        assert result.reconciliation is None

    def test_to_dict_includes_corrections(
        self, invoice_document: InvoiceDocument
    ) -> None:
        data = validate_document(invoice_document).to_dict()
        assert data["is_valid"] is True
        assert data["corrections"]["payable_amount"] == "423.50"
        assert data["corrections"]["line_amounts"] == {"1": "200.00", "2": "150.00"}


class TestDocumentValidationResult:
    """Tests des constructeurs du résultat."""

    def test_success(self) -> None:
        result = DocumentValidationResult.success()
        assert result.is_valid
        assert "corrections" not in result.to_dict()

    def test_from_invalid_argument(self) -> None:
        exc = InvalidArgumentError("Validation en échec", ["a", "b"])
        result = DocumentValidationResult.from_exception(exc)
        assert not result.is_valid
        assert result.errors == ["a", "b"]

    def test_from_other_exception(self) -> None:
        result = DocumentValidationResult.from_exception(RuntimeError("boom"))
        assert result.errors == ["boom"]
