"""Tests unitaires des listes de codes, du registre et du relevé d'usage."""

import json
from pathlib import Path

import pytest

from ubl_peppol.codelists import (
    DEFAULT_REGISTRY,
    CodelistRegistry,
    CodeUsage,
    lookup,
)
from ubl_peppol.codelists.tables import (
    CLASSIFICATION_SCHEMES,
    COUNTRY_CODES,
    UNIT_CODES,
    VAT_COUNTRY_PREFIXES,
)


class TestTables:
    """Tests des tables intégrées."""

    def test_tables_are_read_only(self) -> None:
        with pytest.raises(TypeError):
            UNIT_CODES["NEW"] = "new unit"  # type: ignore[index]

    def test_common_units(self) -> None:
        for code in ("C62", "HUR", "KGM", "EA", "DAY"):
            assert code in UNIT_CODES

    def test_classification_schemes(self) -> None:
        assert {"STD", "SRV", "CPV", "HS"} <= CLASSIFICATION_SCHEMES

    def test_special_country_codes(self) -> None:
        assert {"1A", "EL", "XI"} <= COUNTRY_CODES

    def test_vat_prefixes(self) -> None:
        assert "EL" in VAT_COUNTRY_PREFIXES
        assert "GR" not in VAT_COUNTRY_PREFIXES
        assert "US" not in VAT_COUNTRY_PREFIXES


class TestCodelistRegistry:
    """Tests du registre de listes de codes."""

    def test_builtin_registry(self) -> None:
        assert DEFAULT_REGISTRY.has("unit", " c62 ")
        assert DEFAULT_REGISTRY.has("tax_category", "ae")
        assert not DEFAULT_REGISTRY.has("unit", "ZZZ")
        assert DEFAULT_REGISTRY.list_names == [
            "classification",
            "country",
            "tax_category",
            "unit",
            "vat_country",
        ]

    def test_missing_list(self) -> None:
        registry = CodelistRegistry({"currency": ["EUR"]})
        assert registry.is_loaded("currency")
        assert not registry.is_loaded("unit")
        assert not registry.has("unit", "C62")

    def test_lookup_fallback(self) -> None:
        registry = CodelistRegistry({"unit": ["C62"]})
        assert lookup(registry, "unit", "C62")
        assert not lookup(registry, "unit", "HUR")
        assert lookup(registry, "country", "BE")
        assert lookup(None, "unit", "HUR")

    def test_from_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "codelists.json"
        path.write_text(json.dumps({"currency": ["eur", "USD"], "eas": ["0208"]}))
        registry = CodelistRegistry.from_json_file(path)
        assert registry.has("currency", "EUR")
        assert registry.list_names == ["currency", "eas"]

    def test_from_json_file_invalid(self, tmp_path: Path) -> None:
        path = tmp_path / "codelists.json"
        path.write_text(json.dumps({"currency": "EUR"}))
        with pytest.raises(ValueError, match="invalide"):
            CodelistRegistry.from_json_file(path)


class TestCodeUsage:
    """Tests du relevé des codes utilisés."""

    def test_record(self) -> None:
        usage = CodeUsage()
        usage.record("currencies", " eur ")
        usage.record("currencies", "")
        usage.record("unit_codes", None)
        assert usage.currencies == {"EUR"}
        assert usage.unit_codes == set()

    def test_record_unknown_kind(self) -> None:
        with pytest.raises(KeyError):
            CodeUsage().record("colors", "red")

    def test_check(self) -> None:
        usage = CodeUsage()
        usage.record("currencies", "EUR")
        usage.record("currencies", "XBT")
        usage.record("endpoint_schemes", "0208")
        usage.record("unit_codes", "C62")
        registry = CodelistRegistry({"currency": ["EUR"], "eas": ["0106"]})
        assert usage.check(registry) == [
            "Code 'XBT' absent de la liste 'currency' (currencies)",
            "Code '0208' absent de la liste 'eas' (endpoint_schemes)",
        ]

    def test_check_all_known(self) -> None:
        usage = CodeUsage()
        usage.record("tax_categories", "S")
        assert usage.check(DEFAULT_REGISTRY) == []
