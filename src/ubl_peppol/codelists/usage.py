"""Accumulateur des codes utilisés par un document.

FR: Relève les codes (devises, schémas, unités, catégories...) employés
    pendant l'assemblage d'un seul document, pour le contrôle strict
    contre un registre externe.
EN: Records the codes (currencies, schemes, units, categories...) used
    while assembling a single document, for strict checking against an
    external registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ubl_peppol.codelists.registry import CodelistRegistry, normalize_code

# Attribut de CodeUsage -> nom de la liste dans le registre
USAGE_LISTS: dict[str, str] = {
    "currencies": "currency",
    "endpoint_schemes": "eas",
    "legal_schemes": "icd",
    "payment_means_codes": "payment_means",
    "unit_codes": "unit",
    "tax_categories": "tax_category",
}


@dataclass
class CodeUsage:
    """Codes relevés pour un document."""

    currencies: set[str] = field(default_factory=set)
    endpoint_schemes: set[str] = field(default_factory=set)
    legal_schemes: set[str] = field(default_factory=set)
    payment_means_codes: set[str] = field(default_factory=set)
    unit_codes: set[str] = field(default_factory=set)
    tax_categories: set[str] = field(default_factory=set)

    def record(self, kind: str, code: object) -> None:
        """Enregistre un code (ignoré s'il est vide)."""
        if kind not in USAGE_LISTS:
            msg = f"Type de code inconnu : {kind}"
            raise KeyError(msg)
        if code is None or str(code).strip() == "":
            return
        getattr(self, kind).add(normalize_code(code))

    def check(self, registry: CodelistRegistry) -> list[str]:
        """Contrôle les codes relevés contre les listes chargées du registre.

        Returns:
            La liste des codes inconnus, vide si tout est conforme.
        """
        errors: list[str] = []
        for kind, list_name in USAGE_LISTS.items():
            if not registry.is_loaded(list_name):
                continue
            for code in sorted(getattr(self, kind)):
                if not registry.has(list_name, code):
                    errors.append(
                        f"Code '{code}' absent de la liste '{list_name}' ({kind})"
                    )
        return errors
