"""Validation du format des numéros de TVA intracommunautaire.

FR: Contrôle de format uniquement (préfixe pays autorisé, reste
    alphanumérique) ; la vérification auprès de VIES est hors périmètre.
EN: Format-only check (allowed country prefix, alphanumeric remainder);
    VIES verification is out of scope.
"""

import re

from ubl_peppol.codelists.registry import CodelistRegistry, lookup

_REMAINDER_RE = re.compile(r"^[A-Za-z0-9]+$")


def vat_number_errors(
    vat_number: str, registry: CodelistRegistry | None = None
) -> list[str]:
    """Retourne les erreurs de format d'un numéro de TVA.

    Args:
        vat_number: Le numéro complet, préfixe pays inclus (ex. BE0681845662).
        registry: Registre externe optionnel (liste ``vat_country``).

    Returns:
        La liste des erreurs, vide si le format est valide.
    """
    vat_number = vat_number or ""
    if len(vat_number) < 3:
        return [f"Numéro de TVA trop court : '{vat_number}'"]
    errors: list[str] = []
    prefix, remainder = vat_number[:2].upper(), vat_number[2:]
    if not lookup(registry, "vat_country", prefix):
        errors.append(
            f"Préfixe pays de TVA non autorisé : '{prefix}' (numéro '{vat_number}')"
        )
    if not _REMAINDER_RE.match(remainder):
        errors.append(
            f"Le numéro de TVA '{vat_number}' doit être alphanumérique, sans espace"
        )
    return errors


def is_valid_vat_number(vat_number: str) -> bool:
    """Indique si le numéro de TVA a un format valide."""
    return not vat_number_errors(vat_number)
