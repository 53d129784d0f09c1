"""Validation IBAN (ISO 13616, mod 97) et BIC (ISO 9362)."""

import re

_IBAN_RE = re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z0-9]+$")
_BIC_RE = re.compile(r"^[A-Z]{6}[A-Z0-9]{2}([A-Z0-9]{3})?$")


def normalize_iban(iban: str) -> str:
    """Retire les espaces et passe en majuscules."""
    return re.sub(r"\s+", "", iban or "").upper()


def iban_to_int(iban: str) -> int:
    """Déplace les 4 premiers caractères en fin et convertit les lettres (A=10...Z=35)."""
    rearranged = iban[4:] + iban[:4]
    return int("".join(str(int(ch, 36)) for ch in rearranged))


def is_valid_iban(iban: str) -> bool:
    """Vérifie le format et la clé mod 97 d'un IBAN.

    Args:
        iban: L'IBAN, espaces tolérés.

    Returns:
        True si la longueur est comprise entre 15 et 34, le format
        conforme et le reste modulo 97 égal à 1.
    """
    iban = normalize_iban(iban)
    if not 15 <= len(iban) <= 34 or not _IBAN_RE.match(iban):
        return False
    return iban_to_int(iban) % 97 == 1


def is_valid_bic(bic: str) -> bool:
    """Vérifie le format d'un BIC (8 ou 11 caractères)."""
    return bool(_BIC_RE.match((bic or "").strip().upper()))
