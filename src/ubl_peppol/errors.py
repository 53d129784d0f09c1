"""Hiérarchie d'exceptions pour l'assemblage des documents UBL.

FR: Exceptions typées levées par le constructeur de documents :
    double initialisation, section ajoutée avant création, argument
    invalide (toutes les violations sont listées), référence de
    facturation manquante (BR-55) et écart de rapprochement des montants.
EN: Typed exceptions raised by the document builder: double
    initialization, section added before creation, invalid argument
    (every violation is listed), missing billing reference (BR-55)
    and amount reconciliation mismatch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ubl_peppol.reconciliation.models import ReconciliationResult

BR55_REFERENCE_URL = "https://docs.peppol.eu/poacc/billing/3.0/rules/ubl-tc434/BR-55/"


class UBLError(Exception):
    """Erreur de base pour toutes les opérations UBL.

    FR: Classe parente de toutes les exceptions du paquet.
    EN: Base class for all package exceptions.
    """


class DoubleInitializationError(UBLError):
    """Document déjà créé sur ce constructeur.

    FR: ``create()`` a déjà été appelé ; un nouveau constructeur est requis.
    EN: ``create()`` was already called; a new builder is required.
    """


class NotInitializedError(UBLError):
    """Section ajoutée avant la création du document.

    FR: Erreur de programmation : ``create()`` doit être appelé d'abord.
    EN: Programming error: ``create()`` must be called first.
    """


class InvalidArgumentError(UBLError, ValueError):
    """Une ou plusieurs valeurs fournies sont invalides.

    FR: Le message énumère toutes les contraintes violées lors de l'appel,
        la liste brute reste disponible dans ``errors``.
    EN: The message enumerates every violated constraint of the call,
        the raw list is available in ``errors``.
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors: list[str] = errors or []
        if self.errors:
            message = message + "\n" + "\n".join(f"- {e}" for e in self.errors)
        super().__init__(message)


class InvalidHeaderError(InvalidArgumentError):
    """En-tête de document invalide (numéro, dates)."""


class ElementOrderError(UBLError):
    """Élément ajouté hors de la séquence imposée par le schéma UBL."""


class MissingBillingReferenceError(UBLError):
    """Avoir sérialisé sans référence à la facture d'origine (BR-55).

    FR: Porte un texte de remédiation (``hint``) et un lien vers la règle.
    EN: Carries a remediation text (``hint``) and a link to the rule.
    """

    def __init__(self) -> None:
        self.hint = (
            "Appelez add_billing_reference(invoice_id, issue_date) avant build()."
        )
        self.reference_url = BR55_REFERENCE_URL
        msg = (
            "[BR-55] Un avoir (CreditNote) doit contenir une BillingReference "
            "vers la facture d'origine.\n"
            f"Solution : {self.hint}\n"
            f"Référence : {self.reference_url}"
        )
        super().__init__(msg)


class ReconciliationError(UBLError):
    """Les montants du document ne se rapprochent pas (EN16931 BR-CO-*).

    FR: Levée uniquement lorsque l'appelant exige un document équilibré ;
        ``result`` contient les écarts et les corrections proposées.
    EN: Raised only when the caller requires a balanced document;
        ``result`` holds the mismatches and suggested corrections.
    """

    def __init__(self, result: ReconciliationResult) -> None:
        self.result = result
        details = "\n".join(f"- {issue}" for issue in result.errors)
        msg = f"Rapprochement des montants en échec :\n{details}"
        super().__init__(msg)
