"""Résultat de la génération d'un document UBL."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ubl_peppol.models.enums import DocumentKind, UBLProfile

if TYPE_CHECKING:
    from ubl_peppol.generators.builder import SignCorrection
    from ubl_peppol.reconciliation.models import ReconciliationResult


class GenerationResult:
    """Résultat de la génération d'un document.

    FR: Contient le XML généré, le rapprochement des montants (non
        bloquant) et les corrections de signe appliquées aux lignes d'avoir.
    EN: Contains the generated XML, the (non-blocking) amount
        reconciliation and the sign corrections applied to credit lines.
    """

    def __init__(
        self,
        xml: str,
        kind: DocumentKind,
        profile: UBLProfile,
        reconciliation: ReconciliationResult | None = None,
        sign_corrections: list[SignCorrection] | None = None,
    ) -> None:
        self.xml = xml
        self.kind = kind
        self.profile = profile
        self.reconciliation = reconciliation
        self.sign_corrections = sign_corrections or []

    @property
    def xml_bytes(self) -> bytes:
        return self.xml.encode("utf-8")

    @property
    def is_balanced(self) -> bool:
        """True si aucun écart de montant n'a été détecté."""
        return self.reconciliation is None or self.reconciliation.valid

    def save(self, path: str) -> None:
        """Sauvegarde le XML dans un fichier."""
        with open(path, "wb") as f:
            f.write(self.xml_bytes)
