"""Interface abstraite pour l'envoi des documents générés.

FR: Le cœur remet un XML finalisé et un identifiant de facture ; le
    connecteur d'envoi renvoie une entrée de journal. Le cœur ne dépend
    d'aucun détail de transport (HTTP, authentification, reprises).
EN: The core hands over a finished XML and an invoice id; the sender
    connector returns a log entry. The core depends on no transport
    detail (HTTP, auth, retries).
"""

from abc import ABCMeta, abstractmethod

from ubl_peppol.models.enums import DeliveryStatus
from ubl_peppol.transport.models import DeliveryLog


class BaseTransport(metaclass=ABCMeta):
    """Classe de base abstraite pour les connecteurs d'envoi.

    FR: Les connecteurs concrets (point d'accès HTTP, mémoire) héritent de
        cette classe.
    EN: Concrete connectors (HTTP access point, memory) inherit from this
        class.
    """

    def __init__(self, url: str | None = None) -> None:
        self.url = url

    @abstractmethod
    async def send(
        self,
        invoice_id: str,
        invoice_number: str,
        xml: str | bytes,
    ) -> DeliveryLog:
        """Envoie un document UBL.

        Args:
            invoice_id: Identifiant de la facture côté appelant.
            invoice_number: Numéro de la facture.
            xml: Le document UBL sérialisé.

        Returns:
            L'entrée de journal, statut success ou error.
        """
        ...

    @abstractmethod
    async def get_log(self, log_id: str) -> DeliveryLog:
        """Récupère une entrée de journal.

        Raises:
            TransportNotFoundError: Si l'entrée n'existe pas.
        """
        ...

    @abstractmethod
    async def list_logs(
        self,
        invoice_id: str | None = None,
        status: DeliveryStatus | None = None,
    ) -> list[DeliveryLog]:
        """Liste les entrées de journal, filtrées par facture et/ou statut."""
        ...

    @abstractmethod
    async def purge_logs(self, older_than_days: int | None = None) -> int:
        """Supprime les entrées plus anciennes que la durée de rétention.

        Returns:
            Le nombre d'entrées supprimées.
        """
        ...
