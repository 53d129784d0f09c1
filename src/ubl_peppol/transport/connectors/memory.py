"""Connecteur d'envoi en mémoire pour les tests et le développement.

FR: Simule un point d'accès PEPPOL : le document est analysé (XML mal
    formé ou racine non UBL rejetés avec un statut error), stocké en
    mémoire et journalisé. Fournit la purge des journaux anciens.
EN: Simulates a PEPPOL access point: the document is parsed (malformed
    XML or non-UBL root rejected with an error status), stored in memory
    and logged. Provides purging of old logs.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from lxml import etree

from ubl_peppol.conf import get_settings
from ubl_peppol.generators.serializer import ROOT_NAMESPACES
from ubl_peppol.models.enums import DeliveryStatus
from ubl_peppol.transport.base import BaseTransport
from ubl_peppol.transport.errors import TransportNotFoundError
from ubl_peppol.transport.models import DeliveryLog

logger = logging.getLogger(__name__)

_UBL_ROOTS = {f"{{{ns}}}{kind}" for kind, ns in ROOT_NAMESPACES.items()}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemoryTransport(BaseTransport):
    """Point d'accès simulé en mémoire.

    FR: ``clock`` permet d'injecter l'heure courante (tests de purge).
    EN: ``clock`` allows injecting the current time (purge tests).
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        super().__init__(url="memory://")
        self._clock = clock or _utcnow
        self._logs: dict[str, DeliveryLog] = {}
        self._documents: dict[str, bytes] = {}
        self._counter: int = 0

    def _next_id(self) -> str:
        """Génère un identifiant séquentiel."""
        self._counter += 1
        return f"LOG-{self._counter:06d}"

    async def send(
        self,
        invoice_id: str,
        invoice_number: str,
        xml: str | bytes,
    ) -> DeliveryLog:
        xml_bytes = xml.encode("utf-8") if isinstance(xml, str) else xml
        log = DeliveryLog(
            log_id=self._next_id(),
            invoice_id=invoice_id,
            invoice_number=invoice_number,
            created_at=self._clock(),
        )
        self._logs[log.log_id] = log

        try:
            root = etree.fromstring(xml_bytes)
        except etree.XMLSyntaxError as exc:
            log.status = DeliveryStatus.ERROR
            log.http_status_code = 400
            log.error = f"XML mal formé : {exc}"
            logger.warning("Envoi %s rejeté : %s", invoice_number, log.error)
            return log

        if root.tag not in _UBL_ROOTS:
            log.status = DeliveryStatus.ERROR
            log.http_status_code = 422
            log.error = f"Racine non UBL : {etree.QName(root).localname}"
            logger.warning("Envoi %s rejeté : %s", invoice_number, log.error)
            return log

        self._documents[log.log_id] = xml_bytes
        log.status = DeliveryStatus.SUCCESS
        log.http_status_code = 200
        log.sent_at = self._clock()
        log.message = "Document accepté par le point d'accès"
        log.response = {
            "document_type": etree.QName(root).localname,
            "size": len(xml_bytes),
        }
        logger.info("Envoi %s réussi (%s)", invoice_number, log.log_id)
        return log

    async def get_log(self, log_id: str) -> DeliveryLog:
        log = self._logs.get(log_id)
        if log is None:
            msg = f"Journal d'envoi introuvable : {log_id}"
            raise TransportNotFoundError(msg)
        return log

    async def get_document(self, log_id: str) -> bytes:
        """Récupère le document accepté pour une entrée de journal."""
        document = self._documents.get(log_id)
        if document is None:
            msg = f"Aucun document accepté pour : {log_id}"
            raise TransportNotFoundError(msg)
        return document

    async def list_logs(
        self,
        invoice_id: str | None = None,
        status: DeliveryStatus | None = None,
    ) -> list[DeliveryLog]:
        return [
            log
            for log in self._logs.values()
            if (invoice_id is None or log.invoice_id == invoice_id)
            and (status is None or log.status == status)
        ]

    async def purge_logs(self, older_than_days: int | None = None) -> int:
        if older_than_days is None:
            older_than_days = get_settings().log_retention_days
        cutoff = self._clock() - timedelta(days=older_than_days)
        expired = [
            log_id for log_id, log in self._logs.items() if log.created_at < cutoff
        ]
        for log_id in expired:
            del self._logs[log_id]
            self._documents.pop(log_id, None)
        logger.info(
            "%d journal(aux) d'envoi de plus de %d jours supprimé(s)",
            len(expired),
            older_than_days,
        )
        return len(expired)
