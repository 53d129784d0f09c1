"""Modèles de journalisation des envois.

FR: Une entrée de journal par document envoyé, indexée par l'identifiant
    de facture fourni par l'appelant.
EN: One log entry per sent document, keyed by the caller's invoice id.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from ubl_peppol.models.enums import DeliveryStatus


class DeliveryLog(BaseModel):
    """Journal d'envoi d'un document vers un point d'accès."""

    log_id: str
    invoice_id: str = Field(..., description="Identifiant de la facture côté appelant")
    invoice_number: str = Field(..., description="Numéro de la facture")
    status: DeliveryStatus = DeliveryStatus.PENDING
    created_at: datetime
    sent_at: datetime | None = None
    http_status_code: int | None = None
    message: str | None = None
    error: str | None = None
    response: dict | None = None
