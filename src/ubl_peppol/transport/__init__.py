"""Envoi des documents générés vers un point d'accès PEPPOL."""

from ubl_peppol.transport.base import BaseTransport
from ubl_peppol.transport.errors import (
    TransportError,
    TransportNotFoundError,
)
from ubl_peppol.transport.models import DeliveryLog

__all__ = [
    "BaseTransport",
    "DeliveryLog",
    "TransportError",
    "TransportNotFoundError",
]
