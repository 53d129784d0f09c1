"""Fixtures pour les tests du connecteur d'envoi en mémoire."""

from datetime import datetime, timezone

import pytest

from ubl_peppol.generators import UBLGenerator
from ubl_peppol.models import InvoiceDocument
from ubl_peppol.transport.connectors.memory import MemoryTransport


class FakeClock:
    """Horloge manipulable pour les tests de purge."""

    def __init__(self) -> None:
        self.now = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_transport(clock: FakeClock) -> MemoryTransport:
    return MemoryTransport(clock=clock)


@pytest.fixture
def invoice_xml(invoice_document: InvoiceDocument) -> str:
    return UBLGenerator().generate(invoice_document).xml
