"""Générateurs de documents UBL 2.1 (Invoice / CreditNote)."""

from ubl_peppol.generators.base import GenerationResult
from ubl_peppol.generators.builder import PROFILE_URNS, DocumentBuilder, SignCorrection
from ubl_peppol.generators.serializer import CAC, CBC, CN_NS, INV_NS, XmlSerializer
from ubl_peppol.generators.ubl import UBLGenerator

__all__ = [
    "CAC",
    "CBC",
    "CN_NS",
    "INV_NS",
    "PROFILE_URNS",
    "DocumentBuilder",
    "GenerationResult",
    "SignCorrection",
    "UBLGenerator",
    "XmlSerializer",
]
