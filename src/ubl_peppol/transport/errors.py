"""Hiérarchie d'exceptions pour l'envoi vers un point d'accès PEPPOL.

FR: Exceptions typées levées par les connecteurs d'envoi.
EN: Typed exceptions raised by sender connectors.
"""


class TransportError(Exception):
    """Erreur de base pour toutes les opérations d'envoi."""


class TransportNotFoundError(TransportError):
    """Journal d'envoi introuvable."""
