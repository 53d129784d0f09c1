"""Configuration du paquet via variables d'environnement.

FR: Paramètres UBL_PEPPOL_* lus par pydantic-settings, avec valeurs par
    défaut typées, et chargeur du registre de listes de codes pour le
    mode strict.
EN: UBL_PEPPOL_* settings read through pydantic-settings, with typed
    defaults, and a code-list registry loader for strict mode.
"""

from __future__ import annotations

import logging

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ubl_peppol.codelists.registry import CodelistRegistry
from ubl_peppol.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Paramètres du paquet, surchargeables par UBL_PEPPOL_<NOM>."""

    model_config = SettingsConfigDict(
        env_prefix="UBL_PEPPOL_",
        env_ignore_empty=True,
        extra="ignore",
    )

    profile: str = "PEPPOL"
    currency: str = Field(default="EUR", min_length=3, max_length=3)
    payment_term_days: int = Field(default=30, ge=0)
    codelists_path: str | None = None
    log_retention_days: int = Field(default=60, ge=0)


def get_settings() -> Settings:
    """Lit les paramètres depuis l'environnement.

    Raises:
        InvalidArgumentError: Si une variable UBL_PEPPOL_* est invalide.
    """
    try:
        return Settings()
    except ValidationError as exc:
        errors = [
            f"UBL_PEPPOL_{str(err['loc'][0]).upper()} : {err['msg']}"
            for err in exc.errors()
        ]
        msg = "Configuration UBL_PEPPOL invalide"
        raise InvalidArgumentError(msg, errors) from exc


def get_setting(name: str) -> object:
    """Retourne la valeur d'un paramètre UBL_PEPPOL.

    FR: ``name`` est le nom sans préfixe (ex. ``PAYMENT_TERM_DAYS``).
    EN: ``name`` is the unprefixed name (e.g. ``PAYMENT_TERM_DAYS``).
    """
    field = name.lower()
    if field not in Settings.model_fields:
        msg = f"Paramètre UBL_PEPPOL inconnu : {name}"
        raise KeyError(msg)
    return getattr(get_settings(), field)


def get_codelist_registry() -> CodelistRegistry | None:
    """Charge le registre externe de listes de codes (mode strict).

    Returns:
        Le registre chargé depuis CODELISTS_PATH, ou None si non configuré.
    """
    path = get_setting("CODELISTS_PATH")
    if not path:
        return None
    logger.debug("Chargement des listes de codes depuis %s", path)
    return CodelistRegistry.from_json_file(str(path))
