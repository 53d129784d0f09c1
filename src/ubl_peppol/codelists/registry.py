"""Registre de listes de codes interrogeable par ``has(list, code)``.

FR: Le registre intégré s'appuie sur les tables statiques ; un registre
    externe (chargé depuis un fichier JSON) peut le remplacer en mode strict
    avec la même interface.
EN: The built-in registry uses the static tables; an external registry
    (loaded from a JSON file) can replace it in strict mode through the
    same interface.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from ubl_peppol.codelists.tables import BUILTIN_LISTS

logger = logging.getLogger(__name__)


def normalize_code(code: object) -> str:
    """Normalise un code (espaces retirés, majuscules)."""
    return str(code).strip().upper()


class CodelistRegistry:
    """Ensemble nommé de listes de codes.

    FR: Chaque liste est un ensemble de codes normalisés. Une liste absente
        n'est pas « chargée » et ``has`` y répond toujours False.
    EN: Each list is a set of normalized codes. A missing list is not
        "loaded" and ``has`` always answers False for it.
    """

    def __init__(self, lists: Mapping[str, Iterable[object]] | None = None) -> None:
        self._lists: dict[str, frozenset[str]] = {
            name: frozenset(normalize_code(c) for c in codes)
            for name, codes in (lists or {}).items()
        }

    @classmethod
    def from_json_file(cls, path: str | Path) -> CodelistRegistry:
        """Charge un registre depuis un fichier ``{"liste": ["code", ...]}``.

        Raises:
            ValueError: Si le contenu n'est pas un objet JSON de listes.
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict) or not all(
            isinstance(v, list) for v in data.values()
        ):
            msg = f"Fichier de listes de codes invalide : {path}"
            raise ValueError(msg)
        logger.info("Listes de codes chargées depuis %s : %s", path, ", ".join(data))
        return cls(data)

    def is_loaded(self, list_name: str) -> bool:
        """Indique si la liste est présente dans le registre."""
        return list_name in self._lists

    def has(self, list_name: str, code: object) -> bool:
        """Indique si le code appartient à la liste."""
        codes = self._lists.get(list_name)
        if codes is None:
            return False
        return normalize_code(code) in codes

    @property
    def list_names(self) -> list[str]:
        return sorted(self._lists)


DEFAULT_REGISTRY = CodelistRegistry(BUILTIN_LISTS)


def lookup(registry: CodelistRegistry | None, list_name: str, code: object) -> bool:
    """Cherche un code dans le registre actif, sinon dans le registre intégré.

    FR: Les listes que le registre externe ne fournit pas retombent sur
        les tables intégrées.
    EN: Lists the external registry does not provide fall back to the
        built-in tables.
    """
    if registry is not None and registry.is_loaded(list_name):
        return registry.has(list_name, code)
    return DEFAULT_REGISTRY.has(list_name, code)
