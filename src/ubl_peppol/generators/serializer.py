"""Sérialisation XML des documents UBL 2.1.

FR: Crée l'élément racine avec un espace de noms par défaut (Invoice-2 ou
    CreditNote-2) et les préfixes ``cac`` / ``cbc`` déclarés une seule fois,
    puis produit un XML UTF-8 indenté et déterministe.
EN: Creates the root element with a default namespace (Invoice-2 or
    CreditNote-2) and the ``cac`` / ``cbc`` prefixes declared once, then
    renders deterministic, pretty-printed UTF-8 XML.
"""

from lxml import etree

from ubl_peppol.models.enums import DocumentKind

# --- Namespaces UBL 2.1 ---
INV_NS = "urn:oasis:names:specification:ubl:schema:xsd:Invoice-2"
CN_NS = "urn:oasis:names:specification:ubl:schema:xsd:CreditNote-2"
CAC = "urn:oasis:names:specification:ubl:schema:xsd:CommonAggregateComponents-2"
CBC = "urn:oasis:names:specification:ubl:schema:xsd:CommonBasicComponents-2"

ROOT_NAMESPACES = {
    DocumentKind.INVOICE: INV_NS,
    DocumentKind.CREDIT_NOTE: CN_NS,
}


class XmlSerializer:
    """Création de la racine et rendu du document."""

    @staticmethod
    def new_root(kind: DocumentKind) -> etree._Element:
        """Construit l'élément racine Invoice ou CreditNote."""
        namespace = ROOT_NAMESPACES[kind]
        nsmap = {None: namespace, "cac": CAC, "cbc": CBC}
        return etree.Element(f"{{{namespace}}}{kind}", nsmap=nsmap)

    @staticmethod
    def to_bytes(root: etree._Element) -> bytes:
        """Rend l'arbre en XML UTF-8 avec déclaration."""
        return etree.tostring(
            root,
            xml_declaration=True,
            encoding="UTF-8",
            pretty_print=True,
        )

    @classmethod
    def serialize(cls, root: etree._Element) -> str:
        """Rend l'arbre en chaîne XML (contenu UTF-8 décodé)."""
        return cls.to_bytes(root).decode("utf-8")
