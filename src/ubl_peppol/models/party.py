"""Modèles pour les parties (fournisseur, client), adresses et contacts.

FR: Représentation des entités impliquées dans un document UBL : point de
    terminaison PEPPOL, identifiants, adresse postale, TVA et contact.
EN: Representation of entities involved in a UBL document: PEPPOL
    endpoint, identifiers, postal address, VAT and contact.
"""

from pydantic import BaseModel, Field


class Address(BaseModel):
    """Adresse postale.

    FR: Le pays est toujours le dernier enfant de PostalAddress en UBL.
    EN: The country is always the last child of PostalAddress in UBL.
    """

    street: str = Field(..., description="Rue et numéro / Street and number")
    additional_street: str | None = Field(
        default=None,
        description="Complément d'adresse / Additional street info",
    )
    city: str = Field(..., description="Ville / City")
    postal_code: str = Field(..., description="Code postal / Postal code")
    country_code: str = Field(
        ...,
        description="Code pays ISO 3166-1 alpha-2 / Country code",
    )


class Contact(BaseModel):
    """Contact d'une partie (bloc omis si tous les champs sont vides)."""

    name: str | None = Field(default=None, description="Nom / Contact name")
    phone: str | None = Field(default=None, description="Téléphone / Phone")
    email: str | None = Field(default=None, description="Email / Email address")

    @property
    def is_empty(self) -> bool:
        return not any(
            (value or "").strip() for value in (self.name, self.phone, self.email)
        )


class Party(BaseModel):
    """Partie impliquée dans un document (fournisseur ou client).

    FR: Regroupe l'identifiant de point de terminaison PEPPOL (EndpointID),
        l'identifiant interne, la raison sociale, l'adresse, le numéro de
        TVA et l'identifiant légal (KVK, KBO, SIREN...).
    EN: Holds the PEPPOL endpoint identifier, internal id, legal name,
        address, VAT number and legal identifier (KVK, KBO, SIREN...).
    """

    endpoint_id: str = Field(..., description="Identifiant PEPPOL / Endpoint ID")
    endpoint_scheme: str = Field(
        ...,
        description="Schéma EAS de l'endpoint (ex. 0106, 0208) / Endpoint scheme",
    )
    party_id: str = Field(..., description="Identifiant interne / Party ID")
    name: str = Field(..., description="Raison sociale / Legal name")
    address: Address = Field(..., description="Adresse postale / Postal address")
    vat_number: str | None = Field(
        default=None,
        description="Numéro de TVA / VAT identification number",
    )
    legal_id: str | None = Field(
        default=None,
        description="Identifiant d'enregistrement légal / Legal registration ID",
    )
    legal_id_scheme: str | None = Field(
        default=None,
        description="Schéma ICD de l'identifiant légal (0106, 0208, 0002...)",
    )
    tax_scheme_id: str = Field(default="VAT", description="Schéma fiscal / Tax scheme")
    contact: Contact | None = Field(default=None, description="Contact")
