"""Contrôles métier des sections d'un document UBL.

FR: Chaque fonction ``check_*`` retourne la liste complète des violations
    d'une section (chaîne vide, format, liste de codes, ordre des dates)
    sans lever d'exception ; le constructeur les transforme en
    ``InvalidArgumentError`` et la validation préalable les agrège.
EN: Each ``check_*`` function returns the full list of violations of a
    section (blank string, format, code list, date ordering) without
    raising; the builder turns them into ``InvalidArgumentError`` and the
    pre-flight validation aggregates them.
"""

import re
from datetime import date, datetime

from ubl_peppol.codelists.registry import CodelistRegistry, lookup
from ubl_peppol.models.document import (
    AllowanceCharge,
    Delivery,
    Header,
    InvoiceLine,
    MonetaryTotals,
    PaymentMeans,
    PaymentTerms,
    TaxSubtotal,
)
from ubl_peppol.models.enums import DocumentKind
from ubl_peppol.models.party import Address, Party
from ubl_peppol.validators.iban import is_valid_bic, is_valid_iban
from ubl_peppol.validators.registration import (
    ICD_SCHEMES,
    validate_registration_number,
)
from ubl_peppol.validators.vat import vat_number_errors

MAX_DOCUMENT_NUMBER_LENGTH = 35

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PHONE_RE = re.compile(r"^[+0-9\s\-\(\)]{6,20}$")
_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


def _blank(value: object) -> bool:
    return value is None or str(value).strip() == ""


def parse_date(value: date | str | None) -> date | None:
    """Convertit une date ou une chaîne YYYY-MM-DD, None si invalide."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value.strip()):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def check_currency(code: str | None, label: str = "Devise") -> list[str]:
    if _blank(code) or not _CURRENCY_RE.match(str(code).strip().upper()):
        return [f"{label} invalide : '{code}' (3 lettres ISO 4217 attendues)"]
    return []


def check_header(header: Header, today: date | None = None) -> list[str]:
    """Contrôle numéro, date d'émission et date d'échéance.

    FR: L'échéance est optionnelle pour tout type de document ; absente,
        elle est complétée à l'assemblage.
    EN: The due date is optional for every document kind; when absent the
        builder fills it in.

    Args:
        header: L'en-tête à contrôler.
        today: Date de référence (défaut : aujourd'hui).

    Returns:
        Toutes les violations détectées, pas seulement la première.
    """
    today = today or date.today()
    errors: list[str] = []
    number = (header.number or "").strip()
    if not number:
        errors.append("Le numéro du document est obligatoire")
    elif len(number) > MAX_DOCUMENT_NUMBER_LENGTH:
        errors.append(
            f"Le numéro du document ne peut dépasser "
            f"{MAX_DOCUMENT_NUMBER_LENGTH} caractères ({len(number)})"
        )

    issue = parse_date(header.issue_date)
    if issue is None:
        errors.append(
            f"Date d'émission invalide : '{header.issue_date}' (format YYYY-MM-DD)"
        )
    elif issue > today:
        errors.append(f"La date d'émission {issue} ne peut être dans le futur")

    if not _blank(header.due_date):
        due = parse_date(header.due_date)
        if due is None:
            errors.append(
                f"Date d'échéance invalide : '{header.due_date}' (format YYYY-MM-DD)"
            )
        elif issue is not None and due <= issue:
            errors.append(
                f"La date d'échéance {due} doit être postérieure "
                f"à la date d'émission {issue}"
            )

    errors.extend(check_currency(header.currency, "Devise du document"))
    return errors


def check_address(
    address: Address, label: str, registry: CodelistRegistry | None = None
) -> list[str]:
    errors: list[str] = []
    for field, text in (
        ("street", "rue"),
        ("city", "ville"),
        ("postal_code", "code postal"),
    ):
        if _blank(getattr(address, field)):
            errors.append(f"{label} : {text} obligatoire")
    country = (address.country_code or "").strip()
    if len(country) != 2:
        errors.append(f"{label} : le code pays doit comporter 2 lettres ('{country}')")
    elif not lookup(registry, "country", country):
        errors.append(f"{label} : code pays ISO 3166-1 inconnu '{country}'")
    return errors


def check_party(
    party: Party,
    label: str,
    registry: CodelistRegistry | None = None,
    require_vat: bool = False,
) -> list[str]:
    """Contrôle une partie (fournisseur ou client).

    FR: Champs obligatoires, pays, TVA, email, téléphone et identifiant
        légal lorsque son schéma ICD correspond à un registre national.
    EN: Required fields, country, VAT, email, phone and legal id when its
        ICD scheme maps to a national register.
    """
    errors: list[str] = []
    for field, text in (
        ("endpoint_id", "identifiant d'endpoint"),
        ("endpoint_scheme", "schéma d'endpoint"),
        ("party_id", "identifiant de partie"),
        ("name", "raison sociale"),
    ):
        if _blank(getattr(party, field)):
            errors.append(f"{label} : {text} obligatoire")
    errors.extend(check_address(party.address, label, registry))

    if _blank(party.vat_number):
        if require_vat:
            errors.append(f"{label} : numéro de TVA obligatoire")
    else:
        errors.extend(
            f"{label} : {e}" for e in vat_number_errors(party.vat_number, registry)
        )

    if not _blank(party.legal_id) and party.legal_id_scheme in ICD_SCHEMES:
        country, expected_kind = ICD_SCHEMES[party.legal_id_scheme]
        result = validate_registration_number(party.legal_id, country)
        if not result.valid:
            errors.append(f"{label} : identifiant légal invalide ({result.error})")
        elif expected_kind and result.kind != expected_kind:
            errors.append(
                f"{label} : l'identifiant légal '{party.legal_id}' n'est pas "
                f"un {expected_kind.upper()} (schéma {party.legal_id_scheme})"
            )

    if party.contact is not None:
        if not _blank(party.contact.email) and not _EMAIL_RE.match(
            party.contact.email.strip()
        ):
            errors.append(f"{label} : email invalide '{party.contact.email}'")
        if not _blank(party.contact.phone) and not _PHONE_RE.match(
            party.contact.phone.strip()
        ):
            errors.append(f"{label} : téléphone invalide '{party.contact.phone}'")
    return errors


def check_delivery(
    delivery: Delivery, registry: CodelistRegistry | None = None
) -> list[str]:
    errors: list[str] = []
    if all(
        _blank(v)
        for v in (
            delivery.delivery_date,
            delivery.location_id,
            delivery.address,
            delivery.party_name,
        )
    ):
        errors.append("La livraison ne contient aucune information")
    if not _blank(delivery.delivery_date) and parse_date(delivery.delivery_date) is None:
        errors.append(
            f"Date de livraison invalide : '{delivery.delivery_date}' (format YYYY-MM-DD)"
        )
    if delivery.address is not None:
        errors.extend(check_address(delivery.address, "Adresse de livraison", registry))
    return errors


def check_payment_means(means: PaymentMeans) -> list[str]:
    errors: list[str] = []
    code = (means.code or "").strip()
    if not code.isdigit():
        errors.append(f"Code de moyen de paiement non numérique : '{means.code}'")
    if not _blank(means.iban) and not is_valid_iban(means.iban):
        errors.append(f"IBAN invalide : '{means.iban}'")
    if not _blank(means.bic) and not is_valid_bic(means.bic):
        errors.append(f"BIC invalide : '{means.bic}'")
    return errors


def check_payment_terms(terms: PaymentTerms) -> list[str]:
    if _blank(terms.note):
        return ["Les conditions de paiement (note) sont obligatoires"]
    return []


def check_allowance_charge(
    allowance: AllowanceCharge, registry: CodelistRegistry | None = None
) -> list[str]:
    errors: list[str] = []
    if _blank(allowance.reason):
        errors.append("Le motif de la remise/du frais est obligatoire")
    if not lookup(registry, "tax_category", allowance.tax_category_id):
        errors.append(f"Catégorie de TVA inconnue : '{allowance.tax_category_id}'")
    errors.extend(check_currency(allowance.currency))
    return errors


def check_line(
    line: InvoiceLine,
    kind: DocumentKind = DocumentKind.INVOICE,
    registry: CodelistRegistry | None = None,
) -> list[str]:
    """Contrôle une ligne de facture ou d'avoir.

    FR: Le montant de ligne n'est obligatoire que pour une facture ; un
        avoir le calcule à partir de la quantité et du prix.
    EN: The line amount is only required for an invoice; a credit note
        computes it from quantity and price.
    """
    label = f"Ligne {line.id}"
    errors: list[str] = []
    for field, text in (
        ("id", "identifiant"),
        ("unit_code", "code unité"),
        ("description", "description"),
        ("name", "nom"),
        ("currency", "devise"),
    ):
        if _blank(getattr(line, field)):
            errors.append(f"{label} : {text} obligatoire")
    if kind is DocumentKind.INVOICE:
        if line.line_extension_amount is None:
            errors.append(f"{label} : montant de ligne obligatoire")
        if line.price_amount < 0:
            errors.append(f"{label} : le prix unitaire ne peut être négatif (BR-27)")
    if not _blank(line.unit_code) and not lookup(registry, "unit", line.unit_code):
        errors.append(f"{label} : code unité inconnu '{line.unit_code}'")
    if not _blank(line.classification_scheme) and not lookup(
        registry, "classification", line.classification_scheme
    ):
        errors.append(
            f"{label} : schéma de classification inconnu '{line.classification_scheme}'"
        )
    if not lookup(registry, "tax_category", line.tax_category_id):
        errors.append(f"{label} : catégorie de TVA inconnue '{line.tax_category_id}'")
    if not 0 <= line.tax_percent <= 100:
        errors.append(f"{label} : taux de TVA hors limites ({line.tax_percent})")
    if not _blank(line.origin_country) and not lookup(
        registry, "country", line.origin_country
    ):
        errors.append(f"{label} : pays d'origine inconnu '{line.origin_country}'")
    if not _blank(line.currency):
        errors.extend(f"{label} : {e}" for e in check_currency(line.currency))
    return errors


def check_tax_subtotals(
    subtotals: list[TaxSubtotal], registry: CodelistRegistry | None = None
) -> list[str]:
    if not subtotals:
        return ["Au moins un sous-total de TVA est obligatoire"]
    errors: list[str] = []
    for idx, subtotal in enumerate(subtotals, start=1):
        if _blank(subtotal.category_id):
            errors.append(f"Sous-total {idx} : catégorie de TVA obligatoire")
        elif not lookup(registry, "tax_category", subtotal.category_id):
            errors.append(
                f"Sous-total {idx} : catégorie de TVA inconnue '{subtotal.category_id}'"
            )
        if _blank(subtotal.scheme_id):
            errors.append(f"Sous-total {idx} : schéma fiscal obligatoire")
    currencies = {s.currency for s in subtotals}
    if len(currencies) > 1:
        errors.append(
            f"Les sous-totaux de TVA mélangent plusieurs devises : "
            f"{', '.join(sorted(currencies))}"
        )
    return errors


def check_monetary_totals(totals: MonetaryTotals) -> list[str]:
    return check_currency(totals.currency, "Devise des totaux")
