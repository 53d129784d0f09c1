"""Constructeur incrémental de documents UBL 2.1 (Invoice / CreditNote).

FR: Assemble un seul arbre XML section par section. Chaque section racine
    est insérée à sa place dans la séquence du schéma, quel que soit l'ordre
    des appels ; les enfants des agrégats sont contrôlés contre leur
    séquence. Gère l'initialisation unique, les règles propres aux avoirs
    (BR-55, valeurs absolues) et le relevé des codes utilisés.
EN: Assembles a single XML tree section by section. Each root section is
    inserted at its slot in the schema sequence, whatever the call order;
    aggregate children are checked against their sequence. Handles
    one-time initialization, credit-note rules (BR-55, absolute values)
    and tracking of used codes.
"""

from __future__ import annotations

import bisect
import logging
from collections.abc import Mapping
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, NamedTuple, TypeVar

from lxml import etree
from pydantic import BaseModel, ValidationError

from ubl_peppol.codelists.registry import CodelistRegistry
from ubl_peppol.codelists.usage import CodeUsage
from ubl_peppol.conf import get_setting, get_settings
from ubl_peppol.errors import (
    DoubleInitializationError,
    ElementOrderError,
    InvalidArgumentError,
    InvalidHeaderError,
    MissingBillingReferenceError,
    NotInitializedError,
)
from ubl_peppol.generators.serializer import CAC, CBC, XmlSerializer
from ubl_peppol.models.document import (
    AllowanceCharge,
    BillingReference,
    Delivery,
    DocumentReference,
    Header,
    InvoiceLine,
    MonetaryTotals,
    PaymentMeans,
    PaymentTerms,
    TaxSubtotal,
)
from ubl_peppol.models.enums import DocumentKind, UBLProfile
from ubl_peppol.models.party import Address, Party
from ubl_peppol.models.sequence import (
    CHILD_SEQUENCES,
    HEADER_SEQUENCE,
    DocumentSection,
)
from ubl_peppol.reconciliation.reconciler import round_amount
from ubl_peppol.validators import fields

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

PEPPOL_BILLING_PROFILE = "urn:fdc:peppol.eu:2017:poacc:billing:01:1.0"

# --- URN des profils UBL ---
PROFILE_URNS: dict[UBLProfile, dict[str, str]] = {
    UBLProfile.PEPPOL: {
        "customization_id": (
            "urn:cen.eu:en16931:2017#compliant#"
            "urn:fdc:peppol.eu:2017:poacc:billing:3.0"
        ),
        "profile_id": PEPPOL_BILLING_PROFILE,
    },
    UBLProfile.NLCIUS: {
        "customization_id": (
            "urn:cen.eu:en16931:2017#compliant#urn:fdc:nen.nl:nlcius:v1.0"
        ),
        "profile_id": PEPPOL_BILLING_PROFILE,
    },
    UBLProfile.UBL_BE: {
        "customization_id": (
            "urn:cen.eu:en16931:2017#conformant#urn:UBL.BE:1.0.0.20180214"
        ),
        "profile_id": PEPPOL_BILLING_PROFILE,
    },
    UBLProfile.EN16931: {
        "customization_id": "urn:cen.eu:en16931:2017",
    },
}

DEFAULT_BUYER_REFERENCE = "BUYER_REF"


class SignCorrection(NamedTuple):
    """Valeur négative d'une ligne d'avoir ramenée en positif."""

    line_id: str
    field: str
    original: Decimal


def _qname(tag: str) -> str:
    prefix, _, local = tag.partition(":")
    namespace = CAC if prefix == "cac" else CBC
    return f"{{{namespace}}}{local}"


def _fmt_amount(amount: Decimal) -> str:
    """Formate un montant avec 2 décimales."""
    return str(round_amount(amount))


def _fmt_quantity(quantity: Decimal) -> str:
    """Formate une quantité avec au moins 2 décimales."""
    rounded = quantity.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if rounded == quantity:
        return str(rounded)
    return str(quantity.normalize())


def _fmt_date(d: date) -> str:
    """Formate une date au format ISO 8601 (YYYY-MM-DD)."""
    return d.strftime("%Y-%m-%d")


def _append(
    parent: etree._Element,
    tag: str,
    text: str | None = None,
    **attrib: str,
) -> etree._Element:
    """Ajoute un enfant en respectant la séquence du parent.

    Raises:
        ElementOrderError: Si l'élément précède, dans la séquence du schéma,
            le dernier enfant déjà présent, ou n'y figure pas.
    """
    qname = _qname(tag)
    parent_name = etree.QName(parent).localname
    sequence = CHILD_SEQUENCES.get(parent_name)
    if sequence is not None:
        local = etree.QName(qname).localname
        if local not in sequence:
            msg = f"Élément {local} non autorisé dans {parent_name}"
            raise ElementOrderError(msg)
        if len(parent):
            last = etree.QName(parent[-1]).localname
            if sequence.index(local) < sequence.index(last):
                msg = f"Élément {local} ajouté après {last} dans {parent_name}"
                raise ElementOrderError(msg)
    el = etree.SubElement(parent, qname, attrib)
    if text is not None:
        el.text = text
    return el


def coerce_model(
    model_cls: type[ModelT], data: ModelT | Mapping[str, Any], label: str
) -> ModelT:
    """Convertit un mapping en modèle typé, erreurs regroupées."""
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(p) for p in err['loc']) or label} : {err['msg']}"
            for err in exc.errors()
        ]
        msg = f"{label} invalide"
        raise InvalidArgumentError(msg, errors) from exc


class DocumentBuilder:
    """Constructeur d'un document UBL (une instance par document).

    FR: Non thread-safe ; chaque génération utilise son propre constructeur.
        ``build()`` peut être appelé plusieurs fois et produit un XML
        identique octet pour octet.
    EN: Not thread-safe; each generation uses its own builder. ``build()``
        may be called repeatedly and yields byte-identical XML.
    """

    def __init__(
        self,
        profile: UBLProfile | str | None = None,
        registry: CodelistRegistry | None = None,
    ) -> None:
        profile = profile or str(get_setting("PROFILE"))
        try:
            self.profile = UBLProfile(str(profile).upper())
        except ValueError:
            msg = (
                f"Profil inconnu : {profile}. "
                f"Profils disponibles : {', '.join(UBLProfile)}"
            )
            raise ValueError(msg) from None
        self.registry = registry
        self.usage = CodeUsage()
        self.sign_corrections: list[SignCorrection] = []
        self._kind: DocumentKind | None = None
        self._root: etree._Element | None = None
        self._sections: list[DocumentSection] = []
        self._currency: str | None = None

    # --- État ---

    @property
    def kind(self) -> DocumentKind | None:
        return self._kind

    @property
    def is_credit_note(self) -> bool:
        return self._kind is DocumentKind.CREDIT_NOTE

    @property
    def strict(self) -> bool:
        """Mode strict : un registre externe de codes a été fourni."""
        return self.registry is not None

    def create(self, kind: DocumentKind | str = DocumentKind.INVOICE) -> DocumentBuilder:
        """Crée l'élément racine du document.

        Raises:
            DoubleInitializationError: Si le document est déjà créé.
        """
        if self._root is not None:
            msg = (
                f"Le document est déjà initialisé ({self._kind}) ; "
                "utilisez un nouveau constructeur."
            )
            raise DoubleInitializationError(msg)
        self._kind = DocumentKind(kind)
        self._root = XmlSerializer.new_root(self._kind)
        logger.debug("Document %s créé (profil %s)", self._kind, self.profile)
        return self

    def _require_root(self) -> etree._Element:
        if self._root is None:
            msg = "Document non initialisé : appelez create() avant d'ajouter des sections."
            raise NotInitializedError(msg)
        return self._root

    def _has_section(self, section: DocumentSection) -> bool:
        return section in self._sections

    def _section_element(
        self,
        section: DocumentSection,
        tag: str,
        text: str | None = None,
        **attrib: str,
    ) -> etree._Element:
        """Crée un élément racine et le place à l'emplacement de sa section."""
        root = self._require_root()
        el = etree.SubElement(root, _qname(tag), attrib)
        if text is not None:
            el.text = text
        index = bisect.bisect_right(self._sections, section)
        root.insert(index, el)
        self._sections.insert(index, section)
        return el

    def _open_section(self, section: DocumentSection) -> None:
        self._require_root()
        if not section.repeatable and self._has_section(section):
            msg = f"La section {section.name} a déjà été ajoutée"
            raise InvalidArgumentError(msg)

    @staticmethod
    def _raise_if(errors: list[str], label: str) -> None:
        if errors:
            msg = f"Validation en échec : {label}"
            raise InvalidArgumentError(msg, errors)

    @property
    def currency(self) -> str:
        return self._currency or str(get_setting("CURRENCY"))

    # --- En-tête ---

    def add_header(
        self,
        number: str,
        issue_date: date | str,
        due_date: date | str | None = None,
        currency: str | None = None,
        accounting_cost: str | None = None,
        note: str | None = None,
    ) -> DocumentBuilder:
        """Ajoute l'en-tête (CustomizationID ... AccountingCost).

        Args:
            number: Numéro du document (35 caractères max).
            issue_date: Date d'émission, pas dans le futur.
            due_date: Échéance postérieure à l'émission ; par défaut
                émission + PAYMENT_TERM_DAYS jours. Non émise pour un avoir.
            currency: Devise du document.
            accounting_cost: Référence comptable de l'acheteur.
            note: Note libre.

        Raises:
            InvalidHeaderError: Avec toutes les violations détectées.
        """
        self._open_section(DocumentSection.HEADER)
        values: dict[str, Any] = {
            "number": number,
            "issue_date": issue_date,
            "due_date": due_date,
            "accounting_cost": accounting_cost,
            "note": note,
        }
        if currency is not None:
            values["currency"] = currency
        try:
            header = Header.model_validate(values)
        except ValidationError as exc:
            errors = [
                f"{'.'.join(str(p) for p in err['loc'])} : {err['msg']}"
                for err in exc.errors()
            ]
            msg = "Validation en échec : en-tête du document"
            raise InvalidHeaderError(msg, errors) from exc

        errors = fields.check_header(header)
        if errors:
            msg = "Validation en échec : en-tête du document"
            raise InvalidHeaderError(msg, errors)

        issue = fields.parse_date(header.issue_date)
        due = fields.parse_date(header.due_date) if header.due_date else None
        if due is None:
            due = issue + timedelta(days=get_settings().payment_term_days)

        self._currency = header.currency.strip().upper()
        self.usage.record("currencies", self._currency)

        profile_data = PROFILE_URNS[self.profile]
        type_tag = (
            "cbc:CreditNoteTypeCode" if self.is_credit_note else "cbc:InvoiceTypeCode"
        )
        values_by_tag = {
            "CustomizationID": profile_data["customization_id"],
            "ProfileID": profile_data.get("profile_id"),
            "ID": header.number.strip(),
            "IssueDate": _fmt_date(issue),
            # Pas de DueDate racine dans le schéma CreditNote-2
            "DueDate": None if self.is_credit_note else _fmt_date(due),
            type_tag.partition(":")[2]: self._kind.type_code,
            "Note": header.note,
            "DocumentCurrencyCode": self._currency,
            "AccountingCost": header.accounting_cost,
        }
        for tag in HEADER_SEQUENCE:
            value = values_by_tag.get(tag)
            if value:
                self._section_element(DocumentSection.HEADER, f"cbc:{tag}", value)
        logger.debug("En-tête ajouté : %s", header.number)
        return self

    # --- Références ---

    def add_buyer_reference(self, reference: str | None = None) -> DocumentBuilder:
        """Ajoute BuyerReference (défaut : BUYER_REF)."""
        self._open_section(DocumentSection.BUYER_REFERENCE)
        value = (reference or "").strip() or DEFAULT_BUYER_REFERENCE
        self._section_element(DocumentSection.BUYER_REFERENCE, "cbc:BuyerReference", value)
        return self

    def add_order_reference(self, order_id: str) -> DocumentBuilder:
        """Ajoute OrderReference/ID."""
        self._open_section(DocumentSection.ORDER_REFERENCE)
        if not (order_id or "").strip():
            msg = "Validation en échec : référence de commande"
            raise InvalidArgumentError(msg, ["L'identifiant de commande est obligatoire"])
        order_ref = self._section_element(DocumentSection.ORDER_REFERENCE, "cac:OrderReference")
        etree.SubElement(order_ref, _qname("cbc:ID")).text = order_id.strip()
        return self

    def add_billing_reference(
        self,
        invoice_id: str | BillingReference | Mapping[str, Any],
        issue_date: date | str | None = None,
    ) -> DocumentBuilder:
        """Ajoute BillingReference/InvoiceDocumentReference (BR-55 pour un avoir)."""
        self._open_section(DocumentSection.BILLING_REFERENCE)
        if isinstance(invoice_id, str):
            data: Any = {"invoice_id": invoice_id, "issue_date": issue_date}
        else:
            data = invoice_id
        reference = coerce_model(BillingReference, data, "Référence de facturation")
        errors: list[str] = []
        if not reference.invoice_id.strip():
            errors.append("Le numéro de la facture d'origine est obligatoire")
        original_date = None
        if reference.issue_date:
            original_date = fields.parse_date(reference.issue_date)
            if original_date is None:
                errors.append(
                    f"Date de la facture d'origine invalide : '{reference.issue_date}'"
                )
        self._raise_if(errors, "référence de facturation")

        billing = self._section_element(
            DocumentSection.BILLING_REFERENCE, "cac:BillingReference"
        )
        doc_ref = etree.SubElement(billing, _qname("cac:InvoiceDocumentReference"))
        _append(doc_ref, "cbc:ID", reference.invoice_id.strip())
        if original_date is not None:
            _append(doc_ref, "cbc:IssueDate", _fmt_date(original_date))
        return self

    def add_additional_document_reference(
        self,
        document_id: str | DocumentReference | Mapping[str, Any],
        description: str | None = None,
    ) -> DocumentBuilder:
        """Ajoute un AdditionalDocumentReference (répétable)."""
        self._open_section(DocumentSection.ADDITIONAL_DOCUMENT_REFERENCE)
        if isinstance(document_id, str):
            data: Any = {"id": document_id, "description": description}
        else:
            data = document_id
        reference = coerce_model(DocumentReference, data, "Document additionnel")
        if not reference.id.strip():
            msg = "Validation en échec : document additionnel"
            raise InvalidArgumentError(msg, ["L'identifiant du document est obligatoire"])
        doc_ref = self._section_element(
            DocumentSection.ADDITIONAL_DOCUMENT_REFERENCE,
            "cac:AdditionalDocumentReference",
        )
        _append(doc_ref, "cbc:ID", reference.id.strip())
        if reference.description:
            _append(doc_ref, "cbc:DocumentDescription", reference.description)
        return self

    # --- Parties ---

    def add_supplier(self, party: Party | Mapping[str, Any]) -> DocumentBuilder:
        """Ajoute AccountingSupplierParty (numéro de TVA obligatoire)."""
        self._open_section(DocumentSection.SUPPLIER)
        party = coerce_model(Party, party, "Fournisseur")
        self._raise_if(
            fields.check_party(party, "Fournisseur", self.registry, require_vat=True),
            "fournisseur",
        )
        wrapper = self._section_element(
            DocumentSection.SUPPLIER, "cac:AccountingSupplierParty"
        )
        self._build_party(wrapper, party)
        return self

    def add_customer(self, party: Party | Mapping[str, Any]) -> DocumentBuilder:
        """Ajoute AccountingCustomerParty."""
        self._open_section(DocumentSection.CUSTOMER)
        party = coerce_model(Party, party, "Client")
        self._raise_if(fields.check_party(party, "Client", self.registry), "client")
        # 0210 (codice fiscale italien) n'a pas de sens pour un client néerlandais
        if (
            party.address.country_code.strip().upper() == "NL"
            and party.endpoint_scheme == "0210"
        ):
            logger.info("Client NL : schéma d'endpoint 0210 remplacé par 0106")
            party = party.model_copy(update={"endpoint_scheme": "0106"})
        wrapper = self._section_element(
            DocumentSection.CUSTOMER, "cac:AccountingCustomerParty"
        )
        self._build_party(wrapper, party)
        return self

    def _build_party(self, wrapper: etree._Element, party: Party) -> None:
        """Construit un élément Party complet."""
        party_el = _append(wrapper, "cac:Party")

        _append(
            party_el,
            "cbc:EndpointID",
            party.endpoint_id.strip(),
            schemeID=party.endpoint_scheme.strip(),
        )
        self.usage.record("endpoint_schemes", party.endpoint_scheme)

        identification = _append(party_el, "cac:PartyIdentification")
        etree.SubElement(identification, _qname("cbc:ID")).text = party.party_id.strip()

        party_name = _append(party_el, "cac:PartyName")
        etree.SubElement(party_name, _qname("cbc:Name")).text = party.name.strip()

        self._build_address(party_el, party.address, "cac:PostalAddress")

        if party.vat_number:
            tax_scheme_wrapper = _append(party_el, "cac:PartyTaxScheme")
            _append(tax_scheme_wrapper, "cbc:CompanyID", party.vat_number.strip())
            tax_scheme = _append(tax_scheme_wrapper, "cac:TaxScheme")
            etree.SubElement(tax_scheme, _qname("cbc:ID")).text = party.tax_scheme_id

        legal_entity = _append(party_el, "cac:PartyLegalEntity")
        _append(legal_entity, "cbc:RegistrationName", party.name.strip())
        if party.legal_id:
            attrib = {}
            if party.legal_id_scheme:
                attrib["schemeID"] = party.legal_id_scheme
                self.usage.record("legal_schemes", party.legal_id_scheme)
            _append(legal_entity, "cbc:CompanyID", party.legal_id.strip(), **attrib)

        if party.contact is not None and not party.contact.is_empty:
            contact = _append(party_el, "cac:Contact")
            for tag, value in (
                ("cbc:Name", party.contact.name),
                ("cbc:Telephone", party.contact.phone),
                ("cbc:ElectronicMail", party.contact.email),
            ):
                if value and value.strip():
                    _append(contact, tag, value.strip())

    def _build_address(
        self, parent: etree._Element, address: Address, tag: str
    ) -> None:
        """Construit PostalAddress ou Address (Country en dernier)."""
        addr = _append(parent, tag)
        _append(addr, "cbc:StreetName", address.street)
        if address.additional_street:
            _append(addr, "cbc:AdditionalStreetName", address.additional_street)
        _append(addr, "cbc:CityName", address.city)
        _append(addr, "cbc:PostalZone", address.postal_code)
        country = _append(addr, "cac:Country")
        etree.SubElement(
            country, _qname("cbc:IdentificationCode")
        ).text = address.country_code.strip().upper()

    # --- Livraison ---

    def add_delivery(self, delivery: Delivery | Mapping[str, Any]) -> DocumentBuilder:
        """Ajoute Delivery (date, lieu, partie livrée)."""
        self._open_section(DocumentSection.DELIVERY)
        delivery = coerce_model(Delivery, delivery, "Livraison")
        self._raise_if(fields.check_delivery(delivery, self.registry), "livraison")

        delivery_el = self._section_element(DocumentSection.DELIVERY, "cac:Delivery")
        if delivery.delivery_date:
            _append(
                delivery_el,
                "cbc:ActualDeliveryDate",
                _fmt_date(fields.parse_date(delivery.delivery_date)),
            )
        if delivery.location_id or delivery.address:
            location = _append(delivery_el, "cac:DeliveryLocation")
            if delivery.location_id:
                _append(
                    location,
                    "cbc:ID",
                    delivery.location_id,
                    schemeID=delivery.location_scheme,
                )
            if delivery.address:
                self._build_address(location, delivery.address, "cac:Address")
        if delivery.party_name:
            party = _append(delivery_el, "cac:DeliveryParty")
            party_name = etree.SubElement(party, _qname("cac:PartyName"))
            etree.SubElement(party_name, _qname("cbc:Name")).text = delivery.party_name
        return self

    # --- Paiement ---

    def add_payment_means(
        self, means: PaymentMeans | Mapping[str, Any]
    ) -> DocumentBuilder:
        """Ajoute un PaymentMeans (répétable)."""
        self._open_section(DocumentSection.PAYMENT_MEANS)
        means = coerce_model(PaymentMeans, means, "Moyen de paiement")
        self._raise_if(fields.check_payment_means(means), "moyen de paiement")

        code = means.code.strip()
        self.usage.record("payment_means_codes", code)
        means_el = self._section_element(DocumentSection.PAYMENT_MEANS, "cac:PaymentMeans")
        attrib = {"name": means.name} if means.name else {}
        _append(means_el, "cbc:PaymentMeansCode", code, **attrib)
        if means.payment_id:
            _append(means_el, "cbc:PaymentID", means.payment_id)
        if means.iban:
            account = _append(means_el, "cac:PayeeFinancialAccount")
            _append(account, "cbc:ID", "".join(means.iban.split()).upper())
            if means.account_name:
                _append(account, "cbc:Name", means.account_name)
            if means.bic:
                branch = _append(account, "cac:FinancialInstitutionBranch")
                etree.SubElement(branch, _qname("cbc:ID")).text = means.bic.strip().upper()
        return self

    def add_payment_terms(
        self, terms: str | PaymentTerms | Mapping[str, Any]
    ) -> DocumentBuilder:
        """Ajoute PaymentTerms/Note."""
        self._open_section(DocumentSection.PAYMENT_TERMS)
        data: Any = {"note": terms} if isinstance(terms, str) else terms
        terms = coerce_model(PaymentTerms, data, "Conditions de paiement")
        self._raise_if(fields.check_payment_terms(terms), "conditions de paiement")
        terms_el = self._section_element(DocumentSection.PAYMENT_TERMS, "cac:PaymentTerms")
        etree.SubElement(terms_el, _qname("cbc:Note")).text = terms.note.strip()
        return self

    # --- Remises et frais ---

    def add_allowance_charge(
        self, allowance: AllowanceCharge | Mapping[str, Any]
    ) -> DocumentBuilder:
        """Ajoute une remise ou des frais de document (répétable)."""
        self._open_section(DocumentSection.ALLOWANCE_CHARGE)
        allowance = coerce_model(AllowanceCharge, allowance, "Remise/frais")
        self._raise_if(
            fields.check_allowance_charge(allowance, self.registry), "remise/frais"
        )
        self.usage.record("currencies", allowance.currency)
        self.usage.record("tax_categories", allowance.tax_category_id)

        ac = self._section_element(DocumentSection.ALLOWANCE_CHARGE, "cac:AllowanceCharge")
        _append(ac, "cbc:ChargeIndicator", "true" if allowance.is_charge else "false")
        _append(ac, "cbc:AllowanceChargeReason", allowance.reason.strip())
        _append(
            ac,
            "cbc:Amount",
            _fmt_amount(allowance.amount),
            currencyID=allowance.currency,
        )
        self._build_tax_category(
            ac, "cac:TaxCategory", allowance.tax_category_id, allowance.tax_percent
        )
        return self

    def _build_tax_category(
        self,
        parent: etree._Element,
        tag: str,
        category_id: str,
        percent: Decimal,
        scheme_id: str = "VAT",
        exemption_reason_code: str | None = None,
        exemption_reason: str | None = None,
    ) -> None:
        """Construit TaxCategory ou ClassifiedTaxCategory."""
        tax_cat = _append(parent, tag)
        _append(tax_cat, "cbc:ID", category_id.strip().upper())
        _append(tax_cat, "cbc:Percent", _fmt_amount(percent))
        if exemption_reason_code:
            _append(tax_cat, "cbc:TaxExemptionReasonCode", exemption_reason_code)
        if exemption_reason:
            _append(tax_cat, "cbc:TaxExemptionReason", exemption_reason)
        tax_scheme = _append(tax_cat, "cac:TaxScheme")
        etree.SubElement(tax_scheme, _qname("cbc:ID")).text = scheme_id

    # --- TVA ---

    def add_tax_total(
        self, subtotals: list[TaxSubtotal | Mapping[str, Any]]
    ) -> DocumentBuilder:
        """Ajoute TaxTotal : montant total (somme des sous-totaux) et TaxSubtotal."""
        self._open_section(DocumentSection.TAX_TOTAL)
        items = [
            coerce_model(TaxSubtotal, s, f"Sous-total de TVA {idx}")
            for idx, s in enumerate(subtotals or [], start=1)
        ]
        self._raise_if(fields.check_tax_subtotals(items, self.registry), "total de TVA")

        currency = items[0].currency
        total = sum((s.tax_amount for s in items), Decimal("0"))
        tax_total = self._section_element(DocumentSection.TAX_TOTAL, "cac:TaxTotal")
        _append(tax_total, "cbc:TaxAmount", _fmt_amount(total), currencyID=currency)
        for subtotal in items:
            self.usage.record("currencies", subtotal.currency)
            self.usage.record("tax_categories", subtotal.category_id)
            sub_el = _append(tax_total, "cac:TaxSubtotal")
            _append(
                sub_el,
                "cbc:TaxableAmount",
                _fmt_amount(subtotal.taxable_amount),
                currencyID=subtotal.currency,
            )
            _append(
                sub_el,
                "cbc:TaxAmount",
                _fmt_amount(subtotal.tax_amount),
                currencyID=subtotal.currency,
            )
            self._build_tax_category(
                sub_el,
                "cac:TaxCategory",
                subtotal.category_id,
                subtotal.percent,
                subtotal.scheme_id,
                subtotal.exemption_reason_code,
                subtotal.exemption_reason,
            )
        return self

    # --- Totaux monétaires ---

    def add_legal_monetary_total(
        self, totals: MonetaryTotals | Mapping[str, Any]
    ) -> DocumentBuilder:
        """Ajoute LegalMonetaryTotal."""
        self._open_section(DocumentSection.LEGAL_MONETARY_TOTAL)
        totals = coerce_model(MonetaryTotals, totals, "Totaux monétaires")
        self._raise_if(fields.check_monetary_totals(totals), "totaux monétaires")
        currency = totals.currency
        self.usage.record("currencies", currency)

        monetary = self._section_element(
            DocumentSection.LEGAL_MONETARY_TOTAL, "cac:LegalMonetaryTotal"
        )
        amounts = (
            ("LineExtensionAmount", totals.line_extension_amount, True),
            ("TaxExclusiveAmount", totals.tax_exclusive_amount, True),
            ("TaxInclusiveAmount", totals.tax_inclusive_amount, True),
            ("AllowanceTotalAmount", totals.allowance_total_amount, False),
            ("ChargeTotalAmount", totals.charge_total_amount, True),
            ("PrepaidAmount", totals.prepaid_amount, False),
            ("PayableAmount", totals.payable_amount, True),
        )
        for tag, amount, always in amounts:
            if always or amount:
                _append(monetary, f"cbc:{tag}", _fmt_amount(amount), currencyID=currency)
        return self

    # --- Lignes ---

    def add_line(self, line: InvoiceLine | Mapping[str, Any]) -> DocumentBuilder:
        """Ajoute une InvoiceLine ou une CreditNoteLine.

        FR: Pour un avoir, quantité, prix et montant négatifs sont ramenés
            en valeur absolue (correction, pas rejet) et le montant de ligne
            est calculé s'il est absent.
        EN: For a credit note, negative quantity, price and amount are made
            absolute (correction, not rejection) and the line amount is
            computed when absent.

        Raises:
            InvalidArgumentError: Avec toutes les violations de la ligne.
        """
        self._open_section(DocumentSection.LINE)
        line = coerce_model(InvoiceLine, line, "Ligne")
        self._raise_if(fields.check_line(line, self._kind, self.registry), f"ligne {line.id}")
        if self.is_credit_note:
            line = self._normalize_credit_line(line)

        self.usage.record("unit_codes", line.unit_code)
        self.usage.record("currencies", line.currency)
        self.usage.record("tax_categories", line.tax_category_id)

        if self.is_credit_note:
            line_tag, qty_tag = "cac:CreditNoteLine", "cbc:CreditedQuantity"
        else:
            line_tag, qty_tag = "cac:InvoiceLine", "cbc:InvoicedQuantity"
        line_el = self._section_element(DocumentSection.LINE, line_tag)
        unit_code = line.unit_code.strip().upper()

        _append(line_el, "cbc:ID", line.id.strip())
        _append(line_el, qty_tag, _fmt_quantity(line.quantity), unitCode=unit_code)
        _append(
            line_el,
            "cbc:LineExtensionAmount",
            _fmt_amount(line.line_extension_amount),
            currencyID=line.currency,
        )
        if line.accounting_cost:
            _append(line_el, "cbc:AccountingCost", line.accounting_cost)
        if line.order_line_reference:
            order_line = _append(line_el, "cac:OrderLineReference")
            etree.SubElement(
                order_line, _qname("cbc:LineID")
            ).text = line.order_line_reference

        item = _append(line_el, "cac:Item")
        _append(item, "cbc:Description", line.description)
        _append(item, "cbc:Name", line.name)
        if line.sellers_item_id:
            sellers = _append(item, "cac:SellersItemIdentification")
            etree.SubElement(sellers, _qname("cbc:ID")).text = line.sellers_item_id
        if line.standard_item_id:
            standard = _append(item, "cac:StandardItemIdentification")
            std_id = etree.SubElement(standard, _qname("cbc:ID"))
            std_id.set("schemeID", line.standard_item_scheme)
            std_id.text = line.standard_item_id
        if line.origin_country:
            origin = _append(item, "cac:OriginCountry")
            etree.SubElement(
                origin, _qname("cbc:IdentificationCode")
            ).text = line.origin_country.strip().upper()
        if line.classification_code:
            classification = _append(item, "cac:CommodityClassification")
            code = etree.SubElement(classification, _qname("cbc:ItemClassificationCode"))
            code.set("listID", line.classification_scheme.strip().upper())
            code.text = line.classification_code
        self._build_tax_category(
            item,
            "cac:ClassifiedTaxCategory",
            line.tax_category_id,
            line.tax_percent,
            line.tax_scheme_id,
        )

        price = _append(line_el, "cac:Price")
        _append(
            price,
            "cbc:PriceAmount",
            _fmt_amount(line.price_amount),
            currencyID=line.currency,
        )
        if self.profile is UBLProfile.UBL_BE:
            _append(price, "cbc:BaseQuantity", "1", unitCode=unit_code)
        return self

    def _normalize_credit_line(self, line: InvoiceLine) -> InvoiceLine:
        """Valeurs absolues d'une ligne d'avoir, corrections relevées."""
        update: dict[str, Decimal] = {}
        for field in ("quantity", "price_amount", "line_extension_amount"):
            value = getattr(line, field)
            if value is not None and value < 0:
                self.sign_corrections.append(SignCorrection(line.id, field, value))
                update[field] = -value
        if update:
            logger.info(
                "Ligne d'avoir %s : valeurs négatives corrigées (%s)",
                line.id,
                ", ".join(update),
            )
        line = line.model_copy(update=update)
        if line.line_extension_amount is None:
            line = line.model_copy(
                update={
                    "line_extension_amount": round_amount(
                        line.quantity * line.price_amount
                    )
                }
            )
        return line

    # --- Sérialisation ---

    def build(self) -> str:
        """Sérialise le document en XML UTF-8.

        Raises:
            NotInitializedError: Si ``create()`` n'a pas été appelé.
            MissingBillingReferenceError: Avoir sans BillingReference (BR-55).
            InvalidArgumentError: En mode strict, codes absents du registre.
        """
        root = self._require_root()
        if self.is_credit_note and not self._has_section(
            DocumentSection.BILLING_REFERENCE
        ):
            raise MissingBillingReferenceError()
        if self.registry is not None:
            self._raise_if(self.usage.check(self.registry), "listes de codes (mode strict)")
        return XmlSerializer.serialize(root)

    def build_bytes(self) -> bytes:
        """Comme ``build()`` mais retourne les octets UTF-8."""
        return self.build().encode("utf-8")
