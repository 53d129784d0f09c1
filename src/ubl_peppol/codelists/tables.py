"""Tables de codes statiques (unités, classifications, pays, TVA).

FR: Listes de référence intégrées : codes d'unité UN/ECE Rec. 20/21,
    schémas de classification UNTDID 7143, codes pays ISO 3166-1,
    préfixes de TVA européens et catégories de TVA UNTDID 5305.
    Tables dédupliquées, en lecture seule.
EN: Built-in reference lists: UN/ECE Rec. 20/21 unit codes, UNTDID 7143
    classification schemes, ISO 3166-1 country codes, EU VAT prefixes and
    UNTDID 5305 VAT categories. Deduplicated, read-only tables.
"""

from types import MappingProxyType

UNIT_CODES = MappingProxyType(
    {
        "C62": "unit",
        "HUR": "hour",
        "DAY": "day",
        "TNE": "tonne",
        "KGM": "kilogram",
        "GRM": "gram",
        "MTR": "metre",
        "CMT": "centimetre",
        "MMT": "millimetre",
        "M2": "square metre",
        "MTK": "square metre",
        "M3": "cubic metre",
        "MTQ": "cubic metre",
        "LTR": "litre",
        "MLT": "millilitre",
        "KWH": "kilowatt hour",
        "KWT": "kilowatt",
        "ANN": "year",
        "MON": "month",
        "WEE": "week",
        "DZN": "dozen",
        "SET": "set",
        "PCE": "piece",
        "PR": "pair",
        "PK": "package",
        "BG": "bag",
        "BX": "box",
        "CT": "carton",
        "CS": "case",
        "EA": "each",
        "GLL": "gallon",
        "KTM": "kilometre",
        "KMT": "kilometre",
        "KQ": "kilogram",
        "LBR": "pound",
        "MIN": "minute",
        "SEC": "second",
        "HIT": "hundred items",
        "TNS": "ton (US)",
        "TNI": "ton (UK)",
        "KNT": "knot",
        "KT": "kit",
        "KUR": "kilovolt ampere reactive hour",
        "KVA": "kilovolt ampere",
        "KVR": "kilovar",
        "KVT": "kilovolt",
        "KWN": "kilowatt hour per normalized cubic metre",
        "KWO": "kilogram of uranium trioxide",
        "KWS": "kilowatt hour per standard cubic metre",
        "KX": "millilitre per kilogram",
        "L10": "quart (US) per minute",
        "L11": "volt per metre",
        "L12": "millivolt per metre",
        "L13": "kilopascal per second",
        "L14": "kilopascal per minute",
        "L15": "metre per second kelvin",
        "L16": "metre per second bar",
        "L17": "cubic metre per second bar",
        "L18": "cubic metre per second",
        "L19": "cubic metre per minute bar",
        "L2": "litre per minute",
        "L20": "cubic metre per day",
        "L21": "cubic metre per hour bar",
        "L23": "cubic metre per day bar",
        "L24": "cubic metre per hour kelvin",
        "L25": "cubic metre per day kelvin",
        "L26": "cubic metre per second kelvin",
        "L27": "cubic metre per second bar",
        "L28": "cubic metre per minute kelvin",
        "L29": "cubic centimetre per second bar",
        "L30": "cubic centimetre per second kelvin",
        "L31": "litre per second bar",
        "L32": "litre per second kelvin",
        "L33": "litre per minute bar",
        "L34": "litre per minute kelvin",
        "L35": "litre per day bar",
        "L36": "litre per day kelvin",
        "L37": "cubic metre per hour bar",
        "L38": "cubic metre per day bar",
        "L39": "cubic metre per hour kelvin",
        "L40": "cubic metre per day kelvin",
        "L41": "millilitre per second kelvin",
        "L42": "millilitre per second bar",
        "L43": "millilitre per minute kelvin",
        "L44": "millilitre per minute bar",
        "L45": "millilitre per day kelvin",
        "L46": "millilitre per day bar",
        "L47": "millilitre per hour kelvin",
        "L48": "millilitre per hour bar",
        "L49": "cubic centimetre per second bar",
        "L50": "cubic centimetre per second kelvin",
        "L51": "cubic centimetre per minute bar",
        "L52": "cubic centimetre per minute kelvin",
        "L53": "cubic centimetre per hour bar",
        "L54": "cubic centimetre per hour kelvin",
        "L55": "cubic centimetre per day bar",
        "L56": "cubic centimetre per day kelvin",
        "L57": "cubic metre per second bar",
        "L58": "cubic metre per second kelvin",
        "L59": "cubic metre per minute bar",
        "L60": "cubic metre per minute kelvin",
        "L61": "cubic metre per hour bar",
        "L62": "cubic metre per hour kelvin",
        "L63": "cubic metre per day bar",
        "L64": "cubic metre per day kelvin",
        "L65": "litre per second bar",
        "L66": "litre per second kelvin",
        "L67": "litre per minute bar",
        "L68": "litre per minute kelvin",
        "L69": "litre per hour bar",
        "L70": "litre per hour kelvin",
        "L71": "litre per day bar",
        "L72": "litre per day kelvin",
        "L73": "cubic metre per second pascal",
        "L74": "cubic metre per second kelvin",
        "L75": "cubic metre per minute pascal",
        "L76": "cubic metre per minute kelvin",
        "L77": "cubic metre per hour pascal",
        "L78": "cubic metre per hour kelvin",
        "L79": "cubic metre per day pascal",
        "L80": "cubic metre per day kelvin",
        "L81": "litre per second pascal",
        "L82": "litre per second kelvin",
        "L83": "litre per minute pascal",
        "L84": "litre per minute kelvin",
        "L85": "litre per hour pascal",
        "L86": "litre per hour kelvin",
        "L87": "litre per day pascal",
        "L88": "litre per day kelvin",
        "L89": "cubic metre per second bar",
        "L90": "cubic metre per minute bar",
        "L91": "cubic metre per hour bar",
        "L92": "cubic metre per day bar",
        "L93": "litre per second bar",
        "L94": "litre per minute bar",
        "L95": "litre per hour bar",
        "L96": "litre per day bar",
        "L98": "cubic metre per second pascal",
        "L99": "cubic metre per minute pascal",
    }
)

# UNTDID 7143 (sous-ensemble) + schémas propres à PEPPOL
CLASSIFICATION_SCHEMES = frozenset(
    """
    AA AB AC AD AE AF AG AH AI AJ AK AL AM AN AO AP AQ AR AS AT AU AV AW AX AY AZ
    BA BB BC BD BE BF BG BH BI BJ BK BL BM BN BO BP BQ BR BS BT BU BV BW BX BY BZ
    CC CG CL CR CV DR DW EC EF EMD EN FS GB GN GMN GS HS IB IN IS IT IZ MA MF MN MP
    NB ON PD PL PO PPI PV QS RC RN RU RY SA SG SK SN SRS SRT SRU SRV SRW SRX SRY SRZ
    SS SSA SSB SSC SSD SSE SSF SSG SSH SSI SSJ SSK SSL SSM SSN SSO SSP SSQ SSR SSS
    SST SSU SSV SSW SSX SSY SSZ
    ST STA STB STC STD STE STF STG STH STI STJ STK STL STM STN STO STP STQ STR STS
    STT STU STV STW STX STY STZ
    SUA SUB SUC SUD SUE SUF SUG SUH SUI SUJ SUK SUL SUM TG TSN TSO TSP TSQ TSR TSS
    TST TSU UA UP VN VP VS VX ZZZ
    CPV
    """.split()
)

CLASSIFICATION_DESCRIPTIONS = MappingProxyType(
    {
        "CPV": "Common Procurement Vocabulary",
        "SRV": "Service Type Code",
        "STD": "Standard",
        "HS": "Harmonized System",
    }
)

# ISO 3166-1 alpha-2, plus 1A (Kosovo), EL (Grèce, TVA) et XI (Irlande du Nord)
COUNTRY_CODES = frozenset(
    """
    1A AD AE AF AG AI AL AM AO AQ AR AS AT AU AW AX AZ BA BB BD BE BF BG BH BI BJ
    BL BM BN BO BQ BR BS BT BV BW BY BZ CA CC CD CF CG CH CI CK CL CM CN CO CR CU
    CV CW CX CY CZ DE DJ DK DM DO DZ EC EE EG EH EL ER ES ET FI FJ FK FM FO FR GA
    GB GD GE GF GG GH GI GL GM GN GP GQ GR GS GT GU GW GY HK HM HN HR HT HU ID IE
    IL IM IN IO IQ IR IS IT JE JM JO JP KE KG KH KI KM KN KP KR KW KY KZ LA LB LC
    LI LK LR LS LT LU LV LY MA MC MD ME MF MG MH MK ML MM MN MO MP MQ MR MS MT MU
    MV MW MX MY MZ NA NC NE NF NG NI NL NO NP NR NU NZ OM PA PE PF PG PH PK PL PM
    PN PR PS PT PW PY QA RE RO RS RU RW SA SB SC SD SE SG SH SI SJ SK SL SM SN SO
    SR SS ST SV SX SY SZ TC TD TF TG TH TJ TK TL TM TN TO TR TT TV TW TZ UA UG UM
    US UY UZ VA VC VE VG VI VN VU WF WS XI YE YT ZA ZM ZW
    """.split()
)

VAT_COUNTRY_PREFIXES = frozenset(
    """
    AT BE BG CY CZ DE DK EE EL ES FI FR GB HR HU IE IT LT LU LV MT NL PL PT RO SE
    SI SK XI
    """.split()
)

TAX_CATEGORIES = frozenset({"S", "Z", "E", "AE", "K", "G", "O", "L", "M"})

BUILTIN_LISTS: dict[str, frozenset[str]] = {
    "unit": frozenset(UNIT_CODES),
    "classification": CLASSIFICATION_SCHEMES,
    "country": COUNTRY_CODES,
    "vat_country": VAT_COUNTRY_PREFIXES,
    "tax_category": TAX_CATEGORIES,
}
