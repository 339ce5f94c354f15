"""Instruction-text assembly for each adapter operation.

This module is intentionally narrow: it only builds instruction and prompt
strings from already validated inputs. Schema declaration lives in
`vinscan.prompting.schemas`; model invocation and reply handling live in
`vinscan.core.adapter`.

Design constraints:
    - Deterministic construction for identical inputs.
    - Fixed section ordering per operation.
    - No hidden side effects (no I/O, no global state mutation).

Prompt safety model:
    - Correction rules (OCR character substitution, VDS reading) are
      instruction-led only. Nothing here or downstream re-applies them locally.
    - VINs, brands and vehicle notes are interpolated as raw strings.
"""

from typing import Any, Mapping

from vinscan.core.vehicle_types import FUEL_TYPES, ScanMode, split_vin


# =========================================================
# SHARED FRAGMENTS
# =========================================================

EXPERT_NAME = "KHABIR"

_FUEL_CHOICES = "[" + ", ".join(f'"{fuel}"' for fuel in FUEL_TYPES) + "]"

# Official Moroccan importers, cited by refine and report instructions.
MOROCCAN_IMPORTERS = (
    "  * Audi/VW/Skoda/Porsche/Bentley -> CAC (Centrale Automobile Chérifienne)\n"
    "  * Peugeot/Citroën/DS -> SOPRIAM\n"
    "  * Renault/Dacia -> RENAULT COMMERCE MAROC\n"
    "  * Toyota -> TOYOTA DU MAROC\n"
    "  * Fiat/Jeep/Alfa -> STELLANTIS MAROC\n"
    "  * BMW/Mini -> SMEIA\n"
    "  * Mercedes -> AUTO NEJMA\n"
    "  * Hyundai -> GLOBAL ENGINES\n"
    "  * Kia -> KIA MAROC\n"
)

JSON_ONLY = "Réponds uniquement en JSON pur."


# =========================================================
# DECODE BY VIN (text)
# =========================================================

def build_vin_decode_instruction(vin: str) -> str:
    """Build the system instruction for a text VIN decode.

    Args:
        vin: Candidate VIN, interpolated unvalidated.

    Returns:
        Instruction text asking for an ISO 3779 decode cross-checked against the
        Moroccan market.
    """
    return (
        f"Tu es {EXPERT_NAME}, expert automobile certifié au Maroc.\n"
        f"À partir de ce numéro VIN : {vin}, effectue un décodage ISO 3779 rigoureux.\n\n"
        "RÈGLES D'IDENTIFICATION :\n"
        "1. Examine le VDS (caractères 4 à 9). Pour le groupe VAG (Audi, VW, Seat), "
        "les positions 7 et 8 sont critiques pour le code modèle "
        "(ex: 8X=A1, F5=A5, 5F=Leon, 51=Ateca).\n"
        "2. Ne confonds pas les segments. Si les positions 7-8 indiquent '5F', "
        "le modèle est 'LEON', pas 'ATECA'.\n"
        "3. Croise avec le marché MAROCAIN (importateurs officiels comme CAC, "
        "Sopriam, Renault Commerce Maroc).\n\n"
        "CHAMPS REQUIS :\n"
        "- brand : Constructeur.\n"
        "- model : Modèle commercial exact au Maroc.\n"
        "- deductionReasoning : Explique précisément quel code VDS (positions 4-9) "
        "ou VIS a permis d'identifier le modèle.\n"
        "- yearOfManufacture : Année code (Position 10).\n"
        "- motorization : Motorisation standard au Maroc.\n"
        f"- fuelType : {_FUEL_CHOICES}.\n"
        "- color : Couleur probable.\n\n"
        + JSON_ONLY
    )


def build_vin_decode_prompt(vin: str) -> str:
    return f"Décoder précisément le VIN : {vin} selon ISO 3779. JSON."


# =========================================================
# DECODE FROM IMAGE (critical scan)
# =========================================================
# The scan mode only changes the framing line; extraction rules are shared.

_SCAN_MODE_FOCUS = {
    ScanMode.VIN: (
        "L'image montre une frappe ou une plaque VIN "
        "(pare-brise, portière, montant de caisse)."
    ),
    ScanMode.REGISTRATION: (
        "L'image est une carte grise : lis le numéro de châssis, "
        "l'immatriculation et la date de 1ère mise en circulation."
    ),
    ScanMode.VEHICLE: (
        "L'image montre le véhicule : repère le VIN visible sous le pare-brise "
        "et la plaque d'immatriculation."
    ),
}


def build_image_decode_instruction(mode: ScanMode) -> str:
    """Build the system instruction for VIN extraction from a photograph.

    Args:
        mode: Scan mode; selects the framing line describing the photograph.

    Returns:
        Instruction text with OCR correction guidance and deduction rules.

    Prompt safety considerations:
        The OCR substitution table is guidance for the oracle only; the adapter
        performs no character substitution beyond filtering to `[A-Z0-9]`.
    """
    return (
        f"Tu es {EXPERT_NAME}, expert extraction documentaire automobile au Maroc.\n"
        "Ta mission est d'extraire le VIN (Numéro de Châssis) de l'image.\n"
        f"{_SCAN_MODE_FOCUS[ScanMode(mode)]}\n\n"
        "RÈGLES CRITIQUES (ISO 3779 & NM ISO 3779 Maroc) :\n"
        "1. VIN = 17 caractères alphanumériques (0-9, A-Z sauf I, O, Q).\n"
        "2. Isole la zone du VIN (pare-brise, portière, carte grise) et OCR le texte.\n"
        "3. CORRIGE les erreurs d'OCR courantes :\n"
        "   - 'I' -> '1'\n"
        "   - 'O' -> '0'\n"
        "   - 'Q' -> '0'\n"
        "   - 'B' -> '8'\n"
        "   - 'S' -> '5'\n"
        "   - 'Z' -> '2'\n\n"
        "ANALYSE DU VÉHICULE (DÉDUCTION) :\n"
        "- Utilise le WMI (3 premiers chars) pour la Marque/Pays.\n"
        "- Utilise le VDS (chars 4-9) pour le Modèle/Moteur.\n"
        "- Utilise le caractère 10 pour l'Année Modèle (Code Année).\n\n"
        "EXTRAIRE :\n"
        "- brand : Nom du constructeur (Uppercased).\n"
        "- model : Modèle déduit du VDS.\n"
        "- vin : Le VIN corrigé de 17 caractères.\n"
        "- deductionReasoning : \"Identifié [Marque] [Modèle] grâce au code WMI [XXX] "
        "et VDS [XXXX].\"\n"
        "- yearOfManufacture : Année déduite du 10ème caractère.\n"
        "- licensePlate : Immatriculation (si visible).\n"
        "- registrationYear : Année 1ère mise en circulation (si visible carte grise).\n\n"
        + JSON_ONLY + "\n"
        "FORMAT DATES : Années de 4 chiffres (YYYY)."
    )


def build_image_decode_prompt(mode: ScanMode) -> str:
    return f"Analyse critique ISO 3779 image de {ScanMode(mode).value}. JSON."


# =========================================================
# REFINE FROM IMAGE
# =========================================================

def build_refine_instruction(brand: str) -> str:
    """Build the instruction refining model/engine details for a known brand."""
    return (
        f"Expert automobile spécialiste du marché MAROCAIN ({EXPERT_NAME}).\n"
        f"À partir de cette image et sachant que la marque est {brand}, affine l'analyse.\n\n"
        "CONTEXTE MARCHÉ MAROC (Réglementation NM ISO 3779):\n"
        "- Le VIN doit être conforme.\n"
        "- Les motorisations sont souvent spécifiques (ex: 1.5 dCi, 2.0 TDI, 2.2 CDI).\n"
        "- IMPORTATEURS OFFICIELS :\n"
        + MOROCCAN_IMPORTERS +
        "\nCHAMPS À AFFINER :\n"
        "- model : Version/finition exacte si identifiable (ex: \"Golf 8 R-Line\").\n"
        "- motorization : DÉDUCTION LOGIQUE via VIN et Visuel (ex: sigle 'TDI', échappement).\n"
        f"- fuelType : {_FUEL_CHOICES}.\n"
        "- color : Nom commercial approximatif (ex: \"Gris Nardo\", \"Blanc Nacré\").\n"
        "- registrationYear : Année 1ère mise en circulation.\n"
        "- deductionReasoning : EXPLIQUE COMMENT le modèle et le moteur sont déduits "
        "(Code Moteur dans le VIN ? Logo ?).\n\n"
        + JSON_ONLY
    )


def build_refine_prompt(brand: str) -> str:
    return f"Analyse détaillée pour {brand}. JSON."


# =========================================================
# EXPERTISE REPORT (Markdown)
# =========================================================
# Section order is fixed: identity, technical deduction, decomposition table,
# vigilance points. The table rows carry the VIN slices verbatim.

def build_report_instruction(vin: str) -> str:
    """Build the Markdown report template for a VIN.

    Args:
        vin: VIN as typed by the caller; sliced without validation.

    Returns:
        Instruction text whose decomposition table holds WMI `vin[0:3]`,
        VDS `vin[3:9]` and VIS `vin[9:17]`.

    Edge cases:
        Short VINs produce short or empty table cells rather than errors.
    """
    sections = split_vin(vin)
    return (
        f"Tu es {EXPERT_NAME}, expert automobile officiel au Maroc.\n"
        f"Rédige un rapport d'expertise technique pour le VIN : {vin}.\n"
        "Le rapport doit rassurer l'acheteur et prouver la conformité.\n\n"
        "STRUCTURE DU RAPPORT (Format Markdown) :\n\n"
        "### 1. 🚘 Identité & Conformité\n"
        "- **Marque/Modèle** : [Nom]\n"
        "- **Origine** : [Pays détecté via WMI]\n"
        "- **Importateur Maroc** : (Citer l'importateur officiel: CAC pour VAG, "
        "Sopriam pour PSA, Auto Nejma pour Mercedes, Smeia pour BMW, etc.)\n\n"
        "### 2. ⚙️ Analyse Technique (Déduction VIN)\n"
        "- **Moteur** : [Déduction via VDS]\n"
        "- **Année Modèle** : [Déduction via 10ème caractère]\n"
        "- *Note : Cette analyse respecte la norme NM ISO 3779 en vigueur au Maroc.*\n\n"
        "### 3. 🔍 Décodage Détaillé\n"
        "| Section | Code | Signification |\n"
        "| :--- | :--- | :--- |\n"
        f"| **WMI** | {sections.wmi} | Constructeur / Pays |\n"
        f"| **VDS** | {sections.vds} | Caractéristiques (Châssis, Moteur) |\n"
        f"| **VIS** | {sections.vis} | Identification Unique / Usine |\n\n"
        "### 4. ⚠️ Points de Vigilance (Spécifique Modèle)\n"
        "- Lister 2-3 points à surveiller sur ce modèle précis "
        "(ex: distribution, boîte auto, etc.).\n\n"
        "Ton expert et professionnel. Pas de bla-bla générique."
    )


def build_report_prompt(vin: str) -> str:
    return f"Génère le rapport d'expertise pour le VIN : {vin}."


# =========================================================
# CHAT PERSONA
# =========================================================

CHAT_INSTRUCTION = (
    f"Tu es {EXPERT_NAME}, un expert automobile marocain très expérimenté et serviable.\n"
    "Réponds aux questions techniques sur les véhicules, les pannes, les procédures "
    "d'entretien, et le marché marocain.\n"
    "Sois précis, concis et utilise un langage accessible."
)


# =========================================================
# MARKET VALUE
# =========================================================

DEFAULT_CONDITION_NOTES = "Pas de notes spécifiques sur l'état."
VALUATION_PROMPT = "Estime la valeur de ce véhicule."


def build_valuation_instruction(vehicle: Mapping[str, Any]) -> str:
    """Build the valuation instruction from a partial vehicle record.

    Args:
        vehicle: Wire-name (camelCase) mapping of the known vehicle fields.

    Returns:
        Instruction text asking for a MAD price range and its justification.

    Edge cases:
        - Missing `registrationYear` renders as `N/A`.
        - Missing `inventoryNotes` renders as `DEFAULT_CONDITION_NOTES`.
        - Other missing fields render as `N/A`.
    """

    def field(name: str, default: str = "N/A") -> str:
        value = vehicle.get(name)
        return default if value in (None, "") else str(value)

    return (
        "Tu es un expert en évaluation de véhicules d'occasion au MAROC.\n"
        "Analyse les détails suivants et fournis une estimation de la valeur marchande "
        "en Dirhams Marocains (MAD).\n\n"
        "DÉTAILS DU VÉHICULE :\n"
        f"- Marque: {field('brand')}\n"
        f"- Modèle: {field('model')}\n"
        f"- Année de fabrication: {field('yearOfManufacture')}\n"
        f"- Année de 1ère immatriculation: {field('registrationYear')}\n"
        f"- Motorisation: {field('motorization')}\n"
        f"- Carburant: {field('fuelType')}\n"
        f"- Notes sur l'état: {field('inventoryNotes', DEFAULT_CONDITION_NOTES)}\n\n"
        "TA MISSION :\n"
        "1. **Estimer une fourchette de prix réaliste** (min et max) pour une vente "
        "entre particuliers au Maroc.\n"
        "2. **Fournir une justification claire** expliquant les facteurs pris en compte "
        "(popularité du modèle, motorisation, décote, état général supposé basé sur "
        "les notes).\n\n"
        + JSON_ONLY + " Ne rajoute aucun commentaire en dehors du JSON."
    )
