"""Structured-output schemas declared to the oracle.

Schemas use Gemini `Type` names (`OBJECT`, `STRING`, `INTEGER`). They constrain
what the oracle is asked to produce; replies are not re-validated against them
locally.
"""

from vinscan.core.vehicle_types import FUEL_TYPES


def _string(**extra) -> dict:
    return {"type": "STRING", **extra}


def _fuel_type() -> dict:
    return _string(enum=list(FUEL_TYPES))


VIN_DECODE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "brand": _string(),
        "model": _string(),
        "deductionReasoning": _string(),
        "yearOfManufacture": _string(),
        "motorization": _string(),
        "fuelType": _fuel_type(),
        "color": _string(),
    },
    "required": [
        "brand",
        "model",
        "deductionReasoning",
        "yearOfManufacture",
        "motorization",
        "fuelType",
    ],
}

IMAGE_DECODE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "vin": _string(),
        "brand": _string(),
        "model": _string(),
        "deductionReasoning": _string(),
        "yearOfManufacture": _string(),
        "licensePlate": _string(),
        "registrationYear": _string(),
    },
    "required": ["brand", "vin", "model"],
}

# Best-effort refinement: nothing is required.
REFINE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "model": _string(),
        "motorization": _string(),
        "fuelType": _fuel_type(),
        "color": _string(),
        "registrationYear": _string(),
        "deductionReasoning": _string(),
    },
    "required": [],
}

MARKET_VALUE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "marketValueMin": {"type": "INTEGER", "description": "Prix minimum estimé en MAD"},
        "marketValueMax": {"type": "INTEGER", "description": "Prix maximum estimé en MAD"},
        "marketValueJustification": _string(
            description="Justification détaillée de l'estimation."
        ),
    },
    "required": ["marketValueMin", "marketValueMax", "marketValueJustification"],
}
