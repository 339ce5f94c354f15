"""Reply parsing and field repair for oracle output.

Processing rules:
    - `parse_json_reply` trims and decodes reply text with no schema
      re-validation. Malformed JSON raises `json.JSONDecodeError` to the caller.
    - `normalize_image_scan` is the only post-parse normalization step; every
      other operation returns the parsed dict unchanged.
    - `split_data_uri` strips an optional data-URI header from an image payload.

Determinism:
    All functions are pure.
"""

import json
import re

from vinscan.llm.oracle_types import InlineImage


DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"

UNKNOWN_BRAND = "Inconnu"
PENDING_MODEL = "ANALYSE..."
UNKNOWN_YEAR = "N/A"

_NON_VIN_CHARS = re.compile(r"[^A-Za-z0-9]")
_DATA_URI_HEADER = re.compile(r"^data:([\w.+-]+/[\w.+-]+)")


def parse_json_reply(text: str):
    """Decode trimmed reply text as JSON."""
    return json.loads(text.strip())


def clean_vin(value) -> str:
    """Keep only ASCII letters and digits, uppercased. Length is not checked."""
    return _NON_VIN_CHARS.sub("", str(value or "")).upper()


def normalize_image_scan(raw: dict) -> dict:
    """Repair an image-decode reply into the seven scan fields.

    Args:
        raw: Parsed oracle reply.

    Returns:
        Dict with `vin`, `brand`, `model`, `deductionReasoning`,
        `yearOfManufacture`, `licensePlate`, `registrationYear`.

    Rules:
        - VIN filtered to `[A-Z0-9]`.
        - Brand/model uppercased with `Inconnu` / `ANALYSE...` fallbacks.
        - Year defaults to `N/A`; plate and registration year to `""`.
        - `deductionReasoning` passes through unchanged (or `""`).
        - Falsy values (empty string, `0`, `null`) count as missing.
    """
    return {
        "vin": clean_vin(raw.get("vin")),
        "brand": str(raw.get("brand") or UNKNOWN_BRAND).upper(),
        "model": str(raw.get("model") or PENDING_MODEL).upper(),
        "deductionReasoning": raw.get("deductionReasoning") or "",
        "yearOfManufacture": str(raw.get("yearOfManufacture") or UNKNOWN_YEAR),
        "licensePlate": str(raw.get("licensePlate") or ""),
        "registrationYear": str(raw.get("registrationYear") or ""),
    }


def split_data_uri(image: str) -> InlineImage:
    """Split an image string into mime type and raw base64 payload.

    The payload is the text after the first comma; when there is no comma, or
    nothing follows it, the whole string is forwarded unchanged. The mime type
    comes from a `data:<type>/<subtype>` header, else defaults to JPEG.
    """
    segments = image.split(",")
    data = segments[1] if len(segments) > 1 and segments[1] else image

    match = _DATA_URI_HEADER.match(image)
    mime_type = match.group(1) if match else DEFAULT_IMAGE_MIME_TYPE

    return InlineImage(mime_type=mime_type, data=data)
