"""
Image-input preprocessing for scan requests.

Architectural role:
- Convert an image reference into a validated data URI accepted by the adapter's
  image operations.
- Enforce size and format constraints before any oracle call.
- Provide adapter-level preprocessing only (no endpoint registration).

Processing lifecycle:
1. Resolve the reference (`data:` URI, `file://` URL, or local path).
2. Pre-check the decoded size against `MAX_IMAGE_SIZE_MB`.
3. Decode and open the bytes with Pillow to confirm a supported format.
4. Return a data URI whose mime type matches the detected format.

Error handling strategy:
- Every rejection raises `ImageInputError` (a `ValueError`).
- Nothing is written to disk; decoding happens in memory.

Determinism considerations:
- Output is deterministic for identical input bytes.
"""

import base64
import binascii
import io
import os
from urllib.parse import urlparse, unquote

from PIL import Image, UnidentifiedImageError

from vinscan.core.errors import ImageInputError
from vinscan.llm.provider_config import MAX_IMAGE_SIZE_MB


# ============================================================
# CONFIG
# ============================================================

MAX_IMAGE_SIZE_BYTES = MAX_IMAGE_SIZE_MB * 1024 * 1024

# Pillow format name -> mime type forwarded to the oracle.
ALLOWED_FORMATS = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
}


# ============================================================
# PUBLIC ENTRYPOINTS
# ============================================================

def load_image(image_ref: str) -> str:
    """
    Resolve an image reference into a validated data URI.

    Supported formats:
    - data URI (`data:image/png;base64,...`) or bare base64
    - file URL (local host only)
    - plain local path
    """
    if not image_ref:
        raise ImageInputError("Empty image reference")

    if image_ref.startswith("file://"):
        return _load_path(_path_from_file_url(image_ref))

    if image_ref.startswith("data:") or not os.path.exists(os.path.expanduser(image_ref)):
        return validate_encoded_image(image_ref)

    return _load_path(os.path.expanduser(image_ref))


def validate_encoded_image(image: str) -> str:
    """
    Validate a base64 image (with or without data-URI header).

    Validation behavior:
    - Applies an approximate decoded-size check before decoding.
    - Rejects invalid base64 and formats outside `ALLOWED_FORMATS`.

    Returns:
        Data URI rebuilt with the detected mime type.
    """
    encoded = image.split(",", 1)[1] if image.startswith("data:") and "," in image else image

    padding = 0
    if encoded.endswith("=="):
        padding = 2
    elif encoded.endswith("="):
        padding = 1
    approx_decoded_size = (len(encoded) * 3) // 4 - padding
    if approx_decoded_size > MAX_IMAGE_SIZE_BYTES:
        raise ImageInputError("Image exceeds max size limit")

    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as err:
        raise ImageInputError("Image payload is not valid base64") from err

    return _to_data_uri(raw)


# ============================================================
# INPUT RESOLUTION
# ============================================================

def _path_from_file_url(file_url: str) -> str:
    """Return the local path of a `file://` URL; remote hosts are rejected."""
    parsed = urlparse(file_url)
    if parsed.netloc not in ("", "localhost"):
        raise ImageInputError("Remote file URLs are not supported")
    return unquote(parsed.path or "")


def _load_path(path: str) -> str:
    """Read a local image file after existence and size checks."""
    normalized = os.path.realpath(path)
    if not os.path.isfile(normalized):
        raise ImageInputError("File does not exist")

    if os.path.getsize(normalized) > MAX_IMAGE_SIZE_BYTES:
        raise ImageInputError("Image exceeds max size limit")

    with open(normalized, "rb") as f:
        return _to_data_uri(f.read())


# ============================================================
# FORMAT DETECTION
# ============================================================

def _to_data_uri(raw: bytes) -> str:
    """Identify the image format with Pillow and encode a data URI."""
    try:
        with Image.open(io.BytesIO(raw)) as img:
            fmt = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as err:
        raise ImageInputError("Unreadable image") from err

    mime_type = ALLOWED_FORMATS.get(fmt or "")
    if not mime_type:
        raise ImageInputError(f"Unsupported image format: {fmt}")

    encoded = base64.b64encode(raw).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"
