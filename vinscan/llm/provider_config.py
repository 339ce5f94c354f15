"""Provider/runtime configuration for the oracle layer.

Architectural role:
    Centralizes model selection, endpoint and credential lookup for
    `vinscan.llm.client` and `vinscan.core.adapter`.

Model call flow integration:
    - `AdapterConfig.from_env()` snapshots the environment into an explicit value.
    - `VehicleAIAdapter(config)` rejects a config without an API key.
    - `GeminiClient(config)` uses the endpoint template, models and timeout.

Determinism:
    Deterministic for a fixed process environment and key file. Module-level
    defaults are resolved at import time; `from_env()` re-reads the environment
    on every call.

Failure behavior:
    Missing key material is represented as `None` here. Raising is left to the
    adapter constructor so that the failure happens once, before any request.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_FLASH_MODEL = "gemini-3-flash-preview"
DEFAULT_PRO_MODEL = "gemini-3-pro-preview"

DEFAULT_URL_TEMPLATE = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "{model}:generateContent"
)

GEMINI_KEY_FILE = "config/gemini.key"

# Upper bound for decoded image payloads accepted by `api.multimodal`.
MAX_IMAGE_SIZE_MB = int(os.getenv("MAX_IMAGE_SIZE_MB", "10"))


def load_key(path: Optional[str] = GEMINI_KEY_FILE) -> Optional[str]:
    """Load the Gemini API key from the environment or a key file.

    Resolution order:
        1. `GEMINI_API_KEY`.
        2. `API_KEY` (name used by the original browser build).
        3. Raw file contents at `path`.

    Args:
        path: Key file path, or `None` to skip the file lookup.

    Returns:
        Key string or `None` when not available.

    Edge cases:
        - Blank values are treated as missing.
        - Missing file returns `None`.
    """
    for name in ("GEMINI_API_KEY", "API_KEY"):
        value = os.getenv(name, "").strip()
        if value:
            return value
    if not path or not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip() or None


def _read_timeout() -> Optional[float]:
    raw = os.getenv("GEMINI_TIMEOUT", "").strip()
    if not raw:
        return None
    return float(raw)


@dataclass(frozen=True)
class AdapterConfig:
    """Explicit configuration passed to the adapter and transport.

    Attributes:
        api_key: Gemini API key; `None` makes adapter construction fail.
        flash_model: Model used for fast identification and chat.
        pro_model: Model used for long-form report and valuation.
        url_template: `generateContent` endpoint with a `{model}` placeholder.
        timeout: Per-request timeout in seconds; `None` waits indefinitely.
    """

    api_key: Optional[str]
    flash_model: str = DEFAULT_FLASH_MODEL
    pro_model: str = DEFAULT_PRO_MODEL
    url_template: str = DEFAULT_URL_TEMPLATE
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "AdapterConfig":
        """Build a config from the current process environment."""
        return cls(
            api_key=load_key(),
            flash_model=os.getenv("GEMINI_FLASH_MODEL", DEFAULT_FLASH_MODEL),
            pro_model=os.getenv("GEMINI_PRO_MODEL", DEFAULT_PRO_MODEL),
            url_template=os.getenv("GEMINI_URL_TEMPLATE", DEFAULT_URL_TEMPLATE),
            timeout=_read_timeout(),
        )
