"""Gemini REST transport for oracle requests.

Architectural role:
    Implements the `Oracle` protocol against the Gemini `generateContent`
    endpoint and extracts reply text from the provider payload.

Model invocation flow:
    `VehicleAIAdapter._ask` -> `GeminiClient.generate(request)` -> payload mapping
    (history, inline image, system instruction, structured output) -> HTTP POST
    -> concatenated text of the first candidate.

Retry behavior:
    No retry loop is implemented. Each HTTP call is attempted once. The timeout
    comes from `AdapterConfig.timeout`; `None` waits indefinitely.

Determinism:
    Payload construction is deterministic for a fixed request and config. Output
    text remains non-deterministic due to remote model inference.

Failure handling model:
    `requests` failures are logged and re-raised as `OracleTransportError` with a
    sanitized message (status code only, never the key or raw body). A reply
    without candidates or text parts is not an error: it yields empty text, and
    the adapter decides whether that degrades silently or raises.
"""

import logging

import requests

from vinscan.core.errors import OracleTransportError
from vinscan.llm.oracle_types import OracleRequest, OracleResponse
from vinscan.llm.provider_config import AdapterConfig


logger = logging.getLogger(__name__)

JSON_MIME_TYPE = "application/json"


def _build_sanitized_http_error(err: requests.exceptions.RequestException) -> OracleTransportError:
    """Build a transport error without exposing raw internals.

    Args:
        err: Request exception instance.

    Returns:
        `OracleTransportError` with optional status code.
    """
    status_code = None
    if getattr(err, "response", None) is not None:
        status_code = getattr(err.response, "status_code", None)

    if status_code:
        return OracleTransportError(f"GEMINI HTTP ERROR ({status_code})", status_code=status_code)
    return OracleTransportError("GEMINI HTTP ERROR")


def build_payload(request: OracleRequest) -> dict:
    """Map an `OracleRequest` to a Gemini `generateContent` body.

    Mapping:
        - History turns become `contents` entries with roles `user`/`model`.
        - The final user turn carries the inline image (if any) then the prompt.
        - `system_instruction` becomes `systemInstruction`.
        - `response_schema` enables JSON mode via `generationConfig`.
    """
    contents = [
        {"role": turn.role, "parts": [{"text": turn.text}]}
        for turn in request.history
    ]

    parts = []
    if request.image is not None:
        parts.append({
            "inlineData": {
                "mimeType": request.image.mime_type,
                "data": request.image.data,
            }
        })
    parts.append({"text": request.prompt})
    contents.append({"role": "user", "parts": parts})

    payload = {"contents": contents}

    if request.system_instruction:
        payload["systemInstruction"] = {"parts": [{"text": request.system_instruction}]}

    if request.expects_json:
        payload["generationConfig"] = {
            "responseMimeType": JSON_MIME_TYPE,
            "responseSchema": request.response_schema,
        }

    return payload


def extract_text(data: dict) -> str:
    """Return the concatenated text parts of the first candidate, or `""`."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""

    content = candidates[0].get("content") or {}
    texts = [
        part["text"]
        for part in content.get("parts") or []
        if isinstance(part, dict) and isinstance(part.get("text"), str)
        and not part.get("thought")
    ]
    return "".join(texts)


class GeminiClient:
    """Blocking Gemini transport.

    Args:
        config: Adapter configuration holding key, endpoint and timeout.
        session: Optional `requests` session (defaults to module-level `requests`).
    """

    def __init__(self, config: AdapterConfig, session=None):
        self.config = config
        self._http = session or requests

    def generate(self, request: OracleRequest) -> OracleResponse:
        url = self.config.url_template.format(model=request.model)
        headers = {
            "x-goog-api-key": self.config.api_key,
            "Content-Type": "application/json",
        }

        try:
            response = self._http.post(
                url,
                headers=headers,
                json=build_payload(request),
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as err:
            logger.exception("Gemini request failed for model=%s", request.model)
            raise _build_sanitized_http_error(err) from err

        return OracleResponse(text=extract_text(data), raw=data)
