"""AI adapter: the six vehicle identification and valuation operations.

Architectural role:
    Sits between outer interfaces (HTTP/CLI) and the oracle transport. Each
    operation builds instruction text and an optional response schema, submits
    exactly one request, then parses and normalizes the reply.

Control-flow model (per call):
    1. Build instruction/prompt (`vinscan.prompting.prompt_builder`).
    2. Attach schema (`vinscan.prompting.schemas`) and optional inline image.
    3. Run the blocking `oracle.generate` in a worker thread.
    4. Apply the operation's empty-reply policy, then parse/normalize.

Empty-reply policy (asymmetric):
    - `decode_by_vin`, `refine_from_image`: return `{}`.
    - `decode_from_image`: raise `EmptyOracleResponseError`.
    - `estimate_market_value`: raise `EstimationFailedError`.
    - `generate_report`, `chat`: return a fixed fallback string.
    Silent degradations are logged at WARNING.

Error handling strategy:
    No retry, no caching, no timeout beyond the transport configuration.
    Transport errors and malformed JSON propagate to the caller unchanged.

Determinism:
    Request construction and normalization are deterministic. Oracle output is
    not.
"""

import asyncio
import logging
from typing import Any, Iterable, Mapping, Optional, Union

from vinscan.core import normalization
from vinscan.core.errors import ConfigurationError, EmptyOracleResponseError, EstimationFailedError
from vinscan.core.vehicle_types import ChatTurn, ScanMode, VehicleAnalysis
from vinscan.llm.client import GeminiClient
from vinscan.llm.oracle_types import Oracle, OracleRequest
from vinscan.llm.provider_config import AdapterConfig
from vinscan.prompting import prompt_builder, schemas


logger = logging.getLogger(__name__)

REPORT_FALLBACK = "Impossible de générer le rapport pour ce VIN."
CHAT_FALLBACK = "Désolé, je n'ai pas pu traiter votre demande."


class VehicleAIAdapter:
    """Oracle-backed vehicle expert.

    Args:
        config: Explicit configuration; must carry an API key.
        oracle: Object implementing `generate(request) -> response`. Defaults to
            a `GeminiClient` built from `config`.

    Raises:
        ConfigurationError: `config.api_key` is missing or blank.
    """

    def __init__(self, config: AdapterConfig, oracle: Optional[Oracle] = None):
        if not config.api_key:
            raise ConfigurationError("Clé API Google Gemini manquante")

        self.config = config
        self.oracle = oracle if oracle is not None else GeminiClient(config)

    async def _ask(self, operation: str, request: OracleRequest) -> str:
        """Send one request and return the reply text (possibly empty)."""
        logger.info("Oracle call: operation=%s model=%s", operation, request.model)
        response = await asyncio.to_thread(self.oracle.generate, request)
        return response.text or ""

    # =========================================================
    # IDENTIFICATION
    # =========================================================

    async def decode_by_vin(self, vin: str) -> dict:
        """Decode a typed VIN; returns the raw parsed partial or `{}`."""
        text = await self._ask("decode_by_vin", OracleRequest(
            model=self.config.flash_model,
            prompt=prompt_builder.build_vin_decode_prompt(vin),
            system_instruction=prompt_builder.build_vin_decode_instruction(vin),
            response_schema=schemas.VIN_DECODE_SCHEMA,
        ))
        if not text:
            logger.warning("Empty oracle reply for VIN decode; returning empty partial")
            return {}
        return normalization.parse_json_reply(text)

    async def decode_from_image(self, image: str, mode: Union[ScanMode, str] = ScanMode.VIN) -> dict:
        """Extract VIN and identity from a photograph.

        Args:
            image: Base64 payload, with or without a data-URI header.
            mode: Kind of photograph (VIN plate, registration card, vehicle).

        Returns:
            Normalized partial with all seven scan fields present.

        Raises:
            EmptyOracleResponseError: the oracle returned no text.
            json.JSONDecodeError: the reply is not valid JSON.
        """
        mode = ScanMode(mode)
        text = await self._ask("decode_from_image", OracleRequest(
            model=self.config.flash_model,
            prompt=prompt_builder.build_image_decode_prompt(mode),
            system_instruction=prompt_builder.build_image_decode_instruction(mode),
            response_schema=schemas.IMAGE_DECODE_SCHEMA,
            image=normalization.split_data_uri(image),
        ))
        if not text:
            raise EmptyOracleResponseError()
        return normalization.normalize_image_scan(normalization.parse_json_reply(text))

    async def refine_from_image(self, image: str, brand: str) -> dict:
        """Refine model, engine and color for an already identified brand."""
        text = await self._ask("refine_from_image", OracleRequest(
            model=self.config.flash_model,
            prompt=prompt_builder.build_refine_prompt(brand),
            system_instruction=prompt_builder.build_refine_instruction(brand),
            response_schema=schemas.REFINE_SCHEMA,
            image=normalization.split_data_uri(image),
        ))
        if not text:
            logger.warning("Empty oracle reply for refinement of brand=%s", brand)
            return {}
        return normalization.parse_json_reply(text)

    # =========================================================
    # NARRATIVE
    # =========================================================

    async def generate_report(self, vin: str) -> str:
        """Produce the Markdown expertise report, or a fixed fallback."""
        text = await self._ask("generate_report", OracleRequest(
            model=self.config.pro_model,
            prompt=prompt_builder.build_report_prompt(vin),
            system_instruction=prompt_builder.build_report_instruction(vin),
        ))
        report = text.strip()
        if not report:
            logger.warning("Empty oracle reply for report; using fallback text")
            return REPORT_FALLBACK
        return report

    async def chat(self, history: Iterable[Union[ChatTurn, Mapping[str, str]]], question: str) -> str:
        """Answer one follow-up question given the full prior conversation.

        `history` is replayed as-is and never modified; the caller appends the
        new exchange if it wants to keep it.
        """
        turns = tuple(t if isinstance(t, ChatTurn) else ChatTurn(**t) for t in history)
        text = await self._ask("chat", OracleRequest(
            model=self.config.flash_model,
            prompt=question,
            system_instruction=prompt_builder.CHAT_INSTRUCTION,
            history=turns,
        ))
        answer = text.strip()
        if not answer:
            logger.warning("Empty oracle reply for chat after %d turns", len(turns))
            return CHAT_FALLBACK
        return answer

    # =========================================================
    # VALUATION
    # =========================================================

    async def estimate_market_value(self, vehicle: Union[VehicleAnalysis, Mapping[str, Any]]) -> dict:
        """Estimate a MAD price range for the vehicle.

        Raises:
            EstimationFailedError: the oracle returned no text.
        """
        if isinstance(vehicle, VehicleAnalysis):
            vehicle = vehicle.to_partial()

        text = await self._ask("estimate_market_value", OracleRequest(
            model=self.config.pro_model,
            prompt=prompt_builder.VALUATION_PROMPT,
            system_instruction=prompt_builder.build_valuation_instruction(vehicle),
            response_schema=schemas.MARKET_VALUE_SCHEMA,
        ))
        if not text:
            raise EstimationFailedError()
        return normalization.parse_json_reply(text)


def create_adapter(config: Optional[AdapterConfig] = None, oracle: Optional[Oracle] = None) -> VehicleAIAdapter:
    """Build an adapter from `config`, or from the environment when omitted."""
    return VehicleAIAdapter(config or AdapterConfig.from_env(), oracle=oracle)
