"""Request/response contracts between the adapter and the model oracle.

Architectural role:
    Decouples the adapter's prompt shaping and normalization from any concrete
    transport. `GeminiClient` implements `Oracle` against the live API; tests
    substitute a deterministic stub returning fixed text.

Determinism:
    The data classes are purely structural and state-free.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from vinscan.core.vehicle_types import ChatTurn


@dataclass(frozen=True)
class InlineImage:
    """Base64-encoded image bytes forwarded inline with the prompt."""

    mime_type: str
    data: str


@dataclass(frozen=True)
class OracleRequest:
    """One generation request.

    Attributes:
        model: Model identifier.
        prompt: Text of the final user turn.
        system_instruction: Persona/task instruction, sent outside the turns.
        response_schema: Structured-output schema (Gemini `Type` names); when
            set, the reply is requested as `application/json`.
        image: Optional inline image attached before the prompt text.
        history: Prior turns replayed ahead of the final user turn.
    """

    model: str
    prompt: str
    system_instruction: Optional[str] = None
    response_schema: Optional[dict] = None
    image: Optional[InlineImage] = None
    history: tuple[ChatTurn, ...] = ()

    @property
    def expects_json(self) -> bool:
        return self.response_schema is not None


@dataclass(frozen=True)
class OracleResponse:
    """Reply text plus the raw provider payload it was extracted from."""

    text: str = ""
    raw: dict = field(default_factory=dict)


class Oracle(Protocol):
    """Minimal capability required by `VehicleAIAdapter`."""

    def generate(self, request: OracleRequest) -> OracleResponse:
        """Submit one request and return the reply."""
        ...


__all__ = ["InlineImage", "Oracle", "OracleRequest", "OracleResponse"]
