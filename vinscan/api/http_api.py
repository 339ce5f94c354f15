"""
HTTP API adapter for the VIN SCAN engine.

Architectural role:
- Expose the six adapter operations to the browser client as JSON endpoints.
- Enforce adapter-level input validation (pydantic request schemas, image checks).
- Delegate all oracle work to `vinscan.core.adapter.VehicleAIAdapter`.

Endpoint responsibilities:
- `GET /health`: liveness probe.
- `POST /api/vin/decode`: text VIN decode -> partial record.
- `POST /api/scan`: image decode -> normalized partial record.
- `POST /api/scan/refine`: image refinement for a known brand -> partial record.
- `POST /api/vin/report`: Markdown expertise report -> `{"report": ...}`.
- `POST /api/chat`: conversational follow-up -> `{"answer": ...}`.
- `POST /api/valuation`: market-value estimate -> partial record.

Input validation behavior:
- Schema violations -> HTTP 422 (FastAPI default).
- Rejected images -> HTTP 400 `{"error": ...}`.

Error handling strategy:
- `ConfigurationError` -> HTTP 500 `{"error": "CONFIGURATION_ERROR"}`.
- `OracleError` subclasses -> HTTP 502 `{"error": <code>}`.
- Other exceptions (including malformed oracle JSON) follow FastAPI default
  handling.

Side effects:
- Loads environment variables at import time via `load_dotenv()`.
- Builds the adapter lazily on first request and caches it.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from functools import lru_cache
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from vinscan.api.multimodal.image_input import validate_encoded_image
from vinscan.core.adapter import VehicleAIAdapter, create_adapter
from vinscan.core.errors import ConfigurationError, ImageInputError, OracleError
from vinscan.core.vehicle_types import ChatTurn, ScanMode, VehicleAnalysis


logger = logging.getLogger(__name__)

app = FastAPI(title="VIN SCAN Maroc")


@lru_cache(maxsize=1)
def get_adapter() -> VehicleAIAdapter:
    """Return the process-wide adapter built from the environment."""
    return create_adapter()


# ============================================================
# Request Schemas
# ============================================================

class VinRequest(BaseModel):
    vin: str = Field(..., min_length=1)


class ScanRequest(BaseModel):
    image: str = Field(..., min_length=1)
    mode: ScanMode = ScanMode.VIN


class RefineRequest(BaseModel):
    image: str = Field(..., min_length=1)
    brand: str = Field(..., min_length=1)


class ChatTurnPayload(BaseModel):
    role: str = Field(..., pattern="^(user|model)$")
    text: str


class ChatRequest(BaseModel):
    history: List[ChatTurnPayload] = []
    question: str = Field(..., min_length=1)


class ValuationRequest(BaseModel):
    vehicle: VehicleAnalysis


# ============================================================
# Error Mapping
# ============================================================

@app.exception_handler(OracleError)
async def oracle_error_handler(request: Request, exc: OracleError):
    logger.error("Oracle failure on %s: %s", request.url.path, exc.code)
    return JSONResponse(status_code=502, content={"error": exc.code})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Adapter configuration error: %s", exc)
    return JSONResponse(status_code=500, content={"error": "CONFIGURATION_ERROR"})


@app.exception_handler(ImageInputError)
async def image_error_handler(request: Request, exc: ImageInputError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


# ============================================================
# Endpoints
# ============================================================

@app.get("/health")
def health() -> Dict[str, Any]:
    return {"status": "ok"}


@app.post("/api/vin/decode")
async def decode_vin(payload: VinRequest, adapter: VehicleAIAdapter = Depends(get_adapter)):
    return await adapter.decode_by_vin(payload.vin)


@app.post("/api/scan")
async def scan_image(payload: ScanRequest, adapter: VehicleAIAdapter = Depends(get_adapter)):
    image = validate_encoded_image(payload.image)
    return await adapter.decode_from_image(image, payload.mode)


@app.post("/api/scan/refine")
async def refine_scan(payload: RefineRequest, adapter: VehicleAIAdapter = Depends(get_adapter)):
    image = validate_encoded_image(payload.image)
    return await adapter.refine_from_image(image, payload.brand)


@app.post("/api/vin/report")
async def vin_report(payload: VinRequest, adapter: VehicleAIAdapter = Depends(get_adapter)):
    report = await adapter.generate_report(payload.vin)
    return {"report": report}


@app.post("/api/chat")
async def chat(payload: ChatRequest, adapter: VehicleAIAdapter = Depends(get_adapter)):
    history = [ChatTurn(role=turn.role, text=turn.text) for turn in payload.history]
    answer = await adapter.chat(history, payload.question)
    return {"answer": answer}


@app.post("/api/valuation")
async def valuation(payload: ValuationRequest, adapter: VehicleAIAdapter = Depends(get_adapter)):
    return await adapter.estimate_market_value(payload.vehicle)
