"""VIN SCAN Maroc: AI-backed vehicle identification for the Moroccan market.

Package layout:
    - `core`: vehicle record types, error hierarchy, reply normalization, and the
      `VehicleAIAdapter` exposing the six identification/valuation operations.
    - `llm`: provider configuration, oracle request/response contracts, and the
      Gemini REST transport.
    - `prompting`: instruction texts and structured-output schemas per operation.
    - `api`: HTTP and CLI adapters plus image-input preprocessing.
"""

__version__ = "1.0.0"
