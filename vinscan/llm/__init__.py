"""Oracle access package.

Architectural role:
    Provides provider configuration, the request/response contracts of the model
    oracle, and the Gemini transport used by `vinscan.core.adapter`.

Module split:
    - `provider_config`: environment-driven credentials, model names, endpoint.
    - `oracle_types`: `OracleRequest`, `OracleResponse`, and the `Oracle` protocol.
    - `client`: Gemini REST transport and response-text extraction.
"""
