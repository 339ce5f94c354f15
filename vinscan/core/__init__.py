"""Core identification layer.

Architectural role:
    Owns the vehicle data contracts and the AI adapter that sits between outer
    interfaces (HTTP/CLI) and the oracle transport in `vinscan.llm`.

Composition:
    - `vehicle_types`: `VehicleAnalysis`, `FuelType`, `ScanMode`, conversation turns.
    - `errors`: exception hierarchy shared by all layers.
    - `normalization`: deterministic reply parsing and field repair.
    - `adapter`: the six request operations.

Determinism and side effects:
    Package import is side-effect free. Network side effects happen only inside
    adapter operations through the injected oracle.
"""
