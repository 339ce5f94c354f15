"""Multimodal preprocessing package for interface adapters.

Architectural role:
- Converts image references into validated data URIs for scan operations.
- Applies size/format constraints before any oracle call.

Scope:
- Content preprocessing only; no HTTP endpoint definitions.
"""
