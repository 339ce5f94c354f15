"""VIN SCAN interface adapter package.

Architectural role:
- Defines the external interaction boundary for HTTP and CLI interfaces.
- Performs transport-level validation and response shaping.
- Delegates identification and valuation to `vinscan.core.adapter`.

Scope:
- Request lifecycle control for adapter concerns only.
- No direct oracle invocation is implemented in this package root.
"""
