"""Exception hierarchy for VIN SCAN.

Failure classes:
    - Configuration failures (`ConfigurationError`) are raised synchronously at
      adapter construction, before any network call.
    - Oracle failures (`OracleError` subclasses) carry a stable `code` string that
      outer adapters surface to clients unchanged.
    - Image preprocessing rejections (`ImageInputError`) are also `ValueError`s so
      generic validation handlers catch them.

Malformed JSON replies are deliberately not wrapped: `json.JSONDecodeError`
propagates from the adapter as-is.
"""


class VinScanError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(VinScanError):
    """Raised when required configuration (the API key) is missing."""


class OracleError(VinScanError):
    """Base class for failures attributable to the model oracle.

    Attributes:
        code: Stable machine-readable failure identifier.
    """

    code = "IA_ERROR"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)


class EmptyOracleResponseError(OracleError):
    """The oracle returned no text for an image decode."""

    code = "IA_EMPTY_RESPONSE"


class EstimationFailedError(OracleError):
    """The oracle returned no text for a market-value estimate."""

    code = "IA_ESTIMATION_FAILED"


class OracleTransportError(OracleError):
    """The HTTP call to the oracle failed (network error or non-2xx status).

    Attributes:
        status_code: Upstream HTTP status when one was received, else `None`.
    """

    code = "IA_TRANSPORT_ERROR"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ImageInputError(VinScanError, ValueError):
    """Raised when an image reference cannot be accepted for scanning."""
