"""Error taxonomy for quick limit order placement.

Every failure kind is a distinct exception class so callers can react to
each cause separately. Each class maps to a ``StatusCode`` which the CLI
uses for its message and exit status. Nothing here is retried.
"""

from enum import IntEnum


class StatusCode(IntEnum):
    """Result code of an order placement or one of its internal steps."""

    SUCCESS = 0
    INTERNAL_ERROR_GENERIC = 1
    INTERNAL_ERROR_PARSING_RAW_URL = 2
    INTERNAL_ERROR_CREATING_HTTP_REQUEST = 3
    INTERNAL_ERROR_PARSING_JSON_OBJECT = 4
    INTERNAL_ERROR_NO_TICK_STEP_AVAILABLE = 5
    ERROR_API_RESPONSE = 6
    ERROR_JSON_PARSING = 7
    ERROR_NUMERIC_JSON_PARSING = 8
    MALFORMED_API_RESPONSE_FORMAT = 9
    API_EMPTY_RESULT = 10
    ERROR_INCORRECT_PARAMETER_VALUE = 11
    CONFIGURATION_ERROR = 12


class QuickyError(Exception):
    """Base exception for all order placement errors."""

    status: StatusCode = StatusCode.INTERNAL_ERROR_GENERIC


class InternalError(QuickyError):
    """Raised for conditions nothing else anticipates."""


class ConfigurationError(QuickyError):
    """Raised when credentials or other settings are missing or invalid."""

    status = StatusCode.CONFIGURATION_ERROR


class NoTickStepAvailableError(QuickyError):
    """Raised when the symbol has no known tick size."""

    status = StatusCode.INTERNAL_ERROR_NO_TICK_STEP_AVAILABLE


class IncorrectParameterValueError(QuickyError):
    """Raised for a zero order quantity."""

    status = StatusCode.ERROR_INCORRECT_PARAMETER_VALUE


class ParsingRawUrlError(QuickyError):
    """Raised when an endpoint URL cannot be parsed."""

    status = StatusCode.INTERNAL_ERROR_PARSING_RAW_URL


class CreatingHttpRequestError(QuickyError):
    """Raised when an HTTP request object cannot be built."""

    status = StatusCode.INTERNAL_ERROR_CREATING_HTTP_REQUEST


class ParsingJsonObjectError(QuickyError):
    """Raised when the outgoing order body cannot be serialized."""

    status = StatusCode.INTERNAL_ERROR_PARSING_JSON_OBJECT


class JsonParsingError(QuickyError):
    """Raised when the exchange's reply cannot be decoded."""

    status = StatusCode.ERROR_JSON_PARSING


class ApiResponseError(QuickyError):
    """Raised when the exchange answers with a non-zero ``ret_code``.

    Args:
        ret_code: Return code reported by the exchange.
        ret_msg: Exchange message, kept for diagnostics.
    """

    status = StatusCode.ERROR_API_RESPONSE

    def __init__(self, ret_code: int, ret_msg: str) -> None:
        super().__init__(f"ret_code={ret_code}: {ret_msg}")
        self.ret_code = ret_code
        self.ret_msg = ret_msg


class TransportError(ApiResponseError):
    """Raised when the HTTP round trip itself fails (network, timeout).

    Shares the API response status code but carries no exchange code.
    """

    def __init__(self, message: str) -> None:
        super().__init__(ret_code=-1, ret_msg=message)


class NumericJsonParsingError(QuickyError):
    """Raised when a price field is not a usable number."""

    status = StatusCode.ERROR_NUMERIC_JSON_PARSING


class ApiEmptyResultError(QuickyError):
    """Raised when the exchange returns no rows for a valid request."""

    status = StatusCode.API_EMPTY_RESULT


class MalformedApiResponseFormatError(QuickyError):
    """Reserved for replies whose fields do not follow the documented format."""

    status = StatusCode.MALFORMED_API_RESPONSE_FORMAT
