"""
Result types shared by the dispatcher and every AI backend.

A backend never raises for an upstream problem; it returns Failure with one of
the ErrorKind values below and the dispatcher turns that into an HTTP answer.
"""
from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    # request validation (dispatcher)
    INVALID_PAYLOAD      = "InvalidPayload"
    MISSING_INPUT        = "MissingInput"
    INPUT_TOO_LARGE      = "InputTooLarge"
    UNKNOWN_ROUTE        = "UnknownRoute"
    CONFIGURATION_ERROR  = "ConfigurationError"
    # upstream (backends)
    BAD_REQUEST          = "BadRequest"
    AUTH_FAILURE         = "AuthFailure"
    RATE_LIMITED         = "RateLimited"
    UPSTREAM_UNAVAILABLE = "UpstreamUnavailable"
    UNKNOWN_UPSTREAM     = "UnknownUpstreamError"
    CONNECTION_FAILURE   = "ConnectionFailure"
    EMPTY_RESPONSE       = "EmptyResponse"
    # local bug while handling a call
    INTERNAL_ERROR       = "InternalError"

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS.get(self, 500)


_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_PAYLOAD:      "Request body must be a JSON object.",
    ErrorKind.MISSING_INPUT:        "Missing required field: prompt or text",
    ErrorKind.INPUT_TOO_LARGE:      "Input text is too long. Maximum 50,000 characters allowed.",
    ErrorKind.UNKNOWN_ROUTE:        "Endpoint not found",
    ErrorKind.CONFIGURATION_ERROR:  "AI service configuration error. API key not found.",
    ErrorKind.BAD_REQUEST:          "Invalid request to AI service. Please check your input.",
    ErrorKind.AUTH_FAILURE:         "AI service authentication failed. Please check API key.",
    ErrorKind.RATE_LIMITED:         "AI service rate limit exceeded. Please try again later.",
    ErrorKind.UPSTREAM_UNAVAILABLE: "AI service temporarily unavailable. Please try again.",
    ErrorKind.UNKNOWN_UPSTREAM:     "AI service request failed",
    ErrorKind.CONNECTION_FAILURE:   ("Failed to connect to AI service. "
                                     "Please check your connection and try again."),
    ErrorKind.EMPTY_RESPONSE:       "AI service returned empty response",
    ErrorKind.INTERNAL_ERROR:       "Internal server error. Please try again.",
}

# Upstream auth problems are our misconfiguration, not the caller's: 500.
_HTTP_STATUS: dict[ErrorKind, int] = {
    ErrorKind.INVALID_PAYLOAD:      400,
    ErrorKind.MISSING_INPUT:        400,
    ErrorKind.INPUT_TOO_LARGE:      400,
    ErrorKind.UNKNOWN_ROUTE:        404,
    ErrorKind.CONFIGURATION_ERROR:  500,
    ErrorKind.BAD_REQUEST:          400,
    ErrorKind.AUTH_FAILURE:         500,
    ErrorKind.RATE_LIMITED:         429,
    ErrorKind.UPSTREAM_UNAVAILABLE: 503,
    ErrorKind.CONNECTION_FAILURE:   503,
}


@dataclass(frozen=True)
class Success:
    content: str

    ok = True


@dataclass(frozen=True)
class Failure:
    kind:    ErrorKind
    message: str = ""

    ok = False

    def __post_init__(self):
        if not self.message:
            object.__setattr__(self, "message", self.kind.message)


GenerationResult = Success | Failure


def classify_status(status_code: int) -> ErrorKind:
    """Map an upstream HTTP error status to the caller-facing error kind."""
    if status_code == 400:
        return ErrorKind.BAD_REQUEST
    if status_code in (401, 403):
        return ErrorKind.AUTH_FAILURE
    if status_code == 429:
        return ErrorKind.RATE_LIMITED
    if status_code >= 500:
        return ErrorKind.UPSTREAM_UNAVAILABLE
    return ErrorKind.UNKNOWN_UPSTREAM


def first_fragment(text) -> GenerationResult:
    """Wrap the first generated fragment; a missing or blank one is a failure."""
    if not isinstance(text, str) or not text.strip():
        return Failure(ErrorKind.EMPTY_RESPONSE)
    return Success(text.strip())
