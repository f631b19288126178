"""Error taxonomy shared by services, transformers and controllers."""
from typing import Any, Optional


class ConfigurationError(Exception):
    """Raised at startup when required configuration is missing or invalid."""


class ServiceError(Exception):
    """Base class for failures that map onto an HTTP response.

    Attributes:
        message: Short, stable, user-facing message
        status_code: HTTP status the controller layer responds with
    """

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class InputValidationError(ServiceError):
    """Bad or missing client input."""

    status_code = 400
    default_message = "Invalid request"


class InvalidSportType(InputValidationError):
    """Sport code outside the supported set."""

    default_message = "Invalid sport type"


class UpstreamNotFound(ServiceError):
    """Provider answered 404 for the requested resource."""

    status_code = 404
    default_message = "Resource not found"


class UpstreamError(ServiceError):
    """Provider failure (non-404 status or network error).

    Attributes:
        upstream_status: Status code returned by the provider, None for network errors
        body: Decoded provider error body, kept for logging only
    """

    status_code = 502
    default_message = "Upstream request failed"

    def __init__(
        self,
        message: Optional[str] = None,
        upstream_status: Optional[int] = None,
        body: Any = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, status_code)
        self.upstream_status = upstream_status
        self.body = body


class UpstreamRunFailed(UpstreamError):
    """Assistant run ended in a terminal status other than completed."""

    default_message = "Assistant run failed"


class PollingTimeout(ServiceError):
    """Assistant run did not finish within the polling ceiling."""

    status_code = 504
    default_message = "Request timed out or failed"


class InvalidUpstreamData(ServiceError):
    """Provider payload is structurally invalid."""

    status_code = 500
    default_message = "Invalid data received from upstream"


class NoAssistantResponse(ServiceError):
    """Run completed but the thread holds no assistant text."""

    status_code = 500
    default_message = "No response from assistant"
