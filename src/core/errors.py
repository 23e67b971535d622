"""
Error taxonomy for the upload relay.

Every failure inside the relay is raised as one of these and turned into a
JSON response by a single exception handler in ``src.api.main``:

    {"message": "...", "error": "..."}

``error`` is omitted for client-side mistakes (wrong verb, missing file).
"""

from typing import Any

PROCESSING_FAILED = "Error processing invoice"


class RelayError(Exception):
    """Base class for failures surfaced by the upload relay."""

    status_code: int = 500

    def __init__(self, error: Any = None, message: str = PROCESSING_FAILED,
                 status_code: int | None = None, headers: dict | None = None):
        super().__init__(message if error is None else error)
        self.message = message
        self.error = error
        if status_code is not None:
            self.status_code = status_code
        self.headers = headers

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class MethodNotAllowed(RelayError):
    status_code = 405

    def __init__(self, allowed: str = "POST"):
        super().__init__(message="Method not allowed", headers={"Allow": allowed})


class BadRequest(RelayError):
    status_code = 400

    def __init__(self, message: str = "No file uploaded"):
        super().__init__(message=message)


class ConfigurationError(RelayError):
    status_code = 500


class PayloadTooLarge(RelayError):
    status_code = 413


class UpstreamError(RelayError):
    """Vision Parser answered with a non-2xx status, or could not be reached."""

    def __init__(self, error: Any, status_code: int | None = None):
        super().__init__(error, status_code=status_code or 500)


class InternalError(RelayError):
    status_code = 500
