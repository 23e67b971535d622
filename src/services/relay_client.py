import json
import httpx
from loguru import logger
from pydantic import ValidationError
from ..core.config import settings
from ..models.invoice import ExtractedInvoice

FALLBACK_ERROR = "Failed to process invoice"
TRANSPORT_ERROR = "An error occurred while processing the invoice"
INVALID_PAYLOAD = "Unexpected response from invoice parser"


class RelayClientError(Exception):
    """Relay call failed; `message` is what the user gets to see."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


async def submit_invoice(
    filename: str,
    content: bytes,
    content_type: str | None = None,
    api_key: str | None = None,
    relay_url: str | None = None,
) -> ExtractedInvoice:
    """Send one file to the upload relay and return the extracted invoice."""
    url = relay_url or settings.relay_url
    files = {"file": (filename, content, content_type or "application/octet-stream")}
    data = {"apiKey": api_key} if api_key else None

    try:
        async with httpx.AsyncClient(timeout=settings.relay_timeout) as client:
            r = await client.post(url, files=files, data=data)
    except httpx.RequestError as e:
        logger.error("Relay request failed", error=repr(e), relay_url=url)
        raise RelayClientError(TRANSPORT_ERROR) from e

    try:
        body = r.json()
    except ValueError:
        body = None

    if not r.is_success:
        message = None
        if isinstance(body, dict):
            message = body.get("error") or body.get("message")
        logger.warning("Relay returned an error", status=r.status_code, message=message)
        if message and not isinstance(message, str):
            message = json.dumps(message)
        raise RelayClientError(message or FALLBACK_ERROR, status_code=r.status_code)

    if not isinstance(body, dict) or not isinstance(body.get("data"), dict):
        raise RelayClientError(INVALID_PAYLOAD, status_code=r.status_code)
    try:
        return ExtractedInvoice.model_validate(body["data"])
    except ValidationError as e:
        logger.warning(f"Relay payload failed validation: {e}")
        raise RelayClientError(INVALID_PAYLOAD, status_code=r.status_code) from e
