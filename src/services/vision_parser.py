from pathlib import Path
from typing import Any
import httpx
from loguru import logger
from ..core.errors import ConfigurationError, UpstreamError

RESPONSE_TYPE = "simple"


class VisionParserRelay:
    """
    Forwards an uploaded invoice to the Vision Parser API.

    The API key is injected by the caller (see ``src.api.deps.get_relay``) so the
    relay never reads process configuration itself.

    Usage:
        relay = VisionParserRelay(api_key="...", endpoint=settings.vision_parser_api_url)
        response = await relay.forward(path, filename="invoice.png")
        response.content  # raw JSON body from Vision Parser
    """

    def __init__(
        self,
        api_key: str | None,
        endpoint: str,
        verify_tls: bool = True,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.verify_tls = verify_tls
        self.timeout = timeout
        self.transport = transport

    def resolve_api_key(self, override: str | None = None) -> str:
        """A non-empty caller-supplied key wins over the configured one."""
        if override and override.strip():
            return override.strip()
        if self.api_key:
            return self.api_key
        raise ConfigurationError("Vision Parser API key not configured")

    async def forward(
        self,
        path: Path,
        filename: str | None = None,
        content_type: str | None = None,
        api_key: str | None = None,
    ) -> httpx.Response:
        """
        POST the file at `path` as multipart `file` plus `response_type=simple`.

        Returns the upstream response for any 2xx status.

        Raises:
            ConfigurationError: no API key configured or supplied
            UpstreamError: non-2xx reply (carries its status) or transport failure (500)
        """
        key = self.resolve_api_key(api_key)

        if not self.verify_tls:
            logger.warning(
                "TLS certificate verification is disabled for Vision Parser requests",
                endpoint=self.endpoint,
            )

        logger.info("Preparing API request", file=filename or path.name, size_bytes=path.stat().st_size)
        try:
            async with httpx.AsyncClient(
                verify=self.verify_tls, timeout=self.timeout, transport=self.transport
            ) as client:
                with open(path, "rb") as f:
                    files = {"file": (filename or path.name, f, content_type or "application/octet-stream")}
                    logger.info("Sending request to Vision Parser API", endpoint=self.endpoint)
                    response = await client.post(
                        self.endpoint,
                        files=files,
                        data={"response_type": RESPONSE_TYPE},
                        headers={"api_key": key},
                    )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            detail = _error_detail(e.response) or f"Request failed with status code {status}"
            logger.error(
                "Vision Parser returned an error",
                status=status,
                response=e.response.text[:500],
            )
            raise UpstreamError(detail, status_code=status) from e
        except httpx.RequestError as e:
            logger.error(f"Vision Parser request failed: {e!r}")
            raise UpstreamError(str(e) or e.__class__.__name__) from e

        logger.info("API response received", status=response.status_code, size_bytes=len(response.content))
        return response


def _error_detail(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("detail"):
        return body["detail"]
    return None
