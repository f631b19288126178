"""HTTP client adapter for outbound provider calls."""
import logging
from typing import Any, Dict, Optional

import httpx

from portfolio_proxy.errors import InvalidUpstreamData, UpstreamError
from portfolio_proxy.utils.colored_logger import get_provider_logger, quiet_transport_loggers

logger = logging.getLogger(__name__)
http_logger = get_provider_logger(__name__, 'http')


def extract_error_message(body: Any) -> Optional[str]:
    """Pull a short human-readable message out of a provider error body.

    Handles the shapes seen across providers: ``{"message": ...}``,
    ``{"error": "..."}``, ``{"error": {"message": ...}}`` and the same
    nested under ``data``.

    Args:
        body: Decoded error body (dict, str or None)

    Returns:
        Message string or None
    """
    if isinstance(body, str):
        return body.strip()[:200] or None
    if not isinstance(body, dict):
        return None

    for source in (body, body.get("data")):
        if not isinstance(source, dict):
            continue
        message = source.get("message")
        if isinstance(message, str) and message:
            return message
        error = source.get("error")
        if isinstance(error, str) and error:
            return error
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return None


class HttpClientService:
    """Thin async JSON client with a per-call timeout and structured failures."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = "Portfolio-Proxy/1.0",
        client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize HTTP client service.

        Args:
            timeout: Per-call timeout in seconds
            user_agent: User-Agent header sent with every request
            client: Preconfigured httpx client (tests pass one with a mock transport)
        """
        self._headers = {
            "User-Agent": user_agent,
            "Accept": "application/json",
        }
        self._client = client or httpx.AsyncClient(timeout=timeout)
        quiet_transport_loggers()
        self.timeout = timeout

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        error_message: str = "Upstream request failed"
    ) -> Any:
        """Issue a GET request and return the decoded JSON body.

        Args:
            url: Absolute URL without secrets in it
            params: Query parameters (may carry API keys; never logged)
            headers: Extra headers
            error_message: Fallback message when the provider gives none

        Returns:
            Decoded JSON body

        Raises:
            UpstreamError: On non-2xx status or transport failure
            InvalidUpstreamData: If the body is not JSON
        """
        return await self._request("GET", url, params=params, headers=headers, error_message=error_message)

    async def post_json(
        self,
        url: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        error_message: str = "Upstream request failed"
    ) -> Any:
        """Issue a POST request with a JSON body and return the decoded JSON body.

        Args:
            url: Absolute URL
            json: Request body
            headers: Extra headers
            error_message: Fallback message when the provider gives none

        Returns:
            Decoded JSON body

        Raises:
            UpstreamError: On non-2xx status or transport failure
            InvalidUpstreamData: If the body is not JSON
        """
        return await self._request("POST", url, json=json, headers=headers, error_message=error_message)

    async def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        error_message: str = "Upstream request failed"
    ) -> Any:
        request_headers = self._build_headers(headers)
        http_logger.debug(f"{method} {url}")

        try:
            response = await self._client.request(
                method, url, params=params, json=json, headers=request_headers
            )
        except httpx.TimeoutException as e:
            logger.error(f"{method} {url} timed out after {self.timeout}s")
            raise UpstreamError(f"{error_message}: upstream timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} transport error: {e}")
            raise UpstreamError(error_message) from e

        if not response.is_success:
            body = self._decode_error_body(response)
            logger.error(f"{method} {url} HTTP {response.status_code}: {str(body)[:200]}")
            raise UpstreamError(
                extract_error_message(body) or error_message,
                upstream_status=response.status_code,
                body=body,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{method} {url} returned non-JSON body: {response.text[:200]}")
            raise InvalidUpstreamData(f"{error_message}: invalid JSON from upstream") from e

    @staticmethod
    def _decode_error_body(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    def _build_headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Build request headers.

        Returns:
            Dictionary of headers
        """
        headers = self._headers.copy()
        if extra:
            headers.update(extra)
        return headers
