"""GatewayTransport - HTTP and WebSocket access to the TopstepX gateway"""

import logging
from typing import Any

import httpx
from loguru import logger
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import WebSocketException

from topstepx.shared.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_HEADERS,
    DEFAULT_TIMEOUT_SECONDS,
)
from topstepx.shared.exceptions import TransportError

from .protocols import TransportResponse

MASKED = "***"


class _LoguruHandler(logging.Handler):
    """Forwards records from the ``httpx`` stdlib logger to loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(source=record.name).opt(
            depth=6, exception=record.exc_info
        ).log(level, record.getMessage())


def bridge_httpx_logging() -> None:
    """Attach the loguru bridge to the ``httpx`` logger once

    The logger's level and propagation are left as the application set them.
    """
    httpx_logger = logging.getLogger("httpx")
    if not any(isinstance(h, _LoguruHandler) for h in httpx_logger.handlers):
        httpx_logger.addHandler(_LoguruHandler())


def _masked_headers(headers: httpx.Headers) -> dict[str, str]:
    return {
        name: MASKED if name.lower() == "authorization" else value
        for name, value in headers.items()
    }


class GatewayTransport:
    """Low-level HTTP/socket adapter with no session knowledge

    Responsibilities:
    - Default header set and settable bearer Authorization header
    - JSON request execution against the base URL
    - Mapping network failures and non-2xx statuses to TransportError
    - Opening live-data sockets
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize transport

        Args:
            base_url: Gateway API base URL
            timeout: Request timeout in seconds (the only ceiling applied)
            transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._headers: dict[str, str] = dict(DEFAULT_HEADERS)
        self._http_client: httpx.AsyncClient | None = None
        bridge_httpx_logging()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def headers(self) -> dict[str, str]:
        """Copy of the headers sent with each request"""
        return dict(self._headers)

    @property
    def authorization(self) -> str | None:
        return self._headers.get("Authorization")

    def set_bearer_token(self, token: str) -> None:
        self._headers["Authorization"] = f"Bearer {token}"

    def clear_bearer_token(self) -> None:
        self._headers.pop("Authorization", None)

    def _build_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            event_hooks={
                "request": [self._trace_request],
                "response": [self._trace_response],
            },
        )

    @staticmethod
    async def _trace_request(request: httpx.Request) -> None:
        logger.debug(
            f"-> {request.method} {request.url.path} "
            f"headers={_masked_headers(request.headers)}"
        )

    @staticmethod
    async def _trace_response(response: httpx.Response) -> None:
        request = response.request
        logger.debug(
            f"<- {response.status_code} {request.method} {request.url.path}"
        )

    async def request(
        self, method: str, path: str, json_body: Any = None
    ) -> TransportResponse:
        """Make a JSON request against the base URL

        Args:
            method: HTTP method (GET, POST)
            path: Endpoint path (e.g. "/Auth/loginKey")
            json_body: JSON payload

        Returns:
            TransportResponse with status and decoded body

        Raises:
            TransportError: On network errors, timeouts and non-2xx statuses
        """
        if self._http_client is None:
            self._http_client = self._build_http_client()

        try:
            response = await self._http_client.request(
                method.upper(), path, json=json_body, headers=self._headers
            )
        except httpx.RequestError as e:
            logger.error(f"Network error on {method.upper()} {path}: {e}")
            raise TransportError(f"Network error: {e}") from e

        data = self._decode(response)

        if response.is_success:
            return TransportResponse(status=response.status_code, data=data)

        logger.error(f"Response status: {response.status_code}")
        logger.error(f"Response data: {data}")
        raise TransportError(
            f"Request failed with status code {response.status_code}",
            status=response.status_code,
            data=data,
        )

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """Decode a JSON body, falling back to text for non-JSON payloads."""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def websocket_url(self, path: str) -> str:
        """Swap the http(s) scheme for ws(s) and append ``path``."""
        return f"{self._base_url.replace('http', 'ws', 1)}{path}"

    async def open_socket(
        self, url: str, headers: dict[str, str]
    ) -> ClientConnection:
        """Open a WebSocket connection with the given headers

        Raises:
            TransportError: If the connection cannot be established
        """
        try:
            return await connect(
                url, additional_headers=headers, open_timeout=self._timeout
            )
        except (OSError, TimeoutError, WebSocketException) as e:
            logger.error(f"Socket connection to {url} failed: {e}")
            raise TransportError(f"Socket connection failed: {e}") from e

    async def aclose(self) -> None:
        """Close the HTTP client; it is rebuilt on the next request."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
