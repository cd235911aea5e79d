"""Gateway protocols defining the transport seam.

The session manager and client only talk to the network through this
interface, so tests and alternative transports can stand in for httpx.
"""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class TransportResponse:
    """Status code plus decoded body of a completed request"""

    status: int
    data: Any


@runtime_checkable
class Transport(Protocol):
    """Protocol for HTTP and socket access to the gateway."""

    @property
    def base_url(self) -> str:
        """Base URL requests are resolved against."""
        ...

    @property
    def authorization(self) -> str | None:
        """Current Authorization header value, if any."""
        ...

    def set_bearer_token(self, token: str) -> None:
        """Send ``Authorization: Bearer <token>`` on subsequent requests."""
        ...

    def clear_bearer_token(self) -> None:
        """Stop sending the Authorization header."""
        ...

    async def request(
        self, method: str, path: str, json_body: Any = None
    ) -> TransportResponse:
        """Issue one request; raise TransportError on failure."""
        ...

    def websocket_url(self, path: str) -> str:
        """Socket URL for ``path`` derived from the base URL."""
        ...

    async def open_socket(self, url: str, headers: dict[str, str]) -> Any:
        """Open a persistent socket connection."""
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...
