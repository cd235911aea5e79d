"""TopstepX gateway infrastructure

GatewayTransport - HTTP/WebSocket adapter
SessionManager - Token lifecycle and scheduled validation
LiveDataSubscription - Live market data socket handle
TopstepXClient - Facade exposing the gateway's domain operations
"""

from .client import TopstepXClient, format_timestamp
from .live import LiveDataSubscription
from .protocols import Transport, TransportResponse
from .session import SessionManager, SessionState
from .transport import GatewayTransport

__all__ = [
    "GatewayTransport",
    "LiveDataSubscription",
    "SessionManager",
    "SessionState",
    "TopstepXClient",
    "Transport",
    "TransportResponse",
    "format_timestamp",
]
