"""TopstepX gateway client

Session-authenticated asyncio client for the TopstepX trading gateway:
historical bars, accounts, contract resolution, live data and bracket orders.
"""

from topstepx.domain.models import (
    Account,
    AccountsResult,
    Bar,
    BarUnit,
    Bracket,
    ContractQuery,
    ContractSearchResult,
    Credentials,
    GatewayResult,
    Order,
    OrderSide,
    OrderType,
    ResolvedContract,
)
from topstepx.infrastructure.gateway import (
    GatewayTransport,
    LiveDataSubscription,
    SessionManager,
    SessionState,
    TopstepXClient,
)
from topstepx.shared.exceptions import (
    AccountQueryError,
    AuthenticationError,
    ContractSearchError,
    GatewayError,
    HistoricalDataError,
    OrderPlacementError,
    TopstepXError,
    TransportError,
)

__version__ = "0.1.0"

__all__ = [
    "Account",
    "AccountQueryError",
    "AccountsResult",
    "AuthenticationError",
    "Bar",
    "BarUnit",
    "Bracket",
    "ContractQuery",
    "ContractSearchError",
    "ContractSearchResult",
    "Credentials",
    "GatewayError",
    "GatewayResult",
    "GatewayTransport",
    "HistoricalDataError",
    "LiveDataSubscription",
    "Order",
    "OrderPlacementError",
    "OrderSide",
    "OrderType",
    "ResolvedContract",
    "SessionManager",
    "SessionState",
    "TopstepXClient",
    "TopstepXError",
    "TransportError",
]
