"""Consolidated exceptions for the TopstepX gateway client.

All custom exceptions are defined here to provide a single source of truth
for error handling across the package.
"""

from typing import Any


class TopstepXError(Exception):
    """Base exception for TopstepX client errors"""

    pass


class TransportError(TopstepXError):
    """Raised when the HTTP/socket transport fails (network, timeout, non-2xx)"""

    def __init__(
        self, message: str, status: int | None = None, data: Any = None
    ) -> None:
        super().__init__(message)
        self.status = status
        self.data = data


class GatewayError(TopstepXError):
    """Raised when a gateway endpoint rejects a request

    Wraps the server-reported errorCode/errorMessage when present.
    """

    operation = "Gateway request"
    default_message = "Request failed"

    def __init__(
        self,
        error_message: str | None = None,
        error_code: Any = None,
    ) -> None:
        self.error_message = error_message or self.default_message
        self.error_code = error_code
        code = "Unknown" if error_code is None else error_code
        super().__init__(
            f"{self.operation} failed: {self.error_message} (Code: {code})"
        )


class AuthenticationError(GatewayError):
    """Raised when login is rejected or credentials are missing"""

    operation = "Authentication"
    default_message = "Authentication failed"


class ValidationRecoveredError(GatewayError):
    """Internal: token validation failed and the session is re-authenticating

    Never surfaced to callers.
    """

    operation = "Token validation"
    default_message = "Token validation failed"


class HistoricalDataError(GatewayError):
    """Raised when the history endpoint rejects a bars request"""

    operation = "Historical data"
    default_message = "Failed to fetch historical data"


class AccountQueryError(GatewayError):
    """Raised when the account search is rejected"""

    operation = "Account search"
    default_message = "Failed to fetch accounts"


class ContractSearchError(GatewayError):
    """Raised when a contract search response cannot be normalized"""

    operation = "Contract search"
    default_message = "Failed to fetch contracts"


class OrderPlacementError(GatewayError):
    """Raised when the gateway rejects an order"""

    operation = "Order placement"
    default_message = "Failed to place order"
