"""Shared exceptions and constants"""

from .exceptions import (
    AccountQueryError,
    AuthenticationError,
    ContractSearchError,
    GatewayError,
    HistoricalDataError,
    OrderPlacementError,
    TopstepXError,
    TransportError,
    ValidationRecoveredError,
)

__all__ = [
    "TopstepXError",
    "TransportError",
    "GatewayError",
    "AuthenticationError",
    "ValidationRecoveredError",
    "HistoricalDataError",
    "AccountQueryError",
    "ContractSearchError",
    "OrderPlacementError",
]
