"""Domain models"""

from .account import Account, AccountsResult
from .bar import Bar, BarUnit
from .contract import ContractQuery, ContractSearchResult, ResolvedContract
from .credentials import Credentials
from .order import Bracket, Order, OrderSide, OrderType
from .result import GatewayResult, is_success

__all__ = [
    "Account",
    "AccountsResult",
    "Bar",
    "BarUnit",
    "Bracket",
    "ContractQuery",
    "ContractSearchResult",
    "Credentials",
    "GatewayResult",
    "Order",
    "OrderSide",
    "OrderType",
    "ResolvedContract",
    "is_success",
]
