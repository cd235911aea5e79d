"""Order domain models"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class OrderType(IntEnum):
    """Order type codes understood by the gateway"""

    LIMIT = 1
    MARKET = 2
    STOP_LIMIT = 3
    STOP = 4
    TRAILING_STOP = 5
    JOIN_BID = 6
    JOIN_ASK = 7


class OrderSide(IntEnum):
    """Order side codes (0 = bid/buy, 1 = ask/sell)"""

    BUY = 0
    SELL = 1


@dataclass(frozen=True)
class Bracket:
    """Dependent order expressed as a signed tick offset from the fill price"""

    ticks: int
    type: OrderType

    def to_payload(self) -> dict[str, int]:
        return {"ticks": self.ticks, "type": int(self.type)}


@dataclass(frozen=True)
class Order:
    """Order to submit, optionally bracketed with stop-loss/take-profit legs

    Tick signs are the caller's responsibility: for a long entry the stop-loss
    is negative and the take-profit positive, and the reverse for a short.
    """

    account_id: int
    contract_id: str
    type: OrderType
    side: OrderSide
    size: int
    stop_loss_bracket: Bracket | None = None
    take_profit_bracket: Bracket | None = None
    limit_price: float | None = None
    stop_price: float | None = None

    def __post_init__(self) -> None:
        if isinstance(self.size, bool) or not isinstance(self.size, int):
            raise ValueError(f"Order size must be an integer: {self.size!r}")
        if self.size <= 0:
            raise ValueError(f"Order size must be positive: {self.size}")

    def to_payload(self) -> dict[str, Any]:
        """Build the camelCase wire object for POST /Order/place"""
        payload: dict[str, Any] = {
            "accountId": self.account_id,
            "contractId": self.contract_id,
            "type": int(self.type),
            "side": int(self.side),
            "size": self.size,
        }
        if self.limit_price is not None:
            payload["limitPrice"] = self.limit_price
        if self.stop_price is not None:
            payload["stopPrice"] = self.stop_price
        if self.stop_loss_bracket is not None:
            payload["stopLossBracket"] = self.stop_loss_bracket.to_payload()
        if self.take_profit_bracket is not None:
            payload["takeProfitBracket"] = (
                self.take_profit_bracket.to_payload()
            )
        return payload
