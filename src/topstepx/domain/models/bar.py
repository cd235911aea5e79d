"""Price bar domain model"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class BarUnit(IntEnum):
    """Aggregation unit accepted by the history endpoint"""

    SECOND = 1
    MINUTE = 2
    HOUR = 3
    DAY = 4
    WEEK = 5
    MONTH = 6


@dataclass(frozen=True)
class Bar:
    """OHLCV bar as returned by the gateway (pass-through, unvalidated)"""

    t: str
    o: float
    h: float
    l: float  # noqa: E741
    c: float
    v: float

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Bar":
        return cls(
            t=data.get("t"),
            o=data.get("o"),
            h=data.get("h"),
            l=data.get("l"),
            c=data.get("c"),
            v=data.get("v"),
        )
