"""Contract domain models"""

from dataclasses import dataclass, field
from typing import Any

from topstepx.shared.constants import EXCLUDE_PATTERNS


@dataclass(frozen=True)
class ContractQuery:
    """Symbol to resolve plus patterns that disqualify a candidate"""

    symbol: str
    exclude_patterns: frozenset[str] = EXCLUDE_PATTERNS


@dataclass(frozen=True)
class ResolvedContract:
    """Front-month contract selected for one requested symbol"""

    id: str
    symbol: str | None
    name: str | None
    description: str | None
    tick_size: float | None
    tick_value: float | None
    active_contract: bool
    symbol_id: str | None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ResolvedContract":
        return cls(
            id=data.get("id"),
            symbol=data.get("symbol"),
            name=data.get("name"),
            description=data.get("description"),
            tick_size=data.get("tickSize"),
            tick_value=data.get("tickValue"),
            active_contract=data.get("activeContract") is True,
            symbol_id=data.get("symbolId"),
        )


@dataclass
class ContractSearchResult:
    """Normalized contract search response (any of the three wire shapes)"""

    contracts: list[dict[str, Any]] = field(default_factory=list)
    success: bool = True
    error_code: Any = 0
