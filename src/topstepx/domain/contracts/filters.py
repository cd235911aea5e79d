"""Contract candidate filters"""

from collections.abc import Iterable
from typing import Any

from topstepx.shared.constants import MICRO_SYMBOLS


def display_symbol(contract: dict[str, Any]) -> str:
    """Symbol shown for a contract, falling back to its name"""
    return contract.get("symbol") or contract.get("name") or ""


class ActiveContractFilter:
    """Keeps contracts flagged ``activeContract: true``"""

    @property
    def name(self) -> str:
        return "active_contract"

    def filter(self, contracts: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [c for c in contracts if c.get("activeContract") is True]


class ExcludePatternFilter:
    """Drops contracts whose symbol contains any excluded pattern"""

    def __init__(self, patterns: Iterable[str]):
        self.patterns = frozenset(patterns)

    @property
    def name(self) -> str:
        return "exclude_pattern"

    def filter(self, contracts: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [
            c
            for c in contracts
            if not any(p in display_symbol(c) for p in self.patterns)
        ]


class MicroContractFilter:
    """Stops a micro contract (e.g. MNQ) satisfying its full-size root (NQ)"""

    def __init__(self, symbol: str):
        self.micro = MICRO_SYMBOLS.get(symbol)

    @property
    def name(self) -> str:
        return "micro_contract"

    def filter(self, contracts: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if self.micro is None:
            return contracts
        return [c for c in contracts if self.micro not in display_symbol(c)]


class SymbolMatchFilter:
    """Keeps contracts whose symbol contains the requested symbol"""

    def __init__(self, symbol: str):
        self.symbol = symbol

    @property
    def name(self) -> str:
        return "symbol_match"

    def filter(self, contracts: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [c for c in contracts if self.symbol in display_symbol(c)]
