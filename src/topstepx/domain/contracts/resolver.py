"""Front-month contract resolution

Given one requested root symbol and the raw records from a contract search,
pick exactly one current contract or none.

Selection sorts surviving candidates by contract id as plain strings. Ids
embed the expiry code (e.g. ``CON.F.US.ES.H25``), so this approximates
nearest-expiry for the common case but is not a true chronological sort
across year boundaries.
"""

from typing import Any

from loguru import logger

from topstepx.domain.models import ContractQuery, ResolvedContract

from .filters import (
    ActiveContractFilter,
    ExcludePatternFilter,
    MicroContractFilter,
    SymbolMatchFilter,
)
from .protocol import ContractFilter


class ContractFilterChain:
    """Applies multiple contract filters in sequence"""

    def __init__(self, filters: list[ContractFilter]):
        self.filters = filters

    def apply(self, contracts: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Apply all filters in sequence

        Args:
            contracts: Raw contract records

        Returns:
            Records that passed every filter
        """
        result = contracts
        initial_count = len(contracts)

        for filter_obj in self.filters:
            previous_count = len(result)
            result = filter_obj.filter(result)
            rejected = previous_count - len(result)

            filter_name = getattr(filter_obj, "name", type(filter_obj).__name__)

            if rejected > 0:
                logger.debug(
                    f"{filter_name} filter: rejected {rejected} contracts"
                )

        logger.debug(
            f"Contract filter chain complete: {initial_count} -> {len(result)}"
        )
        return result


def _sort_key(contract: dict[str, Any]) -> str:
    return contract.get("id") or contract.get("symbol") or ""


class ContractResolver:
    """Selects the front-month contract for a symbol from search results"""

    def build_chain(self, query: ContractQuery) -> ContractFilterChain:
        return ContractFilterChain(
            [
                ActiveContractFilter(),
                ExcludePatternFilter(query.exclude_patterns),
                MicroContractFilter(query.symbol),
                SymbolMatchFilter(query.symbol),
            ]
        )

    def resolve(
        self, query: ContractQuery, contracts: list[dict[str, Any]]
    ) -> ResolvedContract | None:
        """Resolve one symbol to a single contract

        Args:
            query: Symbol and exclusion patterns
            contracts: Raw records from a contract search

        Returns:
            The selected contract, or None when no candidate survives
        """
        candidates = self.build_chain(query).apply(list(contracts or []))
        if not candidates:
            logger.warning(f"No matching contract found for {query.symbol}")
            return None

        selected = sorted(candidates, key=_sort_key)[0]
        resolved = ResolvedContract.from_api(selected)
        logger.info(f"Found contract for {query.symbol}: {resolved.id}")
        return resolved


def resolve_front_month(
    symbol: str, contracts: list[dict[str, Any]]
) -> ResolvedContract | None:
    """Convenience wrapper resolving ``symbol`` with the default exclusions"""
    return ContractResolver().resolve(ContractQuery(symbol), contracts)
