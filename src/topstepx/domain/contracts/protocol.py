"""Filter protocol for contract candidate filtering"""

from typing import Any, Protocol


class ContractFilter(Protocol):
    """Protocol for contract filters

    A filter narrows the raw contract records returned by a search down to
    the candidates that can stand for a requested root symbol.
    """

    @property
    def name(self) -> str:
        """Filter identifier"""
        ...

    def filter(self, contracts: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Filter contract records

        Args:
            contracts: Raw contract records to filter

        Returns:
            Contracts that pass this filter, in the same order
        """
        ...
