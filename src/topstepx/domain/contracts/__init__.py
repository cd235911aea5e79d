"""Contract search normalization and front-month resolution"""

from .filters import (
    ActiveContractFilter,
    ExcludePatternFilter,
    MicroContractFilter,
    SymbolMatchFilter,
    display_symbol,
)
from .protocol import ContractFilter
from .resolver import ContractFilterChain, ContractResolver, resolve_front_month
from .search import normalize_contract_search

__all__ = [
    "ActiveContractFilter",
    "ContractFilter",
    "ContractFilterChain",
    "ContractResolver",
    "ExcludePatternFilter",
    "MicroContractFilter",
    "SymbolMatchFilter",
    "display_symbol",
    "normalize_contract_search",
    "resolve_front_month",
]
