"""Normalization of contract search responses

The search endpoint answers in one of three shapes:

- success envelope: ``{"success": true, "errorCode": 0, "contracts": [...]}``
- bare array: ``[{...}, {...}]``
- failure envelope: ``{"success": false, "errorCode": n, "errorMessage": ...}``
"""

from typing import Any

from topstepx.domain.models import ContractSearchResult, is_success
from topstepx.shared.exceptions import ContractSearchError


def normalize_contract_search(data: Any) -> ContractSearchResult:
    """Collapse any contract search response into a ContractSearchResult

    Raises:
        ContractSearchError: On a failure envelope or an unrecognized body
    """
    if data is None or data == "":
        raise ContractSearchError("No response data received")

    if is_success(data):
        return ContractSearchResult(
            contracts=list(data.get("contracts") or []),
            success=True,
            error_code=data.get("errorCode"),
        )

    if isinstance(data, list):
        return ContractSearchResult(contracts=data, success=True, error_code=0)

    if isinstance(data, dict):
        raise ContractSearchError(
            data.get("errorMessage"), data.get("errorCode")
        )

    raise ContractSearchError(
        f"Unexpected response type: {type(data).__name__}"
    )
