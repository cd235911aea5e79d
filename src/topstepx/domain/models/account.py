"""Account domain models"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Account:
    """Normalized view of a gateway account record

    The unmapped record is kept in ``raw`` for callers that need it.
    """

    id: int
    name: str
    balance: float | None
    can_trade: bool
    is_visible: bool
    simulated: bool
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Account":
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            balance=data.get("balance"),
            can_trade=bool(data.get("canTrade")),
            is_visible=bool(data.get("isVisible")),
            simulated=bool(data.get("simulated")),
            raw=data,
        )


@dataclass
class AccountsResult:
    """Result of an account search"""

    account_count: int
    accounts: list[Account]
    raw_accounts: list[dict[str, Any]]

    @property
    def tradable(self) -> list[Account]:
        """Accounts that currently allow trading"""
        return [account for account in self.accounts if account.can_trade]
