"""Uniform success/failure envelope for gateway responses"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from topstepx.shared.exceptions import GatewayError

T = TypeVar("T")


def is_success(data: Any) -> bool:
    """Gateway success predicate: ``success is True and errorCode == 0``"""
    return (
        isinstance(data, dict)
        and data.get("success") is True
        and data.get("errorCode") == 0
    )


@dataclass(frozen=True)
class GatewayResult(Generic[T]):
    """Either ``ok`` with a value, or a failure with code and message"""

    ok: bool
    value: T | None = None
    error_code: Any = None
    error_message: str | None = None

    @classmethod
    def success(cls, value: T) -> "GatewayResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(
        cls, error_code: Any = None, error_message: str | None = None
    ) -> "GatewayResult[T]":
        return cls(ok=False, error_code=error_code, error_message=error_message)

    @classmethod
    def from_envelope(
        cls, data: Any, extract: Callable[[dict[str, Any]], T]
    ) -> "GatewayResult[T]":
        """Map a ``{success, errorCode, errorMessage, ...}`` body to a result

        Args:
            data: Decoded response body
            extract: Pulls the operation's value out of a successful body

        Returns:
            GatewayResult holding the extracted value or the server error
        """
        if is_success(data):
            return cls.success(extract(data))
        if isinstance(data, dict):
            return cls.failure(data.get("errorCode"), data.get("errorMessage"))
        return cls.failure()

    def unwrap(self, error_cls: type[GatewayError] = GatewayError) -> T:
        """Return the value or raise ``error_cls`` with the server details"""
        if not self.ok:
            raise error_cls(self.error_message, self.error_code)
        return self.value  # type: ignore[return-value]
