"""Credentials domain model"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Credentials:
    """API-key login credentials (immutable)"""

    user_name: str
    api_key: str = field(repr=False)

    @property
    def is_complete(self) -> bool:
        """Both user name and API key are non-empty"""
        return bool(self.user_name) and bool(self.api_key)
