"""Configuration management for the TopstepX client"""

import os
from dataclasses import dataclass, field

from loguru import logger

from topstepx.domain.models import Credentials
from topstepx.shared.constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS


@dataclass
class Config:
    """Configuration for the TopstepX client loaded from environment variables"""

    # Fields without defaults (required parameters)
    user_name: str
    api_key: str = field(repr=False)

    # Fields with defaults (optional parameters with sensible defaults)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"

    @property
    def credentials(self) -> Credentials:
        return Credentials(self.user_name, self.api_key)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables

        Returns:
            Config instance with values from environment

        Raises:
            ValueError: If required environment variables are missing or invalid
        """
        user_name = os.getenv("TOPSTEP_USERNAME", "")
        api_key = os.getenv("TOPSTEP_API_KEY", "")

        required_vars = {
            "TOPSTEP_USERNAME": user_name,
            "TOPSTEP_API_KEY": api_key,
        }
        missing = [k for k, v in required_vars.items() if not v]
        if missing:
            raise ValueError(f"Missing TopstepX configuration: {missing}")

        timeout_raw = os.getenv("TOPSTEP_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout = float(timeout_raw)
        except ValueError as e:
            raise ValueError(
                f"TOPSTEP_TIMEOUT must be a number of seconds, got {timeout_raw!r}"
            ) from e
        if timeout <= 0:
            raise ValueError(f"TOPSTEP_TIMEOUT must be positive, got {timeout}")

        config = cls(
            user_name=user_name,
            api_key=api_key,
            base_url=os.getenv("TOPSTEP_BASE_URL", DEFAULT_BASE_URL),
            timeout=timeout,
            log_level=os.getenv("TOPSTEP_LOG_LEVEL", "INFO").upper(),
        )

        logger.info("Configuration loaded:")
        logger.info(f"  User: {config.user_name}")
        logger.info(f"  API Key: {'*' * 8}")
        logger.info(f"  Base URL: {config.base_url}")
        logger.info(f"  Timeout: {config.timeout}s")
        logger.info(f"  Log Level: {config.log_level}")

        return config
