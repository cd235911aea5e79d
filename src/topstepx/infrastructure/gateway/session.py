"""SessionManager - bearer token lifecycle and scheduled validation"""

import asyncio
import contextlib
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from loguru import logger

from topstepx.domain.models import Credentials, GatewayResult
from topstepx.shared.constants import (
    EXPIRY_MARGIN,
    LOGIN_PATH,
    SESSION_LIFETIME,
    VALIDATE_PATH,
    VALIDATION_INTERVAL,
)
from topstepx.shared.exceptions import (
    AuthenticationError,
    TopstepXError,
    TransportError,
    ValidationRecoveredError,
)

from .protocols import Transport


class SessionState(str, Enum):
    """Session lifecycle states"""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    VALIDATING = "validating"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _error_details(data: Any) -> tuple[Any, str | None]:
    """Pull errorCode/errorMessage out of a response body if it has them"""
    if isinstance(data, dict):
        return data.get("errorCode"), data.get("errorMessage")
    return None, None


class SessionManager:
    """Guarantees authenticated calls run against a fresh bearer token

    Responsibilities:
    - Login via API key and token storage
    - Expiry tracking (24h lifetime, final hour treated as expiring)
    - Recurring validation task every 23h
    - Transparent re-authentication when validation fails
    """

    def __init__(
        self,
        credentials: Credentials,
        transport: Transport,
        validation_interval: timedelta = VALIDATION_INTERVAL,
    ) -> None:
        """Initialize session manager

        Args:
            credentials: User name and API key used for login
            transport: Transport used for auth requests; receives the bearer
            validation_interval: Period of the background validation task
        """
        self._credentials = credentials
        self._transport = transport
        self._validation_interval = validation_interval

        self._token: str | None = None
        self._issued_at: datetime | None = None
        self._expires_at: datetime | None = None
        self._authenticated: bool = False
        self._state = SessionState.UNAUTHENTICATED

        self._validation_task: asyncio.Task | None = None
        self._lock = asyncio.Lock()

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def issued_at(self) -> datetime | None:
        return self._issued_at

    @property
    def expires_at(self) -> datetime | None:
        return self._expires_at

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        """True when authenticated with a non-empty token"""
        return self._authenticated and bool(self._token)

    @property
    def has_validation_timer(self) -> bool:
        task = self._validation_task
        return task is not None and not task.done()

    def is_expiring(self) -> bool:
        """Check if the token is within the expiry margin (or past expiry)"""
        if self._expires_at is None:
            return False
        return _utcnow() >= self._expires_at - EXPIRY_MARGIN

    async def authenticate(self) -> str:
        """Log in with the API key and start the validation schedule

        Returns:
            The session token

        Raises:
            AuthenticationError: If credentials are missing or login fails
        """
        async with self._lock:
            return await self._authenticate()

    async def validate(self) -> bool:
        """Validate the current token, re-authenticating if it was rejected

        Validation failures are never surfaced; only a failed
        re-authentication raises.

        Returns:
            True once the session holds a valid token

        Raises:
            AuthenticationError: If re-authentication fails
        """
        async with self._lock:
            return await self._validate()

    async def ensure_valid(self) -> None:
        """Make sure an authenticated call can proceed with a fresh token

        Authenticates when there is no session, validates when the token is
        in its final hour, otherwise does nothing.

        Raises:
            AuthenticationError: If (re-)authentication fails
        """
        if self.is_authenticated and not self.is_expiring():
            return

        async with self._lock:
            if not self.is_authenticated:
                await self._authenticate()
            elif self.is_expiring():
                logger.info("Token expiring soon, validating...")
                await self._validate()

    async def teardown(self) -> None:
        """Stop the validation task and discard the session (idempotent)

        Waits for an in-flight login or validation so it cannot restart the
        timer after teardown returns.
        """
        async with self._lock:
            await self._stop_validation_timer()
            self._reset()

    async def _stop_validation_timer(self) -> None:
        task = self._validation_task
        self._validation_task = None
        if task is not None and not task.done():
            task.cancel()
            if task is not asyncio.current_task():
                with contextlib.suppress(asyncio.CancelledError):
                    await task
            logger.info("Token auto-validation stopped")

    async def _authenticate(self) -> str:
        if not self._credentials.is_complete:
            self._reset()
            raise AuthenticationError(
                "Both userName and apiKey are required for authentication"
            )

        self._state = SessionState.AUTHENTICATING
        logger.info("Authenticating with TopstepX API using loginKey...")

        try:
            response = await self._transport.request(
                "POST",
                LOGIN_PATH,
                {
                    "userName": self._credentials.user_name,
                    "apiKey": self._credentials.api_key,
                },
            )
        except TransportError as e:
            self._reset()
            code, message = _error_details(e.data)
            logger.error(f"Authentication error: {e}")
            raise AuthenticationError(message or str(e), code) from e

        result = GatewayResult.from_envelope(
            response.data, lambda body: body.get("token")
        )
        if not result.ok or not result.value:
            self._reset()
            if result.ok:
                error = AuthenticationError(
                    "Login response did not include a token"
                )
            else:
                error = AuthenticationError(
                    result.error_message, result.error_code
                )
            logger.error(f"Authentication error: {error}")
            raise error

        now = _utcnow()
        self._token = result.value
        self._issued_at = now
        self._expires_at = now + SESSION_LIFETIME
        self._authenticated = True
        self._state = SessionState.AUTHENTICATED
        self._transport.set_bearer_token(self._token)

        self._start_validation_timer()

        logger.info("Authentication successful! Session token received.")
        logger.info(f"Token valid until: {self._expires_at.isoformat()}")
        return self._token

    async def _validate(self) -> bool:
        self._state = SessionState.VALIDATING
        logger.info("Validating session token...")

        try:
            await self._check_token()
        except ValidationRecoveredError as e:
            logger.warning(f"{e}. Re-authenticating...")
            self._authenticated = False
            await self._authenticate()
            return True

        self._state = SessionState.AUTHENTICATED
        logger.info("Token validation successful. Token is still valid.")
        return True

    async def _check_token(self) -> None:
        """Call the validate endpoint, raising ValidationRecoveredError on any failure"""
        try:
            response = await self._transport.request("POST", VALIDATE_PATH, {})
        except TransportError as e:
            code, message = _error_details(e.data)
            raise ValidationRecoveredError(message or str(e), code) from e

        GatewayResult.from_envelope(response.data, lambda body: True).unwrap(
            ValidationRecoveredError
        )

    def _reset(self) -> None:
        self._token = None
        self._issued_at = None
        self._expires_at = None
        self._authenticated = False
        self._state = SessionState.UNAUTHENTICATED
        self._transport.clear_bearer_token()

    def _start_validation_timer(self) -> None:
        """Cancel any running validation task and schedule a fresh one"""
        task = self._validation_task
        if task is not None and not task.done():
            if task is asyncio.current_task():
                # Re-authenticated from inside the task; its loop carries on
                return
            task.cancel()

        self._validation_task = asyncio.create_task(
            self._validation_worker(), name="TopstepXTokenValidation"
        )
        hours = self._validation_interval.total_seconds() / 3600
        logger.info(f"Token auto-validation scheduled every {hours:g} hours")

    async def _validation_worker(self) -> None:
        """Background task validating the token every interval"""
        interval = self._validation_interval.total_seconds()
        while True:
            await asyncio.sleep(interval)
            logger.info("Auto token validation (interval elapsed)")
            try:
                await self.validate()
            except TopstepXError as e:
                logger.warning(f"Scheduled token validation failed: {e}")
