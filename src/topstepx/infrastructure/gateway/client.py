"""TopstepXClient - session-managed facade over the gateway endpoints"""

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from loguru import logger

from topstepx.domain.contracts import ContractResolver, normalize_contract_search
from topstepx.domain.models import (
    Account,
    AccountsResult,
    Bar,
    BarUnit,
    ContractQuery,
    ContractSearchResult,
    Credentials,
    GatewayResult,
    Order,
    ResolvedContract,
)
from topstepx.shared.constants import (
    ACCOUNT_SEARCH_PATH,
    CONTRACT_SEARCH_PATH,
    DEFAULT_BASE_URL,
    DEFAULT_SYMBOLS,
    DEFAULT_TIMEOUT_SECONDS,
    EXCLUDE_PATTERNS,
    HISTORY_PATH,
    LIVE_PATH,
    ORDER_PLACE_PATH,
)
from topstepx.shared.exceptions import (
    AccountQueryError,
    GatewayError,
    HistoricalDataError,
    OrderPlacementError,
)

from .live import LiveDataSubscription, MessageHandler
from .protocols import Transport
from .session import SessionManager
from .transport import GatewayTransport

if TYPE_CHECKING:
    from topstepx.core.config import Config


def format_timestamp(value: datetime | str) -> str:
    """Serialize a timestamp as ISO-8601 UTC with a trailing ``Z``

    Naive datetimes are taken to be UTC; strings pass through unchanged.
    """
    if isinstance(value, str):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return (
        value.astimezone(UTC)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class TopstepXClient:
    """TopstepX gateway client (facade pattern)

    Delegates session handling to SessionManager and network access to the
    transport. Every domain operation awaits ``ensure_valid()`` before its
    request and normalizes the response through GatewayResult.
    """

    def __init__(
        self,
        credentials: Credentials,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Transport | None = None,
    ) -> None:
        """Initialize client

        Args:
            credentials: User name and API key
            base_url: Gateway API base URL
            timeout: Request timeout in seconds
            transport: Optional transport; defaults to GatewayTransport
        """
        self._transport = transport or GatewayTransport(base_url, timeout)
        self._session = SessionManager(credentials, self._transport)
        self._resolver = ContractResolver()
        self._subscriptions: list[LiveDataSubscription] = []

    @classmethod
    def from_config(cls, config: "Config") -> "TopstepXClient":
        """Build a client from loaded configuration"""
        return cls(
            config.credentials,
            base_url=config.base_url,
            timeout=config.timeout,
        )

    @property
    def session(self) -> SessionManager:
        return self._session

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def subscriptions(self) -> list[LiveDataSubscription]:
        """Live data subscriptions opened by this client that are still open"""
        self._prune_subscriptions()
        return list(self._subscriptions)

    def _prune_subscriptions(self) -> None:
        # Handles closed by the caller or dropped by the server
        self._subscriptions = [
            s for s in self._subscriptions if not s.closed and s.connected
        ]

    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    async def authenticate(self) -> str:
        """Log in and return the session token"""
        return await self._session.authenticate()

    async def validate_token(self) -> bool:
        """Validate the session token, re-authenticating if needed"""
        return await self._session.validate()

    async def ensure_authenticated(self) -> None:
        """Authenticate or validate as required before a call"""
        await self._session.ensure_valid()

    async def _post(self, path: str, data: Any) -> Any:
        """Ensure a valid session, then POST ``data`` to ``path``"""
        await self._session.ensure_valid()
        response = await self._transport.request("POST", path, data)
        return response.data

    @staticmethod
    def _unwrap(result: GatewayResult, error_cls: type[GatewayError]) -> Any:
        try:
            return result.unwrap(error_cls)
        except GatewayError as e:
            logger.error(str(e))
            raise

    async def get_historical_data(
        self,
        contract_id: str,
        start_time: datetime | str,
        end_time: datetime | str,
        unit: BarUnit | int = BarUnit.MINUTE,
        unit_number: int = 1,
        limit: int = 1000,
        include_partial_bar: bool = False,
    ) -> list[Bar]:
        """Retrieve historical bars for a contract

        Args:
            contract_id: Contract identifier (e.g. "CON.F.US.MNQ.Z25")
            start_time: Window start
            end_time: Window end
            unit: Bar aggregation unit
            unit_number: Units per bar (e.g. 5 for 5-minute bars)
            limit: Maximum number of bars
            include_partial_bar: Include the current, not yet closed bar

        Returns:
            Bars in the order received (oldest first); empty if none

        Raises:
            HistoricalDataError: If the endpoint rejects the request
            TransportError: On network-level failure
        """
        request_data = {
            "contractId": contract_id,
            "live": False,
            "startTime": format_timestamp(start_time),
            "endTime": format_timestamp(end_time),
            "unit": int(unit),
            "unitNumber": unit_number,
            "limit": limit,
            "includePartialBar": include_partial_bar,
        }
        logger.debug(f"Requesting historical data with: {request_data}")

        data = await self._post(HISTORY_PATH, request_data)
        result = GatewayResult.from_envelope(
            data, lambda body: body.get("bars") or []
        )
        bars = self._unwrap(result, HistoricalDataError)

        if limit is not None and limit >= 0:
            bars = bars[:limit]
        return [Bar.from_api(bar) for bar in bars]

    async def get_accounts(self, only_active: bool = True) -> AccountsResult:
        """Search accounts

        Args:
            only_active: Restrict to active accounts

        Raises:
            AccountQueryError: If the endpoint rejects the request
            TransportError: On network-level failure
        """
        request_data = {"onlyActiveAccounts": only_active}
        logger.info(f"Fetching accounts with: {request_data}")

        data = await self._post(ACCOUNT_SEARCH_PATH, request_data)
        result = GatewayResult.from_envelope(
            data, lambda body: body.get("accounts") or []
        )
        raw_accounts = self._unwrap(result, AccountQueryError)

        logger.info(f"Found {len(raw_accounts)} account(s)")
        return AccountsResult(
            account_count=len(raw_accounts),
            accounts=[Account.from_api(acc) for acc in raw_accounts],
            raw_accounts=raw_accounts,
        )

    async def search_contracts(
        self, search_text: str | None = None
    ) -> ContractSearchResult:
        """Search available contracts

        Args:
            search_text: Optional text filter (e.g. "NQ")

        Raises:
            ContractSearchError: If the response matches no known shape
            TransportError: On network-level failure
        """
        request_data: dict[str, Any] = {"live": False}
        if search_text:
            request_data["searchText"] = search_text
        logger.info(f"Fetching available contracts with: {request_data}")

        data = await self._post(CONTRACT_SEARCH_PATH, request_data)
        try:
            result = normalize_contract_search(data)
        except GatewayError as e:
            logger.error(str(e))
            raise

        logger.info(f"Found {len(result.contracts)} contract(s)")
        return result

    async def get_current_futures_contracts(
        self,
        symbols: Iterable[str] = DEFAULT_SYMBOLS,
        exclude_patterns: Iterable[str] = EXCLUDE_PATTERNS,
    ) -> dict[str, ResolvedContract]:
        """Resolve each symbol to its front-month contract

        One search is issued per symbol. Symbols without a matching contract
        are left out of the result, so callers must check for absence.

        Args:
            symbols: Root symbols to resolve (e.g. "NQ", "MES")
            exclude_patterns: Symbol fragments that disqualify a contract

        Returns:
            Mapping of requested symbol to resolved contract
        """
        patterns = frozenset(exclude_patterns)
        current_contracts: dict[str, ResolvedContract] = {}

        for symbol in symbols:
            search = await self.search_contracts(symbol)
            if not search.contracts:
                logger.info(f"No contracts found for {symbol}")
                continue

            resolved = self._resolver.resolve(
                ContractQuery(symbol, patterns), search.contracts
            )
            if resolved is not None:
                current_contracts[symbol] = resolved

        return current_contracts

    async def place_order(self, order: Order | dict[str, Any]) -> dict[str, Any]:
        """Submit an order, forwarding its payload unchanged

        Args:
            order: Order model or a ready-made wire dict

        Returns:
            Raw acknowledgement body from the gateway

        Raises:
            OrderPlacementError: If the gateway rejects the order
            TransportError: On network-level failure
        """
        payload = order.to_payload() if isinstance(order, Order) else order
        logger.info(f"Placing order with data: {payload}")

        data = await self._post(ORDER_PLACE_PATH, payload)
        result = GatewayResult.from_envelope(data, lambda body: body)
        acknowledgement = self._unwrap(result, OrderPlacementError)

        logger.info("Order placed successfully")
        return acknowledgement

    async def subscribe_live_data(
        self, symbol: str, on_message: MessageHandler
    ) -> LiveDataSubscription:
        """Open a live data socket for ``symbol``

        The Authorization header is captured when the socket opens and is not
        refreshed afterwards.

        Args:
            symbol: Symbol to stream
            on_message: Called (or awaited) with each decoded message

        Returns:
            Subscription handle; close it to stop the feed

        Raises:
            TransportError: If the socket cannot be opened
        """
        await self._session.ensure_valid()

        url = self._transport.websocket_url(f"{LIVE_PATH}/{symbol}")
        headers: dict[str, str] = {}
        if self._transport.authorization:
            headers["Authorization"] = self._transport.authorization

        subscription = LiveDataSubscription(
            symbol, url, headers, self._transport, on_message
        )
        await subscription.start()
        self._prune_subscriptions()
        self._subscriptions.append(subscription)
        return subscription

    async def disconnect(self) -> None:
        """Close live feeds, stop token validation and release the HTTP client

        Safe to call repeatedly and before anything was connected.
        """
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            await subscription.close()

        await self._session.teardown()
        await self._transport.aclose()
        logger.info("Disconnected from TopstepX")

    async def __aenter__(self) -> "TopstepXClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.disconnect()
