"""LiveDataSubscription - one persistent socket per subscribed symbol"""

import asyncio
import contextlib
import inspect
import json
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger
from websockets.exceptions import ConnectionClosedError

from .protocols import Transport

MessageHandler = Callable[[Any], Awaitable[None] | None]


class LiveDataSubscription:
    """Handle for a live market data feed

    Frames are decoded as JSON and handed to the message handler one at a
    time, in arrival order. Malformed frames are logged and dropped.
    Connection errors mark the handle disconnected; there is no reconnect.
    Closing the handle ends the subscription.
    """

    def __init__(
        self,
        symbol: str,
        url: str,
        headers: dict[str, str],
        transport: Transport,
        on_message: MessageHandler,
    ) -> None:
        self.symbol = symbol
        self.url = url
        self._headers = headers
        self._transport = transport
        self._on_message = on_message

        self._connection: Any = None
        self._reader_task: asyncio.Task | None = None
        self._connected = False
        self._closed = False

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def closed(self) -> bool:
        return self._closed

    async def start(self) -> None:
        """Open the socket and begin delivering messages

        Raises:
            TransportError: If the socket cannot be opened
        """
        self._connection = await self._transport.open_socket(
            self.url, self._headers
        )
        self._connected = True
        logger.info(f"Connected to live data feed for {self.symbol}")
        self._reader_task = asyncio.create_task(
            self._read_loop(), name=f"TopstepXLive-{self.symbol}"
        )

    async def _read_loop(self) -> None:
        try:
            async for frame in self._connection:
                await self._deliver(frame)
        except ConnectionClosedError as e:
            logger.error(f"WebSocket error: {e}")
        finally:
            self._connected = False
            logger.info("Live data connection closed")

    async def _deliver(self, frame: str | bytes) -> None:
        try:
            message = json.loads(frame)
        except (ValueError, TypeError) as e:
            logger.error(f"Error parsing live data: {e}")
            return

        try:
            result = self._on_message(message)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.opt(exception=e).error(
                f"Live data handler failed for {self.symbol}: {e}"
            )

    async def close(self) -> None:
        """Close the socket and stop delivery (idempotent)"""
        if self._closed:
            return
        self._closed = True

        if self._connection is not None:
            await self._connection.close()

        task = self._reader_task
        if task is not None and not task.done():
            if task is asyncio.current_task():
                self._connected = False
                return
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        self._connected = False

    async def __aenter__(self) -> "LiveDataSubscription":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
