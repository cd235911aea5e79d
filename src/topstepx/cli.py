"""Connection health check for the TopstepX gateway"""

import asyncio
import sys

from dotenv import load_dotenv
from loguru import logger

from topstepx.core.config import Config
from topstepx.core.logging import setup_logging
from topstepx.infrastructure.gateway import TopstepXClient
from topstepx.shared.constants import DEFAULT_SYMBOLS
from topstepx.shared.exceptions import TopstepXError


async def check(client: TopstepXClient, symbols: list[str]) -> None:
    """Authenticate, list accounts and resolve front-month contracts"""
    await client.authenticate()

    accounts = await client.get_accounts(only_active=True)
    for account in accounts.accounts:
        logger.info(
            f"  {account.name} (ID: {account.id}) "
            f"balance={account.balance} canTrade={account.can_trade} "
            f"simulated={account.simulated}"
        )

    contracts = await client.get_current_futures_contracts(symbols)
    for symbol, contract in contracts.items():
        logger.info(
            f"  {symbol}: {contract.id} tickSize={contract.tick_size} "
            f"tickValue={contract.tick_value}"
        )
    missing = [s for s in symbols if s not in contracts]
    if missing:
        logger.warning(f"No current contract for: {', '.join(missing)}")


def main() -> int:
    """CLI entry point

    Usage: topstepx-check [SYMBOL ...]

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    load_dotenv()

    try:
        config = Config.from_env()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    setup_logging(config.log_level)
    symbols = sys.argv[1:] or list(DEFAULT_SYMBOLS)

    async def run() -> int:
        client = TopstepXClient.from_config(config)
        try:
            await check(client, symbols)
            return 0
        except TopstepXError as e:
            logger.error(f"Health check failed: {e}")
            return 1
        finally:
            await client.disconnect()

    try:
        return asyncio.run(run())
    except KeyboardInterrupt:
        logger.warning("Stopped manually.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
