"""Read-only wallet endpoints."""

import logging
from decimal import Decimal
from typing import Any, Optional

from ..client import BitkubClient
from ..models import WalletBalances

logger = logging.getLogger(__name__)

BALANCES_PATH = "market/balances"
WALLET_PATH = "market/wallet"


class _WalletEndpoint:
    """Shared failure policy: log, notify, and fall back to an empty mapping."""

    def __init__(self, client: BitkubClient, notifier: Optional[Any] = None) -> None:
        self.client = client
        self.notifier = notifier

    async def _report(self, path: str, description: str) -> None:
        message = f"{path} request failed: {description}"
        logger.warning(message)
        if self.notifier is not None:
            await self.notifier.send(message)


class BalanceReader(_WalletEndpoint):
    async def fetch_balances(self) -> WalletBalances:
        """Return a fresh balance snapshot, or ``{}`` if it could not be read."""
        response = await self.client.call(BALANCES_PATH, {}, WalletBalances)
        if response.error is not None:
            await self._report(BALANCES_PATH, str(response.error))
            return {}
        if response.result is None:
            await self._report(BALANCES_PATH, "no response from Bitkub")
            return {}
        logger.info("Fetched balances for %d assets", len(response.result))
        return response.result


class WalletReader(_WalletEndpoint):
    async def fetch_wallet(self) -> dict[str, Decimal]:
        """Return available amounts per asset, or ``{}`` on failure."""
        response = await self.client.call(WALLET_PATH, {}, dict[str, Decimal])
        if response.error is not None:
            await self._report(WALLET_PATH, str(response.error))
            return {}
        if response.result is None:
            await self._report(WALLET_PATH, "no response from Bitkub")
            return {}
        return response.result
