"""Webhook handling pipeline: size the order, place it, report the outcome."""

import logging
from enum import Enum
from typing import Optional

from .endpoints.balances import BalanceReader
from .endpoints.orders import OrderDispatcher, OrderOutcome
from .models import AmountMode, WalletBalances
from .notifier import LineNotifier
from .sizing import resolve_quantity
from .validation import WebhookParams

logger = logging.getLogger(__name__)


class RequestState(str, Enum):
    RECEIVED = "received"
    SIZING = "sizing"
    DISPATCHING = "dispatching"
    SUCCEEDED = "succeeded"
    EXCHANGE_REJECTED = "exchange_rejected"
    NO_RESPONSE = "no_response"


class WebhookService:
    """Runs one trading signal from receipt to a terminal outcome.

    Nothing is shared between calls besides the injected collaborators.
    Concurrent signals for the same account are not serialized, so two
    ``all_available`` sells may both see the same pre-trade balance.
    """

    def __init__(
        self,
        balance_reader: BalanceReader,
        dispatcher: OrderDispatcher,
        notifier: Optional[LineNotifier] = None,
    ) -> None:
        self.balance_reader = balance_reader
        self.dispatcher = dispatcher
        self.notifier = notifier

    async def _notify(self, message: str) -> None:
        if self.notifier is not None:
            await self.notifier.send(message)

    async def handle(self, params: WebhookParams) -> OrderOutcome:
        logger.info(
            "[%s] %s %s amount=%s amount_type=%s price=%s",
            RequestState.RECEIVED.value,
            params.action.value,
            params.symbol,
            params.amount,
            params.amount_type.value,
            params.price,
        )

        logger.info("[%s] %s", RequestState.SIZING.value, params.symbol)
        balances: WalletBalances = {}
        if params.amount_type is not AmountMode.LIMIT_AMOUNT:
            balances = await self.balance_reader.fetch_balances()
        quantity = resolve_quantity(
            params.action, params.amount_type, params.amount, balances, params.symbol
        )

        await self._notify(
            f"Sending command {params.action.value} {params.symbol} price:{params.price} "
            f"amount: {quantity} amount type: {params.amount_type.value}"
        )

        logger.info("[%s] %s quantity=%s", RequestState.DISPATCHING.value, params.symbol, quantity)
        outcome = await self.dispatcher.submit(
            params.symbol, params.price, quantity, params.action
        )

        logger.info("[%s] %s", RequestState(outcome.status.value).value, outcome.message)
        await self._notify(outcome.message)
        return outcome
