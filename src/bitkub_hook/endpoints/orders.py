"""Order placement endpoints."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from ..client import BitkubClient
from ..error_catalog import ExchangeError
from ..errors import BitkubHookError, ExchangeRejectedError, NoResponseError
from ..models import SYMBOL_PREFIX, Action, Order, OrderRequest
from ..sizing import quantize_quantity

logger = logging.getLogger(__name__)

PLACE_BID_PATH = "market/place-bid"
PLACE_ASK_PATH = "market/place-ask"


def _to_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def normalize_symbol(symbol: str) -> str:
    """Return the Bitkub market name, adding the ``THB_`` prefix once."""
    cleaned = symbol.strip().upper()
    if cleaned.startswith(SYMBOL_PREFIX):
        return cleaned
    return f"{SYMBOL_PREFIX}{cleaned}"


class OrderStatus(str, Enum):
    SUCCEEDED = "succeeded"
    EXCHANGE_REJECTED = "exchange_rejected"
    NO_RESPONSE = "no_response"


@dataclass(frozen=True)
class OrderOutcome:
    """Terminal result of one order submission."""

    status: OrderStatus
    request: Optional[OrderRequest] = None
    order: Optional[Order] = None
    error: Optional[ExchangeError] = None
    message: str = ""

    @classmethod
    def succeeded(cls, request: OrderRequest, order: Order) -> "OrderOutcome":
        return cls(
            status=OrderStatus.SUCCEEDED,
            request=request,
            order=order,
            message=order.to_wire_json(),
        )

    @classmethod
    def rejected(cls, request: OrderRequest, error: ExchangeError) -> "OrderOutcome":
        exc = ExchangeRejectedError(error.code, error.description, known=error.known)
        return cls(
            status=OrderStatus.EXCHANGE_REJECTED,
            request=request,
            error=error,
            message=exc.message,
        )

    @classmethod
    def no_response(cls, request: OrderRequest) -> "OrderOutcome":
        return cls(
            status=OrderStatus.NO_RESPONSE,
            request=request,
            message=NoResponseError().message,
        )

    @property
    def ok(self) -> bool:
        return self.status is OrderStatus.SUCCEEDED

    def to_error(self) -> Optional[BitkubHookError]:
        """Typed error for a failed outcome, ``None`` when the order was placed."""
        if self.status is OrderStatus.SUCCEEDED and self.order is not None:
            return None
        if self.status is OrderStatus.EXCHANGE_REJECTED and self.error is not None:
            return ExchangeRejectedError(
                self.error.code, self.error.description, known=self.error.known
            )
        return NoResponseError()

    def to_response(self) -> tuple[int, dict[str, Any]]:
        """HTTP status and body reported back to the webhook caller."""
        error = self.to_error()
        if error is None:
            return 200, {"data": self.order.to_wire()}
        if isinstance(error, NoResponseError):
            return 422, {"data": {"error": error.message}}
        body = error.to_dict()
        body["error"] = self.message or error.message
        return 200, body


class OrderDispatcher:
    """Places limit bids and asks through the signed client."""

    def __init__(self, client: BitkubClient, test_mode: bool = False) -> None:
        self.client = client
        self.test_mode = test_mode

    def endpoint_for(self, action: Action) -> str:
        path = PLACE_BID_PATH if action is Action.BUY else PLACE_ASK_PATH
        return f"{path}/test" if self.test_mode else path

    def build_request(
        self, symbol: str, price: Decimal, quantity: Decimal, action: Action
    ) -> OrderRequest:
        if quantity < 0:
            raise ValueError(f"Quantity must not be negative, got {quantity}")
        return OrderRequest(
            symbol=normalize_symbol(symbol),
            price=_to_decimal(price),
            quantity=quantize_quantity(_to_decimal(quantity)),
            action=action,
        )

    async def submit(
        self, symbol: str, price: Decimal, quantity: Decimal, action: Action
    ) -> OrderOutcome:
        request = self.build_request(symbol, price, quantity, action)
        path = self.endpoint_for(action)
        logger.info(
            "Placing %s %s amount=%s rate=%s via %s",
            action.value,
            request.symbol,
            request.quantity,
            request.price,
            path,
        )

        response = await self.client.call(path, request.to_params(), Order)
        if response.error is not None:
            outcome = OrderOutcome.rejected(request, response.error)
            logger.warning("%s", outcome.message)
            return outcome
        if response.result is None:
            logger.warning("No response from Bitkub for %s %s", action.value, request.symbol)
            return OrderOutcome.no_response(request)

        logger.info("Order %s accepted for %s", response.result.id, request.symbol)
        return OrderOutcome.succeeded(request, response.result)
