"""Data models for the webhook bridge."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Annotated, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from .error_catalog import ExchangeError

QUOTE_CURRENCY = "THB"
SYMBOL_PREFIX = f"{QUOTE_CURRENCY}_"

T = TypeVar("T")

# Bitkub sends amounts as JSON numbers; pydantic would dump Decimal as a string.
WireDecimal = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class Action(str, Enum):
    BUY = "buy"
    SELL = "sell"


class AmountMode(str, Enum):
    """How the webhook ``amount`` is turned into a trade quantity."""

    LIMIT_AMOUNT = "limit"
    ALL_AVAILABLE = "all_available"
    PERCENT = "percent"


class Balance(BaseModel):
    """Balance of one asset at the moment it was read."""

    model_config = ConfigDict(frozen=True)

    available: Decimal = Decimal("0")
    reserved: Decimal = Decimal("0")


WalletBalances = dict[str, Balance]


class Order(BaseModel):
    """Order accepted by Bitkub, keyed by the exchange's short field names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    hash: str
    type: str = Field(alias="typ")
    spending_amount: WireDecimal = Field(alias="amt")
    rate: WireDecimal = Field(alias="rat")
    fee: WireDecimal
    fee_credit_used: WireDecimal = Field(alias="cre")
    amount_to_receive: WireDecimal = Field(alias="rec")
    timestamp: int = Field(alias="ts")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    def to_wire_json(self) -> str:
        return self.model_dump_json(by_alias=True)


@dataclass(frozen=True)
class OrderRequest:
    """Internal representation of an order about to be placed."""

    symbol: str
    price: Decimal
    quantity: Decimal
    action: Action
    order_type: str = "limit"

    def to_params(self) -> dict:
        return {
            "amt": self.quantity,
            "sym": self.symbol,
            "rat": self.price,
            "typ": self.order_type,
        }


@dataclass(frozen=True)
class ExchangeResponse(Generic[T]):
    """Decoded Bitkub envelope.

    Exactly one of ``error`` and ``result`` is set for an answered request;
    neither is set when no usable response came back.
    """

    error: Optional[ExchangeError] = None
    result: Optional[T] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.result is not None

    @property
    def no_response(self) -> bool:
        return self.error is None and self.result is None
