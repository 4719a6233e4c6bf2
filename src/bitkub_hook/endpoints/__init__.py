"""Bitkub REST endpoints used by the webhook bridge."""

from .balances import BalanceReader, WalletReader
from .orders import (
    OrderDispatcher,
    OrderOutcome,
    OrderStatus,
    normalize_symbol,
)

__all__ = [
    "BalanceReader",
    "WalletReader",
    "OrderDispatcher",
    "OrderOutcome",
    "OrderStatus",
    "normalize_symbol",
]
