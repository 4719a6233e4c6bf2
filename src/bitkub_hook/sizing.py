"""Order sizing helpers."""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

from .models import QUOTE_CURRENCY, SYMBOL_PREFIX, Action, AmountMode, WalletBalances

QUANTITY_PLACES = Decimal("0.01")


def base_asset(symbol: str) -> str:
    """Strip the quote prefix: ``THB_IOST`` and ``IOST`` both give ``IOST``."""
    cleaned = symbol.strip().upper()
    if cleaned.startswith(SYMBOL_PREFIX):
        return cleaned[len(SYMBOL_PREFIX):]
    return cleaned


def funding_asset(action: Action, symbol: str) -> str:
    """Buys spend the quote currency, sells spend the traded asset."""
    if action is Action.BUY:
        return QUOTE_CURRENCY
    return base_asset(symbol)


def resolve_quantity(
    action: Action,
    mode: AmountMode,
    raw_amount: Decimal,
    balances: WalletBalances,
    symbol: str,
) -> Decimal:
    """Turn the webhook amount into the quantity to trade.

    ``LIMIT_AMOUNT`` passes ``raw_amount`` through. ``ALL_AVAILABLE`` uses the
    whole available balance of the funding asset and ``PERCENT`` uses
    ``raw_amount`` percent of it, rounded half up to two places. Assets
    missing from ``balances`` count as zero available.
    """
    if mode is AmountMode.LIMIT_AMOUNT:
        return raw_amount

    balance = balances.get(funding_asset(action, symbol))
    available = balance.available if balance is not None else Decimal("0")

    if mode is AmountMode.ALL_AVAILABLE:
        return available
    if mode is AmountMode.PERCENT:
        return (available * raw_amount / Decimal(100)).quantize(
            QUANTITY_PLACES, rounding=ROUND_HALF_UP
        )
    raise ValueError(f"Unsupported amount mode: {mode!r}")


def quantize_quantity(quantity: Decimal) -> Decimal:
    """Round down to the two places Bitkub accepts, never above the input."""
    return quantity.quantize(QUANTITY_PLACES, rounding=ROUND_DOWN)
