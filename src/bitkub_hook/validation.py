"""Input validation helpers."""

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from .models import Action, AmountMode


def _normalize_symbol(value: str) -> str:
    cleaned = value.strip().upper()
    if not cleaned:
        raise ValueError("Symbol cannot be empty")
    if not cleaned.replace("_", "").isalnum():
        raise ValueError("Symbol must be alphanumeric (underscore allowed)")
    return cleaned


def _normalize_action(value):
    if not isinstance(value, str):
        return value
    normalized = value.lower().strip()
    if normalized not in {"buy", "sell"}:
        raise ValueError("action must be 'buy' or 'sell'")
    return normalized


def _normalize_amount_type(value):
    if not isinstance(value, str):
        return value
    normalized = value.lower().strip()
    if normalized not in {mode.value for mode in AmountMode}:
        raise ValueError("amount_type must be 'limit', 'all_available' or 'percent'")
    return normalized


class WebhookParams(BaseModel):
    """Trading signal posted by TradingView."""

    symbol: str = Field(min_length=1, max_length=20)
    action: Action
    price: Decimal = Field(gt=0)
    amount: Decimal = Field(default=Decimal("0"), ge=0)
    amount_type: AmountMode

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, value: str) -> str:
        return _normalize_symbol(value)

    @field_validator("action", mode="before")
    @classmethod
    def validate_action(cls, value):
        return _normalize_action(value)

    @field_validator("amount_type", mode="before")
    @classmethod
    def validate_amount_type(cls, value):
        return _normalize_amount_type(value)

    @model_validator(mode="after")
    def validate_percent_amount(self):
        if self.amount_type is AmountMode.PERCENT and self.amount > 100:
            raise ValueError("amount must be between 0 and 100 for percent sizing")
        return self
