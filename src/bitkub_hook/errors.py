"""Custom exceptions and error handling for the webhook bridge."""

from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

NO_RESPONSE_MESSAGE = "no response from Bitkub"


class BitkubHookError(Exception):
    """Base exception for webhook bridge errors."""

    def __init__(
        self,
        message: str,
        error_type: str = "BitkubHookError",
        details: Optional[dict[str, Any]] = None
    ):
        """
        Initialize error.

        Args:
            message: Human-readable error message
            error_type: Category reported to the webhook caller
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to the JSON body returned by the webhook."""
        result = {
            "success": False,
            "error": self.message,
            "error_type": self.error_type,
        }
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(BitkubHookError):
    """A webhook payload that cannot be turned into an order."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        constraint: Optional[str] = None,
        fields: Optional[dict[str, str]] = None,
    ):
        """
        Initialize validation error.

        Args:
            message: Human-readable error message
            field: First webhook field that failed, or ``body`` for the payload itself
            constraint: What the field should have looked like
            fields: Every failing webhook field mapped to its problem
        """
        details: dict[str, Any] = {}
        if field is not None:
            details["field"] = field
        if constraint is not None:
            details["constraint"] = constraint
        if fields:
            details["fields"] = fields

        super().__init__(
            message=message,
            error_type="ValidationError",
            details=details
        )
        self.field = field

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Report a rejected ``WebhookParams`` by webhook field name."""
        fields: dict[str, str] = {}
        for item in exc.errors(include_url=False, include_context=False):
            name = ".".join(str(loc) for loc in item.get("loc", ())) or "body"
            fields.setdefault(name, item.get("msg", ""))
        if not fields:
            return cls(str(exc))
        field, problem = next(iter(fields.items()))
        return cls(
            f"Validation error for field '{field}': {problem}",
            field=field,
            fields=fields,
        )


class ExchangeRejectedError(BitkubHookError):
    """Error describing a request the exchange answered with a nonzero code."""

    def __init__(self, code: int, description: str, known: bool = True):
        """
        Initialize exchange rejection.

        Args:
            code: Numeric error code returned by Bitkub
            description: Catalog description or server supplied message
            known: False when the code is missing from the error catalog
        """
        super().__init__(
            message=f"request failed with error: {code} {description}",
            error_type="ExchangeRejected" if known else "UnknownErrorCode",
            details={"code": code, "description": description},
        )
        self.code = code
        self.description = description
        self.known = known


class NoResponseError(BitkubHookError):
    """Bitkub gave no usable answer, so the order's fate is unknown."""

    def __init__(self, path: Optional[str] = None):
        super().__init__(
            message=NO_RESPONSE_MESSAGE,
            error_type="NoResponse",
            details={"path": path} if path else None,
        )
        self.path = path


def format_error_response(error: Exception) -> dict[str, Any]:
    """
    Format any exception into the webhook's error body.

    Args:
        error: The exception to format

    Returns:
        Dictionary with ``success``, ``error``, ``error_type`` and optional ``details``
    """
    if isinstance(error, BitkubHookError):
        return error.to_dict()

    if isinstance(error, PydanticValidationError):
        return ValidationError.from_pydantic(error).to_dict()

    return {
        "success": False,
        "error": str(error),
        "error_type": type(error).__name__
    }
