"""Signed request client for the Bitkub REST API."""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from decimal import Decimal
from functools import lru_cache
from typing import Any, Callable, Mapping, Optional

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .config import BitkubConfig
from .error_catalog import describe, replace_description
from .models import ExchangeResponse

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-BTK-APIKEY"
RESERVED_PARAMS = frozenset({"ts", "sig"})


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def canonical_json(params: Mapping[str, Any]) -> str:
    """Serialize params the same way every time: sorted keys, no whitespace."""
    return json.dumps(
        dict(params), sort_keys=True, separators=(",", ":"), default=_json_default
    )


@lru_cache(maxsize=None)
def result_adapter(result_type: Any) -> TypeAdapter:
    """One adapter per result type, built on first use."""
    return TypeAdapter(result_type)


def sign_payload(secret: str, payload: str) -> str:
    return hmac.new(
        secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256
    ).hexdigest()


class BitkubClient:
    """Builds, signs and sends requests to Bitkub and decodes the envelope.

    Each call keeps its params and signature local, so one client can be
    shared by concurrent webhook requests.
    """

    def __init__(
        self,
        config: BitkubConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.base_url = config.api_url
        self._api_key = config.api_key
        self._api_secret = config.api_secret
        self._transport = transport
        self._clock = clock
        self._http: Optional[httpx.AsyncClient] = None

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=self.base_url,
                transport=self._transport,
                timeout=None,
            )
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def sign(self, params: Mapping[str, Any]) -> dict[str, Any]:
        """Return a copy of ``params`` with ``ts`` and ``sig`` added."""
        reserved = RESERVED_PARAMS.intersection(params)
        if reserved:
            raise ValueError(
                f"Params must not contain reserved keys: {', '.join(sorted(reserved))}"
            )
        signed = dict(params)
        signed["ts"] = int(self._clock())
        signed["sig"] = sign_payload(self._api_secret, canonical_json(signed))
        return signed

    async def call(
        self,
        path: str,
        params: Mapping[str, Any],
        result_type: Any,
    ) -> ExchangeResponse[Any]:
        """POST a signed request and decode the result into ``result_type``.

        Transport failures and undecodable bodies produce an envelope with
        neither ``error`` nor ``result`` set.
        """
        if not path or not path.strip("/"):
            raise ValueError("API path cannot be empty")
        path = path.lstrip("/")

        body = canonical_json(self.sign(params))
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            API_KEY_HEADER: self._api_key,
        }
        logger.debug("POST %s%s", self.base_url, path)

        try:
            response = await self.http.post(path, content=body, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Bitkub request to %s failed: %s", path, exc)
            return ExchangeResponse()

        try:
            payload = json.loads(response.content, parse_float=Decimal)
        except ValueError as exc:
            logger.warning(
                "Bitkub returned an undecodable body for %s (HTTP %s): %s",
                path,
                response.status_code,
                exc,
            )
            return ExchangeResponse()
        if not isinstance(payload, dict):
            logger.warning("Bitkub returned a non-object body for %s", path)
            return ExchangeResponse()

        return self._decode_envelope(path, payload, result_type)

    def _decode_envelope(
        self, path: str, payload: dict[str, Any], result_type: Any
    ) -> ExchangeResponse[Any]:
        code = payload.get("error")
        if isinstance(code, bool) or not isinstance(code, int):
            logger.warning("Bitkub response for %s has no integer error code", path)
            return ExchangeResponse()

        error = describe(code)
        if error is not None:
            message = payload.get("message")
            if isinstance(message, str) and message:
                error = replace_description(error, message)
            return ExchangeResponse(error=error)

        raw_result = payload.get("result")
        if raw_result is None:
            return ExchangeResponse()
        try:
            result = result_adapter(result_type).validate_python(raw_result)
        except PydanticValidationError as exc:
            logger.warning("Bitkub result for %s did not match %s: %s", path, result_type, exc)
            return ExchangeResponse()
        return ExchangeResponse(result=result)
