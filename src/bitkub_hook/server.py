"""FastAPI application exposing the TradingView webhook."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from .client import BitkubClient
from .config import BitkubConfig
from .endpoints import BalanceReader, OrderDispatcher
from .errors import ValidationError, format_error_response
from .notifier import LineNotifier
from .service import WebhookService
from .validation import WebhookParams

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/tradingview-webhook"


def build_service(config: BitkubConfig) -> tuple[WebhookService, BitkubClient, LineNotifier]:
    """Wire the webhook pipeline from configuration."""
    client = BitkubClient(config)
    notifier = LineNotifier(config)
    service = WebhookService(
        balance_reader=BalanceReader(client, notifier),
        dispatcher=OrderDispatcher(client, test_mode=config.test_mode),
        notifier=notifier,
    )
    return service, client, notifier


def _invalid_fields(exc: PydanticValidationError) -> set[str]:
    return {str(error["loc"][0]) for error in exc.errors() if error.get("loc")}


def create_app(
    config: Optional[BitkubConfig] = None,
    service: Optional[WebhookService] = None,
) -> FastAPI:
    """
    Create the webhook application.

    Args:
        config: Validated configuration, used to build the pipeline on startup
        service: Pre-built pipeline; when given, ``config`` is not needed
    """
    if config is None and service is None:
        raise ValueError("create_app needs either a config or a service")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.service is not None:
            yield
            return
        built, client, notifier = build_service(config)
        app.state.service = built
        logger.info(
            "Webhook pipeline ready (api=%s, test_mode=%s)", config.api_url, config.test_mode
        )
        try:
            yield
        finally:
            await client.aclose()
            await notifier.aclose()
            app.state.service = None

    app = FastAPI(title="bitkub-hook", lifespan=lifespan)
    app.state.service = service

    @app.get("/ping")
    async def ping() -> dict[str, str]:
        return {"message": "pong"}

    @app.post(WEBHOOK_PATH)
    async def tradingview_webhook(request: Request) -> JSONResponse:
        pipeline: WebhookService = request.app.state.service
        try:
            payload: Any = await request.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            error = ValidationError(
                "Webhook body must be a JSON object",
                field="body",
                constraint="JSON object with symbol, action, price, amount, amount_type",
            )
            body = error.to_dict()
            body["message"] = "invalid webhook params"
            return JSONResponse(status_code=400, content=body)

        try:
            params = WebhookParams.model_validate(payload)
        except PydanticValidationError as exc:
            logger.warning("Rejected webhook payload: %s", exc.errors(include_url=False))
            if "amount_type" in _invalid_fields(exc) and pipeline.notifier is not None:
                await pipeline.notifier.send("invalid amount_type")
            body = format_error_response(exc)
            body["message"] = "invalid webhook params"
            return JSONResponse(status_code=400, content=body)

        try:
            outcome = await pipeline.handle(params)
        except Exception as exc:
            logger.exception("Webhook pipeline failed for %s", params.symbol)
            return JSONResponse(status_code=500, content=format_error_response(exc))

        status_code, body = outcome.to_response()
        return JSONResponse(status_code=status_code, content=body)

    return app
