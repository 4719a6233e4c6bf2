"""Configuration helpers for the Bitkub webhook bridge."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_URL = "https://api.bitkub.com/api/"
DEFAULT_NOTIFY_URL = "https://notify-api.line.me/api/notify"


def _require_env(key: str, message: str) -> str:
    value = os.getenv(key)
    if not value:
        raise ValueError(message)
    return value


def _bool_from_env(value: str | None, *, default: bool = True) -> bool:
    comparison = (value or ("true" if default else "false")).strip().lower()
    return comparison in {"1", "true", "yes"}


@dataclass(slots=True)
class BitkubConfig:
    api_key: str
    api_secret: str
    notify_token: str
    api_url: str = DEFAULT_API_URL
    notify_url: str = DEFAULT_NOTIFY_URL
    test_mode: bool = True
    host: str = "0.0.0.0"
    port: int = 8080

    @classmethod
    def from_env(cls) -> "BitkubConfig":
        api_key = _require_env(
            "BITKUB_API_KEY",
            "BITKUB_API_KEY environment variable is required. Please set it to your Bitkub API key.",
        )
        api_secret = _require_env(
            "BITKUB_API_SECRET",
            "BITKUB_API_SECRET environment variable is required. Please set it to the secret used for request signing.",
        )
        notify_token = _require_env(
            "LINE_NOTIFY_TOKEN",
            "LINE_NOTIFY_TOKEN environment variable is required. Please set it to your LINE Notify access token.",
        )
        raw_port = os.getenv("PORT") or "8080"
        try:
            port = int(raw_port)
        except ValueError as exc:
            raise ValueError(f"PORT must be an integer, got {raw_port!r}") from exc
        return cls(
            api_key=api_key.strip(),
            api_secret=api_secret.strip(),
            notify_token=notify_token.strip(),
            api_url=cls._normalize_api_url(os.getenv("BITKUB_API_URL") or DEFAULT_API_URL),
            notify_url=os.getenv("LINE_NOTIFY_URL") or DEFAULT_NOTIFY_URL,
            test_mode=_bool_from_env(os.getenv("BITKUB_TEST_MODE")),
            host=os.getenv("HOST") or "0.0.0.0",
            port=port,
        )

    @staticmethod
    def _normalize_api_url(raw_url: str) -> str:
        url = raw_url.strip()
        if not url.endswith("/"):
            url = f"{url}/"
        return url

    def validate(self) -> None:
        if not self.api_key:
            raise ValueError("API key cannot be empty")
        if not self.api_secret:
            raise ValueError("API secret cannot be empty")
        if not self.notify_token:
            raise ValueError("Notify token cannot be empty")
        if not self.api_url.startswith(("http://", "https://")):
            raise ValueError(
                f"Invalid API URL: {self.api_url}. URL must start with http:// or https://"
            )
        if not 1 <= self.port <= 65535:
            raise ValueError(f"Invalid port: expected 1-65535, got {self.port}")


def load_config() -> BitkubConfig:
    load_dotenv()
    config = BitkubConfig.from_env()
    config.validate()
    return config
