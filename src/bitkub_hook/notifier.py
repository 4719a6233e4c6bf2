"""LINE Notify side channel."""

import logging
from typing import Optional

import httpx

from .config import BitkubConfig

logger = logging.getLogger(__name__)


class LineNotifier:
    def __init__(
        self,
        config: BitkubConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 5.0,
    ) -> None:
        self.url = config.notify_url
        self._token = config.notify_token
        self.client = httpx.AsyncClient(transport=transport, timeout=timeout)

    async def send(
        self, message: str, sticker_id: str = "1", sticker_package_id: str = "1"
    ) -> bool:
        """Post ``message`` to LINE Notify. Failures are logged, never raised."""
        data = {
            "message": message,
            "stickerId": sticker_id,
            "stickerPackageId": sticker_package_id,
        }
        headers = {"Authorization": f"Bearer {self._token}"}
        try:
            response = await self.client.post(self.url, data=data, headers=headers)
            response.raise_for_status()
        except Exception:
            logger.exception("LINE notification failed")
            return False
        logger.debug("LINE notification sent: %s", response.text)
        return True

    async def aclose(self) -> None:
        await self.client.aclose()
