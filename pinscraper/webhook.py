import json
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

import httpx

from pinscraper.dispatcher import RunResult

logger = logging.getLogger("pinscraper.webhook")

SOURCE = "PinterestScraper"


class WebhookClient:
    """Posts the outcome of a run (image list or error record) to a webhook."""

    def __init__(
        self,
        url: Optional[str],
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.url = url
        self.token = token
        self._client = client
        self.timeout = timeout

    @property
    def headers(self) -> dict:
        return {"Content-Type": "application/json", "x-auth-token": self.token or ""}

    async def _post(self, payload: dict) -> None:
        if self._client is not None:
            response = await self._client.post(self.url, json=payload, headers=self.headers)
            response.raise_for_status()
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(self.url, json=payload, headers=self.headers)
            response.raise_for_status()

    async def send_images(self, images: List[str]) -> bool:
        if not self.url or not images:
            logger.warning("Nothing sent: webhook URL missing or no images collected")
            return False
        try:
            await self._post({"images": list(images)})
        except httpx.HTTPError as exc:
            logger.error("Error while sending images: %s", exc)
            return False
        logger.info("Images successfully sent to webhook")
        return True

    async def send_error(self, message: str, details: Optional[Any] = None) -> bool:
        if not self.url:
            return False
        payload = {
            "source": SOURCE,
            "type": "error",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "message": message,
            "details": json.dumps(details) if details else "No details",
        }
        try:
            await self._post(payload)
        except httpx.HTTPError as exc:
            logger.error("Error while sending error: %s", exc)
            return False
        logger.info("Error message sent to webhook")
        return True

    async def report(self, result: RunResult) -> bool:
        if result.ok:
            return await self.send_images(result.images)
        return await self.send_error(
            "Error while trying to scrape",
            {"message": result.error.message, "stack": result.error.detail, "url": result.error.url},
        )
