"""Fire-and-forget relay of recognized readings to an integrator webhook.

Runs after the HTTP response is prepared (FastAPI background task). Delivery
failures are retried with exponential backoff and finally logged; they never
reach the request that produced the reading.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any

import requests
from tenacity import Retrying, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

EVENT_NAME = "weight.recognized"


class WebhookDispatcher:
    def __init__(
        self,
        url: str,
        *,
        timeout: float = 5.0,
        max_attempts: int = 3,
        wait_multiplier: float = 1.0,
        session: requests.Session | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._wait_multiplier = wait_multiplier
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        return self._url

    async def dispatch(self, data: dict[str, Any]) -> bool:
        """Deliver *data*; returns False (after logging) when every attempt failed."""
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(None, self._post_with_retry, {"event": EVENT_NAME, "data": data})
        except requests.RequestException as exc:
            logger.error(
                "webhook_failed",
                extra={"url": self._url, "attempts": self._max_attempts, "error": str(exc)},
            )
            return False
        logger.info("webhook_delivered", extra={"url": self._url})
        return True

    def _post_with_retry(self, payload: dict[str, Any]) -> None:
        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._wait_multiplier, min=0, max=10),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                response = self._session.post(self._url, json=payload, timeout=self._timeout)
                response.raise_for_status()
