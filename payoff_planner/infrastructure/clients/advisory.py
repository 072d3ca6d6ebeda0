"""Text-generation HTTP client with a single retry"""

import asyncio
import logging
from typing import Any, Dict

import httpx

from payoff_planner.config import settings
from payoff_planner.domain.exceptions import AdvisoryUnavailable
from payoff_planner.infrastructure.observability.metrics import advisory_failure_counter, advisory_latency_histogram

logger = logging.getLogger(__name__)


class AdvisoryClient:
    """Client for the external text-generation service"""

    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url or settings.advisory_api_url
        self.api_key = api_key or settings.advisory_api_key
        self.model = settings.advisory_model
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.advisory_max_retries
        self.backoff_base = settings.advisory_backoff_base
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    async def generate(self, prompt: str, response_schema: Dict[str, Any]) -> Dict[str, Any]:
        """
        Request structured text for ``prompt``.

        Retry strategy:
        - At most ``advisory_max_retries`` retries (default 1)
        - Backoff: base * 2^(attempt-1) seconds
        - Retries on 5xx/4xx errors, network failures and undecodable bodies

        Raises:
            AdvisoryUnavailable: After the final failed attempt
        """
        payload = {"model": self.model, "prompt": prompt, "response_json_schema": response_schema}
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with advisory_latency_histogram.time():
                        response = await client.post(self.api_url, json=payload, headers=self._headers())
                        response.raise_for_status()
                        data = response.json()
                    if not isinstance(data, dict):
                        raise ValueError("response body is not a JSON object")
                    return data

                except (httpx.HTTPStatusError, httpx.RequestError, ValueError) as e:
                    attempt += 1
                    advisory_failure_counter.inc()

                    if attempt > self.max_retries:
                        raise AdvisoryUnavailable(f"Advisory service failed after {attempt} attempts: {e}") from e

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    logger.info("Retrying advisory request", extra={"attempt": attempt, "backoff_seconds": backoff})
                    await asyncio.sleep(backoff)
