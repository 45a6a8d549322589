"""HTTP trigger adapter.

Implements TriggerPort by calling the actuator's trigger URL over HTTP.
A single call per fire(); failures are surfaced, never retried.
Redirects are followed and only the final response is checked.
"""

import json
import logging
from typing import Any, Literal

import httpx

from treatrelay.core.ports import TriggerFailedError, TriggerPort

logger = logging.getLogger(__name__)

TriggerMethod = Literal["GET", "POST", "PUT"]


class HttpTriggerAdapter(TriggerPort):
    """Fires the actuator by requesting a configured URL."""

    def __init__(
        self,
        trigger_url: str,
        method: TriggerMethod = "GET",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize HTTP trigger adapter.

        Args:
            trigger_url: Full URL of the actuator trigger endpoint.
            method: HTTP method to use (default GET). No body is sent.
            timeout_seconds: httpx timeout applied to each phase of the call
                (connect, write, read and pool), not to the call as a whole.
            transport: Optional httpx transport (used by tests).
        """
        if not trigger_url:
            raise ValueError("trigger_url must be a non-empty string")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self.trigger_url = trigger_url
        self.method = method.upper()
        self.timeout_seconds = timeout_seconds
        self.client = httpx.AsyncClient(
            timeout=timeout_seconds, follow_redirects=True, transport=transport
        )

    async def __aenter__(self) -> "HttpTriggerAdapter":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.client.aclose()

    async def close(self) -> None:
        """Close the httpx client and clean up resources."""
        await self.client.aclose()

    async def fire(self) -> Any:
        """Call the trigger URL once.

        Returns:
            Parsed JSON body, or the raw text if the body is not JSON.

        Raises:
            TriggerFailedError: On a non-2xx status or a transport error.
        """
        try:
            response = await self.client.request(self.method, self.trigger_url)
        except httpx.HTTPError as e:
            logger.error(
                f"Trigger request to {self.trigger_url} failed: {e}", exc_info=True
            )
            raise TriggerFailedError(None, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise TriggerFailedError(response.status_code, response.text)

        logger.debug(
            f"Trigger responded {response.status_code}",
            extra={"trigger_url": self.trigger_url},
        )
        return self._parse_body(response)

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        """Return the body as structured data when it parses as JSON."""
        text = response.text
        if not text.strip():
            return text
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text
