"""
Webhook Sender.

Single-shot JSON POST to a provider webhook. Delivery is best effort:
no retries, and failures are logged and reported as None instead of
raised, so a broken webhook can never fail the operation that triggered it.
"""

import time
from typing import Any

import httpx

from gumboard.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


class WebhookSender:
    """
    Posts payloads to webhook URLs with httpx.

    Args:
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    async def _post(self, url: str, payload: dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(transport=self._transport) as client:
            return await client.post(
                url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )

    @staticmethod
    def _delivery_id(response: httpx.Response) -> str:
        """Provider-issued id when the body has one, else a millisecond token."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("id"):
            return str(body["id"])
        return str(int(time.time() * 1000))

    async def send(self, url: str, payload: dict[str, Any], provider: str) -> str | None:
        """
        POST a payload once.

        Returns:
            Delivery id on a 2xx response, None on any failure
        """
        try:
            response = await self._post(url, payload)
        except httpx.HTTPError as e:
            log_with_source(
                logger,
                "notifications",
                "error",
                "Webhook delivery failed",
                provider=provider,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        if not response.is_success:
            log_with_source(
                logger,
                "notifications",
                "error",
                "Webhook rejected message",
                provider=provider,
                status=response.status_code,
                reason=response.reason_phrase,
            )
            return None

        message_id = self._delivery_id(response)
        log_with_source(
            logger,
            "notifications",
            "debug",
            "Webhook message delivered",
            provider=provider,
            message_id=message_id,
        )
        return message_id

    async def update(self, url: str, payload: dict[str, Any], provider: str) -> None:
        """
        Announce a changed state by posting a fresh message.

        Webhooks are treated as post-only: the original remote message is
        left untouched and nothing is returned.
        """
        await self.send(url, payload, provider)
