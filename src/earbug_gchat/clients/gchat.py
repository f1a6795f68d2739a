from typing import Protocol

import httpx
import orjson

from earbug_gchat.domains.summary.errors import DeliveryError


class Notifier(Protocol):
    async def send(self, text: str) -> None:
        ...


class WebhookClient:
    """Posts plain text messages to a Google Chat space through an incoming webhook."""

    def __init__(self, endpoint: str, client: httpx.AsyncClient):
        self.endpoint = endpoint
        self.client = client

    async def send(self, text: str) -> None:
        if not self.endpoint:
            raise DeliveryError("no webhook endpoint configured")

        try:
            resp = await self.client.post(
                self.endpoint,
                content=orjson.dumps({"text": text}),
                headers={"Content-Type": "application/json; charset=UTF-8"},
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DeliveryError(f"webhook responded {e.response.status_code}: {e.response.text[:200]}") from e
        except httpx.HTTPError as e:
            raise DeliveryError(f"post webhook: {e}") from e
