# helpdesk/notification/client.py
from typing import Any

import httpx

from helpdesk.core.config import get_settings


class HelpdeskClient:
    """Thin async client over the ticket API."""

    def __init__(self, base_url: str | None = None, timeout: float = 20.0, transport: httpx.AsyncBaseTransport | None = None):
        self._client = httpx.AsyncClient(
            base_url=base_url or get_settings().API_BASE_URL,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def list_all_tickets(self) -> list[dict[str, Any]]:
        response = await self._client.get("/api/tickets")
        response.raise_for_status()
        return response.json()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HelpdeskClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
