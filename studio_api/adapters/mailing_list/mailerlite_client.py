"""MailerLite subscriber API client."""

from __future__ import annotations

import logging

import httpx

from studio_api.adapters.mailing_list.base import AbstractMailingListClient

logger = logging.getLogger(__name__)


class MailerLiteClient(AbstractMailingListClient):
    """Adds subscribers to a MailerLite group over the v2 REST API."""

    def __init__(
        self,
        api_key: str,
        *,
        group_id: str,
        base_url: str = "https://connect.mailerlite.com",
        timeout_seconds: float = 10.0,
    ) -> None:
        self._api_key = api_key
        self.group_id = group_id
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    async def subscribe(self, email: str, *, source: str) -> None:
        payload = {
            "email": email,
            "groups": [self.group_id],
            "fields": {"source": source},
        }
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_seconds,
        ) as client:
            response = await client.post("/api/subscribers", json=payload, headers=self._headers())
            response.raise_for_status()

        logger.info(
            "mailing_list.subscribed",
            extra={"provider": "mailerlite", "status_code": response.status_code},
        )
