"""Subscription gate for publishing.

Subscription status lives in a published CSV sheet: first column is the
contact id, third column the status. Only ``active`` contacts may publish.
"""

import csv
import io
import logging

import httpx

from app_builder.core.config import settings
from app_builder.core.exceptions import PublishError, SubscriptionError

logger = logging.getLogger(__name__)

ACTIVE_STATUS = "active"


def find_status(sheet_csv: str, contact_id: str) -> str | None:
    wanted = contact_id.strip().lower()
    for row in csv.reader(io.StringIO(sheet_csv)):
        if len(row) > 2 and row[0].strip().lower() == wanted:
            return row[2].strip().lower()
    return None


class SubscriptionChecker:
    def __init__(
        self,
        sheet_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.sheet_url = settings.SUBSCRIPTION_SHEET_URL if sheet_url is None else sheet_url
        self._transport = transport

    async def fetch_status(self, contact_id: str) -> str | None:
        if not self.sheet_url:
            raise PublishError("Subscription checking is not configured.")
        async with httpx.AsyncClient(timeout=10.0, transport=self._transport) as client:
            resp = await client.get(self.sheet_url, follow_redirects=True)
            resp.raise_for_status()
        return find_status(resp.text, contact_id)

    async def ensure_active(self, contact_id: str) -> None:
        status = await self.fetch_status(contact_id)
        if status != ACTIVE_STATUS:
            logger.info("Publish blocked for %s (subscription status %r)", contact_id, status)
            raise SubscriptionError("An active subscription is required to publish.")
