"""Source pulling extracted records from the automation host over HTTP."""

import logging
from typing import Optional

import httpx

from scholarship_archive.models.raw import RawRecord
from scholarship_archive.sources.base import RecordSource

logger = logging.getLogger(__name__)


class HttpFeedSource(RecordSource):
    """
    Fetches a JSON array of extracted mappings from a URL.
    Also accepts an object with a 'records' (or 'items') array.
    """

    source_id = "http"

    DEFAULT_HEADERS = {
        "User-Agent": "scholarship-archive/0.1",
        "Accept": "application/json",
    }

    def __init__(self, url: str, client: Optional[httpx.Client] = None):
        self.url = url
        self._client = client or httpx.Client(
            timeout=60.0,
            follow_redirects=True,
            headers=self.DEFAULT_HEADERS,
        )

    def _fetch_json(self):
        response = self._client.get(self.url)
        response.raise_for_status()
        return response.json()

    def fetch(self) -> list[RawRecord]:
        payload = self._fetch_json()
        if isinstance(payload, dict):
            items = payload.get("records", payload.get("items"))
            if items is None:
                raise ValueError(f"Feed at {self.url} has no 'records' array")
        else:
            items = payload
        records = self._to_raw(items)
        logger.info("Fetched %d raw records from %s", len(records), self.url)
        return records
