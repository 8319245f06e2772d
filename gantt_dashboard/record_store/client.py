"""
Record Store API Client

Async client for an Airtable-compatible record store. Each table is exposed as a
paginated list of ``{id, fields}`` records; pages are chained with an opaque
``offset`` cursor returned alongside each page.
"""

import asyncio
import logging
from urllib.parse import quote

import httpx
from django.conf import settings

from gantt_dashboard.record_store.models import RawRecord, RecordPage

logger = logging.getLogger(__name__)

# Error types the store returns for a table that does not exist in the base
MISSING_TABLE_ERROR_TYPES = {"NOT_FOUND", "TABLE_NOT_FOUND", "INVALID_PERMISSIONS_OR_MODEL_NOT_FOUND"}


class RecordStoreError(Exception):
    """Exception raised when a table could not be read from the record store."""

    def __init__(self, table: str, message: str):
        super().__init__(f"{table}: {message}")
        self.table = table
        self.message = message


class RecordStoreNotConfigured(RecordStoreError):
    pass


class TableNotFound(RecordStoreError):
    pass


class RecordStoreClient:
    """
    Fetch whole tables from the record store.

    Use as an async context manager so the underlying connection pool is closed:

        async with RecordStoreClient.from_settings() as client:
            milestones = await client.fetch_all("Milestones")
    """

    def __init__(
        self,
        token: str,
        base_id: str,
        api_url: str = "https://api.airtable.com/v0",
        timeout: float = 30.0,
        page_size: int = 100,
        max_retries: int = 1,
        retry_delay: float = 0.5,
    ):
        if not token or not base_id:
            raise RecordStoreNotConfigured("*", "record store token and base id are required")

        self.base_id = base_id
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.page_size = page_size
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.token = token
        self._client = None

    @classmethod
    def from_settings(cls) -> "RecordStoreClient":
        return cls(
            token=settings.RECORD_STORE_TOKEN,
            base_id=settings.RECORD_STORE_BASE_ID,
            api_url=settings.RECORD_STORE_API_URL,
            timeout=settings.RECORD_STORE_TIMEOUT,
            page_size=settings.RECORD_STORE_PAGE_SIZE,
            max_retries=settings.RECORD_STORE_MAX_RETRIES,
            retry_delay=settings.RECORD_STORE_RETRY_DELAY,
        )

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"Authorization": f"Bearer {self.token}"},
                timeout=self.timeout,
            )
        return self._client

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def table_url(self, table: str) -> str:
        return f"{self.api_url}/{self.base_id}/{quote(table, safe='')}"

    async def fetch_page(self, table: str, offset: str | None = None) -> RecordPage:
        """
        Fetch a single page of records.

        Args:
            table: Table name as shown in the record store
            offset: Cursor returned by the previous page, if any

        Returns:
            RecordPage with the page's records and the next cursor (None on the last page)

        Raises:
            TableNotFound: If the table does not exist in the base
            RecordStoreError: If the request fails after retrying
        """
        params = {"pageSize": self.page_size}
        if offset:
            params["offset"] = offset

        response = await self._get(table, params)
        return RecordPage.build(**response.json())

    async def fetch_all(self, table: str) -> list[RawRecord]:
        """
        Fetch every record of a table, following the pagination cursor until exhausted.

        A table that does not exist yields an empty list.
        """
        records = []
        seen_offsets = set()
        offset = None
        page = 0

        logger.info(f"Fetching table {table!r} from record store")

        while True:
            page += 1
            try:
                result = await self.fetch_page(table, offset)
            except TableNotFound:
                logger.warning(f"Table {table!r} does not exist, treating as empty")
                return []

            records.extend(result.records)
            logger.debug(
                f"Retrieved {len(result.records)} records from {table!r} page {page} (total so far: {len(records)})"
            )

            if not result.has_more:
                break
            if result.offset in seen_offsets:
                raise RecordStoreError(table, f"pagination cursor {result.offset!r} repeated on page {page}")
            seen_offsets.add(result.offset)
            offset = result.offset

        logger.info(f"Fetched total of {len(records)} records from {table!r}")
        return records

    async def _get(self, table: str, params: dict) -> httpx.Response:
        url = self.table_url(table)
        attempt = 0
        while True:
            try:
                response = await self.http_client.get(url, params=params)
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as e:
                if _is_missing_table(e.response):
                    raise TableNotFound(table, "table not found") from e
                if not _is_transient(e.response) or attempt >= self.max_retries:
                    raise RecordStoreError(table, f"HTTP {e.response.status_code}: {e.response.text}") from e
                logger.warning(f"Transient HTTP {e.response.status_code} fetching {table!r}, retrying")
            except httpx.TransportError as e:
                if attempt >= self.max_retries:
                    raise RecordStoreError(table, f"request failed: {e}") from e
                logger.warning(f"Transport error fetching {table!r}, retrying: {e}")

            attempt += 1
            if self.retry_delay:
                await asyncio.sleep(self.retry_delay)


def _is_transient(response: httpx.Response) -> bool:
    return response.status_code == 429 or response.status_code >= 500


def _is_missing_table(response: httpx.Response) -> bool:
    if response.status_code == 404:
        return True
    if response.status_code != 403:
        return False
    try:
        data = response.json()
    except ValueError:
        return False
    error = data.get("error") if isinstance(data, dict) else None
    error_type = error.get("type") if isinstance(error, dict) else error
    return error_type in MISSING_TABLE_ERROR_TYPES
