import re
from urllib.parse import quote

import pytest


@pytest.fixture
def table_url(settings):
    """Build a URL pattern matching every page request for a record store table."""

    def _table_url(table: str) -> re.Pattern:
        base = f"{settings.RECORD_STORE_API_URL}/{settings.RECORD_STORE_BASE_ID}/{quote(table, safe='')}"
        return re.compile(rf"^{re.escape(base)}(\?.*)?$")

    return _table_url


@pytest.fixture
def mock_table(httpx_mock, table_url):
    """Register record store responses for a table.

    Each positional argument is one page of raw record dicts; every page but the
    last carries an ``offset`` cursor to the next one.
    """

    def _mock_table(table: str, *pages: list[dict], status_code: int = 200, error: str = None, times: int = 1):
        url = table_url(table)
        if status_code != 200:
            body = {"error": {"type": error or "SERVER_ERROR", "message": "failed"}}
            for _ in range(times):
                httpx_mock.add_response(url=url, status_code=status_code, json=body)
            return

        pages = pages or ([],)
        for number, records in enumerate(pages, start=1):
            body = {"records": records}
            if number < len(pages):
                body["offset"] = f"itr{table}/{number + 1}"
            httpx_mock.add_response(url=url, json=body)

    return _mock_table
