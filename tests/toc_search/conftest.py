import asyncio

import pytest

from search_plugins.toc_search.fetch import BaseFetcher, FetchResult
from search_plugins.toc_search.locations import LocationService


class FakeFetcher(BaseFetcher):
    """In-memory fetcher; ``delays`` holds per-path latencies in seconds."""

    def __init__(self, documents, delays=None):
        self.documents = dict(documents)
        self.delays = dict(delays or {})
        self.requests = []

    async def get(self, path):
        self.requests.append(path)
        await asyncio.sleep(self.delays.get(path, 0))
        if path not in self.documents:
            return FetchResult.missing()
        return FetchResult(contents=self.documents[path])


@pytest.fixture
def make_fetcher():
    return FakeFetcher


@pytest.fixture
def locations():
    return LocationService(root="docs", base_url="/")
