import dataclasses
import logging
from typing import List, Optional, Tuple

from .fetch import BaseFetcher
from .index import SearchIndexBuilder
from .locations import LocationService
from .models import LinkRecord, SearchResult
from .options import TocSearchOptions
from .search import search

log = logging.getLogger("mkdocs.plugins.toc_search")


class TocSearch:
    """
    Holds the current search index and answers queries against it.

    ``refresh`` rebuilds the index from the configured paths (or the pages a
    summary document links to). Builds are numbered; only the most recently
    started one may replace ``search_index``, and it does so in one
    assignment, so readers see the previous complete index or the next.
    """

    def __init__(
        self,
        fetcher: BaseFetcher,
        locations: LocationService,
        options: Optional[TocSearchOptions] = None,
    ):
        self.fetcher = fetcher
        self.locations = locations
        self.options = options or TocSearchOptions()
        self.search_index: Optional[Tuple[LinkRecord, ...]] = None
        self.search_results: Optional[List[SearchResult]] = None
        self.paths: Optional[Tuple[str, ...]] = self.options.paths
        self._generation = 0

    def configure(self, options: Optional[TocSearchOptions] = None, **changes) -> TocSearchOptions:
        """Replace the options snapshot used by the next ``refresh``."""
        base = options or self.options
        self.options = dataclasses.replace(base, **changes) if changes else base
        return self.options

    async def refresh(self) -> Optional[Tuple[LinkRecord, ...]]:
        self._generation += 1
        generation = self._generation
        options = self.options

        if not options.enabled:
            log.debug("[toc_search] neither paths nor summary configured; search disabled")
            index, paths = None, None
        else:
            builder = SearchIndexBuilder(self.fetcher, self.locations, options)
            paths = options.paths
            if paths is None:
                paths = tuple(await builder.resolve_summary(options.summary))
            index = await builder.build(paths)

        if generation != self._generation:
            log.debug(
                f"[toc_search] discarding index build {generation}; build {self._generation} is newer"
            )
            return self.search_index

        self.paths = paths
        self.search_index = index
        return index

    def search(self, query) -> Optional[List[SearchResult]]:
        if self.search_index is None:
            self.search_results = None
        else:
            self.search_results = search(self.search_index, query)
        return self.search_results
