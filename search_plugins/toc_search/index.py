import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

from .fetch import BaseFetcher
from .locations import LocationService
from .models import Document, LinkRecord, TransformedDocument
from .options import TocSearchOptions
from .pipeline import Processor, links_processor, toc_processor

log = logging.getLogger("mkdocs.plugins.toc_search")


class SearchIndexBuilder:
    """
    Fetches and processes documents into a flat, ordered list of link records.

    A document that is missing or fails to process contributes nothing; the
    rest of the build carries on.
    """

    def __init__(
        self,
        fetcher: BaseFetcher,
        locations: LocationService,
        options: Optional[TocSearchOptions] = None,
    ):
        options = options or TocSearchOptions()
        self.fetcher = fetcher
        self.locations = locations
        self.processor = toc_processor(options, locations)
        self.links_processor = links_processor(options, locations)

    async def load(self, page: str, processor: Processor) -> Optional[TransformedDocument]:
        vfile = self.locations.page_to_file(page)
        full_path = vfile.full_path
        try:
            resource = await self.fetcher.get(full_path)
        except Exception as e:
            log.warning(f"[toc_search] fetch failed for {full_path}: {e}", exc_info=True)
            return None
        if resource.not_found:
            log.debug(f"[toc_search] skipping {page}: {full_path} not found")
            return None

        document = Document(
            logical_path=page,
            base_directory=vfile.cwd,
            path=vfile.path,
            raw_content=resource.contents,
        )
        try:
            return processor.process(document)
        except Exception as e:
            log.warning(f"[toc_search] failed to process {page}: {e}", exc_info=True)
            return None

    async def resolve_summary(self, summary: str) -> List[str]:
        """Return the link targets of the summary document as a path list."""
        transformed = await self.load(summary, self.links_processor)
        if transformed is None:
            log.warning(f"[toc_search] summary {summary} could not be loaded")
            return []
        paths = [link.url for link in transformed.links]
        log.debug(f"[toc_search] summary {summary} lists {len(paths)} pages")
        return paths

    async def build(self, paths: Sequence[str]) -> Tuple[LinkRecord, ...]:
        documents = await asyncio.gather(
            *(self.load(page, self.processor) for page in paths)
        )
        index: List[LinkRecord] = []
        for document in documents:
            if document is not None:
                index.extend(document.links)
        log.debug(
            f"[toc_search] indexed {sum(d is not None for d in documents)}/{len(paths)} documents"
        )
        return tuple(index)
