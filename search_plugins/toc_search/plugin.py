import asyncio
import logging
from urllib.parse import urlsplit

from mkdocs.config import config_options as c
from mkdocs.exceptions import PluginError
from mkdocs.plugins import BasePlugin

from .fetch import fetcher_for
from .locations import LocationService
from .options import TocSearchOptions
from .service import TocSearch

log = logging.getLogger("mkdocs.plugins.toc_search")


class TocSearchPlugin(BasePlugin):
    """MkDocs plugin that builds a linked table-of-contents search index.

    Configuration options (all optional):
    - paths (str|list): Pages to index, as a list or a comma separated string.
    - summary (str): A page whose links enumerate the pages to index; used when `paths` is unset.
    - min_depth (int): Headings shallower than this are dropped before the TOC is built.
    - max_depth (int): Deepest heading level included in the TOC.
    - base_url (str): URL prefix of the pages; defaults to the path of `site_url`.
    - docs_root (str): Where documents are read from; defaults to `docs_dir`. An http(s) root is fetched remotely.
    - index_name (str): Page name that stands for a directory (`guide/` -> `guide/index.md`).
    - max_results (int): How many results `search` hands back to callers.

    Other plugins can call `search()` once the build has run; the index is
    rebuilt on every build.
    """

    config_scheme = (
        ("paths", c.Type((str, list), default=None)),
        ("summary", c.Type(str, default=None)),
        ("min_depth", c.Type(int, default=1)),
        ("max_depth", c.Type(int, default=6)),
        ("base_url", c.Type(str, default=None)),
        ("docs_root", c.Type(str, default=None)),
        ("index_name", c.Type(str, default="index")),
        ("max_results", c.Type(int, default=9)),
    )

    def __init__(self):
        super().__init__()
        self.toc_search = None

    def on_config(self, config, **kwargs):
        try:
            options = TocSearchOptions.from_config(self.config)
        except ValueError as e:
            raise PluginError(f"[toc_search] invalid configuration: {e}") from e

        site_path = urlsplit(config.get("site_url") or "").path
        base_url = self.config.get("base_url") or site_path or "/"
        root = self.config.get("docs_root") or config["docs_dir"]
        locations = LocationService(
            root=root,
            base_url=base_url,
            index_name=self.config.get("index_name") or "index",
        )
        # A fresh service per config load; `mkdocs serve` reloads config on change.
        self.toc_search = TocSearch(fetcher_for(root), locations, options)
        log.debug(f"[toc_search] documents root {root}, base url {locations.base_url}")
        return config

    def on_post_build(self, config, **kwargs):
        if self.toc_search is None:
            return
        index = asyncio.run(self.toc_search.refresh())
        if index is None:
            log.info("[toc_search] no paths or summary configured; search index not built")
            return
        paths = self.toc_search.paths or ()
        log.info(f"[toc_search] indexed {len(index)} links from {len(paths)} pages")

    @property
    def search_index(self):
        return self.toc_search.search_index if self.toc_search else None

    def search(self, query):
        """Run ``query`` against the index, truncated to ``max_results``."""
        if self.toc_search is None:
            return None
        results = self.toc_search.search(query)
        if results is None:
            return None
        return results[: self.config.get("max_results", 9)]
