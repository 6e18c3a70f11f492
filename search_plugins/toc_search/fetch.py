import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib import error as urllib_error
from urllib import request as urllib_request

log = logging.getLogger("mkdocs.plugins.toc_search")


@dataclass(frozen=True)
class FetchResult:
    contents: Optional[str] = None
    not_found: bool = False

    @classmethod
    def missing(cls) -> "FetchResult":
        return cls(contents=None, not_found=True)


class BaseFetcher:
    """
    Loads raw document text by path.

    ``get`` never raises for a resource that cannot be read; it reports it
    as not found so one bad path cannot abort a whole index build.
    """

    async def get(self, path: str) -> FetchResult:
        raise NotImplementedError


class LocalFetcher(BaseFetcher):
    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def _read(self, path: str) -> FetchResult:
        try:
            return FetchResult(contents=Path(path).read_text(encoding=self.encoding))
        except FileNotFoundError:
            log.debug(f"[toc_search] no document at {path}")
        except (OSError, UnicodeDecodeError) as exc:
            log.warning(f"[toc_search] unable to read {path}: {exc}")
        return FetchResult.missing()

    async def get(self, path: str) -> FetchResult:
        return await asyncio.to_thread(self._read, path)


class HttpFetcher(BaseFetcher):
    def __init__(self, timeout: float = 10, encoding: str = "utf-8"):
        self.timeout = timeout
        self.encoding = encoding

    def _download(self, url: str) -> FetchResult:
        try:
            with urllib_request.urlopen(url, timeout=self.timeout) as response:
                return FetchResult(contents=response.read().decode(self.encoding))
        except urllib_error.HTTPError as exc:
            if exc.code != 404:
                log.warning(f"[toc_search] error fetching {url}: {exc}")
        except (urllib_error.URLError, OSError, UnicodeDecodeError) as exc:
            log.warning(f"[toc_search] error fetching {url}: {exc}")
        return FetchResult.missing()

    async def get(self, path: str) -> FetchResult:
        return await asyncio.to_thread(self._download, path)


def fetcher_for(root: str) -> BaseFetcher:
    """Pick the fetcher able to read documents below ``root``."""
    if root.startswith(("http://", "https://")):
        return HttpFetcher()
    return LocalFetcher()
