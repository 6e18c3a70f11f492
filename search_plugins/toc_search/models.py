from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Document:
    """A fetched markdown source.

    ``logical_path`` is the page name as requested, ``base_directory`` and
    ``path`` locate the file it was read from. ``raw_content`` is ``None``
    when the fetcher reported the resource as missing.
    """

    logical_path: str
    base_directory: str
    path: str
    raw_content: Optional[str] = None

    @property
    def not_found(self) -> bool:
        return self.raw_content is None


@dataclass(frozen=True)
class LinkRecord:
    """One searchable entry of the index."""

    name: str
    url: str
    content: str
    depth: Optional[int] = None


@dataclass(frozen=True)
class SearchResult(LinkRecord):
    """A matching record whose content holds the highlighted excerpt."""

    @classmethod
    def from_record(cls, record: LinkRecord, content: str) -> "SearchResult":
        return cls(name=record.name, url=record.url, content=content, depth=record.depth)


@dataclass(frozen=True)
class TransformedDocument:
    path: str
    title: Optional[str]
    name: str
    links: Tuple[LinkRecord, ...]
    markdown: Optional[str] = None
