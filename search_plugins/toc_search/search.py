import html
import re
from typing import Iterable, List, Optional

from .models import LinkRecord, SearchResult

EXCERPT_LEAD = 20
EXCERPT_LENGTH = 40
HIGHLIGHT_TEMPLATE = '<em class="search-keyword">{}</em>'


def compile_query(query) -> Optional[re.Pattern]:
    """Return a case-insensitive literal pattern, or None for a blank query."""
    if not isinstance(query, str) or query.strip() == "":
        return None
    return re.compile(re.escape(query), re.IGNORECASE)


def excerpt_bounds(match_index: int, length: int = EXCERPT_LENGTH, lead: int = EXCERPT_LEAD):
    start = max(0, match_index - lead)
    return start, start + length


def highlight(text: str, pattern: re.Pattern, template: str = HIGHLIGHT_TEMPLATE) -> str:
    """Wrap every match of ``pattern`` in ``template``; other text is HTML-escaped."""
    parts = []
    position = 0
    for match in pattern.finditer(text):
        parts.append(html.escape(text[position:match.start()], quote=False))
        parts.append(template.format(html.escape(match.group(0), quote=False)))
        position = match.end()
    parts.append(html.escape(text[position:], quote=False))
    return "".join(parts)


def search(index: Optional[Iterable[LinkRecord]], query) -> Optional[List[SearchResult]]:
    """
    Match ``query`` against the content of every record in ``index``.

    Returns None when the query is blank (no active search), otherwise the
    matching records in index order, each with a 40 character excerpt around
    the first match and all matches inside it highlighted.
    """
    pattern = compile_query(query)
    if pattern is None:
        return None

    results = []
    for record in index or ():
        match = pattern.search(record.content)
        if match is None:
            continue
        start, end = excerpt_bounds(match.start())
        excerpt = highlight(record.content[start:end], pattern)
        results.append(SearchResult.from_record(record, excerpt))
    return results
