import html
import logging
import re
import xml.etree.ElementTree as etree
from typing import Any, Dict, List, Optional, Tuple

import markdown
import yaml
from bs4 import BeautifulSoup
from markdown import util
from markdownify import markdownify

log = logging.getLogger("mkdocs.plugins.toc_search")

FM_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*\n?", re.DOTALL)

# Block extensions enabled for every document; headings inside fenced code
# must not count as headings.
MARKDOWN_EXTENSIONS = ["tables", "fenced_code", "sane_lists"]

HEADING_TAGS = {f"h{depth}": depth for depth in range(1, 7)}


def split_front_matter(source_text: str) -> Tuple[Dict[str, Any], str]:
    """
    Return (front_matter_dict, body_text). If no FM, dict={} and body=source_text.
    """
    m = FM_PATTERN.match(source_text)
    if not m:
        return {}, source_text
    try:
        fm = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as exc:
        log.debug(f"[toc_search] ignoring unparsable front matter: {exc}")
        fm = {}
    if not isinstance(fm, dict):
        fm = {}
    return fm, source_text[m.end():]


def create_markdown(extensions: Optional[List[Any]] = None) -> markdown.Markdown:
    """Build a fresh Markdown instance; instances hold per-document state."""
    return markdown.Markdown(extensions=MARKDOWN_EXTENSIONS + list(extensions or []))


def heading_depth(element: etree.Element) -> Optional[int]:
    return HEADING_TAGS.get(element.tag) if isinstance(element.tag, str) else None


def _stashed_text(match: re.Match, stash) -> str:
    raw = stash.rawHtmlBlocks[int(match.group(1))]
    if not isinstance(raw, str):
        return "".join(raw.itertext())
    return BeautifulSoup(raw, "html.parser").get_text()


def flatten_text(element: etree.Element, stash=None) -> str:
    """Concatenate the text of a subtree, image alt text included."""
    parts: List[str] = []

    def walk(node):
        if node.tag == "img":
            parts.append(node.get("alt") or "")
        if node.text:
            # code spans hold entity-escaped text
            parts.append(html.unescape(node.text) if node.tag == "code" else node.text)
        for child in node:
            walk(child)
            if child.tail:
                parts.append(child.tail)

    walk(element)
    text = "".join(parts)
    if stash is not None:
        text = util.HTML_PLACEHOLDER_RE.sub(lambda m: _stashed_text(m, stash), text)
    return text


def serialize(html: str) -> str:
    """Render transformed HTML back to markdown text."""
    text = markdownify(html, heading_style="ATX", bullets="-").strip()
    return f"{text}\n" if text else ""
