"""
Tree transforms applied to a parsed markdown document.

Each step takes the root element and the document context and returns the
(possibly new) root. Steps run in a fixed order; state shared between them
lives on the context, never on the tree nodes, apart from the heading ``id``
attributes which are the anchors the TOC links point to.
"""

import xml.etree.ElementTree as etree
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from markdown.extensions.toc import slugify, unique

from .locations import LocationService, VirtualFile
from .models import LinkRecord
from .parser import flatten_text, heading_depth


@dataclass
class HeadingRecord:
    depth: int
    text: str
    slug: str
    element: etree.Element = field(repr=False, compare=False)


@dataclass
class DocumentContext:
    path: str
    file: VirtualFile
    locations: LocationService
    min_depth: int = 1
    max_depth: int = 6
    matter: Dict[str, Any] = field(default_factory=dict)
    stash: Any = None
    title: Optional[str] = None
    headings: List[HeadingRecord] = field(default_factory=list)
    # TOC-generated link element -> depth of the heading it points to
    toc_depths: Dict[etree.Element, int] = field(default_factory=dict)
    links: List[LinkRecord] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.title or self.matter.get("title") or self.path

    def text_of(self, element: etree.Element) -> str:
        return flatten_text(element, self.stash)


Step = Callable[[etree.Element, DocumentContext], etree.Element]


def assign_slugs(root: etree.Element, context: DocumentContext) -> etree.Element:
    ids = set()
    context.headings = []
    for element in root.iter():
        depth = heading_depth(element)
        if depth is None:
            continue
        text = context.text_of(element).strip()
        slug = unique(element.get("id") or slugify(text, "-"), ids)
        element.set("id", slug)
        context.headings.append(HeadingRecord(depth, text, slug, element))
    return root


def extract_title(root: etree.Element, context: DocumentContext) -> etree.Element:
    if context.title is None:
        for heading in context.headings:
            if heading.depth == 1:
                context.title = heading.text
                break
    return root


def _parent_map(root: etree.Element) -> Dict[etree.Element, etree.Element]:
    return {child: parent for parent in root.iter() for child in parent}


def filter_min_depth(root: etree.Element, context: DocumentContext) -> etree.Element:
    parents = _parent_map(root)
    kept = []
    for heading in context.headings:
        if heading.depth >= context.min_depth:
            kept.append(heading)
            continue
        parent = parents.get(heading.element)
        if parent is not None:
            parent.remove(heading.element)
    context.headings = kept
    return root


def _toc_position(root: etree.Element, element: etree.Element) -> int:
    for index, child in enumerate(root):
        if any(node is element for node in child.iter()):
            return index
    return len(root)


def build_toc(headings: List[HeadingRecord], context: DocumentContext) -> etree.Element:
    """Nest headings into ``ul``/``li`` lists linking to ``#slug`` anchors."""
    top = etree.Element("ul")
    stack: List[Tuple[int, etree.Element]] = []
    for heading in headings:
        while stack and stack[-1][0] >= heading.depth:
            stack.pop()
        if stack:
            parent_item = stack[-1][1]
            container = parent_item.find("ul")
            if container is None:
                container = etree.SubElement(parent_item, "ul")
        else:
            container = top
        item = etree.SubElement(container, "li")
        link = etree.SubElement(item, "a", {"href": f"#{heading.slug}"})
        link.text = heading.text
        context.toc_depths[link] = heading.depth
        stack.append((heading.depth, item))
    return top


def replace_with_toc(root: etree.Element, context: DocumentContext) -> etree.Element:
    headings = [h for h in context.headings if h.depth <= context.max_depth]
    if not headings:
        return root
    position = _toc_position(root, headings[0].element)
    for child in list(root)[position:]:
        root.remove(child)
    root.append(build_toc(headings, context))
    return root


def resolve_urls(root: etree.Element, context: DocumentContext) -> etree.Element:
    for tag, attribute in (("a", "href"), ("img", "src")):
        for element in root.iter(tag):
            url = element.get(attribute)
            if url is not None:
                element.set(attribute, context.locations.resolve_url(url, context.file))
    return root


def harvest_links(root: etree.Element, context: DocumentContext) -> etree.Element:
    context.links = []
    name = context.name
    for element in root.iter("a"):
        url = element.get("href")
        if url is None:
            continue
        context.links.append(
            LinkRecord(
                name=name,
                url=url,
                content=context.text_of(element),
                depth=context.toc_depths.get(element),
            )
        )
    return root


FULL_PIPELINE: Tuple[Step, ...] = (
    assign_slugs,
    extract_title,
    filter_min_depth,
    replace_with_toc,
    resolve_urls,
    harvest_links,
)

LINKS_PIPELINE: Tuple[Step, ...] = (
    assign_slugs,
    harvest_links,
)
