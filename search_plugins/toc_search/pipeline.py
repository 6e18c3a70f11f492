import logging
from typing import Sequence

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from .locations import LocationService, VirtualFile
from .models import Document, TransformedDocument
from .options import TocSearchOptions
from .parser import create_markdown, serialize, split_front_matter
from .transforms import FULL_PIPELINE, LINKS_PIPELINE, DocumentContext, Step

log = logging.getLogger("mkdocs.plugins.toc_search")

# Below Python-Markdown's "unescape" treeprocessor (priority 0) so the steps
# see final inline text.
PIPELINE_PRIORITY = -10


class PipelineTreeprocessor(Treeprocessor):
    def __init__(self, md, steps: Sequence[Step], context: DocumentContext):
        super().__init__(md)
        self.steps = steps
        self.context = context

    def run(self, root):
        self.context.stash = self.md.htmlStash
        for step in self.steps:
            root = step(root, self.context)
        return root


class PipelineExtension(Extension):
    def __init__(self, steps: Sequence[Step], context: DocumentContext, **kwargs):
        self.steps = steps
        self.context = context
        super().__init__(**kwargs)

    def extendMarkdown(self, md):
        md.treeprocessors.register(
            PipelineTreeprocessor(md, self.steps, self.context),
            "toc_search",
            PIPELINE_PRIORITY,
        )


class Processor:
    """
    Parses a document and runs an ordered sequence of tree transforms over it.

    The depth limits and the location service are captured when the
    processor is created, so a build keeps its settings even if the owning
    component is reconfigured while it runs.
    """

    def __init__(
        self,
        steps: Sequence[Step],
        options: TocSearchOptions,
        locations: LocationService,
        serialize_output: bool = False,
    ):
        self.steps = tuple(steps)
        self.min_depth = options.min_depth
        self.max_depth = options.max_depth
        self.locations = locations
        self.serialize_output = serialize_output

    def process(self, document: Document) -> TransformedDocument:
        if document.not_found:
            raise ValueError(f"cannot process missing document {document.logical_path}")

        matter, body = split_front_matter(document.raw_content)
        context = DocumentContext(
            path=document.logical_path,
            file=VirtualFile(cwd=document.base_directory, path=document.path),
            locations=self.locations,
            min_depth=self.min_depth,
            max_depth=self.max_depth,
            matter=matter,
        )
        md = create_markdown([PipelineExtension(self.steps, context)])
        html = md.convert(body)
        log.debug(
            f"[toc_search] processed {document.logical_path}: "
            f"{len(context.headings)} headings, {len(context.links)} links"
        )
        return TransformedDocument(
            path=document.logical_path,
            title=context.title,
            name=context.name,
            links=tuple(context.links),
            markdown=serialize(html) if self.serialize_output else None,
        )


def toc_processor(options: TocSearchOptions, locations: LocationService) -> Processor:
    """Full variant: slugs, title, depth filter, TOC, URL resolution, links."""
    return Processor(FULL_PIPELINE, options, locations, serialize_output=True)


def links_processor(options: TocSearchOptions, locations: LocationService) -> Processor:
    """Links-only variant used to turn a summary document into a path list."""
    return Processor(LINKS_PIPELINE, options, locations)
