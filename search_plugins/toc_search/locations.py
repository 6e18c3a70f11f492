import posixpath
import re
from dataclasses import dataclass

# Any "scheme:" prefix (https:, mailto:, data:...) or a protocol-relative "//host"
ABSOLUTE_URL_RE = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.\-]*:|//)")


def join(base: str, *parts: str) -> str:
    """Join path or URL segments with exactly one slash between them."""
    result = base or ""
    for part in parts:
        if not part:
            continue
        if not result:
            result = part
        else:
            result = result.rstrip("/") + "/" + part.lstrip("/")
    return result


def is_absolute_url(url: str) -> bool:
    return bool(ABSOLUTE_URL_RE.match(url))


@dataclass(frozen=True)
class VirtualFile:
    cwd: str
    path: str

    @property
    def full_path(self) -> str:
        return join(self.cwd, self.path)


class LocationService:
    """
    Maps logical page names to markdown files and back.

    A page ``guide/setup`` lives in ``<root>/guide/setup.md`` and is served
    at ``<base_url>guide/setup``. Directory pages (``guide/`` or the empty
    page) map to ``<index_name>.md`` inside that directory.
    """

    def __init__(
        self,
        root: str = "docs",
        base_url: str = "/",
        index_name: str = "index",
        extension: str = ".md",
    ):
        self.root = root
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self.index_name = index_name
        self.extension = extension

    def page_to_file(self, page: str) -> VirtualFile:
        path = page.split("#", 1)[0].split("?", 1)[0]
        base = self.base_url.rstrip("/")
        if base and (path == base or path.startswith(f"{base}/")):
            path = path[len(base):]
        path = path.lstrip("/")
        if not path or path.endswith("/"):
            path = f"{path}{self.index_name}"
        if not path.endswith(self.extension):
            path = f"{path}{self.extension}"
        return VirtualFile(cwd=self.root, path=path)

    def file_to_page(self, path: str) -> str:
        route = path.lstrip("/")
        if route.endswith(self.extension):
            route = route[: -len(self.extension)]
        if route == self.index_name:
            route = ""
        elif route.endswith(f"/{self.index_name}"):
            route = route[: -len(self.index_name)]
        return f"{self.base_url}{route}"

    def resolve_url(self, url: str, vfile: VirtualFile) -> str:
        """Return ``url`` made absolute against the page ``vfile`` belongs to."""
        if is_absolute_url(url):
            return url
        target, hash_mark, fragment = url.partition("#")
        suffix = f"#{fragment}" if hash_mark else ""
        if not target:
            return f"{self.file_to_page(vfile.path)}{suffix}"

        if target.startswith("/"):
            path = target.lstrip("/")
        else:
            path = posixpath.normpath(posixpath.join(posixpath.dirname(vfile.path), target))
            if path == ".":
                path = ""
        if target.endswith("/") and path and not path.endswith("/"):
            path = f"{path}/"

        if path.endswith(self.extension):
            return f"{self.file_to_page(path)}{suffix}"
        return f"{self.base_url}{path}{suffix}"
