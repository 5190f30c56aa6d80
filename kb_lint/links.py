"""Link extraction and resolution against the docs tree.

Internal targets are resolved the way the site generator routes pages:

    /interview-section/design-patterns          -> design-patterns.md or design-patterns/index.md
    /interview-section/design-patterns/         -> design-patterns/index.md
    /interview-section/design-patterns.html     -> design-patterns.md
    ../solid.md#open-closed                     -> relative to the linking page, anchor checked

Root-relative targets that are not pages may be static assets, either next to
the pages or under the public directory.
"""

import fnmatch
import posixpath
import re
from collections import defaultdict
from dataclasses import dataclass
from urllib.parse import unquote

from .issues import Issue, make_issue

INLINE_LINK_RE = re.compile(
    r"(!?)\[(?:[^\[\]]|\[[^\]]*\])*\]\(\s*(<[^>]*>|(?:[^()\s]|\([^()\s]*\))+)(?:\s+(?:\"[^\"]*\"|'[^']*'|\([^)]*\)))?\s*\)"
)
REFERENCE_DEF_RE = re.compile(r"^ {0,3}\[(?!\^)[^\]]+\]:\s*(<[^>]*>|\S+)")
AUTOLINK_RE = re.compile(r"<(https?://[^>\s]+)>")
HTML_LINK_RE = re.compile(r"""\b(?:href|src)\s*=\s*["']([^"']+)["']""")
SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


@dataclass
class Link:
    target: str
    line: int
    kind: str

    @property
    def is_external(self) -> bool:
        return self.target.lower().startswith(("http://", "https://"))

    @property
    def is_internal(self) -> bool:
        return not SCHEME_RE.match(self.target) and not self.target.startswith("//")


@dataclass
class LinkResult:
    issues: list[Issue]
    # rel_path -> rel_paths of other pages it links to
    edges: dict[str, set[str]]
    # url -> [(rel_path, line)]
    external: dict[str, list[tuple[str, int]]]
    checked: int


def extract_links(doc) -> list[Link]:
    links = []
    for lineno, line in doc.prose_lines():
        ref = REFERENCE_DEF_RE.match(line)
        if ref:
            links.append(Link(ref.group(1).strip("<>"), lineno, "reference"))
            continue
        for bang, target in INLINE_LINK_RE.findall(line):
            links.append(Link(target.strip("<>"), lineno, "image" if bang else "inline"))
        for target in AUTOLINK_RE.findall(line):
            links.append(Link(target, lineno, "autolink"))
        for target in HTML_LINK_RE.findall(line):
            links.append(Link(target, lineno, "html"))
    return links


def split_target(target: str) -> tuple[str, str | None]:
    """'a/b?x=1#sec' -> ('a/b', 'sec')."""
    anchor = None
    if "#" in target:
        target, anchor = target.split("#", 1)
    target = target.split("?", 1)[0]
    return unquote(target), (unquote(anchor) if anchor else None)


def route_candidates(path: str) -> list[str]:
    """Files that could serve ``path`` (relative to the docs root)."""
    if path in ("", ".") or path.endswith("/"):
        return [posixpath.join(path.rstrip("/"), "index.md").lstrip("/")]
    if path.endswith(".md"):
        return [path]
    if path.endswith(".html"):
        return [path[: -len(".html")] + ".md"]
    return [path + ".md", posixpath.join(path, "index.md"), path]


class Resolver:
    def __init__(self, docs_dir, docs, public_dir: str = "public"):
        self.docs_dir = docs_dir
        self.by_path = {doc.rel_path: doc for doc in docs}
        self.public_dir = public_dir

    def _exists(self, rel: str) -> bool:
        return (self.docs_dir / rel).is_file()

    def resolve(self, path: str, source_doc) -> str | None:
        """Relative-to-root file serving ``path`` as linked from ``source_doc``, or None."""
        root_relative = path.startswith("/")
        if root_relative:
            joined = path.lstrip("/")
        else:
            joined = posixpath.join(source_doc.section, path)
        trailing = "/" if path.endswith("/") else ""
        normalized = posixpath.normpath(joined) if joined else ""
        if normalized == ".":
            normalized = ""
        if normalized.startswith(".."):
            return None
        normalized += trailing if normalized else ""

        for candidate in route_candidates(normalized):
            if candidate in self.by_path or self._exists(candidate):
                return candidate
        if root_relative and self.public_dir:
            asset = posixpath.join(self.public_dir, normalized)
            if self._exists(asset):
                return asset
        return None


def check_links(docs, docs_dir, ignore_links: list[str] | None = None,
                public_dir: str = "public") -> LinkResult:
    ignore_links = ignore_links or []
    resolver = Resolver(docs_dir, docs, public_dir)
    issues = []
    edges = defaultdict(set)
    external = defaultdict(list)
    checked = 0

    for doc in docs:
        if doc.read_error:
            continue
        for link in extract_links(doc):
            if any(fnmatch.fnmatch(link.target, p) for p in ignore_links):
                continue
            if link.is_external:
                external[link.target].append((doc.rel_path, link.line))
                continue
            if not link.is_internal or not link.target:
                continue

            checked += 1
            path, anchor = split_target(link.target)
            if path:
                resolved = resolver.resolve(path, doc)
                if resolved is None:
                    issues.append(make_issue(
                        "link-broken", doc.rel_path, link.line,
                        f"Broken link: {link.target}",
                    ))
                    continue
                target_doc = resolver.by_path.get(resolved)
            else:
                target_doc = doc

            if target_doc is not None and target_doc is not doc:
                edges[doc.rel_path].add(target_doc.rel_path)

            if anchor and target_doc is not None and not target_doc.read_error:
                if anchor not in target_doc.anchors:
                    where = "" if target_doc is doc else f" in {target_doc.rel_path}"
                    issues.append(make_issue(
                        "anchor-broken", doc.rel_path, link.line,
                        f"No heading for anchor #{anchor}{where}",
                    ))

    return LinkResult(issues, dict(edges), dict(external), checked)
