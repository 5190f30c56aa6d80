"""Loading Markdown lessons: frontmatter, fences, headings and anchors."""

import fnmatch
import re
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .fences import Fence, fenced_line_numbers, scan_fences

SKIP_DIRS = {"node_modules", ".vitepress", ".git"}

ATX_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.*?)[ \t]*$")
CUSTOM_ANCHOR_RE = re.compile(r"\s*\{#([^}\s]+)\}\s*$")
HTML_ID_RE = re.compile(r"""<[a-zA-Z][^>]*?\s(?:id|name)\s*=\s*["']([^"']+)["']""")
INLINE_CODE_RE = re.compile(r"(`+)(.+?)\1")
MD_LINK_TEXT_RE = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
HTML_TAG_RE = re.compile(r"<[^>]+>")

# Same character classes the site generator's slugify uses
SLUG_SPECIAL_RE = re.compile(r"[\s~`!@#$%^&*()\-_+=\[\]{}|\\;:\"'“”‘’<>,.?/]+")
SLUG_CONTROL_RE = re.compile(r"[\u0000-\u001f]")


def slugify(text: str) -> str:
    text = unicodedata.normalize("NFKD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = SLUG_CONTROL_RE.sub("", text)
    text = SLUG_SPECIAL_RE.sub("-", text)
    text = re.sub(r"-{2,}", "-", text).strip("-")
    text = re.sub(r"^(\d)", r"_\1", text)
    return text.lower()


def heading_text(raw: str) -> str:
    """Visible text of an ATX heading's content."""
    raw = re.sub(r"(^|\s)#+$", "", raw).strip()
    raw = MD_LINK_TEXT_RE.sub(r"\1", raw)
    raw = INLINE_CODE_RE.sub(r"\2", raw)
    raw = HTML_TAG_RE.sub("", raw)
    return raw.replace("**", "").replace("__", "").replace("*", "").strip()


@dataclass
class Heading:
    line: int
    level: int
    text: str
    anchor: str


@dataclass
class Document:
    path: Path
    rel_path: str
    text: str = ""
    frontmatter: dict | None = None
    frontmatter_error: str | None = None
    has_frontmatter: bool = False
    body_lines: list[str] = field(default_factory=list)
    body_offset: int = 0
    fences: list[Fence] = field(default_factory=list)
    headings: list[Heading] = field(default_factory=list)
    anchors: set[str] = field(default_factory=set)
    read_error: str | None = None

    @property
    def section(self) -> str:
        parent = Path(self.rel_path).parent.as_posix()
        return "" if parent == "." else parent

    @property
    def url(self) -> str:
        route = self.rel_path[: -len(".md")]
        if route == "index":
            return "/"
        if route.endswith("/index"):
            return "/" + route[: -len("index")]
        return "/" + route

    @property
    def title(self) -> str | None:
        if not self.frontmatter:
            return None
        title = self.frontmatter.get("title")
        return title if isinstance(title, str) and title.strip() else None

    def prose_lines(self):
        """(line number, text) for body lines outside code, inline code removed."""
        last = self.body_offset + len(self.body_lines)
        fenced = fenced_line_numbers(self.fences, last)
        for idx, line in enumerate(self.body_lines):
            lineno = self.body_offset + idx + 1
            if lineno in fenced:
                continue
            yield lineno, INLINE_CODE_RE.sub("", line)


def split_frontmatter(text: str) -> tuple[str | None, list[str], int, str | None]:
    """Returns (frontmatter source, body lines, lines consumed, error)."""
    lines = text.splitlines()
    if not lines or lines[0].rstrip() != "---":
        return None, lines, 0, None
    for idx in range(1, len(lines)):
        if lines[idx].rstrip() in ("---", "..."):
            return "\n".join(lines[1:idx]), lines[idx + 1:], idx + 1, None
    return None, lines, 0, "Frontmatter opened with '---' but never closed"


def parse_frontmatter(source: str) -> tuple[dict | None, str | None]:
    try:
        data = yaml.safe_load(source)
    except yaml.YAMLError as e:
        return None, f"Invalid YAML in frontmatter: {' '.join(str(e).split())}"
    if data is None:
        return {}, None
    if not isinstance(data, dict):
        return None, f"Frontmatter should be a mapping, got {type(data).__name__}"
    return data, None


def _collect_headings(doc: Document):
    seen: dict[str, int] = {}
    for lineno, line in doc.prose_lines():
        # prose_lines strips inline code, headings need the raw line
        raw_line = doc.body_lines[lineno - doc.body_offset - 1]
        match = ATX_HEADING_RE.match(raw_line)
        if match:
            hashes, content = match.groups()
            custom = CUSTOM_ANCHOR_RE.search(content)
            if custom:
                anchor = custom.group(1)
                text = heading_text(content[: custom.start()])
            else:
                text = heading_text(content)
                base = slugify(text)
                anchor = base
                if base in seen:
                    seen[base] += 1
                    anchor = f"{base}-{seen[base]}"
                else:
                    seen[base] = 0
            doc.headings.append(Heading(lineno, len(hashes), text, anchor))
            doc.anchors.add(anchor)
        doc.anchors.update(HTML_ID_RE.findall(line))


def load_document(path: Path, docs_dir: Path) -> Document:
    doc = Document(path=path, rel_path=path.relative_to(docs_dir).as_posix())
    try:
        # utf-8-sig drops a leading BOM so frontmatter still starts at "---"
        doc.text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        doc.read_error = f"Not valid UTF-8: {e.reason} at byte {e.start}"
        return doc

    source, body, consumed, error = split_frontmatter(doc.text)
    doc.body_lines = body
    doc.body_offset = consumed
    if error:
        doc.has_frontmatter = True
        doc.frontmatter_error = error
    elif source is not None:
        doc.has_frontmatter = True
        doc.frontmatter, doc.frontmatter_error = parse_frontmatter(source)

    doc.fences = scan_fences(doc.body_lines, first_line=consumed + 1)
    _collect_headings(doc)
    return doc


def is_ignored(rel_path: str, patterns: list[str]) -> bool:
    return any(fnmatch.fnmatch(rel_path, p) for p in patterns)


def list_documents(docs_dir: Path, ignore: list[str] | None = None) -> list[Path]:
    """Every Markdown file under ``docs_dir``, sorted."""
    ignore = ignore or []
    paths = []
    for path in sorted(docs_dir.rglob("*.md")):
        rel = path.relative_to(docs_dir)
        if any(part in SKIP_DIRS or part.startswith(".") for part in rel.parts[:-1]):
            continue
        if is_ignored(rel.as_posix(), ignore):
            continue
        paths.append(path)
    return paths
