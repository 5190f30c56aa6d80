"""Run every check over a docs tree and collect one report."""

import posixpath

from .config import Config
from .documents import list_documents, load_document
from .external import check_external
from .fences import check_fences
from .frontmatter import check_frontmatter
from .issues import ConfigError, Report
from .links import check_links
from .orphans import check_orphans, find_hubs
from .titles import check_duplicate_titles, pages_by_section


def load_tree(config: Config):
    docs_dir = config.docs_dir
    if not docs_dir.is_dir():
        raise ConfigError(f"Docs directory not found: {docs_dir}")
    return [load_document(path, docs_dir) for path in list_documents(docs_dir, config.ignore)]


def normalize_section(section: str | None) -> str | None:
    """'/oop/' -> 'oop'; the docs root itself ('.', '/') means no filter."""
    if not section:
        return None
    section = posixpath.normpath(section.strip("/"))
    if section == ".":
        return None
    if section.startswith(".."):
        raise ConfigError(f"Section must be inside the docs directory: {section}")
    return section


def audit(config: Config, section: str | None = None) -> Report:
    """Checks always see the whole tree; ``section`` only narrows what is reported."""
    section = normalize_section(section)
    if section and not (config.docs_dir / section).is_dir():
        raise ConfigError(f"Section not found under {config.docs_dir}: {section}")

    docs = load_tree(config)
    report = Report()
    readable = []

    # ── Per-document checks ──────────────────────────────────────────────
    for doc in docs:
        if doc.read_error:
            report.add("file-unreadable", doc.rel_path, None, doc.read_error)
            continue
        readable.append(doc)
        report.extend(check_frontmatter(doc, config.required_frontmatter, config.max_description_length))
        report.extend(check_fences(doc, config.languages))

    # ── Cross-document checks ────────────────────────────────────────────
    report.extend(check_duplicate_titles(readable))

    links = check_links(readable, config.docs_dir, config.ignore_links, config.public_dir)
    report.extend(links.issues)
    report.extend(check_orphans(readable, links.edges, config.entry_pages))

    if config.external.enabled:
        report.extend(check_external(links.external, config.external))

    report.apply_overrides(config.rules)
    if section:
        report.only_section(section)
    report.issues.sort(key=lambda i: (i.path, i.line or 0, i.rule))

    report.stats = {
        "documents": len(docs),
        "sections": pages_by_section(docs),
        "hub_pages": find_hubs(links.edges, config.hub_min_links),
        "internal_links": links.checked,
        "external_links": len(links.external),
        "external_checked": config.external.enabled,
        "code_fences": sum(len(doc.fences) for doc in readable),
        "by_rule": report.counts_by_rule(),
    }
    return report
