import fnmatch

from .issues import Issue, make_issue


def incoming_links(edges: dict[str, set[str]]) -> dict[str, set[str]]:
    incoming: dict[str, set[str]] = {}
    for source, targets in edges.items():
        for target in targets:
            incoming.setdefault(target, set()).add(source)
    return incoming


def find_hubs(edges: dict[str, set[str]], min_links: int) -> list[str]:
    """Pages that link to at least ``min_links`` other pages."""
    return sorted(page for page, targets in edges.items() if len(targets) >= min_links)


def check_orphans(docs, edges: dict[str, set[str]], entry_pages: list[str]) -> list[Issue]:
    """Pages nothing else links to, besides the entry pages."""
    incoming = incoming_links(edges)
    issues = []
    for doc in docs:
        if any(fnmatch.fnmatch(doc.rel_path, p) for p in entry_pages):
            continue
        if not incoming.get(doc.rel_path):
            issues.append(make_issue(
                "page-orphan", doc.rel_path, None,
                "No other page links here (not reachable from any hub)",
            ))
    return issues
