from collections import defaultdict

from .issues import Issue, make_issue


def normalize_title(title: str) -> str:
    return " ".join(title.split()).casefold()


def check_duplicate_titles(docs) -> list[Issue]:
    """Flag every page after the first that reuses a title within its section."""
    issues = []
    first_seen: dict[tuple[str, str], str] = {}

    for doc in sorted(docs, key=lambda d: d.rel_path):
        if doc.title is None:
            continue
        key = (doc.section, normalize_title(doc.title))
        if key in first_seen:
            issues.append(make_issue(
                "title-duplicate", doc.rel_path, 1,
                f"Title '{doc.title}' already used by {first_seen[key]}",
            ))
        else:
            first_seen[key] = doc.rel_path

    return issues


def pages_by_section(docs) -> dict[str, int]:
    counts = defaultdict(int)
    for doc in docs:
        counts[doc.section or "(root)"] += 1
    return dict(sorted(counts.items()))
