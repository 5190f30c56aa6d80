from .issues import Issue, make_issue


def check_frontmatter(doc, required: list[str], max_description_length: int) -> list[Issue]:
    """Frontmatter must parse and carry every required key as a non-empty string."""
    issues = []
    path = doc.rel_path

    if not doc.has_frontmatter:
        return [make_issue("frontmatter-missing", path, 1, "No YAML frontmatter")]
    if doc.frontmatter_error:
        return [make_issue("frontmatter-invalid", path, 1, doc.frontmatter_error)]

    data = doc.frontmatter
    for key in required:
        value = data.get(key)
        if value is None:
            issues.append(make_issue("frontmatter-key", path, 1, f"Missing '{key}' in frontmatter"))
        elif not isinstance(value, str):
            issues.append(make_issue(
                "frontmatter-key", path, 1,
                f"'{key}' should be a string, got {type(value).__name__}",
            ))
        elif not value.strip():
            issues.append(make_issue("frontmatter-key", path, 1, f"'{key}' is empty"))

    description = data.get("description")
    if isinstance(description, str) and len(description.strip()) > max_description_length:
        issues.append(make_issue(
            "description-length", path, 1,
            f"description is {len(description.strip())} chars (want <= {max_description_length})",
        ))

    return issues
