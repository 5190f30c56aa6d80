import textwrap


def page(title: str, description: str = "A lesson", body: str = "") -> str:
    """Markdown text for a lesson with frontmatter."""
    return f"---\ntitle: {title}\ndescription: {description}\n---\n\n{textwrap.dedent(body).lstrip()}"
