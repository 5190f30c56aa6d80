"""Fenced code blocks: scanning and the fence checks.

Fences are found at the top level, inside list items (indented to the item's
content column) and inside blockquotes (``> ```java``).
"""

import re
from dataclasses import dataclass

from .issues import Issue, make_issue

OPEN_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})(.*)$")
LIST_ITEM_RE = re.compile(r"^( *)([-*+]|\d{1,9}[.)])( +|$)")
BLOCKQUOTE_RE = re.compile(r"^ {0,3}> ?")
# Highlight ranges, line-number flags and code-group titles on the info string
LANGUAGE_RE = re.compile(r"^([^\s{:\[]+)")


@dataclass
class Fence:
    line: int
    end_line: int | None
    char: str
    length: int
    info: str
    language: str | None
    # container the fence sits in: list content column and blockquote depth
    indent: int = 0
    quote_depth: int = 0
    # last line of an unclosed fence whose list item or blockquote ended
    stop_line: int | None = None

    @property
    def closed(self) -> bool:
        return self.end_line is not None


def fence_language(info: str) -> str | None:
    """``java{1,3}`` -> ``java``, ``ts:line-numbers`` -> ``ts``, ``'' -> None``."""
    info = info.strip()
    if info.startswith("{") and info.endswith("}"):
        # pandoc-style attributes: {.python}
        info = info[1:-1].strip().lstrip(".")
    match = LANGUAGE_RE.match(info)
    return match.group(1).lower() if match else None


def _is_closing(line: str, char: str, length: int) -> bool:
    stripped = line.strip()
    if not stripped or len(line) - len(line.lstrip(" ")) > 3:
        return False
    run = len(stripped) - len(stripped.lstrip(char))
    return run >= length and not stripped[run:].strip()


def strip_blockquote(line: str) -> tuple[str, int]:
    """'> > x' -> ('x', 2)."""
    depth = 0
    match = BLOCKQUOTE_RE.match(line)
    while match:
        line = line[match.end():]
        depth += 1
        match = BLOCKQUOTE_RE.match(line)
    return line, depth


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def scan_fences(lines: list[str], first_line: int = 1) -> list[Fence]:
    """Find fenced blocks in ``lines``; line numbers start at ``first_line``."""
    fences = []
    current = None
    list_indent = 0

    for idx, raw in enumerate(lines):
        lineno = first_line + idx
        line, depth = strip_blockquote(raw.expandtabs(4))

        if current is not None:
            left_container = depth < current.quote_depth or (
                line.strip() and _indent(line) < current.indent
            )
            if left_container:
                current.stop_line = lineno - 1
                current = None
            else:
                if _is_closing(line[current.indent:], current.char, current.length):
                    current.end_line = lineno
                    current = None
                continue

        if not line.strip():
            continue
        item = LIST_ITEM_RE.match(line)
        if item:
            list_indent = len(item.group(1)) + len(item.group(2)) + max(1, len(item.group(3)))
            candidate = line[item.end():]
        else:
            if _indent(line) < list_indent:
                list_indent = 0
            candidate = line[list_indent:]

        match = OPEN_FENCE_RE.match(candidate)
        if not match:
            continue
        marker, info = match.groups()
        # A backtick fence's info string may not contain backticks (inline code)
        if marker[0] == "`" and "`" in info:
            continue
        current = Fence(
            lineno, None, marker[0], len(marker), info.strip(), fence_language(info),
            indent=list_indent, quote_depth=depth,
        )
        fences.append(current)

    return fences


def fenced_line_numbers(fences: list[Fence], last_line: int) -> set[int]:
    """Every line covered by a fence, delimiters included."""
    covered = set()
    for fence in fences:
        if fence.closed:
            end = fence.end_line
        else:
            end = fence.stop_line if fence.stop_line is not None else last_line
        covered.update(range(fence.line, end + 1))
    return covered


def check_fences(doc, languages: set[str]) -> list[Issue]:
    issues = []
    for fence in doc.fences:
        if not fence.closed:
            issues.append(make_issue(
                "fence-unclosed", doc.rel_path, fence.line,
                f"Code fence opened with {fence.char * fence.length} is never closed",
            ))
        if not fence.language:
            issues.append(make_issue(
                "fence-language-missing", doc.rel_path, fence.line,
                "Code fence has no language tag",
            ))
        elif fence.language not in languages:
            issues.append(make_issue(
                "fence-language-unknown", doc.rel_path, fence.line,
                f"Unknown code fence language: {fence.language}",
            ))
    return issues
