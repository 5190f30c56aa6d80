"""Issues and the report they are collected into."""

from collections import defaultdict
from dataclasses import dataclass, field, asdict
from enum import Enum


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


# rule -> (default severity, what it flags)
RULES = {
    "file-unreadable": (Severity.ERROR, "File is not valid UTF-8 text"),
    "frontmatter-missing": (Severity.WARNING, "Document has no YAML frontmatter"),
    "frontmatter-invalid": (Severity.ERROR, "Frontmatter is not a parseable YAML mapping"),
    "frontmatter-key": (Severity.ERROR, "Required frontmatter key missing or empty"),
    "description-length": (Severity.WARNING, "Description longer than the SEO snippet length"),
    "link-broken": (Severity.ERROR, "Internal link points to no document or asset"),
    "anchor-broken": (Severity.WARNING, "Link anchor matches no heading in the target"),
    "title-duplicate": (Severity.ERROR, "Same title used twice in one section"),
    "fence-unclosed": (Severity.ERROR, "Code fence never closed"),
    "fence-language-missing": (Severity.ERROR, "Code fence has no language tag"),
    "fence-language-unknown": (Severity.WARNING, "Code fence language not in the allow-list"),
    "page-orphan": (Severity.WARNING, "No other document links to this page"),
    "external-broken": (Severity.WARNING, "External URL returned an error or failed"),
}


class KbLintError(Exception):
    """Base class for tool failures (as opposed to content issues)."""


class ConfigError(KbLintError):
    pass


@dataclass
class Issue:
    rule: str
    severity: Severity
    path: str
    line: int | None
    message: str

    def __str__(self) -> str:
        where = f"{self.path}:{self.line}" if self.line else self.path
        return f"[{where}] {self.message}"

    def to_dict(self) -> dict:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data


@dataclass
class Report:
    issues: list[Issue] = field(default_factory=list)
    stats: dict = field(default_factory=dict)

    def add(self, rule: str, path: str, line: int | None, message: str):
        self.issues.append(make_issue(rule, path, line, message))

    def extend(self, issues: list[Issue]):
        self.issues.extend(issues)

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity is Severity.WARNING]

    def failed(self, strict: bool = False) -> bool:
        return bool(self.errors) or (strict and bool(self.warnings))

    def apply_overrides(self, overrides: dict[str, str]):
        """Re-grade or drop issues per the config's ``rules`` table."""
        kept = []
        for issue in self.issues:
            level = overrides.get(issue.rule)
            if level == "off":
                continue
            if level:
                issue.severity = Severity(level)
            kept.append(issue)
        self.issues = kept

    def only_section(self, section: str):
        prefix = section.strip("/") + "/"
        self.issues = [i for i in self.issues if i.path.startswith(prefix)]

    def counts_by_rule(self) -> dict[str, int]:
        counts = defaultdict(int)
        for issue in self.issues:
            counts[issue.rule] += 1
        return dict(sorted(counts.items()))

    def to_dict(self) -> dict:
        return {
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "issues": [i.to_dict() for i in self.issues],
            "stats": self.stats,
        }


def make_issue(rule: str, path: str, line: int | None, message: str) -> Issue:
    return Issue(rule, RULES[rule][0], path, line, message)
