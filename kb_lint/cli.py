"""
Validate a Markdown knowledge base before it is published.

Checks:
- Frontmatter parses as YAML and has a non-empty title and description
- Internal links (/interview-section/..., ./x.md) resolve to a page or asset
- Link anchors match a heading in the target page
- No two pages in the same section share a title
- Code fences are closed and tagged with a known language
- Every page is linked from somewhere (hub pages reach all lessons)
- External URLs still answer (opt-in, needs network)

Usage:
    kb-lint                          # ./docs, ./kb-lint.yaml if present
    kb-lint path/to/docs --strict    # treat warnings as errors
    kb-lint --section interview-section/design-patterns
    kb-lint --check-external --workers 10
    kb-lint --json report.json
"""

import argparse
import json
import sys
from pathlib import Path

from .config import find_config_file, load_config
from .issues import RULES, KbLintError
from .runner import audit

DEFAULT_MAX_SHOWN = 30


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kb-lint", description="Validate a Markdown knowledge base")
    parser.add_argument("docs_dir", nargs="?", help="Docs root (default: docs, or docs_dir from config)")
    parser.add_argument("--config", help="Path to kb-lint.yaml")
    parser.add_argument("--strict", action="store_true", help="Treat warnings as errors")
    parser.add_argument("--section", help="Only report issues for one section, e.g. interview-section/oop")
    parser.add_argument("--check-external", action="store_true", help="Check http(s) links over the network")
    parser.add_argument("--workers", type=int, help="Threads for external link checks")
    parser.add_argument("--json", type=Path, dest="json_path", help="Also write the report as JSON")
    parser.add_argument("--max-shown", type=int, default=DEFAULT_MAX_SHOWN,
                        help=f"Issues listed per severity (default: {DEFAULT_MAX_SHOWN})")
    parser.add_argument("--list-rules", action="store_true", help="List rules and exit")
    return parser


def print_rules():
    for rule, (severity, description) in RULES.items():
        print(f"  {rule:<24} {severity.value:<8} {description}")


def print_issues(label: str, marker: str, issues, max_shown: int):
    if not issues:
        return
    print(f"\n{marker} {len(issues)} {label}:")
    for issue in issues[:max_shown]:
        print(f"  {issue}")
    if len(issues) > max_shown:
        print(f"  ... and {len(issues) - max_shown} more")


def print_stats(stats: dict):
    print(f"\n--- STATS ---")
    print(f"Documents: {stats['documents']}")
    print(f"Internal links checked: {stats['internal_links']}")
    external = "checked" if stats["external_checked"] else "not checked"
    print(f"External links: {stats['external_links']} ({external})")
    print(f"Code fences: {stats['code_fences']}")

    print(f"\nBy Section:")
    for section, count in stats["sections"].items():
        print(f"  {section}: {count}")

    hubs = stats["hub_pages"]
    print(f"\nHub pages: {len(hubs)}")
    for hub in hubs:
        print(f"  {hub}")

    if stats["by_rule"]:
        print(f"\nBy Rule:")
        for rule, count in stats["by_rule"].items():
            print(f"  {rule}: {count}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.list_rules:
        print_rules()
        return 0

    try:
        config = load_config(find_config_file(args.config))
        if args.docs_dir:
            config.docs_dir = Path(args.docs_dir)
        if args.check_external:
            config.external.enabled = True
        if args.workers is not None:
            if args.workers < 1:
                raise KbLintError("--workers must be >= 1")
            config.external.workers = args.workers

        print(f"Validating {config.docs_dir}...")
        report = audit(config, section=args.section)
    except KbLintError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 2

    print_issues("WARNINGS", "⚠", report.warnings, args.max_shown)
    print_issues("ERRORS", "✗", report.errors, args.max_shown)
    print_stats(report.stats)

    if args.json_path:
        args.json_path.write_text(json.dumps(report.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"\nReport written to {args.json_path}")

    print()
    print("=" * 50)
    if report.failed(args.strict):
        print(f"✗ VALIDATION FAILED: {len(report.errors)} errors, {len(report.warnings)} warnings")
        return 1
    print(f"✓ ALL VALIDATIONS PASSED ({len(report.warnings)} warnings)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
