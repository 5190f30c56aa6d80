from kb_lint.documents import load_document
from kb_lint.frontmatter import check_frontmatter

REQUIRED = ["title", "description"]


def _check(make_docs, text, max_len=160):
    docs = make_docs({"lesson.md": text})
    doc = load_document(docs / "lesson.md", docs)
    return check_frontmatter(doc, REQUIRED, max_len)


def test_valid_frontmatter(make_docs):
    assert _check(make_docs, "---\ntitle: Factory Pattern\ndescription: Creating objects\n---\n") == []


def test_missing_frontmatter_is_a_warning(make_docs):
    issues = _check(make_docs, "# No metadata\n")
    assert [i.rule for i in issues] == ["frontmatter-missing"]
    assert issues[0].severity.value == "warning"


def test_unparseable_yaml(make_docs):
    issues = _check(make_docs, "---\ntitle: [unclosed\n---\n")
    assert [i.rule for i in issues] == ["frontmatter-invalid"]
    assert issues[0].severity.value == "error"


def test_non_mapping_frontmatter(make_docs):
    issues = _check(make_docs, "---\n- a\n- b\n---\n")
    assert [i.rule for i in issues] == ["frontmatter-invalid"]
    assert "mapping" in issues[0].message


def test_unclosed_frontmatter(make_docs):
    issues = _check(make_docs, "---\ntitle: A\n\n# Body\n")
    assert [i.rule for i in issues] == ["frontmatter-invalid"]


def test_missing_empty_and_wrong_type_keys(make_docs):
    issues = _check(make_docs, "---\ntitle: 42\ndescription: '  '\n---\n")
    messages = sorted(i.message for i in issues)
    assert [i.rule for i in issues] == ["frontmatter-key", "frontmatter-key"]
    assert messages == ["'description' is empty", "'title' should be a string, got int"]


def test_empty_frontmatter_reports_each_key(make_docs):
    issues = _check(make_docs, "---\n---\n")
    assert sorted(i.message for i in issues) == [
        "Missing 'description' in frontmatter",
        "Missing 'title' in frontmatter",
    ]


def test_long_description(make_docs):
    issues = _check(make_docs, f"---\ntitle: A\ndescription: {'x' * 30}\n---\n", max_len=20)
    assert [i.rule for i in issues] == ["description-length"]
    assert "30 chars" in issues[0].message


def test_byte_order_mark_before_frontmatter(make_docs):
    issues = _check(make_docs, "﻿---\ntitle: A\n---\n")
    assert [(i.rule, i.message) for i in issues] == [
        ("frontmatter-key", "Missing 'description' in frontmatter"),
    ]
