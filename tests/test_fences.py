import pytest

from kb_lint.fences import check_fences, fence_language, scan_fences
from kb_lint.documents import load_document
from kb_lint.links import extract_links

from tests.helpers import page


@pytest.mark.parametrize("info, expected", [
    ("java", "java"),
    ("Java", "java"),
    ("java{1,3-5}", "java"),
    ("ts:line-numbers", "ts"),
    ("java [Singleton.java]", "java"),
    ("{.python}", "python"),
    ("", None),
    ("   ", None),
    ("[Main.java]", None),
])
def test_fence_language(info, expected):
    assert fence_language(info) == expected


def test_scan_finds_closed_fence_with_line_numbers():
    lines = ["intro", "```java", "class A {}", "```", "outro"]
    fences = scan_fences(lines, first_line=10)
    assert len(fences) == 1
    fence = fences[0]
    assert (fence.line, fence.end_line, fence.language) == (11, 13, "java")


def test_closing_fence_must_be_at_least_as_long():
    lines = ["````markdown", "```java", "inner", "```", "````"]
    fences = scan_fences(lines)
    assert len(fences) == 1
    assert fences[0].end_line == 5


def test_tilde_fence_not_closed_by_backticks():
    fences = scan_fences(["~~~sql", "SELECT 1;", "```", "~~~"])
    assert fences[0].end_line == 4


def test_closing_fence_with_info_does_not_close():
    fences = scan_fences(["```java", "code", "```java", "```"])
    assert len(fences) == 1
    assert fences[0].end_line == 4


def test_indented_four_spaces_is_not_a_fence():
    assert scan_fences(["    ```java", "x"]) == []


def test_backticks_in_info_string_is_inline_code():
    assert scan_fences(["```a` b```"]) == []


def test_unclosed_fence_runs_to_end():
    fences = scan_fences(["```python", "print(1)"])
    assert not fences[0].closed


def _issues(make_docs, body, languages=frozenset({"java", "python"})):
    docs = make_docs({"lesson.md": page("Lesson", body=body)})
    doc = load_document(docs / "lesson.md", docs)
    return check_fences(doc, set(languages))


def test_check_reports_unclosed_and_untagged(make_docs):
    issues = _issues(make_docs, """
        ```
        plain
        ```

        ```java
        class Singleton {
    """)
    rules = [(i.rule, i.line) for i in issues]
    # frontmatter occupies lines 1-4, blank line 5, body starts at 6
    assert ("fence-language-missing", 6) in rules
    assert ("fence-unclosed", 10) in rules


def test_check_reports_unknown_language_as_warning(make_docs):
    issues = _issues(make_docs, """
        ```jaav
        class A {}
        ```
    """)
    assert [i.rule for i in issues] == ["fence-language-unknown"]
    assert issues[0].severity.value == "warning"
    assert "jaav" in issues[0].message


def test_check_clean_fences(make_docs):
    issues = _issues(make_docs, """
        ```java{2}
        class A {
            private static A instance;
        }
        ```
    """)
    assert issues == []


def test_fence_inside_list_item():
    lines = ["1. Step one", "", "    ```", "    no language here", "    ```", "2. Step two"]
    fences = scan_fences(lines)
    assert [(f.line, f.end_line, f.language, f.indent) for f in fences] == [(3, 5, None, 3)]


def test_fence_on_list_marker_line():
    fences = scan_fences(["- ```java", "  class A {}", "  ```"])
    assert [(f.line, f.end_line, f.language) for f in fences] == [(1, 3, "java")]


def test_fence_inside_blockquote():
    fences = scan_fences(["> ```", "> quoted no lang", "> ```", "", "> > ~~~sql", "> > SELECT 1;", "> > ~~~"])
    assert [(f.line, f.end_line, f.quote_depth) for f in fences] == [(1, 3, 1), (5, 7, 2)]


def test_fence_ends_with_its_blockquote():
    fences = scan_fences(["> ```java", "> class A {}", "", "Prose [link](/x)."])
    assert not fences[0].closed
    assert fences[0].stop_line == 2


def test_list_and_quote_fences_are_checked(make_docs):
    issues = _issues(make_docs, """
        1. Step one

            ```
            no language here
            ```

        > ```
        > quoted no lang
        > ```
    """)
    assert [(i.rule, i.line) for i in issues] == [
        ("fence-language-missing", 8),
        ("fence-language-missing", 12),
    ]


def test_list_fence_contents_are_not_prose(make_docs):
    docs = make_docs({"lesson.md": page("Lesson", body="""
        - Example:

            ```markdown
            [not a link](/missing)
            ## Not A Heading
            ```
    """)})
    doc = load_document(docs / "lesson.md", docs)
    assert extract_links(doc) == []
    assert doc.headings == []
