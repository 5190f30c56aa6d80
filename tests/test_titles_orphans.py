from kb_lint.documents import list_documents, load_document
from kb_lint.orphans import check_orphans, find_hubs, incoming_links
from kb_lint.titles import check_duplicate_titles, normalize_title, pages_by_section

from tests.helpers import page


def _load(docs):
    return [load_document(p, docs) for p in list_documents(docs)]


def test_normalize_title():
    assert normalize_title("  Builder   Pattern ") == normalize_title("builder pattern")


def test_duplicate_titles_within_a_section(make_docs):
    docs = make_docs({
        "patterns/builder.md": page("Builder Pattern"),
        "patterns/builder-2.md": page("builder  pattern"),
        "lld/builder.md": page("Builder Pattern"),
        "patterns/untitled.md": "# no frontmatter\n",
    })
    issues = check_duplicate_titles(_load(docs))
    assert len(issues) == 1
    assert issues[0].path == "patterns/builder.md"
    assert issues[0].message == "Title 'Builder Pattern' already used by patterns/builder-2.md"


def test_pages_by_section(make_docs):
    docs = make_docs({
        "index.md": page("Home"),
        "oop/a.md": page("A"),
        "oop/b.md": page("B"),
    })
    assert pages_by_section(_load(docs)) == {"(root)": 1, "oop": 2}


def test_incoming_and_hubs():
    edges = {
        "patterns.md": {"a.md", "b.md", "c.md"},
        "a.md": {"b.md"},
    }
    assert incoming_links(edges)["b.md"] == {"patterns.md", "a.md"}
    assert find_hubs(edges, min_links=3) == ["patterns.md"]
    assert find_hubs(edges, min_links=1) == ["a.md", "patterns.md"]


def test_orphans_skip_entry_pages(make_docs):
    docs = make_docs({
        "index.md": page("Home"),
        "linked.md": page("Linked"),
        "lonely.md": page("Lonely"),
        "guide/index.md": page("Guide"),
    })
    edges = {"index.md": {"linked.md"}}
    issues = check_orphans(_load(docs), edges, entry_pages=["index.md", "guide/*"])
    assert [i.path for i in issues] == ["lonely.md"]
    assert issues[0].rule == "page-orphan"
