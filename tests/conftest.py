from pathlib import Path

import pytest

from kb_lint.config import Config


@pytest.fixture
def make_docs(tmp_path):
    """Write {rel_path: text} under tmp_path/docs and return the docs dir."""

    def _make(files: dict) -> Path:
        docs = tmp_path / "docs"
        docs.mkdir(exist_ok=True)
        for rel, text in files.items():
            path = docs / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(text, bytes):
                path.write_bytes(text)
            else:
                path.write_text(text, encoding="utf-8")
        return docs

    return _make


@pytest.fixture
def config_for():
    def _config(docs_dir: Path, **overrides) -> Config:
        return Config(docs_dir=docs_dir, **overrides)

    return _config
