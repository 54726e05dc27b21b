"""
Pytest configuration and shared fixtures
"""

import datetime as dt
import json
from argparse import Namespace

import pytest

from mdindex.app import wire_blog
from mdindex.filters import FilterEngine
from mdindex.repository import PostRepository

TODAY = dt.date(2024, 3, 1)

SAMPLE_MANIFEST = [
    {
        "file": "rust-basics.md",
        "title": "Rust Basics",
        "date": "2024-01-15",
        "tags": ["rust", "beginner"],
        "category": "Programming",
        "excerpt": "Ownership and borrowing in ten minutes.",
    },
    {
        "file": "go-guide.md",
        "title": "Go Guide",
        "date": "2024-02-01",
        "tags": ["go"],
        "category": "Programming",
        "excerpt": "Goroutines without tears.",
    },
    {
        "file": "travel/kyoto.md",
        "title": "Autumn in Kyoto",
        "date": "2023-11-20",
        "tags": ["travel", "Japan"],
        "category": "Life",
        "excerpt": "Temples and maple leaves.",
    },
    {
        "file": "notes.md",
        "date": "2023-10-01",
        "tags": "not-a-list",
    },
]


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def manifest():
    return [dict(record) for record in SAMPLE_MANIFEST]


@pytest.fixture
def repository(manifest, today):
    return PostRepository.load(manifest, today=today)


@pytest.fixture
def engine(repository):
    return FilterEngine(repository)


@pytest.fixture
def blog(repository):
    return wire_blog(repository)


@pytest.fixture
def site_tree(tmp_path, manifest):
    """Manifest, documents and config laid out like a real site checkout."""
    pages = tmp_path / "pages"
    (pages / "travel").mkdir(parents=True)
    (pages / "rust-basics.md").write_text(
        '---\ntitle: "Rust Basics"\ndate: 2024-01-15\ntags: ["rust", "beginner"]\n---\n'
        "# Ownership\n\nFirst line\nsecond line\n\n```python\nprint('hi')\n```\n",
        encoding="utf-8",
    )
    (pages / "go-guide.md").write_text("No front matter here.\n", encoding="utf-8")
    (pages / "travel" / "kyoto.md").write_text(
        "---\ntitle: Autumn in Kyoto\ntags: [travel, Japan]\n---\n![maple](maple.png)\n",
        encoding="utf-8",
    )
    (pages / "travel" / "maple.png").write_bytes(b"\x89PNG")
    (tmp_path / "posts.json").write_text(json.dumps(manifest), encoding="utf-8")
    return tmp_path


@pytest.fixture
def site_args(site_tree):
    return Namespace(
        config=str(site_tree / "site.toml"),
        manifest="posts.json",
        pages="pages",
        templates="templates",
        site_name="Test Blog",
        site_description="Notes & things",
        date_locale="en",
        theme="light",
        allow_empty_fallback=False,
        request_timeout=5,
        comments_repo="",
        comments_repo_id="",
        comments_category="General",
        comments_category_id="",
        comments_lang="en",
    )
