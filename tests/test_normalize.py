"""Tests for manifest record normalization."""

import datetime as dt
import logging

import pytest

from mdindex.models import Post
from mdindex.normalize import normalize_manifest, normalize_post

TODAY = dt.date(2024, 3, 1)


def assert_complete(post):
    assert isinstance(post, Post)
    assert isinstance(post.file, str) and post.file
    assert isinstance(post.title, str)
    assert isinstance(post.date, str) and post.date
    assert isinstance(post.tags, tuple)
    assert all(isinstance(tag, str) for tag in post.tags)
    assert post.category is None or isinstance(post.category, str)
    assert isinstance(post.excerpt, str)


class TestNormalizePost:

    @pytest.mark.parametrize(
        "raw",
        [
            {},
            {"tags": "rust"},
            {"tags": None},
            {"tags": [1, 2]},
            {"tags": {"a": 1}},
            {"file": 42, "title": 7, "date": 20240101, "excerpt": ["x"]},
            [],
            "a string record",
            None,
            42,
        ],
    )
    def test_total_for_any_shape(self, raw):
        assert_complete(normalize_post(raw, 3, TODAY))

    def test_full_record_is_kept(self):
        post = normalize_post(
            {
                "file": "a.md",
                "title": "A",
                "date": "2024-01-02",
                "tags": ["x", "y"],
                "category": "c",
                "excerpt": "e",
            },
            0,
            TODAY,
        )
        assert post == Post(file="a.md", title="A", date="2024-01-02", tags=("x", "y"), category="c", excerpt="e")

    def test_defaults(self):
        post = normalize_post({"file": "notes/hello.world.md"}, 0, TODAY)
        assert post.title == "notes/hello.world"
        assert post.date == "2024-03-01"
        assert post.tags == ()
        assert post.category is None
        assert post.excerpt == ""

    def test_missing_file_is_positional_and_warned(self, caplog):
        with caplog.at_level(logging.WARNING, logger="mdindex.normalize"):
            first = normalize_post({}, 0, TODAY)
            second = normalize_post({"file": ""}, 1, TODAY)
        assert first.file == "post-0.md"
        assert second.file == "post-1.md"
        assert first.title == "post-0"
        assert len([r for r in caplog.records if "missing 'file'" in r.getMessage()]) == 2

    def test_supplied_file_is_not_warned(self, caplog):
        with caplog.at_level(logging.WARNING, logger="mdindex.normalize"):
            normalize_post({"file": "a.md"}, 0, TODAY)
        assert caplog.records == []

    def test_wrong_typed_tags_become_empty(self):
        assert normalize_post({"file": "a.md", "tags": "x, y"}, 0, TODAY).tags == ()
        assert normalize_post({"file": "a.md", "tags": ["x", 1]}, 0, TODAY).tags == ()

    def test_duplicate_tags_collapse_in_order(self):
        post = normalize_post({"file": "a.md", "tags": ["b", "a", "b"]}, 0, TODAY)
        assert post.tags == ("b", "a")

    def test_date_values(self):
        assert normalize_post({"file": "a.md", "date": dt.date(2023, 5, 6)}, 0, TODAY).date == "2023-05-06"
        assert normalize_post({"file": "a.md", "date": dt.datetime(2023, 5, 6, 7, 8)}, 0, TODAY).date == "2023-05-06"
        assert normalize_post({"file": "a.md", "date": "someday"}, 0, TODAY).date == "someday"

    def test_empty_category_is_uncategorized(self):
        assert normalize_post({"file": "a.md", "category": ""}, 0, TODAY).category is None

    def test_default_date_is_today(self):
        post = normalize_post({"file": "a.md"}, 0)
        assert post.date == dt.date.today().isoformat()


def test_normalize_manifest_preserves_order():
    posts = normalize_manifest([{"file": "b.md"}, {}, {"file": "a.md"}], TODAY)
    assert [post.file for post in posts] == ["b.md", "post-1.md", "a.md"]


def test_placeholder_skips_supplied_files(caplog):
    with caplog.at_level(logging.WARNING, logger="mdindex.normalize"):
        posts = normalize_manifest([{"file": "post-1.md"}, {"title": "untitled"}, {"file": "post-1-2.md"}], TODAY)
    assert [post.file for post in posts] == ["post-1.md", "post-1-3.md", "post-1-2.md"]
    assert "using post-1-3.md" in caplog.text
