"""Tests for loading and wiring the blog objects."""

import logging

import pytest

from mdindex.app import load_blog
from mdindex.errors import FetchFailure, InvalidManifest


def test_load_blog_wires_shared_repository(site_args, today):
    blog = load_blog(site_args, today=today)
    assert len(blog.repository) == 4
    assert blog.engine.repository is blog.repository
    assert blog.projection.repository is blog.repository
    assert not blog.fallback
    assert blog.repository.by_file("notes.md").title == "notes"


def test_missing_manifest_raises(site_args):
    site_args.manifest = "missing.json"
    with pytest.raises(FetchFailure):
        load_blog(site_args)


def test_non_list_manifest_raises(site_args, site_tree):
    (site_tree / "posts.json").write_text('{"file": "a.md"}', encoding="utf-8")
    with pytest.raises(InvalidManifest):
        load_blog(site_args)


def test_empty_fallback_when_allowed(site_args, caplog):
    site_args.manifest = "missing.json"
    site_args.allow_empty_fallback = True
    with caplog.at_level(logging.WARNING, logger="mdindex.app"):
        blog = load_blog(site_args)
    assert blog.fallback
    assert blog.engine.apply() == []
    assert "empty post list" in caplog.text


def test_yaml_manifest(site_args, site_tree):
    (site_tree / "posts.yaml").write_text("- file: a.md\n  tags: [x]\n", encoding="utf-8")
    site_args.manifest = "posts.yaml"
    blog = load_blog(site_args)
    assert blog.projection.distinct_tags() == ["x"]
