from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Collection, Mapping
from typing import Optional

from .content import strip_extension
from .models import Post

logger = logging.getLogger(__name__)

DATE_FMT = "%Y-%m-%d"


def _is_missing(value: object) -> bool:
    return value is None or value == "" or value == [] or value == {}


def _as_text(value: object) -> str:
    return value if isinstance(value, str) else str(value)


def _normalize_date(value: object, today: dt.date) -> str:
    if _is_missing(value):
        return today.strftime(DATE_FMT)
    if isinstance(value, dt.datetime):
        return value.date().isoformat()
    if isinstance(value, dt.date):
        return value.isoformat()
    return _as_text(value)


def _normalize_tags(value: object) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    if not all(isinstance(tag, str) for tag in value):
        return ()
    return tuple(dict.fromkeys(value))


def _placeholder_file(index: int, taken: Collection[str]) -> str:
    file = f"post-{index}.md"
    suffix = 2
    while file in taken:
        file = f"post-{index}-{suffix}.md"
        suffix += 1
    return file


def _supplied_files(records: list) -> set[str]:
    files = set()
    for raw in records:
        if isinstance(raw, Mapping) and not _is_missing(raw.get("file")):
            files.add(_as_text(raw.get("file")))
    return files


def normalize_post(
    raw: object,
    index: int,
    today: Optional[dt.date] = None,
    taken: Collection[str] = (),
) -> Post:
    if today is None:
        today = dt.date.today()
    if not isinstance(raw, Mapping):
        logger.warning("Post %d: record is not a mapping (%s); using defaults.", index, type(raw).__name__)
        raw = {}

    file_value = raw.get("file")
    if _is_missing(file_value):
        file = _placeholder_file(index, taken)
        logger.warning("Post %d: missing 'file', using %s.", index, file)
    else:
        file = _as_text(file_value)

    title_value = raw.get("title")
    title = strip_extension(file) if _is_missing(title_value) else _as_text(title_value)

    category_value = raw.get("category")
    category = None if _is_missing(category_value) else _as_text(category_value)

    excerpt_value = raw.get("excerpt")
    excerpt = "" if _is_missing(excerpt_value) else _as_text(excerpt_value)

    return Post(
        file=file,
        title=title,
        date=_normalize_date(raw.get("date"), today),
        tags=_normalize_tags(raw.get("tags")),
        category=category,
        excerpt=excerpt,
    )


def normalize_manifest(records: list, today: Optional[dt.date] = None) -> list[Post]:
    if today is None:
        today = dt.date.today()
    taken = _supplied_files(records)
    posts = []
    for index, raw in enumerate(records):
        post = normalize_post(raw, index, today, taken)
        taken.add(post.file)
        posts.append(post)
    return posts
