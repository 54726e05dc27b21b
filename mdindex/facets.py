from __future__ import annotations

import datetime as dt
from collections import Counter
from typing import Iterable, Optional

from .models import Post
from .repository import PostRepository

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
LONG_DATE_FORMATS = {
    "en": "{month_name} {day}, {year}",
    "ko": "{year}년 {month}월 {day}일",
    "ja": "{year}年{month}月{day}日",
    "zh": "{year}年{month}月{day}日",
}


def distinct_tags(posts: Iterable[Post]) -> list[str]:
    return sorted({tag for post in posts for tag in post.tags})


def distinct_categories(posts: Iterable[Post]) -> list[str]:
    return sorted({post.category for post in posts if post.category is not None})


def parse_iso_date(value: str) -> Optional[dt.date]:
    value = value.strip()
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return dt.datetime.fromisoformat(value).date()
    except ValueError:
        return None


def format_date(value: object, locale: str = "en") -> str:
    if value is None or value == "":
        return ""
    raw = value if isinstance(value, str) else str(value)
    if isinstance(value, dt.datetime):
        date = value.date()
    elif isinstance(value, dt.date):
        date = value
    else:
        date = parse_iso_date(raw)
    if date is None:
        return raw
    language = (locale or "en").replace("_", "-").split("-")[0].lower()
    pattern = LONG_DATE_FORMATS.get(language, LONG_DATE_FORMATS["en"])
    return pattern.format(
        year=date.year,
        month=date.month,
        day=date.day,
        month_name=MONTH_NAMES[date.month - 1],
    )


class ViewProjection:
    def __init__(self, repository: PostRepository, locale: str = "en") -> None:
        self.repository = repository
        self.locale = locale

    def distinct_tags(self) -> list[str]:
        return distinct_tags(self.repository.all())

    def distinct_categories(self) -> list[str]:
        return distinct_categories(self.repository.all())

    def tag_counts(self) -> dict[str, int]:
        counts = Counter(tag for post in self.repository.all() for tag in post.tags)
        return {tag: counts[tag] for tag in self.distinct_tags()}

    def category_counts(self) -> dict[str, int]:
        counts = Counter(post.category for post in self.repository.all() if post.category is not None)
        return {category: counts[category] for category in self.distinct_categories()}

    def format_date(self, value: object) -> str:
        return format_date(value, self.locale)
