from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Optional


@dataclass(frozen=True)
class Post:
    file: str
    title: str
    date: str
    tags: tuple[str, ...] = ()
    category: Optional[str] = None
    excerpt: str = ""

    def to_dict(self) -> dict:
        data = asdict(self)
        data["tags"] = list(self.tags)
        return data


@dataclass(frozen=True)
class FilterState:
    """Current listing filter: free-text term plus selected tag and category sets.

    The command methods never mutate; each returns the next state.
    """

    search_term: str = ""
    selected_tags: frozenset[str] = field(default_factory=frozenset)
    selected_categories: frozenset[str] = field(default_factory=frozenset)

    def is_empty(self) -> bool:
        return not (self.search_term or self.selected_tags or self.selected_categories)

    def with_search_term(self, term: str) -> FilterState:
        return replace(self, search_term=(term or "").strip())

    def toggle_tag(self, tag: str) -> FilterState:
        return replace(self, selected_tags=_toggle(self.selected_tags, tag))

    def toggle_category(self, category: str) -> FilterState:
        return replace(self, selected_categories=_toggle(self.selected_categories, category))

    def cleared(self) -> FilterState:
        return FilterState()


def _toggle(values: frozenset[str], value: str) -> frozenset[str]:
    if value in values:
        return values - {value}
    return values | {value}
