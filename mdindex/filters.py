from __future__ import annotations

import logging
from typing import AbstractSet, Iterable, Optional
from urllib.parse import parse_qs

from .models import FilterState, Post
from .repository import PostRepository

logger = logging.getLogger(__name__)


def matches_search(post: Post, term: str) -> bool:
    if not term:
        return True
    needle = term.casefold()
    if needle in post.title.casefold() or needle in post.excerpt.casefold():
        return True
    if any(needle in tag.casefold() for tag in post.tags):
        return True
    return post.category is not None and needle in post.category.casefold()


def matches_tags(post: Post, selected: AbstractSet[str]) -> bool:
    if not selected:
        return True
    return any(tag in selected for tag in post.tags)


def matches_category(post: Post, selected: AbstractSet[str]) -> bool:
    if not selected:
        return True
    return post.category is not None and post.category in selected


def filter_posts(posts: Iterable[Post], state: FilterState) -> list[Post]:
    # AND across the three dimensions, OR within the tag and category sets.
    return [
        post
        for post in posts
        if matches_search(post, state.search_term)
        and matches_tags(post, state.selected_tags)
        and matches_category(post, state.selected_categories)
    ]


def state_from_query(query: str, state: Optional[FilterState] = None) -> FilterState:
    state = state or FilterState()
    params = parse_qs(query.lstrip("?"), keep_blank_values=False)
    terms = params.get("q", [])
    if terms:
        state = state.with_search_term(terms[-1])
    for tag in params.get("tag", []):
        if tag not in state.selected_tags:
            state = state.toggle_tag(tag)
    for category in params.get("category", []):
        if category not in state.selected_categories:
            state = state.toggle_category(category)
    return state


class FilterEngine:
    def __init__(self, repository: PostRepository, state: Optional[FilterState] = None) -> None:
        self.repository = repository
        self._state = state or FilterState()

    @property
    def state(self) -> FilterState:
        return self._state

    def _set(self, state: FilterState) -> FilterState:
        self._state = state
        logger.debug(
            "Filter state: search=%r tags=%s categories=%s",
            state.search_term,
            sorted(state.selected_tags),
            sorted(state.selected_categories),
        )
        return state

    def set_search_term(self, term: str) -> FilterState:
        return self._set(self._state.with_search_term(term))

    def toggle_tag(self, tag: str) -> FilterState:
        return self._set(self._state.toggle_tag(tag))

    def toggle_category(self, category: str) -> FilterState:
        return self._set(self._state.toggle_category(category))

    def clear(self) -> FilterState:
        return self._set(self._state.cleared())

    def apply_query(self, query: str) -> FilterState:
        return self._set(state_from_query(query, self._state))

    def apply(self) -> list[Post]:
        return filter_posts(self.repository.all(), self._state)
