from __future__ import annotations

import datetime as dt
import json
from typing import Iterable, Optional

import yaml

from .errors import DuplicatePost, InvalidManifest, PostNotFound
from .models import Post
from .normalize import normalize_manifest


def parse_manifest(text: str, source: str = "posts.json") -> object:
    suffix = source.lower().rsplit(".", 1)[-1]
    if suffix in {"yml", "yaml"}:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise InvalidManifest(f"Invalid YAML in manifest {source}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidManifest(f"Invalid JSON in manifest {source}: {exc}") from exc


class PostRepository:
    def __init__(self, posts: Iterable[Post] = ()) -> None:
        self._posts: list[Post] = []
        self._by_file: dict[str, Post] = {}
        positions: dict[str, int] = {}
        for index, post in enumerate(posts):
            if post.file in positions:
                raise DuplicatePost(post.file, positions[post.file], index)
            positions[post.file] = index
            self._posts.append(post)
            self._by_file[post.file] = post

    @classmethod
    def load(cls, raw_manifest: object, today: Optional[dt.date] = None) -> PostRepository:
        if not isinstance(raw_manifest, (list, tuple)):
            raise InvalidManifest(
                f"Manifest must be a list of post records, got {type(raw_manifest).__name__}"
            )
        return cls(normalize_manifest(list(raw_manifest), today))

    def all(self) -> list[Post]:
        return list(self._posts)

    def by_file(self, file: str) -> Post:
        try:
            return self._by_file[file]
        except KeyError:
            raise PostNotFound(file) from None

    def __len__(self) -> int:
        return len(self._posts)

    def __contains__(self, file: object) -> bool:
        return file in self._by_file
