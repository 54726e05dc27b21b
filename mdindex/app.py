from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Optional

from .config import resolve_source
from .errors import FetchFailure, InvalidManifest
from .facets import ViewProjection
from .fetch import fetch_text
from .filters import FilterEngine
from .repository import PostRepository, parse_manifest
from .utils import parse_bool, parse_int

logger = logging.getLogger(__name__)


@dataclass
class Blog:
    repository: PostRepository
    engine: FilterEngine
    projection: ViewProjection
    fallback: bool = False


def wire_blog(repository: PostRepository, locale: str = "en", fallback: bool = False) -> Blog:
    engine = FilterEngine(repository)
    projection = ViewProjection(repository, locale=locale)
    return Blog(repository=repository, engine=engine, projection=projection, fallback=fallback)


def load_repository(args: object, today: Optional[dt.date] = None) -> PostRepository:
    source = resolve_source(args, getattr(args, "manifest", "posts.json"))
    timeout = parse_int(getattr(args, "request_timeout", 10), 10)
    text = fetch_text(source, timeout=timeout)
    return PostRepository.load(parse_manifest(text, source), today=today)


def load_blog(args: object, today: Optional[dt.date] = None) -> Blog:
    locale = getattr(args, "date_locale", "en") or "en"
    try:
        repository = load_repository(args, today=today)
    except (FetchFailure, InvalidManifest) as exc:
        if not parse_bool(getattr(args, "allow_empty_fallback", False)):
            raise
        logger.warning("Manifest load failed (%s); continuing with an empty post list.", exc)
        return wire_blog(PostRepository(), locale=locale, fallback=True)
    logger.info("Loaded %d posts.", len(repository))
    return wire_blog(repository, locale=locale)
