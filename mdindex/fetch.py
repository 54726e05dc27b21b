from __future__ import annotations

import logging
from pathlib import Path

import requests

from .errors import FetchFailure
from .utils import is_url, join_url

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


def decode_response(response) -> str:
    # requests assumes ISO-8859-1 for text/* without a charset
    if "charset" not in response.headers.get("Content-Type", "").lower():
        return response.content.decode("utf-8", errors="replace")
    return response.text


def fetch_text(source: str, timeout: int = DEFAULT_TIMEOUT) -> str:
    if is_url(source):
        logger.debug("GET %s", source)
        try:
            response = requests.get(source, timeout=timeout)
        except requests.RequestException as exc:
            raise FetchFailure(source, str(exc)) from exc
        if not response.ok:
            raise FetchFailure(source, f"HTTP {response.status_code}: {response.reason}")
        return decode_response(response)
    path = Path(source)
    if not path.is_file():
        raise FetchFailure(source, "file not found")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FetchFailure(source, str(exc)) from exc


def document_source(pages: str, file: str) -> str:
    relative = Path(file)
    if relative.is_absolute() or ".." in relative.parts:
        raise FetchFailure(file, "path escapes the pages directory")
    if is_url(pages):
        return join_url(pages, file)
    root = Path(pages).resolve()
    target = (root / relative).resolve()
    if target != root and root not in target.parents:
        raise FetchFailure(file, "path escapes the pages directory")
    return str(Path(pages) / relative)


def fetch_document(pages: str, file: str, timeout: int = DEFAULT_TIMEOUT) -> str:
    return fetch_text(document_source(pages, file), timeout=timeout)
