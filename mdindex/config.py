from __future__ import annotations

import json
import sys
from pathlib import Path

try:
    import tomllib as toml
except ImportError:
    try:
        import tomli as toml
    except ImportError:  # pragma: no cover - optional dependency
        toml = None

import yaml

from .utils import is_url

GISCUS_DEFAULTS = {
    "data-mapping": "pathname",
    "data-strict": "0",
    "data-reactions-enabled": "1",
    "data-emit-metadata": "0",
    "data-input-position": "bottom",
    "data-theme": "preferred_color_scheme",
}


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        if toml is None:
            print("TOML config requires tomllib (Python 3.11+) or tomli.", file=sys.stderr)
            sys.exit(1)
        try:
            data = toml.loads(text)
        except toml.TOMLDecodeError as exc:
            print(f"Invalid TOML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        return data
    if suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            print(f"Invalid YAML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        if data is None:
            return {}
        if not isinstance(data, dict):
            print(f"YAML config must be a mapping: {path}", file=sys.stderr)
            sys.exit(1)
        return data
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON in config file {path}: {exc}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(data, dict):
        print(f"JSON config must be an object: {path}", file=sys.stderr)
        sys.exit(1)
    return data


def resolve_source(args: object, value: str) -> str:
    if not value or is_url(value):
        return value
    path = Path(value)
    if not path.is_absolute():
        config_path = Path(getattr(args, "config", "site.toml")).resolve()
        path = config_path.parent / path
    return str(path)


def resolve_comments(args: object) -> dict[str, str]:
    repo = (getattr(args, "comments_repo", "") or "").strip()
    if not repo:
        return {}
    attrs = {
        "data-repo": repo,
        "data-repo-id": (getattr(args, "comments_repo_id", "") or "").strip(),
        "data-category": (getattr(args, "comments_category", "") or "General").strip(),
        "data-category-id": (getattr(args, "comments_category_id", "") or "").strip(),
    }
    attrs.update(GISCUS_DEFAULTS)
    attrs["data-lang"] = (getattr(args, "comments_lang", "") or "en").strip()
    return attrs
