from __future__ import annotations

import json
import re

DELIMITER = "---"
QUOTE_CHARS = "'\""
EDGE_QUOTE_RE = re.compile(r"^['\"]|['\"]$")


def slugify(text: str) -> str:
    text = text.lower()
    text = re.sub(r"[^\w]+", "-", text, flags=re.UNICODE)
    text = text.strip("-_").replace("_", "-")
    return text or "post"


def strip_extension(file: str) -> str:
    head, sep, name = file.rpartition("/")
    stem, dot, _ = name.rpartition(".")
    if not dot or not stem:
        return file
    return f"{head}{sep}{stem}"


def strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in QUOTE_CHARS:
        return value[1:-1]
    return value


def parse_list(value: str) -> list[str]:
    value = value.strip()
    if value.startswith("[") and value.endswith("]"):
        try:
            data = json.loads(value)
        except ValueError:
            data = None
        if isinstance(data, list):
            return [str(item) for item in data]
        inner = value[1:-1]
        items = [EDGE_QUOTE_RE.sub("", item.strip()) for item in inner.split(",")]
    else:
        items = [item.strip() for item in value.split(",")]
    return [item for item in items if item]


def parse_front_matter(text: str) -> tuple[dict, str]:
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.split("\n")
    if lines[0].strip() != DELIMITER:
        return {}, clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == DELIMITER:
            end = i
            break
    if end is None:
        return {}, clean_text

    meta = {}
    for line in lines[1:end]:
        colon = line.find(":")
        if colon <= 0:
            continue
        key = line[:colon].strip()
        if not key:
            continue
        value = strip_quotes(line[colon + 1 :].strip())
        if key == "tags" and value.startswith("[") and value.endswith("]"):
            meta[key] = parse_list(value)
        else:
            meta[key] = value
    offset = sum(len(line) + 1 for line in lines[: end + 1])
    return meta, clean_text[offset:]
