from __future__ import annotations

import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path

import markdown
from pygments.formatters import HtmlFormatter

from .content import parse_front_matter, parse_list, strip_extension
from .facets import format_date

IMG_SRC_RE = re.compile(r'<img([^>]*?)src="([^"]+)"', re.IGNORECASE)
HIGHLIGHT_CSS_CLASS = "codehilite"

# nl2br: line breaks; fenced_code/tables/sane_lists: GitHub-flavoured blocks;
# toc: header ids. smarty is left out so quotes and dashes stay as written.
MARKDOWN_EXTENSIONS = ["nl2br", "fenced_code", "tables", "sane_lists", "toc", "codehilite"]
MARKDOWN_EXTENSION_CONFIGS = {
    "codehilite": {"css_class": HIGHLIGHT_CSS_CLASS, "guess_lang": False, "noclasses": False},
}

DEFAULT_BASE_TEMPLATE = """<!DOCTYPE html>
<html lang="{{lang}}" data-theme="{{theme}}">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{{title}}</title>
<link rel="stylesheet" href="{{root}}/highlight.css">
{{extra_head}}
</head>
<body>
<header class="site-header"><a href="{{root}}/index.html">{{site_name}}</a><p>{{site_description}}</p>
<nav><a href="{{root}}/index.html">Home</a> <a href="{{root}}/search.html">Search</a></nav></header>
<main>{{content}}</main>
</body>
</html>
"""


@dataclass
class RenderedPost:
    file: str
    title: str
    date: str
    tags: list[str] = field(default_factory=list)
    html: str = ""
    metadata: dict = field(default_factory=dict)


def render_markdown(text: str) -> str:
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS, extension_configs=MARKDOWN_EXTENSION_CONFIGS)
    return md.convert(text)


def highlight_css() -> str:
    return HtmlFormatter(cssclass=HIGHLIGHT_CSS_CLASS).get_style_defs(f".{HIGHLIGHT_CSS_CLASS}")


def metadata_tags(meta: dict) -> list[str]:
    value = meta.get("tags")
    if isinstance(value, list):
        return [str(tag) for tag in value if str(tag).strip()]
    if isinstance(value, str):
        return parse_list(value)
    return []


def render_post_document(text: str, file: str, locale: str = "en") -> RenderedPost:
    meta, body = parse_front_matter(text)
    title = meta.get("title") or strip_extension(file)
    return RenderedPost(
        file=file,
        title=title,
        date=format_date(meta.get("date"), locale),
        tags=metadata_tags(meta),
        html=render_markdown(body),
        metadata=meta,
    )


def fix_relative_img_src(html_text: str, root: str) -> str:
    def repl(match: re.Match) -> str:
        attrs = match.group(1)
        src = match.group(2)
        if src.startswith(("http://", "https://", "data:", "#", "/", "./", "../")):
            return match.group(0)
        return f'<img{attrs}src="{root}/{src}"'

    return IMG_SRC_RE.sub(repl, html_text)


def render_template(template: str, **context: str) -> str:
    output = template
    late_keys = {"content"}
    for key, value in context.items():
        if key in late_keys:
            continue
        output = output.replace(f"{{{{{key}}}}}", value)
    for key in late_keys:
        if key in context:
            output = output.replace(f"{{{{{key}}}}}", context[key])
    return output


def read_template(path: Path) -> str:
    if path.is_file():
        return path.read_text(encoding="utf-8")
    return DEFAULT_BASE_TEMPLATE


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def copy_assets(pages_dir: Path, output_dir: Path) -> int:
    copied = 0
    for item in pages_dir.rglob("*"):
        if not item.is_file() or item.suffix.lower() == ".md":
            continue
        dest = output_dir / item.relative_to(pages_dir)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(item, dest)
        copied += 1
    return copied
