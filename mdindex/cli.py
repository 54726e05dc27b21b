from __future__ import annotations

import argparse
import html
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from .app import Blog, load_blog
from .config import load_config, resolve_source
from .errors import MdIndexError, PostNotFound
from .fetch import fetch_document
from .pages import SiteBuilder
from .render import render_post_document
from .utils import clean_output_dir, count_label, parse_bool, parse_int

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def cmd_list(blog: Blog, args: argparse.Namespace) -> int:
    engine = blog.engine
    if args.query:
        engine.apply_query(args.query)
    if args.search:
        engine.set_search_term(args.search)
    for tag in args.tag:
        if tag not in engine.state.selected_tags:
            engine.toggle_tag(tag)
    for category in args.category:
        if category not in engine.state.selected_categories:
            engine.toggle_category(category)
    posts = engine.apply()
    if not posts:
        print("No posts match.")
        return 0
    for post in posts:
        tags = f" [{', '.join(post.tags)}]" if post.tags else ""
        category = f" ({post.category})" if post.category else ""
        print(f"{blog.projection.format_date(post.date)}  {post.title}{category}{tags}  {post.file}")
    return 0


def cmd_facets(blog: Blog, args: argparse.Namespace) -> int:
    print("Tags:")
    for tag, count in blog.projection.tag_counts().items():
        print(f"  {tag} ({count})")
    print("Categories:")
    for category, count in blog.projection.category_counts().items():
        print(f"  {category} ({count})")
    return 0


def cmd_show(blog: Blog, args: argparse.Namespace) -> int:
    try:
        post = blog.repository.by_file(args.file)
    except PostNotFound as exc:
        print(str(exc), file=sys.stderr)
        return 1
    pages = resolve_source(args, args.pages)
    text = fetch_document(pages, post.file, timeout=parse_int(args.request_timeout, 10))
    rendered = render_post_document(text, post.file, blog.projection.locale)
    print(f"<h1>{html.escape(rendered.title)}</h1>")
    if rendered.date:
        print(f'<p class="post-date">{html.escape(rendered.date)}</p>')
    print(rendered.html)
    return 0


def cmd_build(blog: Blog, args: argparse.Namespace) -> int:
    output_dir = Path(args.output)
    if args.clean:
        clean_output_dir(output_dir, Path.cwd())
    start = time.perf_counter()
    stats = SiteBuilder(blog, args, output_dir).build()
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s.")
    summary = f"{count_label(stats['posts'], 'post')}, {count_label(stats['files'], 'file')}"
    print(f"Site generated in: {output_dir} ({summary})")
    if stats["failed"]:
        print(f"{stats['failed']} post(s) could not be loaded.", file=sys.stderr)
    return 0


COMMANDS = {
    "list": cmd_list,
    "facets": cmd_facets,
    "show": cmd_show,
    "build": cmd_build,
}


def build_parser(config: dict, config_path: str) -> argparse.ArgumentParser:
    def cfg_value(key: str, default: object) -> object:
        value = config.get(key)
        return default if value is None else value

    def cfg_str(key: str, default: str) -> str:
        return str(cfg_value(key, default))

    def cfg_bool(key: str, default: bool) -> bool:
        return parse_bool(cfg_value(key, default))

    def cfg_int(key: str, default: int) -> int:
        return parse_int(cfg_value(key, default), default)

    parser = argparse.ArgumentParser(description="Markdown blog post index and static front end.")
    parser.add_argument("--config", default=config_path, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--manifest",
        default=cfg_str("manifest", "posts.json"),
        help="Path or URL of the post manifest (JSON or YAML).",
    )
    parser.add_argument(
        "--pages",
        default=cfg_str("pages", "pages"),
        help="Directory or base URL holding the Markdown post documents.",
    )
    parser.add_argument("--site-name", default=cfg_str("site_name", "Blog"), help="Site title.")
    parser.add_argument(
        "--site-description",
        default=cfg_str("site_description", ""),
        help="Site description.",
    )
    parser.add_argument(
        "--date-locale",
        default=cfg_str("date_locale", "en"),
        help="Locale used for long-form dates (en, ko, ja, zh).",
    )
    parser.add_argument(
        "--allow-empty-fallback",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("allow_empty_fallback", False),
        help="Continue with no posts when the manifest cannot be loaded.",
    )
    parser.add_argument(
        "--request-timeout",
        default=cfg_int("request_timeout", 10),
        type=int,
        help="Timeout in seconds for HTTP fetches.",
    )
    parser.set_defaults(
        theme=cfg_str("theme", "light"),
        comments_repo=cfg_str("comments_repo", ""),
        comments_repo_id=cfg_str("comments_repo_id", ""),
        comments_category=cfg_str("comments_category", "General"),
        comments_category_id=cfg_str("comments_category_id", ""),
        comments_lang=cfg_str("comments_lang", "en"),
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Print the filtered post listing.")
    list_parser.add_argument("--search", default="", help="Case-insensitive search term.")
    list_parser.add_argument("--tag", action="append", default=[], help="Tag filter (repeatable, OR).")
    list_parser.add_argument(
        "--category", action="append", default=[], help="Category filter (repeatable, OR)."
    )
    list_parser.add_argument("--query", default="", help="URL query string, e.g. 'tag=python&q=intro'.")

    subparsers.add_parser("facets", help="Print distinct tags and categories.")

    show_parser = subparsers.add_parser("show", help="Render one post as HTML.")
    show_parser.add_argument("file", help="Post file as listed in the manifest.")

    build_parser_ = subparsers.add_parser("build", help="Write the static site.")
    build_parser_.add_argument("--output", default=cfg_str("output", "dist"), help="Output directory.")
    build_parser_.add_argument(
        "--templates",
        default=cfg_str("templates", "templates"),
        help="Directory containing base.html.",
    )
    build_parser_.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("clean", True),
        help="Clean output directory before build.",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default="site.toml")
    pre_args, _ = pre_parser.parse_known_args(argv)
    config = load_config(Path(pre_args.config))

    args = build_parser(config, pre_args.config).parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)

    try:
        blog = load_blog(args)
        if blog.fallback:
            print("Manifest could not be loaded; showing an empty post list.", file=sys.stderr)
        return COMMANDS[args.command](blog, args)
    except MdIndexError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
