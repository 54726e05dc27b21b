from __future__ import annotations

import html
import json
import logging
from pathlib import Path
from posixpath import dirname

from .app import Blog
from .config import resolve_comments, resolve_source
from .content import slugify, strip_extension
from .errors import FetchFailure
from .facets import ViewProjection
from .fetch import fetch_document
from .models import Post
from .render import (
    copy_assets,
    fix_relative_img_src,
    highlight_css,
    read_template,
    render_post_document,
    render_template,
    write_text,
)
from .utils import count_label, is_url, join_url, parse_int

logger = logging.getLogger(__name__)

GISCUS_SRC = "https://giscus.app/client.js"
SEARCH_INDEX = "search-index.json"

# Same rule as filters.filter_posts: AND across facets, OR within tags and within categories.
SEARCH_SCRIPT = """(function () {
  var input = document.getElementById("search-input");
  var list = document.getElementById("posts-list");
  var filters = document.getElementById("search-filters");
  var status = document.getElementById("search-status");
  var noResults = document.getElementById("no-results");
  if (!input || !list) return;

  var params = new URLSearchParams(window.location.search);
  var state = { search: (params.get("q") || "").trim(), tags: params.getAll("tag"), categories: params.getAll("category") };
  var cards = {};
  var posts = [];
  list.querySelectorAll("[data-file]").forEach(function (card) {
    cards[card.dataset.file] = card;
  });
  input.value = state.search;

  function toggle(values, value) {
    var index = values.indexOf(value);
    if (index > -1) {
      values.splice(index, 1);
    } else {
      values.push(value);
    }
  }

  function matchesSearch(post) {
    var term = state.search.toLowerCase();
    if (!term) return true;
    var fields = [post.title, post.excerpt, post.category || ""].concat(post.tags);
    return fields.some(function (text) {
      return text.toLowerCase().indexOf(term) > -1;
    });
  }

  function matches(post) {
    var tagMatch = state.tags.length === 0 || state.tags.some(function (tag) {
      return post.tags.indexOf(tag) > -1;
    });
    var categoryMatch = state.categories.length === 0 || state.categories.indexOf(post.category) > -1;
    return matchesSearch(post) && tagMatch && categoryMatch;
  }

  function apply() {
    var shown = 0;
    posts.forEach(function (post) {
      var card = cards[post.file];
      if (!card) return;
      card.hidden = !matches(post);
      if (!card.hidden) shown += 1;
    });
    filters.querySelectorAll("[data-tag]").forEach(function (button) {
      button.classList.toggle("active", state.tags.indexOf(button.dataset.tag) > -1);
    });
    filters.querySelectorAll("[data-category]").forEach(function (button) {
      button.classList.toggle("active", state.categories.indexOf(button.dataset.category) > -1);
    });
    status.textContent = shown === 1 ? "1 post" : shown + " posts";
    noResults.hidden = shown > 0;
  }

  input.addEventListener("input", function () {
    state.search = input.value.trim();
    apply();
  });
  filters.addEventListener("click", function (event) {
    var button = event.target.closest("button");
    if (!button) return;
    if (button.dataset.tag !== undefined) toggle(state.tags, button.dataset.tag);
    if (button.dataset.category !== undefined) toggle(state.categories, button.dataset.category);
    apply();
  });

  fetch("search-index.json")
    .then(function (response) {
      return response.json();
    })
    .then(function (data) {
      posts = data;
      apply();
    });
})();
"""


def unique_slugs(values: list[str], to_slug) -> dict[str, str]:
    slugs = {}
    used = set()
    for value in values:
        base = to_slug(value)
        slug = base
        counter = 2
        while slug in used:
            slug = f"{base}-{counter}"
            counter += 1
        used.add(slug)
        slugs[value] = slug
    return slugs


def post_slugs(posts: list[Post]) -> dict[str, str]:
    return unique_slugs([post.file for post in posts], lambda file: slugify(strip_extension(file)))


def build_facet_list(counts: dict[str, int], slugs: dict[str, str], kind: str, root: str, active: str = "") -> str:
    items = []
    for name, count in counts.items():
        active_class = " active" if name == active else ""
        items.append(
            f'<a class="{kind}-button{active_class}" href="{root}/{kind}s/{slugs[name]}.html">'
            f'{html.escape(name)}<span class="count">{count}</span></a>'
        )
    if not items:
        return ""
    return f'<nav class="{kind}-buttons">{"".join(items)}</nav>'


def build_filter_buttons(counts: dict[str, int], kind: str) -> str:
    items = [
        f'<button type="button" class="{kind}-button" data-{kind}="{html.escape(name)}">'
        f'{html.escape(name)}<span class="count">{count}</span></button>'
        for name, count in counts.items()
    ]
    if not items:
        return ""
    return f'<div class="{kind}-buttons">{"".join(items)}</div>'


def build_post_cards(posts: list[Post], projection: ViewProjection, slugs: dict[str, str], root: str) -> str:
    if not posts:
        return '<p class="no-results">No posts match.</p>'
    cards = []
    for post in posts:
        url = f"{root}/posts/{slugs[post.file]}.html"
        tags_html = "".join(f'<span class="post-card-tag">{html.escape(tag)}</span>' for tag in post.tags)
        category_html = (
            f'<span class="post-card-category">{html.escape(post.category)}</span>' if post.category else ""
        )
        cards.append(
            f'<article class="post-card" data-file="{html.escape(post.file)}">'
            f'<h3 class="post-card-title"><a href="{url}">{html.escape(post.title)}</a></h3>'
            '<div class="post-card-meta">'
            f'<span class="post-card-date">{html.escape(projection.format_date(post.date))}</span>'
            f"{category_html}"
            f'<div class="post-card-tags">{tags_html}</div>'
            "</div>"
            f'<p class="post-card-excerpt">{html.escape(post.excerpt)}</p>'
            f'<a class="post-card-read-more" href="{url}">Read more</a>'
            "</article>"
        )
    return "\n".join(cards)


def build_comments(args: object) -> str:
    attrs = resolve_comments(args)
    if not attrs:
        return ""
    rendered = " ".join(f'{name}="{html.escape(value)}"' for name, value in attrs.items())
    return (
        '<section id="comments" class="giscus-container">'
        f'<script src="{GISCUS_SRC}" {rendered} crossorigin="anonymous" async></script>'
        "</section>"
    )


def render_page(
    base_template: str, args: object, title: str, root: str, content: str, extra_head: str = ""
) -> str:
    site_name = getattr(args, "site_name", "Blog")
    return render_template(
        base_template,
        title=html.escape(f"{site_name} | {title}" if title else site_name),
        root=root,
        content=content,
        site_name=html.escape(site_name),
        site_description=html.escape(getattr(args, "site_description", "")),
        lang=html.escape((getattr(args, "date_locale", "en") or "en").split("-")[0]),
        theme=html.escape(getattr(args, "theme", "light") or "light"),
        extra_head=extra_head,
    )


class SiteBuilder:
    def __init__(self, blog: Blog, args: object, output_dir: Path) -> None:
        self.blog = blog
        self.args = args
        self.output_dir = output_dir
        self.base_template = read_template(
            Path(resolve_source(args, getattr(args, "templates", "templates"))) / "base.html"
        )
        posts = blog.repository.all()
        projection = blog.projection
        self.post_slugs = post_slugs(posts)
        self.tag_counts = projection.tag_counts()
        self.category_counts = projection.category_counts()
        self.tag_slugs = unique_slugs(list(self.tag_counts), slugify)
        self.category_slugs = unique_slugs(list(self.category_counts), slugify)
        self.pages = resolve_source(args, getattr(args, "pages", "pages"))
        self.timeout = parse_int(getattr(args, "request_timeout", 10), 10)
        self.written = 0

    def write(self, rel: str, text: str) -> None:
        write_text(self.output_dir / rel, text)
        self.written += 1
        logger.info("Wrote %s", rel)

    def listing(self, heading: str, root: str, active_tag: str = "", active_category: str = "") -> str:
        engine = self.blog.engine
        engine.clear()
        if active_tag:
            engine.toggle_tag(active_tag)
        if active_category:
            engine.toggle_category(active_category)
        posts = engine.apply()
        engine.clear()
        tags_html = build_facet_list(self.tag_counts, self.tag_slugs, "tag", root, active_tag)
        categories_html = build_facet_list(
            self.category_counts, self.category_slugs, "category", root, active_category
        )
        cards = build_post_cards(posts, self.blog.projection, self.post_slugs, root)
        return (
            '<div class="section-head">'
            f"<h2>{html.escape(heading)}</h2>"
            f'<p class="post-count">{count_label(len(posts), "post")}</p>'
            "</div>"
            f'<div class="filters">{categories_html}{tags_html}</div>'
            f'<div id="posts-list" class="posts-list">{cards}</div>'
        )

    def build_index(self) -> None:
        content = self.listing("Latest posts", ".")
        self.write("index.html", render_page(self.base_template, self.args, "Home", ".", content))

    def build_facet_pages(self) -> None:
        for tag, slug in self.tag_slugs.items():
            content = self.listing(f"Tag: {tag}", "..", active_tag=tag)
            self.write(f"tags/{slug}.html", render_page(self.base_template, self.args, tag, "..", content))
        for category, slug in self.category_slugs.items():
            content = self.listing(f"Category: {category}", "..", active_category=category)
            self.write(
                f"categories/{slug}.html", render_page(self.base_template, self.args, category, "..", content)
            )

    def build_search(self) -> None:
        posts = self.blog.repository.all()
        cards = build_post_cards(posts, self.blog.projection, self.post_slugs, ".") if posts else ""
        hidden = " hidden" if posts else ""
        content = (
            '<div class="section-head">'
            "<h2>Search</h2>"
            f'<p id="search-status" class="post-count">{count_label(len(posts), "post")}</p>'
            "</div>"
            '<div class="search-bar">'
            '<input id="search-input" class="search-input" type="search" placeholder="Search posts..." />'
            "</div>"
            '<div id="search-filters" class="filters">'
            f'{build_filter_buttons(self.category_counts, "category")}'
            f'{build_filter_buttons(self.tag_counts, "tag")}'
            "</div>"
            f'<div id="posts-list" class="posts-list">{cards}</div>'
            f'<p id="no-results" class="no-results"{hidden}>No posts match.</p>'
        )
        extra_head = '<script src="./js/search.js" defer></script>'
        self.write("js/search.js", SEARCH_SCRIPT)
        self.write("search.html", render_page(self.base_template, self.args, "Search", ".", content, extra_head))

    def build_search_index(self) -> None:
        index = []
        for post in self.blog.repository.all():
            index.append(
                {
                    "file": post.file,
                    "title": post.title,
                    "url": f"posts/{self.post_slugs[post.file]}.html",
                    "date": self.blog.projection.format_date(post.date),
                    "tags": list(post.tags),
                    "category": post.category,
                    "excerpt": post.excerpt,
                }
            )
        self.write(SEARCH_INDEX, json.dumps(index, indent=2, ensure_ascii=False))

    def asset_root(self, pages: str, file: str) -> str:
        folder = dirname(file)
        if is_url(pages):
            return join_url(pages, folder)
        return join_url("../pages", folder)

    def build_post(self, post: Post) -> bool:
        try:
            text = fetch_document(self.pages, post.file, timeout=self.timeout)
        except FetchFailure as exc:
            logger.warning("%s", exc)
            content = (
                '<article class="post post-error">'
                "<h1>Error</h1>"
                '<p class="error-message">The post could not be loaded.</p>'
                "</article>"
            )
            self.write(
                f"posts/{self.post_slugs[post.file]}.html",
                render_page(self.base_template, self.args, post.title, "..", content),
            )
            return False
        rendered = render_post_document(text, post.file, self.blog.projection.locale)
        body = fix_relative_img_src(rendered.html, self.asset_root(self.pages, post.file))
        tag_links = []
        for tag in rendered.tags:
            if tag in self.tag_slugs:
                tag_links.append(
                    f'<a class="tag-button" href="../tags/{self.tag_slugs[tag]}.html">{html.escape(tag)}</a>'
                )
            else:
                tag_links.append(f'<span class="tag-button">{html.escape(tag)}</span>')
        content = (
            '<article class="post">'
            f'<h1 id="post-title">{html.escape(rendered.title)}</h1>'
            '<div class="post-meta">'
            f'<span id="post-date">{html.escape(rendered.date)}</span>'
            f'<span id="post-tags">{html.escape(", ".join(rendered.tags))}</span>'
            "</div>"
            f'<div id="post-body" class="post-body">{body}</div>'
            f'<div id="post-tags-list" class="post-tags-list">{"".join(tag_links)}</div>'
            "</article>"
            f"{build_comments(self.args)}"
        )
        self.write(
            f"posts/{self.post_slugs[post.file]}.html",
            render_page(self.base_template, self.args, rendered.title, "..", content),
        )
        return True

    def build_manifest(self) -> None:
        data = [post.to_dict() for post in self.blog.repository.all()]
        self.write("posts.json", json.dumps(data, indent=2, ensure_ascii=False))

    def build(self) -> dict[str, int]:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        if not is_url(self.pages) and Path(self.pages).is_dir():
            copy_assets(Path(self.pages), self.output_dir / "pages")
        self.write("highlight.css", highlight_css())
        self.build_manifest()
        self.build_index()
        self.build_facet_pages()
        self.build_search_index()
        self.build_search()
        failed = 0
        for post in self.blog.repository.all():
            if not self.build_post(post):
                failed += 1
        return {"posts": len(self.blog.repository), "failed": failed, "files": self.written}
