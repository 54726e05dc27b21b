"""Tests for front matter parsing in mdindex/content.py."""

from mdindex.content import parse_front_matter, parse_list, slugify, strip_extension, strip_quotes


class TestParseFrontMatter:

    def test_metadata_and_body(self):
        meta, body = parse_front_matter('---\ntitle: Hello\ntags: ["a", "b"]\n---\nBody text')
        assert meta == {"title": "Hello", "tags": ["a", "b"]}
        assert body == "Body text"

    def test_malformed_tag_list_keeps_other_keys(self):
        meta, body = parse_front_matter("---\ntitle: Hello\ntags: [a, b\n---\nBody")
        assert meta["title"] == "Hello"
        assert meta["tags"] == "[a, b"
        assert body == "Body"

    def test_unquoted_list_falls_back_to_split(self):
        meta, _ = parse_front_matter("---\ntags: [a, 'b', \"c\"]\n---\n")
        assert meta["tags"] == ["a", "b", "c"]

    def test_no_leading_delimiter(self):
        text = "title: Hello\n---\nBody"
        assert parse_front_matter(text) == ({}, text)

    def test_unterminated_block(self):
        text = "---\ntitle: Hello\nBody without closing"
        assert parse_front_matter(text) == ({}, text)

    def test_empty_input(self):
        assert parse_front_matter("") == ({}, "")

    def test_splits_on_first_colon(self):
        meta, _ = parse_front_matter("---\ntitle: Rust: the good parts\nurl: https://x.io/a\n---\n")
        assert meta["title"] == "Rust: the good parts"
        assert meta["url"] == "https://x.io/a"

    def test_strips_matching_quotes_only(self):
        meta, _ = parse_front_matter("---\na: \"quoted\"\nb: 'single'\nc: \"mixed'\n---\n")
        assert meta == {"a": "quoted", "b": "single", "c": "\"mixed'"}

    def test_other_keys_are_not_coerced(self):
        meta, _ = parse_front_matter("---\ndate: 2024-01-15\ndraft: true\ncategories: [x, y]\n---\n")
        assert meta == {"date": "2024-01-15", "draft": "true", "categories": "[x, y]"}

    def test_lines_without_key_are_skipped(self):
        meta, _ = parse_front_matter("---\n\njust text\n: no key\ntitle: T\n---\nBody")
        assert meta == {"title": "T"}

    def test_empty_block(self):
        assert parse_front_matter("---\n---\nBody") == ({}, "Body")

    def test_bom_is_ignored(self):
        meta, body = parse_front_matter("\ufeff---\ntitle: Hi\n---\nBody")
        assert meta == {"title": "Hi"}
        assert body == "Body"

    def test_quoted_tag_list(self):
        meta, _ = parse_front_matter("---\ntags: '[\"x\"]'\n---\n")
        assert meta["tags"] == ["x"]

    def test_multiline_body_preserved(self):
        _, body = parse_front_matter("---\ntitle: T\n---\nline one\n\nline two")
        assert body == "line one\n\nline two"

    def test_body_is_returned_verbatim(self):
        _, body = parse_front_matter("---\ntitle: T\n---\nline two\x0cthree\u2028four\n\n")
        assert body == "line two\x0cthree\u2028four\n\n"

    def test_crlf_document(self):
        meta, body = parse_front_matter("---\r\ntitle: T\r\n---\r\nline one\r\nline two\r\n")
        assert meta == {"title": "T"}
        assert body == "line one\r\nline two\r\n"


class TestHelpers:

    def test_parse_list_json_numbers_become_strings(self):
        assert parse_list("[1, 2]") == ["1", "2"]

    def test_parse_list_drops_empty_items(self):
        assert parse_list("[a,,b, ]") == ["a", "b"]

    def test_parse_list_plain_commas(self):
        assert parse_list("a, b") == ["a", "b"]

    def test_strip_quotes_single_char(self):
        assert strip_quotes('"') == '"'

    def test_strip_extension(self):
        assert strip_extension("post.md") == "post"
        assert strip_extension("notes/a.b.md") == "notes/a.b"
        assert strip_extension("README") == "README"
        assert strip_extension(".hidden") == ".hidden"
        assert strip_extension("dir.v2/readme") == "dir.v2/readme"

    def test_slugify(self):
        assert slugify("Hello World!") == "hello-world"
        assert slugify("travel/kyoto") == "travel-kyoto"
        assert slugify("???") == "post"
