"""Tests for post extraction, emphasis coalescing and lead text."""

from datetime import date

import pytest

from conftest import IMAGE_URL, MISSING_IMAGE_URL, POST_HTML
from mhtml_site.errors import MissingListItemError, MissingRegionError, UnexpectedContentTypeError
from mhtml_site.extractor import (
    coalesce_emphasis,
    extract_post,
    extract_post_from_part,
    lead_text,
    text_from_html,
)
from mhtml_site.models import ArchivePart


class TestCoalesceEmphasis:
    def test_space_separated(self):
        html, texts = coalesce_emphasis("<i>hi</i> <i>there</i><br><i>hi there</i>")
        assert texts == ["hi there"]
        assert html == "<i>hi there</i><br><i>hi there</i>"

    def test_with_nbsp(self):
        html, texts = coalesce_emphasis("<i>hi</i>&nbsp;<i>there</i>")
        assert texts == ["hi\xa0there"]
        assert html == "<i>hi&nbsp;there</i>"

    def test_short_text_kept_in_markup_but_not_recorded(self):
        html, texts = coalesce_emphasis("<p><i>a</i>, <i>ok</i></p>")
        assert html == "<p><i>a</i>, <i>ok</i></p>"
        assert texts == []

    def test_long_text_not_recorded(self):
        caption = "x" * 51
        html, texts = coalesce_emphasis(f"<i>{caption}</i>")
        assert html == f"<i>{caption}</i>"
        assert texts == []

    def test_bounds_are_inclusive(self):
        _, texts = coalesce_emphasis("<i>abc</i>, <i>{}</i>".format("y" * 50))
        assert texts == ["abc", "y" * 50]

    def test_punctuation_trimmed(self):
        _, texts = coalesce_emphasis("<i>'Brandywine!'</i>")
        assert texts == ["Brandywine"]

    def test_first_seen_order_and_uniqueness(self):
        _, texts = coalesce_emphasis(
            "<i>Sungold</i>, <i>Cherokee Purple</i>. <i>Sungold</i> <p><i>Cherokee Purple</i></p>"
        )
        assert texts == ["Sungold", "Cherokee Purple"]

    def test_run_across_newline_whitespace(self):
        html, texts = coalesce_emphasis("<i>one</i>\n  <i>two</i>")
        assert html == "<i>one\n  two</i>"
        assert texts == ["one two"]

    def test_other_tags_break_runs(self):
        html, texts = coalesce_emphasis("<i>left</i><b>x</b><i>right</i>")
        assert html == "<i>left</i><b>x</b><i>right</i>"
        assert texts == ["left", "right"]


class TestTextFromHtml:
    def test_empty(self):
        assert text_from_html("") == ""

    def test_all_spaces(self):
        assert text_from_html(" <p> <span>   </span></p>   ") == ""

    def test_compress_spaces(self):
        assert text_from_html(" <p>Hi,</p><p>there<b>!</b>") == "Hi, there!"

    def test_entities_decoded(self):
        assert text_from_html("<p>Salt &amp; pepper&nbsp;?</p>") == "Salt & pepper\xa0?"


class TestLeadText:
    def test_short_text_untouched(self):
        assert lead_text("<p>Short post.</p>") == "Short post."

    def test_exact_limit_has_no_ellipsis(self):
        text = "a" * 140
        assert lead_text(f"<p>{text}</p>") == text

    def test_truncated_with_ellipsis(self):
        result = lead_text("<p>{}</p>".format("b" * 200))
        assert result == "b" * 140 + "..."

    def test_custom_limit(self):
        assert lead_text("<p>abcdef</p>", max_len=3) == "abc..."

    def test_never_splits_grapheme(self):
        # "e" + COMBINING ACUTE ACCENT is one grapheme of two code points
        result = lead_text("e\u0301" * 150)
        assert result == "e\u0301" * 140 + "..."

    def test_never_splits_emoji_sequence(self):
        family = "\U0001F468\u200d\U0001F469\u200d\U0001F467"
        result = lead_text(family * 141)
        assert result == family * 140 + "..."

    def test_idempotent_without_ellipsis(self):
        first = lead_text("<p>{}</p>".format("words " * 40))
        assert first.endswith("...")
        stripped = first[:-3]
        assert lead_text(stripped) == stripped

    def test_cut_after_space_is_idempotent(self):
        first = lead_text("<p>{} bcdef</p>".format("a" * 139))
        assert first == "a" * 139 + "..."
        stripped = first[:-3]
        assert lead_text(stripped) == stripped


class TestExtractPost:
    def test_author(self):
        assert extract_post(POST_HTML.encode()).author == "Jane Doe"

    def test_author_optional(self):
        html = '<section role="listitem"><div role="region"><p>hi</p></div></section>'
        assert extract_post(html.encode()).author is None

    def test_image_urls_in_order_with_duplicates(self):
        post = extract_post(POST_HTML.encode())
        assert post.image_urls == [IMAGE_URL, MISSING_IMAGE_URL, IMAGE_URL]

    def test_absolute_date_evidence(self):
        assert extract_post(POST_HTML.encode()).date == date(2023, 7, 13)

    def test_no_date_evidence(self):
        html = '<section role="listitem"><div role="region"><p>hi</p></div></section>'
        assert extract_post(html.encode()).date is None

    def test_content_fragment(self):
        post = extract_post(POST_HTML.encode())
        assert post.html.startswith("<p>Look at <i>these tomatoes</i>!")
        assert "Grown with&nbsp;care." in post.html
        assert 'role="region"' not in post.html
        assert "<section" not in post.html
        assert "Jul 13, 2023" not in post.html

    def test_emphasized_texts(self):
        post = extract_post(POST_HTML.encode())
        assert post.emphasized_texts == ["these tomatoes"]

    def test_void_elements_serialized_as_html(self):
        html = '<section role="listitem"><div role="region">a<br>b</div></section>'
        assert extract_post(html.encode()).html == "a<br>b"

    def test_raw_html_kept(self):
        assert "zX2W9c" in extract_post(POST_HTML.encode()).raw_html

    def test_first_listitem_wins(self):
        html = (
            '<section role="listitem" data-author="first"><div role="region">one</div></section>'
            '<section role="listitem" data-author="second"><div role="region">two</div></section>'
        )
        post = extract_post(html.encode())
        assert post.author == "first"
        assert post.html == "one"

    def test_missing_listitem(self):
        with pytest.raises(MissingListItemError):
            extract_post(b'<div role="region"><p>hi</p></div>')

    def test_missing_region(self):
        with pytest.raises(MissingRegionError):
            extract_post(b'<section role="listitem"><p>hi</p></section>')

    def test_region_outside_listitem_ignored(self):
        html = '<div role="region">x</div><section role="listitem"><p>hi</p></section>'
        with pytest.raises(MissingRegionError):
            extract_post(html.encode())


class TestExtractPostFromPart:
    def test_html_part(self):
        part = ArchivePart("text/html", "https://x.example/", POST_HTML.encode())
        assert extract_post_from_part(part).author == "Jane Doe"

    def test_rejects_other_types(self):
        part = ArchivePart("image/jpeg", "https://x.example/a.jpg", b"\xff\xd8")
        with pytest.raises(UnexpectedContentTypeError):
            extract_post_from_part(part)
