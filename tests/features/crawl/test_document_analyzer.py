"""
Tests for the single-pass document analyzer.
"""

import pytest

from app.features.crawl.schemas.analysis import HTML5, XHTML
from app.features.crawl.services.document_analyzer import (
    analyze_document,
    extract_text,
    parse_document,
)


def outline_of(markup: str):
    return analyze_document(parse_document(markup.encode("utf-8")))


class TestTitle:
    def test_first_non_empty_title_wins(self):
        outline = outline_of(
            "<html><head><title>   </title><title>  Hello World  </title>"
            "<title>Second</title></head><body></body></html>"
        )
        assert outline.title == "Hello World"

    def test_missing_title_is_empty(self):
        assert outline_of("<html><body><p>hi</p></body></html>").title == ""

    def test_extract_text_trims_each_node(self):
        document = parse_document(b"<div>  Hello <span> big </span> world  </div>")
        assert extract_text(document.div) == "Hellobigworld"

    def test_comments_are_not_text(self):
        document = parse_document(b"<div>a<!-- hidden -->b</div>")
        assert extract_text(document.div) == "ab"


class TestHeadings:
    def test_counts_nested_headings(self):
        outline = outline_of(
            "<html><body>"
            "<h1>One</h1><div><h1>Two</h1><section><h3>Deep</h3></section></div>"
            "<h6>Six</h6>"
            "</body></html>"
        )
        assert outline.heading_counts == {1: 2, 2: 0, 3: 1, 4: 0, 5: 0, 6: 1}

    def test_three_h2_one_h1_at_any_depth(self):
        outline = outline_of(
            "<h2>a</h2><div><div><h2>b</h2></div><h1>top</h1></div>"
            "<ul><li><span><h2>c</h2></span></li></ul>"
        )
        assert outline.heading_counts == {1: 1, 2: 3, 3: 0, 4: 0, 5: 0, 6: 0}

    def test_no_headings_gives_all_levels_zero(self):
        outline = outline_of("<p>text</p>")
        assert outline.heading_counts == {level: 0 for level in range(1, 7)}


class TestMarkupVersion:
    def test_html5_doctype(self):
        assert outline_of("<!DOCTYPE html><html><head></head></html>").markup_version == HTML5

    def test_xmlns_without_doctype_is_xhtml(self):
        outline = outline_of('<html xmlns="http://www.w3.org/1999/xhtml"><body></body></html>')
        assert outline.markup_version == XHTML

    def test_plain_html_defaults_to_html5(self):
        assert outline_of("<html><body></body></html>").markup_version == HTML5

    def test_fragment_without_html_element_defaults_to_html5(self):
        assert outline_of("<p>just a fragment</p>").markup_version == HTML5

    def test_only_first_html_element_sets_version(self):
        outline = outline_of('<html></html><html xmlns="http://www.w3.org/1999/xhtml"></html>')
        assert outline.markup_version == HTML5

    def test_doctype_wins_over_xmlns(self):
        outline = outline_of('<!DOCTYPE html><html xmlns="http://www.w3.org/1999/xhtml"></html>')
        assert outline.markup_version == HTML5

    def test_xhtml_in_any_attribute_value_without_xmlns(self):
        assert outline_of('<html lang="xhtml-ish"><body></body></html>').markup_version == XHTML


class TestAnchors:
    def test_hrefs_in_document_order(self):
        outline = outline_of(
            '<body><a href="/first">1</a><div><a href="https://other.com/">2</a></div>'
            '<a href="#top">3</a></body>'
        )
        assert outline.hrefs == ["/first", "https://other.com/", "#top"]

    def test_empty_or_missing_href_is_ignored(self):
        outline = outline_of('<body><a href="">x</a><a name="anchor">y</a><a href="/ok">z</a></body>')
        assert outline.hrefs == ["/ok"]


class TestLoginFormDetection:
    def test_login_form_detected_anywhere_in_page(self):
        outline = outline_of(
            "<body><form action='/search'><input type='text' name='q'></form>"
            "<div><form><input type='email' name='email'><input type='password' name='pw'></form></div>"
            "</body>"
        )
        assert outline.has_login_form is True

    def test_page_without_login_form(self):
        outline = outline_of("<body><form><input type='text' name='q'></form></body>")
        assert outline.has_login_form is False


@pytest.mark.parametrize("content", [b"", b"not html at all", b"<<<>>>"])
def test_odd_input_still_parses(content):
    outline = analyze_document(parse_document(content))
    assert outline.markup_version == HTML5
    assert outline.hrefs == []
