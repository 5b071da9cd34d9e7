"""
Tests for link resolution and internal/external classification.
"""

import pytest

from app.features.crawl.services.link_classifier import (
    InvalidReference,
    classify_links,
    parse_base_url,
    parse_reference,
    resolve,
)
from app.platform.exceptions import ParseError

BASE = "https://example.com/a/page"


def test_relative_href_resolves_against_page_url():
    assert resolve("../b", BASE) == "https://example.com/b"
    assert resolve("/root", BASE) == "https://example.com/root"
    assert resolve("sibling", BASE) == "https://example.com/a/sibling"


def test_internal_and_external_split():
    result = classify_links(["../b", "https://other.com/x", "/c", "//cdn.example.com/lib.js"], BASE)

    assert result.internal_count == 2
    assert result.external_count == 2
    assert [link.url for link in result.links] == [
        "https://example.com/b",
        "https://other.com/x",
        "https://example.com/c",
        "https://cdn.example.com/lib.js",
    ]
    assert [link.is_internal for link in result.links] == [True, False, True, False]


def test_port_is_part_of_the_host():
    result = classify_links(["https://example.com:8443/x"], BASE)
    assert result.external_count == 1


def test_host_comparison_is_case_sensitive():
    result = classify_links(["https://EXAMPLE.com/x"], BASE)
    assert result.external_count == 1


def test_userinfo_is_ignored():
    result = classify_links(["https://bob@example.com/x"], BASE)
    assert result.internal_count == 1


def test_scheme_only_links_count_as_external():
    result = classify_links(["mailto:someone@example.com"], BASE)
    assert result.external_count == 1
    assert result.links[0].url == "mailto:someone@example.com"


def test_fragment_links_are_internal():
    result = classify_links(["#top"], BASE)
    assert result.internal_count == 1
    assert result.links[0].href == "#top"


@pytest.mark.parametrize("href", ["http://[::1", "/bad%zzescape", "http://example.com:port/", "/a\x00b"])
def test_unparseable_hrefs_are_dropped(href):
    result = classify_links([href, "/ok"], BASE)
    assert result.internal_count == 1
    assert result.external_count == 0
    assert [link.href for link in result.links] == ["/ok"]


def test_counts_always_match_links():
    hrefs = ["/a", "https://x.org", "http://[bad", "#f", "mailto:a@b.c", "../up"]
    result = classify_links(hrefs, BASE)
    assert result.internal_count + result.external_count == len(result.links)


def test_parse_reference_rejects_bad_escape():
    with pytest.raises(InvalidReference):
        parse_reference("100%")


def test_invalid_base_url_is_a_parse_error():
    with pytest.raises(ParseError):
        parse_base_url("http://[::1")


def test_directory_base_url():
    result = classify_links(["../b", "https://other.com/x"], "https://example.com/a/")

    assert [(link.url, link.is_internal) for link in result.links] == [
        ("https://example.com/b", True),
        ("https://other.com/x", False),
    ]


def test_query_string_is_not_checked_for_escapes():
    result = classify_links(["/sale?discount=50%", "/search?q=100%25"], "https://example.com/a/")

    assert result.internal_count == 2
    assert [link.url for link in result.links] == [
        "https://example.com/sale?discount=50%",
        "https://example.com/search?q=100%25",
    ]


@pytest.mark.parametrize("href", ["https://ex%zzample.com/", "/page#frag%g1"])
def test_bad_escape_outside_query_is_still_rejected(href):
    with pytest.raises(InvalidReference):
        parse_reference(href)


def test_scheme_without_host_stays_absolute():
    assert resolve("https:foo", "https://example.com/a/page") == "https:foo"

    result = classify_links(["https:foo"], "https://example.com/a/page")
    assert result.internal_count == 0
    assert result.external_count == 1
    assert result.links[0].url == "https:foo"
