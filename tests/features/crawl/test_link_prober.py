"""
Tests for the HEAD accessibility probe.
"""

import httpx
import pytest

from app.features.crawl.services.cancellation import CancellationToken
from app.features.crawl.services.link_classifier import ResolvedLink
from app.features.crawl.services.link_prober import LINK_CHECK_FAILED, LinkProber, is_skippable
from app.platform.exceptions import AnalysisCancelled


def make_transport(seen):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, str(request.url)))
        if request.url.host == "down.test":
            raise httpx.ConnectError("connection refused", request=request)
        if request.url.path == "/missing":
            return httpx.Response(404)
        if request.url.path == "/error":
            return httpx.Response(500)
        if request.url.path == "/moved":
            return httpx.Response(301, headers={"Location": "https://site.test/ok"})
        return httpx.Response(200)

    return httpx.MockTransport(handler)


def link(url, href=None, is_internal=True):
    return ResolvedLink(href=href if href is not None else url, url=url, is_internal=is_internal)


@pytest.mark.parametrize(
    "url, href, expected",
    [
        ("mailto:a@b.c", "mailto:a@b.c", True),
        ("TEL:+123", "TEL:+123", True),
        ("JavaScript:void(0)", "JavaScript:void(0)", True),
        ("https://site.test/page#top", "#top", True),
        ("https://site.test/page", "/page", False),
    ],
)
def test_is_skippable(url, href, expected):
    assert is_skippable(url, href) is expected


@pytest.mark.asyncio
async def test_broken_links_in_discovery_order():
    seen = []
    prober = LinkProber(transport=make_transport(seen), concurrency=3)

    links = [
        link("https://site.test/missing"),
        link("https://site.test/ok"),
        link("https://down.test/x", is_internal=False),
        link("mailto:someone@site.test"),
        link("https://site.test/error"),
        link("https://site.test/#frag", href="#frag"),
        link("https://site.test/moved"),
    ]
    broken = await prober.probe_all(links)

    assert [b.url for b in broken] == [
        "https://site.test/missing",
        "https://down.test/x",
        "https://site.test/error",
    ]
    assert broken[0].reason == LINK_CHECK_FAILED
    assert broken[1].reason == "connection refused"
    assert broken[2].reason == LINK_CHECK_FAILED
    assert all(b.status_code == 0 for b in broken)


@pytest.mark.asyncio
async def test_only_head_requests_and_skipped_links_never_sent():
    seen = []
    prober = LinkProber(transport=make_transport(seen))

    await prober.probe_all([link("mailto:x@y.z"), link("https://site.test/a"), link("javascript:go()")])

    assert seen == [("HEAD", "https://site.test/a")]


@pytest.mark.asyncio
async def test_sequential_probing_gives_same_result():
    links = [link("https://site.test/error"), link("https://site.test/ok"), link("https://site.test/missing")]

    parallel = await LinkProber(transport=make_transport([]), concurrency=5).probe_all(links)
    sequential = await LinkProber(transport=make_transport([]), concurrency=1).probe_all(links)

    assert parallel == sequential
    assert [b.url for b in sequential] == ["https://site.test/error", "https://site.test/missing"]


@pytest.mark.asyncio
async def test_no_links_no_requests():
    seen = []
    assert await LinkProber(transport=make_transport(seen)).probe_all([]) == []
    assert seen == []


@pytest.mark.asyncio
async def test_probe_single_link_without_shared_client():
    prober = LinkProber(transport=make_transport([]))

    check = await prober.probe("https://site.test/missing")

    assert check.accessible is False
    assert check.reason == LINK_CHECK_FAILED


@pytest.mark.asyncio
async def test_cancelled_token_stops_probing():
    token = CancellationToken()
    token.cancel()

    with pytest.raises(AnalysisCancelled):
        await LinkProber(transport=make_transport([])).probe_all([link("https://site.test/ok")], cancel_token=token)
