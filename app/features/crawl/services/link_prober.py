import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import httpx

from app.features.crawl.schemas.analysis import BrokenLink
from app.features.crawl.services.cancellation import CancellationToken
from app.features.crawl.services.link_classifier import ResolvedLink
from app.platform.config import settings

logger = logging.getLogger(__name__)

SKIP_PREFIXES = ("mailto:", "tel:", "javascript:", "#")
LINK_CHECK_FAILED = "link check failed"


@dataclass(frozen=True)
class LinkCheck:
    accessible: bool
    reason: str = ""


def is_skippable(url: str, href: str = "") -> bool:
    """Links that are never checked: mail/phone/script schemes and in-page fragments."""
    if href.startswith("#"):
        return True
    return url.lower().startswith(SKIP_PREFIXES)


class LinkProber:
    """
    Checks that resolved links still answer, with a HEAD request per link.

    Probes run concurrently up to ``concurrency`` at a time; results always
    come back in the order the links were discovered.
    """

    def __init__(
        self,
        timeout: float = None,
        concurrency: int = None,
        user_agent: str = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout if timeout is not None else settings.LINK_CHECK_TIMEOUT_SECONDS
        self.concurrency = max(1, concurrency or settings.LINK_CHECK_CONCURRENCY)
        self.user_agent = user_agent or settings.CRAWLER_USER_AGENT
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        )

    async def probe(self, url: str, client: httpx.AsyncClient = None, href: str = "") -> LinkCheck:
        if is_skippable(url, href):
            return LinkCheck(accessible=True)

        if client is None:
            async with self._client() as own_client:
                return await self._head(own_client, url)
        return await self._head(client, url)

    async def _head(self, client: httpx.AsyncClient, url: str) -> LinkCheck:
        try:
            response = await client.head(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return LinkCheck(accessible=False, reason=str(exc) or exc.__class__.__name__)

        if response.status_code >= 400:
            return LinkCheck(accessible=False, reason=LINK_CHECK_FAILED)
        return LinkCheck(accessible=True)

    async def probe_all(
        self,
        links: Sequence[ResolvedLink],
        cancel_token: CancellationToken = None,
    ) -> List[BrokenLink]:
        """Probe every link and return the broken ones in discovery order."""
        if not links:
            return []

        semaphore = asyncio.Semaphore(self.concurrency)

        async with self._client() as client:

            async def check(link: ResolvedLink) -> LinkCheck:
                async with semaphore:
                    return await self.probe(link.url, client=client, href=link.href)

            checks = asyncio.gather(*(check(link) for link in links))
            if cancel_token is not None:
                results = await cancel_token.guard(checks)
            else:
                results = await checks

        broken = [
            # The failing status code is not kept, only the generic reason
            BrokenLink(url=link.url, status_code=0, reason=result.reason)
            for link, result in zip(links, results)
            if not result.accessible
        ]
        logger.debug(f"Probed {len(links)} links, {len(broken)} broken")
        return broken
