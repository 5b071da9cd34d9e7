import logging
from typing import Optional

import httpx

from app.platform.config import settings
from app.platform.exceptions import HTTPStatusError, TransportError

logger = logging.getLogger(__name__)


class PageFetcher:
    """
    Downloads the page under analysis.

    Only an exact 200 counts as success; redirects are followed and only the
    final response is judged.
    """

    def __init__(
        self,
        timeout: float = None,
        user_agent: str = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout if timeout is not None else settings.FETCH_TIMEOUT_SECONDS
        self.user_agent = user_agent or settings.CRAWLER_USER_AGENT
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        )

    async def fetch(self, url: str) -> bytes:
        """
        Fetch ``url`` and return the raw body.

        Raises:
            TransportError: connection, DNS, timeout or protocol failure
            HTTPStatusError: final status is not 200
        """
        try:
            async with self._client() as client:
                async with client.stream("GET", url) as response:
                    if response.status_code != 200:
                        raise HTTPStatusError(url, response.status_code)
                    body = await response.aread()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"Failed to fetch {url}: {exc!r}") from exc

        logger.debug(f"Fetched {url} ({len(body)} bytes)")
        return body
