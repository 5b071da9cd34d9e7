import logging

from app.features.crawl.schemas.analysis import AnalysisResult
from app.features.crawl.services.cancellation import CancellationToken
from app.features.crawl.services.document_analyzer import analyze_document, parse_document
from app.features.crawl.services.fetcher import PageFetcher
from app.features.crawl.services.link_classifier import classify_links, parse_base_url
from app.features.crawl.services.link_prober import LinkProber
from app.features.crawl.services.result_store import ResultStore
from app.features.urls.models.target_url import UrlStatus
from app.platform.exceptions import AnalysisCancelled, AnalysisError, LinkInsertError

logger = logging.getLogger(__name__)


class PageCrawler:
    """
    Runs one page analysis end to end and reports the outcome to the store.

    Fetcher and prober are injectable so the pipeline can run against a fake
    network; the store is always injected.
    """

    def __init__(
        self,
        store: ResultStore,
        fetcher: PageFetcher = None,
        prober: LinkProber = None,
    ):
        self.store = store
        self.fetcher = fetcher or PageFetcher()
        self.prober = prober or LinkProber()

    async def analyze(self, target_url: str, cancel_token: CancellationToken = None) -> AnalysisResult:
        """
        Fetch, parse and inspect ``target_url``.

        Raises TransportError, HTTPStatusError or ParseError on the first
        fatal step, AnalysisCancelled if the token fires.
        """
        token = cancel_token or CancellationToken()

        content = await token.guard(self.fetcher.fetch(target_url))
        document = parse_document(content)
        parse_base_url(target_url)

        outline = analyze_document(document)
        links = classify_links(outline.hrefs, target_url)
        broken_links = await self.prober.probe_all(links.links, cancel_token=token)

        return AnalysisResult(
            title=outline.title,
            markup_version=outline.markup_version,
            heading_counts=outline.heading_counts,
            internal_link_count=links.internal_count,
            external_link_count=links.external_count,
            has_login_form=outline.has_login_form,
            broken_links=broken_links,
        )

    async def finalize(self, job_id: str, result: AnalysisResult) -> str:
        """
        Replace the job's stored result with ``result``.

        PersistenceError from the aggregate row propagates; a broken link that
        fails to insert is logged and skipped.
        """
        result_id = await self.store.replace_result(job_id, result)

        for position, link in enumerate(result.broken_links):
            try:
                await self.store.insert_broken_link(result_id, position, link)
            except LinkInsertError as e:
                logger.warning(f"[{job_id}] {e}")

        return result_id

    async def run_analysis(self, job_id: str, target_url: str, cancel_token: CancellationToken = None) -> None:
        logger.info(f"[{job_id}] Starting crawl: {target_url}")
        token = cancel_token or CancellationToken()

        try:
            result = await self.analyze(target_url, token)
            token.raise_if_cancelled()
            await self.finalize(job_id, result)
        except AnalysisCancelled as e:
            logger.info(f"[{job_id}] Crawl stopped before completion ({e})")
            return
        except AnalysisError as e:
            logger.error(f"[{job_id}] Crawl failed for {target_url}: {e}")
            await self.store.set_job_status(job_id, UrlStatus.failed)
            return

        await self.store.set_job_status(job_id, UrlStatus.completed)
        logger.info(
            f"[{job_id}] Crawl completed: internal={result.internal_link_count}, "
            f"external={result.external_link_count}, broken={result.inaccessible_link_count}"
        )
