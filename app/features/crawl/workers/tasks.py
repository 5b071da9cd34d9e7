import asyncio
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.features.crawl.services.cancellation import CancellationToken
from app.features.crawl.services.crawler import PageCrawler
from app.features.crawl.services.result_store import SqlAlchemyResultStore
from app.features.urls.models.target_url import TargetUrl, UrlStatus
from app.platform.async_db_helper import worker_session_factory
from app.platform.celery_app import celery_app
from app.platform.config import settings
from app.platform.logger import get_logger

logger = get_logger(__name__)


async def watch_for_stop(job_id: str, sessions, token: CancellationToken, interval: float = None):
    """
    Cancel ``token`` once the job is no longer ``running``.

    A stop request only rewrites the stored status; this is what turns it
    into an interruption of the analysis in flight.
    """
    interval = interval if interval is not None else settings.CANCEL_POLL_INTERVAL_SECONDS

    while not token.cancelled:
        await asyncio.sleep(interval)
        try:
            async with sessions() as db:
                status = await db.scalar(select(TargetUrl.status).where(TargetUrl.id == job_id))
        except SQLAlchemyError as e:
            logger.warning(f"[{job_id}] Could not poll job status: {e}")
            continue

        if status != UrlStatus.running:
            logger.info(f"[{job_id}] Job left running state ({status}), cancelling crawl")
            token.cancel(f"job status changed to {status.value if status else 'deleted'}")


async def run_analysis_job(job_id: str, target_url: str, database_url: str = None) -> None:
    """Run one analysis with its own session and a stop watcher alongside."""
    async with worker_session_factory(database_url) as sessions:
        token = CancellationToken()
        watcher = asyncio.create_task(watch_for_stop(job_id, sessions, token))
        try:
            async with sessions() as db:
                crawler = PageCrawler(store=SqlAlchemyResultStore(db))
                await crawler.run_analysis(job_id, target_url, cancel_token=token)
        finally:
            watcher.cancel()
            try:
                await watcher
            except asyncio.CancelledError:
                pass


@celery_app.task(
    bind=True,
    name="app.features.crawl.workers.tasks.analyze_url",
    max_retries=0,
)
def analyze_url(self, job_id: str, target_url: str) -> None:
    """
    Celery entry point: analyze ``target_url`` for job ``job_id``.

    All outcomes are reported through the job status and the stored result.
    """
    logger.info(f"[{job_id}] Worker {self.request.hostname} picked up {target_url}")
    asyncio.run(run_analysis_job(job_id, target_url))


def dispatch_analysis(job_id: str, target_url: str) -> Optional[str]:
    """Fire-and-forget: queue an analysis and return the Celery task id."""
    async_result = analyze_url.delay(job_id, target_url)
    logger.info(f"[{job_id}] Queued analysis task {async_result.id}")
    return async_result.id


def revoke_analysis(task_id: Optional[str]) -> None:
    """Drop a queued task that has not started yet. Running ones are stopped by the watcher."""
    if not task_id:
        return
    try:
        celery_app.control.revoke(task_id)
        logger.info(f"Revoked Celery task {task_id}")
    except Exception as e:
        logger.error(f"Error revoking Celery task {task_id}: {e}")
