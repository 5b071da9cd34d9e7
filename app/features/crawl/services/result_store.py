import logging
from typing import Protocol

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.crawl.schemas.analysis import AnalysisResult, BrokenLink
from app.features.urls.models.crawl_result import BrokenLink as BrokenLinkRow
from app.features.urls.models.crawl_result import CrawlResult
from app.features.urls.models.target_url import TargetUrl, UrlStatus
from app.platform.exceptions import LinkInsertError, PersistenceError

logger = logging.getLogger(__name__)


class ResultStore(Protocol):
    """Everything the crawler needs from persistence."""

    async def replace_result(self, job_id: str, result: AnalysisResult) -> str:
        """Delete the job's previous result, insert ``result``, return the new result id."""

    async def insert_broken_link(self, result_id: str, position: int, link: BrokenLink) -> None:
        """Store one broken link. Raises LinkInsertError on failure."""

    async def set_job_status(self, job_id: str, status: UrlStatus) -> None:
        """Move the job to a terminal status."""


class SqlAlchemyResultStore:
    """ResultStore backed by the ``crawl_results``/``broken_links``/``urls`` tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def replace_result(self, job_id: str, result: AnalysisResult) -> str:
        counts = result.heading_counts
        row = CrawlResult(
            url_id=job_id,
            title=result.title,
            html_version=result.markup_version,
            h1_count=counts[1],
            h2_count=counts[2],
            h3_count=counts[3],
            h4_count=counts[4],
            h5_count=counts[5],
            h6_count=counts[6],
            internal_links=result.internal_link_count,
            external_links=result.external_link_count,
            inaccessible_links=result.inaccessible_link_count,
            has_login_form=result.has_login_form,
        )
        try:
            await self.db.execute(delete(CrawlResult).where(CrawlResult.url_id == job_id))
            self.db.add(row)
            await self.db.flush()
            result_id = row.id
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Failed to replace result for job {job_id}: {e}") from e

        return result_id

    async def insert_broken_link(self, result_id: str, position: int, link: BrokenLink) -> None:
        self.db.add(
            BrokenLinkRow(
                result_id=result_id,
                position=position,
                url=link.url,
                status_code=link.status_code,
                error_message=link.reason,
            )
        )
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise LinkInsertError(f"Failed to insert broken link {link.url}: {e}") from e

    async def set_job_status(self, job_id: str, status: UrlStatus) -> None:
        try:
            await self.db.execute(
                update(TargetUrl).where(TargetUrl.id == job_id).values(status=status)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"[{job_id}] Failed to update URL status to {status.value}: {e}")
