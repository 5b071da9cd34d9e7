"""
URL job management.

A URL row doubles as its analysis job: ``start`` moves it to running and
hands it to a Celery worker, ``stop`` puts it back to queued. The worker
writes the result and the terminal status.
"""
import logging
from typing import List, Tuple

from fastapi import HTTPException, status
from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.crawl.workers.tasks import dispatch_analysis, revoke_analysis
from app.features.urls.models.crawl_result import CrawlResult
from app.features.urls.models.target_url import TargetUrl, UrlStatus
from app.features.urls.schemas.url import UrlListQuery
from app.platform.utils.url_validator import validate_url

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "created_at": TargetUrl.created_at,
    "updated_at": TargetUrl.updated_at,
    "url": TargetUrl.url,
    "status": TargetUrl.status,
    "title": CrawlResult.title,
    "internal_links": CrawlResult.internal_links,
    "external_links": CrawlResult.external_links,
}


async def create_url(db: AsyncSession, url: str) -> TargetUrl:
    is_valid, normalized_url, error = validate_url(url)
    if not is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    target = TargetUrl(url=normalized_url, status=UrlStatus.queued)
    db.add(target)
    await db.commit()
    await db.refresh(target)

    logger.info(f"Registered URL {target.id}: {normalized_url}")
    return target


async def list_urls(db: AsyncSession, query: UrlListQuery) -> Tuple[List[TargetUrl], int]:
    """Filtered, sorted page of URLs plus the total matching count."""
    stmt = select(TargetUrl).outerjoin(CrawlResult, CrawlResult.url_id == TargetUrl.id)

    if query.search:
        pattern = f"%{query.search}%"
        stmt = stmt.where(or_(TargetUrl.url.ilike(pattern), CrawlResult.title.ilike(pattern)))

    if query.status:
        stmt = stmt.where(TargetUrl.status == query.status)

    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))

    # Unknown sort keys fall back to created_at
    column = SORT_COLUMNS.get(query.sort_by, TargetUrl.created_at)
    ordering = column.asc() if query.sort_order.lower() == "asc" else column.desc()
    stmt = stmt.order_by(ordering, TargetUrl.id).offset((query.page - 1) * query.page_size).limit(query.page_size)

    result = await db.execute(stmt)
    return list(result.scalars().unique().all()), total or 0


async def get_url(db: AsyncSession, url_id: str) -> TargetUrl:
    target = await db.get(TargetUrl, url_id)
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="URL not found")
    return target


async def get_results(db: AsyncSession, url_id: str) -> CrawlResult:
    result = await db.execute(select(CrawlResult).where(CrawlResult.url_id == url_id))
    crawl_result = result.scalars().first()
    if not crawl_result:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Results not found")
    return crawl_result


async def start_crawl(db: AsyncSession, url_id: str) -> TargetUrl:
    target = await get_url(db, url_id)

    target.status = UrlStatus.running
    await db.commit()

    target.celery_task_id = dispatch_analysis(target.id, target.url)
    await db.commit()
    await db.refresh(target)

    logger.info(f"Started crawl for URL {url_id} (task {target.celery_task_id})")
    return target


async def stop_crawl(db: AsyncSession, url_id: str) -> TargetUrl:
    target = await get_url(db, url_id)

    target.status = UrlStatus.queued
    await db.commit()
    await db.refresh(target)

    revoke_analysis(target.celery_task_id)
    logger.info(f"Stop requested for URL {url_id}")
    return target


async def delete_url(db: AsyncSession, url_id: str) -> None:
    target = await get_url(db, url_id)
    await db.delete(target)
    await db.commit()
    logger.info(f"Deleted URL {url_id}")


def _require_ids(ids: List[str]) -> None:
    if not ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No IDs provided")


async def bulk_delete(db: AsyncSession, ids: List[str]) -> int:
    _require_ids(ids)
    result = await db.execute(delete(TargetUrl).where(TargetUrl.id.in_(ids)))
    await db.commit()
    logger.info(f"Bulk deleted {result.rowcount} URLs")
    return result.rowcount


async def bulk_rerun(db: AsyncSession, ids: List[str]) -> List[TargetUrl]:
    """Start a fresh analysis for every existing URL in ``ids``; unknown ids are ignored."""
    _require_ids(ids)
    result = await db.execute(select(TargetUrl).where(TargetUrl.id.in_(ids)))
    targets = list(result.scalars().all())

    for target in targets:
        target.status = UrlStatus.running
    await db.commit()

    for target in targets:
        target.celery_task_id = dispatch_analysis(target.id, target.url)
    await db.commit()

    for target in targets:
        await db.refresh(target)

    logger.info(f"Bulk rerun queued {len(targets)} URLs")
    return targets
