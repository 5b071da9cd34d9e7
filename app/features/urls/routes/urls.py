from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.urls.models.target_url import UrlStatus
from app.features.urls.schemas.url import (
    CrawlResultResponse,
    UrlCreate,
    UrlListQuery,
    UrlResponse,
)
from app.features.urls.services.url_service import (
    create_url,
    delete_url,
    get_results,
    get_url,
    list_urls,
    start_crawl,
    stop_crawl,
)
from app.platform.db.session import get_db
from app.platform.response import api_response, paginated_data

router = APIRouter(prefix="/urls", tags=["URLs"])


@router.post(
    "",
    response_model=dict,
    status_code=status.HTTP_201_CREATED,
    summary="Register a URL for analysis",
)
async def create_url_route(request: UrlCreate, db: AsyncSession = Depends(get_db)):
    target = await create_url(db, request.url)
    return api_response(
        data=UrlResponse.model_validate(target),
        message="URL created successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.get(
    "",
    response_model=dict,
    summary="List URLs",
    description="Paginated list with search on URL or page title, status filter and sorting",
)
async def list_urls_route(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    status_filter: Optional[UrlStatus] = Query(None, alias="status"),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc"),
    db: AsyncSession = Depends(get_db),
):
    query = UrlListQuery(
        page=page,
        page_size=page_size,
        search=search,
        status=status_filter,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    targets, total = await list_urls(db, query)
    return api_response(
        data=paginated_data(
            [UrlResponse.model_validate(t) for t in targets],
            total=total,
            page=page,
            page_size=page_size,
        ),
        message="URLs retrieved successfully",
    )


@router.get("/{url_id}", response_model=dict, summary="Get one URL")
async def get_url_route(url_id: str, db: AsyncSession = Depends(get_db)):
    target = await get_url(db, url_id)
    return api_response(data=UrlResponse.model_validate(target), message="URL retrieved successfully")


@router.put("/{url_id}/start", response_model=dict, summary="Start analysis")
async def start_crawl_route(url_id: str, db: AsyncSession = Depends(get_db)):
    target = await start_crawl(db, url_id)
    return api_response(data=UrlResponse.model_validate(target), message="Crawl started")


@router.put("/{url_id}/stop", response_model=dict, summary="Stop analysis")
async def stop_crawl_route(url_id: str, db: AsyncSession = Depends(get_db)):
    target = await stop_crawl(db, url_id)
    return api_response(data=UrlResponse.model_validate(target), message="Crawl stopped")


@router.delete("/{url_id}", response_model=dict, summary="Delete a URL and its results")
async def delete_url_route(url_id: str, db: AsyncSession = Depends(get_db)):
    await delete_url(db, url_id)
    return api_response(data={"id": url_id}, message="URL deleted successfully")


@router.get("/{url_id}/results", response_model=dict, summary="Get analysis results")
async def get_results_route(url_id: str, db: AsyncSession = Depends(get_db)):
    crawl_result = await get_results(db, url_id)
    return api_response(
        data=CrawlResultResponse.model_validate(crawl_result),
        message="Results retrieved successfully",
    )
