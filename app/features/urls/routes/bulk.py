from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.urls.schemas.url import BulkRequest, UrlResponse
from app.features.urls.services.url_service import bulk_delete, bulk_rerun
from app.platform.db.session import get_db
from app.platform.response import api_response

router = APIRouter(prefix="/bulk", tags=["Bulk"])


@router.post("/delete", response_model=dict, summary="Delete several URLs")
async def bulk_delete_route(request: BulkRequest, db: AsyncSession = Depends(get_db)):
    deleted = await bulk_delete(db, request.ids)
    return api_response(data={"deleted": deleted}, message="URLs deleted successfully")


@router.post("/rerun", response_model=dict, summary="Re-run analysis for several URLs")
async def bulk_rerun_route(request: BulkRequest, db: AsyncSession = Depends(get_db)):
    targets = await bulk_rerun(db, request.ids)
    return api_response(
        data={"started": [UrlResponse.model_validate(t) for t in targets]},
        message="Crawls started",
    )
