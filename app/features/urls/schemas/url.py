from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.features.urls.models.target_url import UrlStatus


class UrlCreate(BaseModel):
    url: str = Field(..., min_length=1, max_length=2048)


class BulkRequest(BaseModel):
    ids: List[str] = Field(default_factory=list)


class BrokenLinkResponse(BaseModel):
    url: str
    status_code: int
    error_message: Optional[str] = None

    class Config:
        from_attributes = True


class CrawlResultSummary(BaseModel):
    """Result fields shown next to a URL in listings."""
    title: Optional[str] = None
    html_version: Optional[str] = None
    internal_links: int = 0
    external_links: int = 0
    inaccessible_links: int = 0
    has_login_form: bool = False

    class Config:
        from_attributes = True


class CrawlResultResponse(CrawlResultSummary):
    id: str
    url_id: str
    heading_counts: Dict[int, int]
    broken_links: List[BrokenLinkResponse] = []
    created_at: datetime

    class Config:
        from_attributes = True


class UrlResponse(BaseModel):
    id: str
    url: str
    status: UrlStatus
    created_at: datetime
    updated_at: datetime
    result: Optional[CrawlResultSummary] = None

    class Config:
        from_attributes = True


class UrlListQuery(BaseModel):
    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, le=100)
    search: Optional[str] = None
    status: Optional[UrlStatus] = None
    sort_by: str = "created_at"
    sort_order: str = "desc"
