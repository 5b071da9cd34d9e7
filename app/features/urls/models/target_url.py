import enum

from sqlalchemy import Column, Enum, Index, String
from sqlalchemy.orm import relationship

from app.platform.db.base import BaseModel


class UrlStatus(enum.Enum):
    """Analysis job status. The crawler only ever moves a job to completed or failed."""
    queued = "queued"
    running = "running"
    completed = "completed"
    failed = "failed"


class TargetUrl(BaseModel):
    """
    A page registered for analysis. Each start/rerun is one analysis job
    against ``url``; the latest outcome lives in ``result``.
    """
    __tablename__ = "urls"

    url = Column(String(2048), nullable=False)
    status = Column(Enum(UrlStatus), default=UrlStatus.queued, nullable=False, index=True)

    # Set when a job is dispatched, used to revoke it on stop
    celery_task_id = Column(String(128), nullable=True)

    result = relationship(
        "CrawlResult",
        back_populates="target_url",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_urls_created_at", "created_at"),
    )
