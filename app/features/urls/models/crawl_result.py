from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.platform.db.base import BaseModel


class CrawlResult(BaseModel):
    """
    Aggregate analysis of one page. At most one row per URL: a new run
    deletes the previous row before inserting its own.
    """
    __tablename__ = "crawl_results"

    url_id = Column(String, ForeignKey("urls.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)

    title = Column(Text, nullable=True)
    html_version = Column(String(20), nullable=True)

    h1_count = Column(Integer, default=0, nullable=False)
    h2_count = Column(Integer, default=0, nullable=False)
    h3_count = Column(Integer, default=0, nullable=False)
    h4_count = Column(Integer, default=0, nullable=False)
    h5_count = Column(Integer, default=0, nullable=False)
    h6_count = Column(Integer, default=0, nullable=False)

    internal_links = Column(Integer, default=0, nullable=False)
    external_links = Column(Integer, default=0, nullable=False)
    inaccessible_links = Column(Integer, default=0, nullable=False)

    has_login_form = Column(Boolean, default=False, nullable=False)

    target_url = relationship("TargetUrl", back_populates="result")
    broken_links = relationship(
        "BrokenLink",
        back_populates="result",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="BrokenLink.position",
        lazy="selectin",
    )

    @property
    def heading_counts(self) -> dict:
        return {level: getattr(self, f"h{level}_count") or 0 for level in range(1, 7)}


class BrokenLink(BaseModel):
    """A link on the analyzed page that failed its accessibility check."""
    __tablename__ = "broken_links"

    result_id = Column(String, ForeignKey("crawl_results.id", ondelete="CASCADE"), nullable=False, index=True)

    # Discovery order on the page
    position = Column(Integer, nullable=False, default=0)

    url = Column(String(2048), nullable=False)
    status_code = Column(Integer, nullable=False, default=0)
    error_message = Column(Text, nullable=True)

    result = relationship("CrawlResult", back_populates="broken_links")
