"""
URL models package.
"""
from app.features.urls.models.target_url import TargetUrl, UrlStatus
from app.features.urls.models.crawl_result import CrawlResult, BrokenLink

__all__ = ["TargetUrl", "UrlStatus", "CrawlResult", "BrokenLink"]
