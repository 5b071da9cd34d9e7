"""
Crawl workers package.
"""
