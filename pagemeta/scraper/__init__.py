"""Scraper package — single-page fetch & metadata extraction."""

from pagemeta.scraper.fetcher import fetch_url, is_valid_url
from pagemeta.scraper.models import (
    Failed,
    ImageDetail,
    LinkDetail,
    Pending,
    RawPage,
    Ready,
)
from pagemeta.scraper.page import PageScraper

__all__ = [
    "PageScraper",
    "fetch_url",
    "is_valid_url",
    "RawPage",
    "LinkDetail",
    "ImageDetail",
    "Pending",
    "Ready",
    "Failed",
]
