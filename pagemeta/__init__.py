"""pagemeta — fetch a single web page and read its metadata."""

from pagemeta.scraper import PageScraper

__all__ = ["PageScraper"]
