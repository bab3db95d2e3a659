"""Page endpoints — one fetch per request.

Routes
------
GET  /pages/metadata?url=...             → PageScraper.summary
GET  /pages/headings?url=...&level=N     → PageScraper.h1 … h6
GET  /pages/links?url=...&details=bool   → links / link_details
GET  /pages/images?url=...&details=bool  → images / image_details
POST /pages/filter                       → PageScraper.filter
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field, HttpUrl
from soupsieve import SelectorSyntaxError

from pagemeta.scraper import PageScraper

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class FilterRequest(BaseModel):
    url: HttpUrl
    element: str = Field(..., min_length=1)
    attributes: dict[str, str] = Field(default_factory=dict)
    multiple: bool = False
    extract: list[str] = Field(default_factory=list)
    return_html: bool = True


class PageMetadata(BaseModel):
    url: str
    title: Optional[str] = None
    charset: Optional[str] = None
    canonical: Optional[str] = None
    content_type: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    viewport: Optional[list[str]] = None
    keywords: Optional[list[str]] = None
    csrf_token: Optional[str] = None
    open_graph: dict[str, Optional[str]]
    twitter_card: dict[str, Optional[str]]


class FilterResponse(BaseModel):
    url: str
    result: Any


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_page(url: HttpUrl) -> PageScraper:
    """Fetch *url*, turning an unusable page into a 502."""
    url_str = str(url)
    page = PageScraper.load(url_str)
    if not page.ready:
        raise HTTPException(status_code=502, detail=f"Could not load page: {url_str}")
    return page


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/metadata", response_model=PageMetadata)
def page_metadata(url: HttpUrl = Query(...)) -> dict[str, Any]:
    """Title, meta tags and social cards of the page at *url*."""
    return _load_page(url).summary()


@router.get("/headings", response_model=list[str])
def page_headings(
    url: HttpUrl = Query(...),
    level: int = Query(1, ge=1, le=6),
) -> list[str]:
    page = _load_page(url)
    return getattr(page, f"h{level}")()


@router.get("/links")
def page_links(url: HttpUrl = Query(...), details: bool = False) -> list[Any]:
    page = _load_page(url)
    if details:
        return [link.to_dict() for link in page.link_details()]
    return page.links()


@router.get("/images")
def page_images(url: HttpUrl = Query(...), details: bool = False) -> list[Any]:
    page = _load_page(url)
    if details:
        return [img.to_dict() for img in page.image_details()]
    return page.images()


@router.post("/filter", response_model=FilterResponse)
def page_filter(body: FilterRequest) -> dict[str, Any]:
    """Run a selector-based extraction against the page at ``body.url``.

    ``result`` is a single value (or ``null``) unless ``multiple`` is set.
    """
    page = _load_page(body.url)
    try:
        result = page.filter(
            body.element,
            body.attributes,
            multiple=body.multiple,
            extract=body.extract,
            return_html=body.return_html,
        )
    except SelectorSyntaxError as exc:
        raise HTTPException(
            status_code=422, detail=f"Invalid selector: {exc}"
        ) from exc
    return {"url": page.url, "result": result}
