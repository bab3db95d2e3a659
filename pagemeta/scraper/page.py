"""PageScraper: fetch one page and answer metadata queries against it.

Lifecycle
---------
A scraper is built with a URL and starts out :class:`Pending`.  ``init()``
moves it exactly once to either :class:`Ready` (document parsed) or
:class:`Failed`.  ``init()`` never raises; fetch and parse errors are logged
and folded into ``Failed``.

Every accessor may be called in any state.  Outside ``Ready`` they return
``None``; inside ``Ready`` they return ``None`` (or an empty list) for absent
content.  Accessors only read the document.

Usage::

    page = PageScraper.load("https://example.com")
    page.title()
    page.open_graph("og:title")
    page.filter("div", {"class": "card"}, multiple=True, extract=[".price"])
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx
from bs4 import BeautifulSoup, Tag

from pagemeta.scraper.fetcher import fetch_url, is_valid_url
from pagemeta.scraper.models import (
    Failed,
    ImageDetail,
    LinkDetail,
    PageState,
    Pending,
    RawPage,
    Ready,
)
from pagemeta.scraper.selectors import SubSelector, parse_selector

logger = logging.getLogger(__name__)

OPEN_GRAPH_PROPERTIES = (
    "og:site_name",
    "og:type",
    "og:title",
    "og:description",
    "og:url",
    "og:image",
)

TWITTER_CARD_PROPERTIES = (
    "twitter:card",
    "twitter:title",
    "twitter:description",
    "twitter:url",
    "twitter:image",
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _parse(raw: RawPage) -> PageState:
    """Parse *raw* into a :class:`Ready` state, or :class:`Failed` on error.

    Multi-valued attributes are disabled so ``class`` and ``rel`` read back as
    the literal strings found in the markup.
    """
    try:
        document = BeautifulSoup(raw.html, "html.parser", multi_valued_attributes=None)
    except Exception as exc:
        logger.warning("Could not parse %s: %s", raw.url, exc)
        return Failed("parse")
    return Ready(document)


def _attr(tag: Optional[Tag], name: str) -> Optional[str]:
    """Return attribute *name* of *tag*, with missing and empty both as ``None``."""
    if tag is None:
        return None
    return tag.get(name) or None


def _split_commas(value: Optional[str]) -> Optional[List[str]]:
    return value.split(",") if value else None


def _matches_attributes(tag: Tag, attributes: Mapping) -> bool:
    """Exact string match on every pair; non-string values never match."""
    return all(
        isinstance(value, str) and tag.get(key) == value
        for key, value in attributes.items()
    )


def _extract_fields(tag: Tag, selectors: Sequence[SubSelector]) -> Dict[str, Optional[str]]:
    fields: Dict[str, Optional[str]] = {}
    for sub in selectors:
        found = tag.select_one(sub.css)
        text = found.get_text().strip() if found is not None else ""
        fields[sub.key] = text or None
    return fields


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class PageScraper:
    """Metadata accessors over a single fetched page."""

    def __init__(self, url: str) -> None:
        self._url = url
        self._state: PageState = Pending()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, url: str) -> PageScraper:
        """Build a scraper for *url* and initialise it."""
        return cls(url).init()

    @classmethod
    def from_raw(cls, raw: RawPage) -> PageScraper:
        """Build a scraper over an already fetched page (no network access)."""
        scraper = cls(raw.url)
        scraper._state = _parse(raw)
        return scraper

    def init(self) -> PageScraper:
        """Validate the URL, fetch it and parse the body.

        Only the first call has any effect.  Returns ``self``.
        """
        if isinstance(self._state, Pending):
            self._state = self._initialise()
        return self

    def _initialise(self) -> PageState:
        if not is_valid_url(self._url):
            logger.warning("Not fetching invalid URL %r", self._url)
            return Failed("invalid_url")

        try:
            raw = fetch_url(self._url)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            # ValueError covers IDNA failures raised while building the request
            logger.warning("Fetch failed for %s: %s", self._url, exc)
            return Failed("transport")

        return _parse(raw)

    @property
    def url(self) -> str:
        return self._url

    @property
    def state(self) -> PageState:
        return self._state

    @property
    def ready(self) -> bool:
        return isinstance(self._state, Ready)

    def _document(self) -> Optional[BeautifulSoup]:
        state = self._state
        return state.document if isinstance(state, Ready) else None

    def _select_attr(self, selector: str, name: str) -> Optional[str]:
        document = self._document()
        if document is None:
            return None
        return _attr(document.select_one(selector), name)

    # ------------------------------------------------------------------
    # Scalar metadata
    # ------------------------------------------------------------------

    def title(self) -> Optional[str]:
        document = self._document()
        if document is None:
            return None
        tag = document.find("title")
        return (tag.get_text() if tag is not None else "") or None

    def charset(self) -> Optional[str]:
        return self._select_attr("meta[charset]", "charset")

    def viewport_string(self) -> Optional[str]:
        return self._select_attr('meta[name="viewport"]', "content")

    def viewport(self) -> Optional[List[str]]:
        return _split_commas(self.viewport_string())

    def canonical(self) -> Optional[str]:
        return self._select_attr('link[rel="canonical"]', "href")

    def content_type(self) -> Optional[str]:
        return self._select_attr('meta[http-equiv="Content-Type"]', "content")

    def author(self) -> Optional[str]:
        return self._select_attr('meta[name="author"]', "content")

    def description(self) -> Optional[str]:
        return self._select_attr('meta[name="description"]', "content")

    def image(self) -> Optional[str]:
        """The Open Graph image URL."""
        return self._select_attr('meta[property="og:image"]', "content")

    def keyword_string(self) -> Optional[str]:
        return self._select_attr('meta[name="keywords"]', "content")

    def keywords(self) -> Optional[List[str]]:
        return _split_commas(self.keyword_string())

    def csrf_token(self) -> Optional[str]:
        """Token from ``<meta name="csrf-token">``, else from the matching ``<input>``.

        Lookups run in order and the first one that finds an element wins;
        its ``content`` attribute is read first, then ``value``.
        """
        document = self._document()
        if document is None:
            return None

        strategies: List[Callable[[BeautifulSoup], Optional[Tag]]] = [
            lambda doc: doc.find("meta", attrs={"name": "csrf-token"}),
            lambda doc: doc.find("input", attrs={"name": "csrf-token"}),
        ]
        for strategy in strategies:
            tag = strategy(document)
            if tag is not None:
                return self._token_from(tag)
        return None

    @staticmethod
    def _token_from(tag: Optional[Tag]) -> Optional[str]:
        return _attr(tag, "content") or _attr(tag, "value")

    # ------------------------------------------------------------------
    # Social metadata
    # ------------------------------------------------------------------

    def _meta_content(self, attr: str, value: str) -> Optional[str]:
        document = self._document()
        if document is None:
            return None
        return _attr(document.find("meta", attrs={attr: value}), "content")

    def open_graph(self, prop: Optional[str] = None) -> Any:
        """One Open Graph property, or all known ones as a dict.

        Without *prop* every key in :data:`OPEN_GRAPH_PROPERTIES` is present,
        mapped to ``None`` when the page lacks it.
        """
        if self._document() is None:
            return None
        if prop:
            return self._meta_content("property", prop)
        return {p: self._meta_content("property", p) for p in OPEN_GRAPH_PROPERTIES}

    def twitter_card(self, prop: Optional[str] = None) -> Any:
        """Same as :meth:`open_graph` for ``<meta name="twitter:...">`` tags."""
        if self._document() is None:
            return None
        if prop:
            return self._meta_content("name", prop)
        return {p: self._meta_content("name", p) for p in TWITTER_CARD_PROPERTIES}

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def _tag_texts(self, name: str) -> Optional[List[str]]:
        document = self._document()
        if document is None:
            return None
        return [tag.get_text().strip() for tag in document.find_all(name)]

    def h1(self) -> Optional[List[str]]:
        return self._tag_texts("h1")

    def h2(self) -> Optional[List[str]]:
        return self._tag_texts("h2")

    def h3(self) -> Optional[List[str]]:
        return self._tag_texts("h3")

    def h4(self) -> Optional[List[str]]:
        return self._tag_texts("h4")

    def h5(self) -> Optional[List[str]]:
        return self._tag_texts("h5")

    def h6(self) -> Optional[List[str]]:
        return self._tag_texts("h6")

    def p(self) -> Optional[List[str]]:
        return self._tag_texts("p")

    def _list_items(self, name: str) -> Optional[List[str]]:
        document = self._document()
        if document is None:
            return None
        items: List[str] = []
        for lst in document.find_all(name):
            items.extend(li.get_text().strip() for li in lst.find_all("li"))
        return items

    def ul(self) -> Optional[List[str]]:
        return self._list_items("ul")

    def ol(self) -> Optional[List[str]]:
        return self._list_items("ol")

    def images(self) -> Optional[List[str]]:
        """``src`` of every image; images without one are skipped."""
        document = self._document()
        if document is None:
            return None
        return [img["src"] for img in document.find_all("img") if img.get("src") is not None]

    def image_details(self) -> Optional[List[ImageDetail]]:
        document = self._document()
        if document is None:
            return None
        return [
            ImageDetail(url=img.get("src"), alt_text=img.get("alt"), title=img.get("title"))
            for img in document.find_all("img")
        ]

    def links(self) -> Optional[List[str]]:
        document = self._document()
        if document is None:
            return None
        return [a["href"] for a in document.find_all("a") if a.get("href")]

    def link_details(self) -> Optional[List[LinkDetail]]:
        document = self._document()
        if document is None:
            return None
        return [
            LinkDetail.from_attrs(
                href=a.get("href") or "",
                text=a.get_text().strip(),
                title=a.get("title") or "",
                target=a.get("target") or "",
                rel=a.get("rel") or "",
            )
            for a in document.find_all("a")
        ]

    # ------------------------------------------------------------------
    # Generic extraction
    # ------------------------------------------------------------------

    def filter(
        self,
        element: str,
        attributes: Optional[Mapping] = None,
        multiple: bool = False,
        extract: Optional[Sequence[str]] = None,
        return_html: bool = True,
    ) -> Any:
        """Select *element*, keep exact *attributes* matches, and render them.

        Each kept element becomes:

        * a field map when *extract* is non-empty (see
          :mod:`pagemeta.scraper.selectors` for the key format);
        * otherwise its outer HTML, or its trimmed text when *return_html*
          is false.

        Returns the first rendering (or ``None``) unless *multiple* is set,
        in which case a list of all of them is returned.

        Raises:
            soupsieve.SelectorSyntaxError: If *element* or an *extract* entry
                is not a valid CSS selector.
        """
        document = self._document()
        if document is None:
            return None
        if attributes is None:
            attributes = {}
        elif not isinstance(attributes, Mapping):
            return None

        if isinstance(extract, str):
            extract = [extract]
        selectors = [parse_selector(raw) for raw in extract or ()]
        matches = [tag for tag in document.select(element) if _matches_attributes(tag, attributes)]

        def render(tag: Tag) -> Any:
            if selectors:
                return _extract_fields(tag, selectors)
            return str(tag) if return_html else tag.get_text().strip()

        if multiple:
            return [render(tag) for tag in matches]
        return render(matches[0]) if matches else None

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def summary(self) -> Optional[Dict[str, Any]]:
        """All scalar metadata plus social cards, as one JSON-ready dict."""
        if self._document() is None:
            return None
        return {
            "url": self._url,
            "title": self.title(),
            "charset": self.charset(),
            "canonical": self.canonical(),
            "content_type": self.content_type(),
            "author": self.author(),
            "description": self.description(),
            "image": self.image(),
            "viewport": self.viewport(),
            "keywords": self.keywords(),
            "csrf_token": self.csrf_token(),
            "open_graph": self.open_graph(),
            "twitter_card": self.twitter_card(),
        }
