"""Data models for the page scraper."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple, Union

from bs4 import BeautifulSoup


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int


@dataclass
class LinkDetail:
    """One ``<a>`` element, with its ``rel`` tokens broken out into flags."""

    url: str
    protocol: str
    text: str
    title: str
    target: str
    rel: Tuple[str, ...]
    is_nofollow: bool
    is_ugc: bool
    is_noopener: bool
    is_noreferrer: bool

    @classmethod
    def from_attrs(
        cls,
        href: str,
        text: str,
        title: str = "",
        target: str = "",
        rel: str = "",
    ) -> LinkDetail:
        """Build a :class:`LinkDetail` from raw attribute strings.

        ``protocol`` is everything before the first ``:`` in *href* (empty
        when there is no colon).  A blank *rel* yields an empty token tuple.
        """
        tokens = tuple(rel.split())
        return cls(
            url=href,
            protocol=href.split(":", 1)[0] if ":" in href else "",
            text=text,
            title=title,
            target=target,
            rel=tokens,
            is_nofollow="nofollow" in tokens,
            is_ugc="ugc" in tokens,
            is_noopener="noopener" in tokens,
            is_noreferrer="noreferrer" in tokens,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["rel"] = list(self.rel)
        return data


@dataclass
class ImageDetail:
    """One ``<img>`` element."""

    url: Optional[str] = None
    alt_text: Optional[str] = None
    title: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Document state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Pending:
    """Built but not yet initialised."""


@dataclass(frozen=True)
class Ready:
    """Fetched and parsed; *document* is queried but never mutated."""

    document: BeautifulSoup


@dataclass(frozen=True)
class Failed:
    """Initialisation gave up.

    *reason* is one of ``"invalid_url"``, ``"transport"`` or ``"parse"``.
    """

    reason: str


PageState = Union[Pending, Ready, Failed]
