"""pagemeta CLI — fetch one page and print its metadata as JSON.

Usage:
    python cli/main.py --help

Commands:
    meta      → title, meta tags, Open Graph / Twitter card
    headings  → h1 … h6 texts
    links     → anchor hrefs (or full link details)
    images    → image sources (or full image details)
    filter    → generic selector-based extraction
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from pagemeta.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
import logging
from typing import Any, Dict, List, Optional

import typer
from soupsieve import SelectorSyntaxError

from pagemeta.config import settings
from pagemeta.scraper import PageScraper

app = typer.Typer(
    name="pagemeta",
    help="Fetch a web page and extract its metadata.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log fetches at DEBUG level."),
) -> None:
    """Configure logging for every sub-command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_or_exit(url: str) -> PageScraper:
    page = PageScraper.load(url)
    if not page.ready:
        typer.echo(f"❌ Could not load {url}")
        raise typer.Exit(code=1)
    return page


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _parse_attrs(pairs: List[str]) -> Dict[str, str]:
    """Turn ``["class=card", "data-id=7"]`` into a dict."""
    attributes: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            typer.echo(f"❌ Invalid --attr {pair!r}; expected NAME=VALUE")
            raise typer.Exit(code=2)
        attributes[key] = value
    return attributes


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command("meta")
def meta(url: str = typer.Argument(..., help="URL to fetch.")) -> None:
    """Print title, meta tags and social cards."""
    page = _load_or_exit(url)
    _echo_json(page.summary())


@app.command("headings")
def headings(
    url: str = typer.Argument(..., help="URL to fetch."),
    level: int = typer.Option(1, "--level", min=1, max=6, help="Heading level (1-6)."),
) -> None:
    """Print the trimmed text of every heading of one level."""
    page = _load_or_exit(url)
    _echo_json(getattr(page, f"h{level}")())


@app.command("links")
def links(
    url: str = typer.Argument(..., help="URL to fetch."),
    details: bool = typer.Option(False, "--details", help="Include text, rel and target."),
) -> None:
    """Print every anchor href."""
    page = _load_or_exit(url)
    if details:
        _echo_json([link.to_dict() for link in page.link_details()])
    else:
        _echo_json(page.links())


@app.command("images")
def images(
    url: str = typer.Argument(..., help="URL to fetch."),
    details: bool = typer.Option(False, "--details", help="Include alt text and title."),
) -> None:
    """Print every image source."""
    page = _load_or_exit(url)
    if details:
        _echo_json([img.to_dict() for img in page.image_details()])
    else:
        _echo_json(page.images())


@app.command("filter")
def filter_cmd(
    url: str = typer.Argument(..., help="URL to fetch."),
    element: str = typer.Argument(..., help="CSS selector for the elements to keep."),
    attr: Optional[List[str]] = typer.Option(None, "--attr", help="Exact attribute match NAME=VALUE (repeatable)."),
    multiple: bool = typer.Option(False, "--multiple", help="Return every match, not just the first."),
    extract: Optional[List[str]] = typer.Option(None, "--extract", help="Sub-selector to extract (repeatable): .class, #id or CSS."),
    text: bool = typer.Option(False, "--text", help="Return trimmed text instead of outer HTML."),
) -> None:
    """Select elements and print their HTML, text or extracted fields."""
    attributes = _parse_attrs(attr or [])
    page = _load_or_exit(url)
    try:
        result = page.filter(
            element,
            attributes,
            multiple=multiple,
            extract=extract or [],
            return_html=not text,
        )
    except SelectorSyntaxError as e:
        typer.echo(f"❌ Invalid selector: {e}")
        raise typer.Exit(code=2)
    _echo_json(result)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
