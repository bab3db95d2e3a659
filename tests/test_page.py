"""Tests for the PageScraper accessors and the generic ``filter`` extractor.

Pages are built with ``PageScraper.from_raw`` so no HTTP is involved; the
fetch path is covered in ``test_scraper.py``.
"""

from __future__ import annotations

import pytest
from soupsieve import SelectorSyntaxError

from pagemeta.scraper import ImageDetail, PageScraper, RawPage


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_PAGE_HTML = """\
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Hello</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <meta http-equiv="Content-Type" content="text/html; charset=utf-8">
  <meta name="author" content="Ada Lovelace">
  <meta name="keywords" content="python,scraping, metadata">
  <meta name="csrf-token" content="tok-123">
  <link rel="canonical" href="https://example.com/canonical">
  <meta property="og:title" content="OG Hello">
  <meta property="og:type" content="article">
  <meta property="og:image" content="https://example.com/og.png">
  <meta name="twitter:card" content="summary">
  <meta name="twitter:title" content="TW Hello">
</head>
<body>
  <h1>Main heading</h1>
  <h2>A</h2>
  <h2> B </h2>
  <h2>C</h2>
  <p>First paragraph.</p>
  <p>   </p>
  <ul><li>x</li><li> y </li></ul>
  <ul><li>z</li></ul>
  <ol><li>one</li><li>two</li></ol>
  <img src="/a.png" alt="Alpha" title="First">
  <img alt="No source">
  <img src="/b.png">
  <a href="https://ex.com" rel="nofollow noopener">Link</a>
  <a href="mailto:hi@example.com" title="Mail" target="_blank">Mail us</a>
  <a href="/relative">Relative</a>
  <a href="">Empty</a>
  <a>No href</a>
  <div class="card" data-id="1"><h3 class="name">Widget</h3><span class="price"> $5 </span></div>
  <div class="card" data-id="2"><h3 class="name">Gadget</h3><span class="price">$7</span><span id="sku">G-2</span></div>
  <div class="card featured" data-id="3"><h3 class="name">Gizmo</h3></div>
</body>
</html>
"""

_URL = "https://example.com/page"


def _page(html: str = _PAGE_HTML) -> PageScraper:
    return PageScraper.from_raw(RawPage(url=_URL, html=html, status_code=200))


@pytest.fixture()
def page() -> PageScraper:
    return _page()


@pytest.fixture()
def empty_page() -> PageScraper:
    return _page("<html><head></head><body></body></html>")


# ---------------------------------------------------------------------------
# Scalar metadata
# ---------------------------------------------------------------------------

class TestScalarAccessors:
    def test_title(self, page) -> None:
        assert page.title() == "Hello"

    def test_title_is_not_trimmed(self) -> None:
        assert _page("<title>  Hi </title>").title() == "  Hi "

    def test_empty_title_is_none(self) -> None:
        assert _page("<title></title>").title() is None

    def test_charset(self, page) -> None:
        assert page.charset() == "utf-8"

    def test_canonical(self, page) -> None:
        assert page.canonical() == "https://example.com/canonical"

    def test_content_type(self, page) -> None:
        assert page.content_type() == "text/html; charset=utf-8"

    def test_author(self, page) -> None:
        assert page.author() == "Ada Lovelace"

    def test_missing_description_is_none(self, page) -> None:
        assert page.description() is None

    def test_description(self) -> None:
        html = '<meta name="description" content="A page about things">'
        assert _page(html).description() == "A page about things"

    def test_empty_attribute_is_none(self) -> None:
        assert _page('<meta name="author" content="">').author() is None

    def test_image_is_open_graph_image(self, page) -> None:
        assert page.image() == "https://example.com/og.png"

    def test_viewport(self, page) -> None:
        assert page.viewport_string() == "width=device-width, initial-scale=1"
        assert page.viewport() == ["width=device-width", " initial-scale=1"]

    def test_keywords_split_without_trimming(self, page) -> None:
        assert page.keyword_string() == "python,scraping, metadata"
        assert page.keywords() == ["python", "scraping", " metadata"]

    def test_absent_split_values_are_none(self, empty_page) -> None:
        assert empty_page.viewport() is None
        assert empty_page.keywords() is None

    def test_all_scalars_none_on_empty_page(self, empty_page) -> None:
        for name in ("title", "charset", "canonical", "content_type", "author",
                     "description", "image", "csrf_token"):
            assert getattr(empty_page, name)() is None, name


class TestCsrfToken:
    def test_meta_tag(self, page) -> None:
        assert page.csrf_token() == "tok-123"

    def test_falls_back_to_input_value(self) -> None:
        html = '<form><input type="hidden" name="csrf-token" value="form-tok"></form>'
        assert _page(html).csrf_token() == "form-tok"

    def test_meta_wins_over_input(self) -> None:
        html = (
            '<meta name="csrf-token" content="meta-tok">'
            '<input name="csrf-token" value="form-tok">'
        )
        assert _page(html).csrf_token() == "meta-tok"

    def test_empty_meta_does_not_fall_back_to_input(self) -> None:
        html = '<meta name="csrf-token" content=""><input name="csrf-token" value="form-tok">'
        assert _page(html).csrf_token() is None

    def test_meta_value_attribute(self) -> None:
        assert _page('<meta name="csrf-token" value="v-tok">').csrf_token() == "v-tok"


# ---------------------------------------------------------------------------
# Social metadata
# ---------------------------------------------------------------------------

class TestSocialMetadata:
    def test_open_graph_single_property(self, page) -> None:
        assert page.open_graph("og:title") == "OG Hello"
        assert page.open_graph("og:locale") is None

    def test_open_graph_all_keys_present(self, page) -> None:
        assert page.open_graph() == {
            "og:site_name": None,
            "og:type": "article",
            "og:title": "OG Hello",
            "og:description": None,
            "og:url": None,
            "og:image": "https://example.com/og.png",
        }

    def test_twitter_card_single_property(self, page) -> None:
        assert page.twitter_card("twitter:card") == "summary"

    def test_twitter_card_all_keys_present(self, page) -> None:
        assert page.twitter_card() == {
            "twitter:card": "summary",
            "twitter:title": "TW Hello",
            "twitter:description": None,
            "twitter:url": None,
            "twitter:image": None,
        }

    def test_property_with_quotes_is_safe(self, page) -> None:
        assert page.open_graph('og:"title') is None


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------

class TestCollections:
    def test_headings_trimmed_in_order(self, page) -> None:
        assert page.h1() == ["Main heading"]
        assert page.h2() == ["A", "B", "C"]
        assert page.h3() == ["Widget", "Gadget", "Gizmo"]
        assert page.h4() == []

    def test_duplicates_kept(self) -> None:
        assert _page("<h5>x</h5><h5>x</h5>").h5() == ["x", "x"]
        assert _page("<h6>y</h6>").h6() == ["y"]

    def test_paragraphs_keep_empty_strings(self, page) -> None:
        assert page.p() == ["First paragraph.", ""]

    def test_unordered_lists_flattened(self, page) -> None:
        assert page.ul() == ["x", "y", "z"]

    def test_ordered_lists(self, page) -> None:
        assert page.ol() == ["one", "two"]

    def test_images_skip_missing_src(self, page) -> None:
        assert page.images() == ["/a.png", "/b.png"]

    def test_image_details(self, page) -> None:
        assert page.image_details() == [
            ImageDetail(url="/a.png", alt_text="Alpha", title="First"),
            ImageDetail(url=None, alt_text="No source", title=None),
            ImageDetail(url="/b.png", alt_text=None, title=None),
        ]

    def test_links_drop_empty_hrefs(self, page) -> None:
        assert page.links() == ["https://ex.com", "mailto:hi@example.com", "/relative"]

    def test_link_details(self, page) -> None:
        details = page.link_details()
        assert len(details) == 5

        first = details[0]
        assert first.url == "https://ex.com"
        assert first.protocol == "https"
        assert first.text == "Link"
        assert first.rel == ("nofollow", "noopener")
        assert first.is_nofollow is True
        assert first.is_noopener is True
        assert first.is_ugc is False

        mail = details[1]
        assert mail.protocol == "mailto"
        assert mail.title == "Mail"
        assert mail.target == "_blank"
        assert mail.rel == ()

        assert details[2].protocol == ""
        assert details[4].url == ""
        assert details[4].text == "No href"

    def test_empty_page_collections_are_empty(self, empty_page) -> None:
        assert empty_page.h1() == []
        assert empty_page.ul() == []
        assert empty_page.images() == []
        assert empty_page.links() == []
        assert empty_page.link_details() == []


# ---------------------------------------------------------------------------
# filter
# ---------------------------------------------------------------------------

class TestFilter:
    def test_text_of_exact_attribute_matches(self, page) -> None:
        # "card featured" is not an exact match for class="card"
        assert page.filter("div", {"class": "card"}, True, [], False) == [
            "Widget $5",
            "Gadget$7G-2",
        ]

    def test_extract_class_fields(self, page) -> None:
        assert page.filter("div", {"class": "card"}, True, [".price"]) == [
            {"class__price": "$5"},
            {"class__price": "$7"},
        ]

    def test_extract_mixed_fields_first_only(self, page) -> None:
        assert page.filter("div", {"class": "card"}, extract=[".price", "#sku", "h3"]) == {
            "class__price": "$5",
            "id__sku": None,
            "h3": "Widget",
        }

    def test_outer_html_by_default(self, page) -> None:
        html = page.filter("div", {"data-id": "2"})
        assert html == (
            '<div class="card" data-id="2"><h3 class="name">Gadget</h3>'
            '<span class="price">$7</span><span id="sku">G-2</span></div>'
        )

    def test_css_selector_element(self, page) -> None:
        names = page.filter("div.card h3", multiple=True, return_html=False)
        assert names == ["Widget", "Gadget", "Gizmo"]

    def test_all_pairs_must_match(self, page) -> None:
        assert page.filter("div", {"class": "card", "data-id": "9"}) is None

    def test_no_match(self, page) -> None:
        assert page.filter("section") is None
        assert page.filter("section", multiple=True) == []

    def test_non_mapping_attributes(self, page) -> None:
        assert page.filter("div", ["class"]) is None

    def test_non_string_values_never_match(self, page) -> None:
        assert page.filter("div", {"data-id": 1}, multiple=True) == []

    def test_string_extract_is_one_selector(self, page) -> None:
        assert page.filter("div", {"class": "card"}, True, ".price") == [
            {"class__price": "$5"},
            {"class__price": "$7"},
        ]

    def test_invalid_selector_raises(self, page) -> None:
        with pytest.raises(SelectorSyntaxError):
            page.filter("div[")


# ---------------------------------------------------------------------------
# Summary / state handling / idempotence
# ---------------------------------------------------------------------------

class TestSummary:
    def test_summary_collects_metadata(self, page) -> None:
        summary = page.summary()
        assert summary["url"] == _URL
        assert summary["title"] == "Hello"
        assert summary["keywords"] == ["python", "scraping", " metadata"]
        assert summary["open_graph"]["og:title"] == "OG Hello"
        assert summary["twitter_card"]["twitter:card"] == "summary"
        assert summary["description"] is None


_ACCESSORS = [
    "title", "charset", "viewport", "viewport_string", "canonical",
    "content_type", "csrf_token", "author", "description", "image",
    "keywords", "keyword_string", "open_graph", "twitter_card",
    "h1", "h2", "h3", "h4", "h5", "h6", "p", "ul", "ol",
    "images", "image_details", "links", "link_details", "summary",
]


class TestFailedPage:
    @pytest.mark.parametrize("name", _ACCESSORS)
    def test_accessors_return_none(self, name) -> None:
        page = PageScraper("not a url").init()
        assert getattr(page, name)() is None

    def test_filter_returns_none(self) -> None:
        page = PageScraper("not a url").init()
        assert page.filter("div", multiple=True) is None
        assert page.open_graph("og:title") is None


class TestIdempotence:
    @pytest.mark.parametrize("name", _ACCESSORS)
    def test_repeated_calls_agree(self, page, name) -> None:
        assert getattr(page, name)() == getattr(page, name)()

    def test_filter_does_not_mutate(self, page) -> None:
        first = page.filter("div", {"class": "card"}, True, [".price"])
        assert page.filter("div", {"class": "card"}, True, [".price"]) == first
        assert page.h3() == ["Widget", "Gadget", "Gizmo"]
