"""Sub-selectors accepted by ``PageScraper.filter(extract=...)``.

Each entry of ``extract`` is parsed once into one of three variants, which
decide both the key used in the output field map and the CSS selector run
against the matched element:

    ".price"   -> ClassSelector("price")   key "class__price"   css ".price"
    "#sku"     -> IdSelector("sku")        key "id__sku"        css "#sku"
    "span b"   -> RawSelector("span b")    key "span b"         css "span b"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ClassSelector:
    name: str

    @property
    def key(self) -> str:
        return f"class__{self.name}"

    @property
    def css(self) -> str:
        return f".{self.name}"


@dataclass(frozen=True)
class IdSelector:
    name: str

    @property
    def key(self) -> str:
        return f"id__{self.name}"

    @property
    def css(self) -> str:
        return f"#{self.name}"


@dataclass(frozen=True)
class RawSelector:
    selector: str

    @property
    def key(self) -> str:
        return self.selector

    @property
    def css(self) -> str:
        return self.selector


SubSelector = Union[ClassSelector, IdSelector, RawSelector]


def parse_selector(raw: str) -> SubSelector:
    """Classify *raw* by its leading character."""
    if raw.startswith("."):
        return ClassSelector(raw[1:])
    if raw.startswith("#"):
        return IdSelector(raw[1:])
    return RawSelector(raw)
