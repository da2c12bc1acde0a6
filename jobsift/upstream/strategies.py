"""First-match-wins extraction strategies over parsed markup.

Every strategy exposes one capability, ``attempt(root)``, returning a match or
None. Chains are plain tuples of strategies tried in order by ``first_match``.
"""

import logging
from collections.abc import Iterable
from typing import Protocol, TypeVar

from bs4 import Tag

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Extractor(Protocol[T_co]):
    """A single extraction attempt against a markup subtree."""

    def attempt(self, root: Tag) -> T_co | None: ...


def clean_text(text: str | None) -> str:
    return " ".join(text.split()) if text else ""


def first_match(strategies: Iterable[Extractor[T]], root: Tag) -> T | None:
    """Return the result of the first strategy that yields a match."""
    for strategy in strategies:
        try:
            result = strategy.attempt(root)
        except Exception:
            logger.debug("Strategy %r raised, trying next", strategy, exc_info=True)
            continue
        if result:
            return result
    return None


class CardSelector:
    """All elements matching one CSS selector, or None if there are none."""

    def __init__(self, selector: str) -> None:
        self.selector = selector

    def __repr__(self) -> str:
        return f"CardSelector({self.selector!r})"

    def attempt(self, root: Tag) -> list[Tag] | None:
        cards = root.select(self.selector)
        return list(cards) or None


class AnchorAncestorCards:
    """Nearest block-level ancestor of every anchor pointing at a job page."""

    def __init__(self, href_fragment: str, ancestor_tags: tuple[str, ...]) -> None:
        self.href_fragment = href_fragment
        self.ancestor_tags = ancestor_tags

    def __repr__(self) -> str:
        return f"AnchorAncestorCards({self.href_fragment!r})"

    def attempt(self, root: Tag) -> list[Tag] | None:
        cards: list[Tag] = []
        seen: set[int] = set()
        for anchor in root.find_all("a", href=True):
            if self.href_fragment not in str(anchor.get("href", "")):
                continue
            card = anchor.find_parent(list(self.ancestor_tags)) or anchor
            if id(card) not in seen:
                seen.add(id(card))
                cards.append(card)
        return cards or None


class TextSelector:
    """Whitespace-collapsed text of the first element matching a selector."""

    def __init__(self, selector: str) -> None:
        self.selector = selector

    def __repr__(self) -> str:
        return f"TextSelector({self.selector!r})"

    def attempt(self, root: Tag) -> str | None:
        el = root.select_one(self.selector)
        if el is None:
            return None
        return clean_text(el.get_text(" ", strip=True)) or None


class AttrSelector:
    """First non-empty attribute (tried in order) of the first matching element."""

    def __init__(self, selector: str, attrs: tuple[str, ...]) -> None:
        self.selector = selector
        self.attrs = attrs

    def __repr__(self) -> str:
        return f"AttrSelector({self.selector!r}, {self.attrs!r})"

    def attempt(self, root: Tag) -> str | None:
        el = root.select_one(self.selector)
        if el is None:
            return None
        for attr in self.attrs:
            value = el.get(attr)
            if isinstance(value, list):
                value = " ".join(value)
            if value and value.strip():
                return value.strip()
        return None


def text_chain(selectors: Iterable[str]) -> tuple[TextSelector, ...]:
    return tuple(TextSelector(s) for s in selectors)


def attr_chain(selectors: Iterable[str], attrs: tuple[str, ...]) -> tuple[AttrSelector, ...]:
    return tuple(AttrSelector(s, attrs) for s in selectors)
