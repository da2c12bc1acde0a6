"""HTML search-results parser: converts job cards into raw job records.

Two-level fallback:
  - Card boundary: the first CARD_SELECTORS entry with any match wins
    (never unioned). If none match, anchors pointing at a job page are
    mapped to their nearest block-level ancestor.
  - Fields: per-field selector chains, first non-empty match wins. A missing
    field yields "" (never crashes). A missing title falls back to the text
    of the card's first link.
"""

import logging
from typing import Any
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from jobsift.upstream.selectors import (
    BASE_ORIGIN,
    CARD_ANCESTOR_TAGS,
    CARD_COMPANY_LINK_SELECTORS,
    CARD_SELECTORS,
    COMPANY_SELECTORS,
    DATE_SELECTORS,
    JOB_LINK_FRAGMENT,
    JOB_LINK_SELECTORS,
    LOCATION_SELECTORS,
    LOGO_ATTRS,
    LOGO_SELECTORS,
    SALARY_SELECTORS,
    TITLE_SELECTORS,
)
from jobsift.upstream.strategies import (
    AnchorAncestorCards,
    AttrSelector,
    CardSelector,
    Extractor,
    TextSelector,
    attr_chain,
    first_match,
    text_chain,
)

logger = logging.getLogger(__name__)


def absolute_url(href: str, base: str = BASE_ORIGIN) -> str:
    """Rewrite a relative link target against the upstream origin."""
    href = href.strip()
    if not href:
        return ""
    return urljoin(f"{base}/", href)


class HtmlCardExtractor:
    """Extracts raw job records from search-results markup."""

    def __init__(self, base_url: str = BASE_ORIGIN) -> None:
        self._base_url = base_url.rstrip("/")
        self.card_strategies: tuple[Extractor[list[Tag]], ...] = (
            *(CardSelector(s) for s in CARD_SELECTORS),
            AnchorAncestorCards(JOB_LINK_FRAGMENT, CARD_ANCESTOR_TAGS),
        )
        self.title_strategies: tuple[Extractor[str], ...] = (
            *text_chain(TITLE_SELECTORS),
            TextSelector("a"),
        )
        self.company_strategies = text_chain(COMPANY_SELECTORS)
        self.location_strategies = text_chain(LOCATION_SELECTORS)
        self.date_strategies: tuple[Extractor[str], ...] = (
            *attr_chain(DATE_SELECTORS, ("datetime",)),
            *text_chain(DATE_SELECTORS),
        )
        self.salary_strategies = text_chain(SALARY_SELECTORS)
        self.job_link_strategies = attr_chain(JOB_LINK_SELECTORS, ("href",))
        self.company_link_strategies = attr_chain(CARD_COMPANY_LINK_SELECTORS, ("href",))
        self.logo_strategies = tuple(AttrSelector(s, LOGO_ATTRS) for s in LOGO_SELECTORS)

    def extract(self, markup: str) -> list[dict[str, Any]]:
        """Parse markup and return one raw record per detected card."""
        soup = BeautifulSoup(markup, "html.parser")
        cards = self.find_cards(soup)
        records: list[dict[str, Any]] = []
        for card in cards:
            try:
                records.append(self.parse_card(card))
            except Exception:
                logger.debug("Failed to parse card, skipping", exc_info=True)
        logger.debug("Extracted %d records from %d cards", len(records), len(cards))
        return records

    def find_cards(self, root: Tag) -> list[Tag]:
        """Locate card boundaries with the first strategy that matches."""
        for strategy in self.card_strategies:
            cards = strategy.attempt(root)
            if cards:
                logger.debug("Found %d cards with %r", len(cards), strategy)
                return cards
        logger.warning("No job cards found with any selector")
        return []

    def parse_card(self, card: Tag) -> dict[str, Any]:
        job_url = first_match(self.job_link_strategies, card) or ""
        company_url = first_match(self.company_link_strategies, card) or ""
        logo = first_match(self.logo_strategies, card) or ""
        return {
            "position": first_match(self.title_strategies, card) or "",
            "company": first_match(self.company_strategies, card) or "",
            "location": first_match(self.location_strategies, card) or "",
            "date": first_match(self.date_strategies, card) or "",
            "salary": first_match(self.salary_strategies, card) or "",
            "jobUrl": absolute_url(job_url, self._base_url),
            "companyUrl": absolute_url(company_url, self._base_url),
            "companyLogo": absolute_url(logo, self._base_url),
            "description": "",
        }
