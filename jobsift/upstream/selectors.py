"""Job board CSS selector constants with fallbacks.

Ordered from most to least specific. Each constant is a tuple so callers
iterate until a match is found.
"""

BASE_ORIGIN: str = "https://www.linkedin.com"

# --- Job card container (first selector with any match wins) ---
CARD_SELECTORS: tuple[str, ...] = (
    "div.base-search-card",
    "div.job-search-card",
    "div.base-card",
    "li.jobs-search-results__list-item",
    "ul.jobs-search__results-list > li",
)

# --- Anchor fallback when no card selector matches ---
JOB_LINK_FRAGMENT: str = "/jobs/view/"
CARD_ANCESTOR_TAGS: tuple[str, ...] = ("li", "div", "article", "section")

# --- Fields inside a card ---
TITLE_SELECTORS: tuple[str, ...] = (
    "h3.base-search-card__title",
    ".base-search-card__title",
    ".job-card-list__title",
    "h3",
)

COMPANY_SELECTORS: tuple[str, ...] = (
    "h4.base-search-card__subtitle",
    ".base-search-card__subtitle",
    ".job-card-container__company-name",
    "h4",
)

LOCATION_SELECTORS: tuple[str, ...] = (
    "span.job-search-card__location",
    ".job-search-card__location",
    ".job-card-container__metadata-item",
)

DATE_SELECTORS: tuple[str, ...] = (
    "time.job-search-card__listdate",
    "time.job-search-card__listdate--new",
    "time",
)

SALARY_SELECTORS: tuple[str, ...] = (
    "span.job-search-card__salary-info",
    ".job-search-card__salary-info",
)

JOB_LINK_SELECTORS: tuple[str, ...] = (
    "a.base-card__full-link",
    "a.base-search-card__full-link",
    'a[href*="/jobs/view/"]',
    "a[href]",
)

CARD_COMPANY_LINK_SELECTORS: tuple[str, ...] = (
    "h4.base-search-card__subtitle a[href]",
    "a.hidden-nested-link",
)

LOGO_SELECTORS: tuple[str, ...] = (
    "img.artdeco-entity-image",
    "img",
)
LOGO_ATTRS: tuple[str, ...] = ("data-delayed-url", "data-ghost-url", "src")

# --- Job detail page (enrichment) ---
DESCRIPTION_SELECTORS: tuple[str, ...] = (
    "div.show-more-less-html__markup",
    "div.description__text",
    "section.description",
    ".jobs-description__content",
    "#job-details",
)

COMPANY_LINK_SELECTORS: tuple[str, ...] = (
    "a.topcard__org-name-link",
    "a.sub-nav-cta__optional-url",
    'a[href*="/company/"]',
)
