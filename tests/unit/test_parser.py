"""Tests for the HTML card extractor and its strategy chains."""

from bs4 import BeautifulSoup

from jobsift.upstream.parser import HtmlCardExtractor, absolute_url
from jobsift.upstream.strategies import (
    AnchorAncestorCards,
    AttrSelector,
    CardSelector,
    TextSelector,
    first_match,
)


def _card_html(
    *,
    job_id: str = "3812345678",
    title: str | None = "IT Support Analyst",
    company: str = "Acme Corp",
    location: str | None = "Austin, TX",
    href: str | None = None,
    posted: str = "2026-10-10",
    salary: str | None = None,
) -> str:
    """Build one guest-search card in the upstream's markup."""
    href = href if href is not None else f"https://www.linkedin.com/jobs/view/it-support-analyst-{job_id}?refId=abc"
    title_html = f'<h3 class="base-search-card__title">\n  {title}\n</h3>' if title is not None else ""
    location_html = (
        f'<span class="job-search-card__location">{location}</span>' if location is not None else ""
    )
    salary_html = (
        f'<span class="job-search-card__salary-info">{salary}</span>' if salary is not None else ""
    )
    return f"""
    <li>
      <div class="base-card base-search-card job-search-card" data-entity-urn="urn:li:jobPosting:{job_id}">
        <a class="base-card__full-link" href="{href}"><span class="sr-only">{title or ''}</span></a>
        <div class="search-entity-media">
          <img class="artdeco-entity-image" data-delayed-url="https://media.licdn.com/logo-{job_id}.png" src="">
        </div>
        <div class="base-search-card__info">
          {title_html}
          <h4 class="base-search-card__subtitle">
            <a class="hidden-nested-link" href="/company/acme?trk=public">{company}</a>
          </h4>
          <div class="base-search-card__metadata">
            {location_html}
            {salary_html}
            <time class="job-search-card__listdate" datetime="{posted}">3 days ago</time>
          </div>
        </div>
      </div>
    </li>
    """


def _page(*cards: str) -> str:
    return f'<ul class="jobs-search__results-list">{"".join(cards)}</ul>'


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class TestStrategies:
    def test_text_selector_collapses_whitespace(self) -> None:
        soup = BeautifulSoup("<div><h3>  Help \n  Desk </h3></div>", "html.parser")
        assert TextSelector("h3").attempt(soup) == "Help Desk"

    def test_text_selector_empty_is_none(self) -> None:
        soup = BeautifulSoup("<div><h3>   </h3></div>", "html.parser")
        assert TextSelector("h3").attempt(soup) is None

    def test_attr_selector_tries_attrs_in_order(self) -> None:
        soup = BeautifulSoup('<img src="a.png" data-delayed-url="">', "html.parser")
        assert AttrSelector("img", ("data-delayed-url", "src")).attempt(soup) == "a.png"

    def test_first_match_skips_empty_and_raising(self) -> None:
        soup = BeautifulSoup("<p class='x'>hit</p>", "html.parser")
        chain = (TextSelector("h1"), TextSelector("[[invalid"), TextSelector("p.x"))
        assert first_match(chain, soup) == "hit"

    def test_first_match_none(self) -> None:
        soup = BeautifulSoup("<p></p>", "html.parser")
        assert first_match((TextSelector("h1"),), soup) is None

    def test_card_selector_no_match_is_none(self) -> None:
        soup = BeautifulSoup("<div></div>", "html.parser")
        assert CardSelector("li").attempt(soup) is None

    def test_anchor_ancestor_collapses_shared_parent(self) -> None:
        soup = BeautifulSoup(
            '<section><article><a href="/jobs/view/1">A</a><a href="/jobs/view/1?x">B</a></article>'
            '<article><a href="/jobs/view/2">C</a></article><a href="/about">no</a></section>',
            "html.parser",
        )
        cards = AnchorAncestorCards("/jobs/view/", ("li", "div", "article", "section")).attempt(soup)
        assert cards is not None
        assert [c.name for c in cards] == ["article", "article"]

    def test_anchor_ancestor_flat_container_is_one_card(self) -> None:
        soup = BeautifulSoup(
            '<div><a href="/jobs/view/1">A</a><a href="/jobs/view/2">B</a></div>',
            "html.parser",
        )
        cards = AnchorAncestorCards("/jobs/view/", ("li", "div")).attempt(soup)
        assert cards is not None
        assert len(cards) == 1
        assert cards[0].name == "div"


# ---------------------------------------------------------------------------
# HtmlCardExtractor
# ---------------------------------------------------------------------------


class TestHtmlCardExtractor:
    def test_full_card(self) -> None:
        records = HtmlCardExtractor().extract(_page(_card_html(salary="$25 - $30")))
        assert len(records) == 1
        r = records[0]
        assert r["position"] == "IT Support Analyst"
        assert r["company"] == "Acme Corp"
        assert r["location"] == "Austin, TX"
        assert r["date"] == "2026-10-10"
        assert r["salary"] == "$25 - $30"
        assert r["jobUrl"].startswith("https://www.linkedin.com/jobs/view/it-support-analyst-3812345678")
        assert r["companyUrl"] == "https://www.linkedin.com/company/acme?trk=public"
        assert r["companyLogo"] == "https://media.licdn.com/logo-3812345678.png"
        assert r["description"] == ""

    def test_missing_location_is_empty(self) -> None:
        records = HtmlCardExtractor().extract(_page(_card_html(location=None)))
        assert records[0]["location"] == ""
        assert records[0]["position"] == "IT Support Analyst"

    def test_missing_title_falls_back_to_first_link_text(self) -> None:
        records = HtmlCardExtractor().extract(
            "<div class='base-search-card'><a href='/jobs/view/9'>Service Desk Agent</a>"
            "<h4 class='base-search-card__subtitle'>Globex</h4></div>"
        )
        assert records[0]["position"] == "Service Desk Agent"
        assert records[0]["company"] == "Globex"

    def test_relative_url_made_absolute(self) -> None:
        records = HtmlCardExtractor().extract(_page(_card_html(href="/jobs/view/555/")))
        assert records[0]["jobUrl"] == "https://www.linkedin.com/jobs/view/555/"

    def test_multiple_cards_in_order(self) -> None:
        html = _page(
            _card_html(job_id="1", title="Help Desk Technician"),
            _card_html(job_id="2", title="Desktop Support Specialist"),
        )
        records = HtmlCardExtractor().extract(html)
        assert [r["position"] for r in records] == ["Help Desk Technician", "Desktop Support Specialist"]

    def test_first_matching_selector_wins_not_union(self) -> None:
        html = (
            '<div class="base-search-card"><h3>Primary</h3></div>'
            '<div class="job-search-card"><h3>Secondary only</h3></div>'
        )
        records = HtmlCardExtractor().extract(html)
        assert [r["position"] for r in records] == ["Primary"]

    def test_secondary_selector_used_when_primary_absent(self) -> None:
        html = '<div class="job-search-card"><h3>Secondary</h3></div>'
        records = HtmlCardExtractor().extract(html)
        assert [r["position"] for r in records] == ["Secondary"]

    def test_anchor_fallback(self) -> None:
        html = (
            "<main>"
            "<article><a href='/jobs/view/101/'>Help Desk Lead</a><h4>Initech</h4></article>"
            "<article><a href='/jobs/view/102/'>IT Technician</a></article>"
            "<a href='/privacy'>Privacy</a>"
            "</main>"
        )
        records = HtmlCardExtractor().extract(html)
        assert [r["position"] for r in records] == ["Help Desk Lead", "IT Technician"]
        assert records[0]["company"] == "Initech"
        assert records[1]["jobUrl"] == "https://www.linkedin.com/jobs/view/102/"

    def test_no_cards(self) -> None:
        assert HtmlCardExtractor().extract("<html><body><p>Nothing here</p></body></html>") == []

    def test_empty_markup(self) -> None:
        assert HtmlCardExtractor().extract("") == []

    def test_custom_base_url(self) -> None:
        records = HtmlCardExtractor("https://jobs.example.com/").extract(
            _page(_card_html(href="/jobs/view/7/"))
        )
        assert records[0]["jobUrl"] == "https://jobs.example.com/jobs/view/7/"


class TestAbsoluteUrl:
    def test_relative(self) -> None:
        assert absolute_url("/jobs/view/1") == "https://www.linkedin.com/jobs/view/1"

    def test_absolute_unchanged(self) -> None:
        assert absolute_url("https://example.com/x") == "https://example.com/x"

    def test_empty(self) -> None:
        assert absolute_url("  ") == ""
