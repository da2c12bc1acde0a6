"""Configuration models, YAML loader, and inbound search parameter parsing."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_KEYWORD = "IT support"
DEFAULT_LOCATION = "United States"
DEFAULT_DAYS = 7
DEFAULT_LIMIT = 100
MIN_LIMIT = 1
MAX_LIMIT = 200

TRUTHY_STRINGS = frozenset({"1", "true", "yes", "on"})

# Whole-token aliases expanded during location normalization.
LOCATION_ALIASES: dict[str, str] = {
    "us": "United States",
    "usa": "United States",
    "uk": "United Kingdom",
}


def normalize_location(value: str) -> str:
    """Collapse whitespace, expand locale abbreviations, drop repeated tokens.

    >>> normalize_location("  Remote   US  United  States ")
    'Remote United States'
    """
    expanded: list[str] = []
    for token in value.split():
        expanded.extend(LOCATION_ALIASES.get(token.lower(), token).split())

    seen: set[str] = set()
    tokens: list[str] = []
    for token in expanded:
        key = token.lower()
        if key not in seen:
            seen.add(key)
            tokens.append(token)
    return " ".join(tokens)


def _coerce_int(value: Any, default: int) -> int:
    """Best-effort int parsing; anything unparseable yields ``default``."""
    if isinstance(value, bool):
        return default
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return default


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY_STRINGS


class SearchParams(BaseModel):
    """Per-request search parameters.

    Parsing never fails on malformed numbers or flags: limit is clamped to
    [1, 200], start is floored at 0, and unparseable values fall back to the
    defaults. Flags are accepted in both snake_case and camelCase.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    keyword: str = DEFAULT_KEYWORD
    location: str = DEFAULT_LOCATION
    days: int = DEFAULT_DAYS
    limit: int = DEFAULT_LIMIT
    start: int = 0
    require_remote: bool = Field(
        default=False,
        validation_alias=AliasChoices("require_remote", "requireRemote"),
    )
    require_contract: bool = Field(
        default=False,
        validation_alias=AliasChoices("require_contract", "requireContract"),
    )
    fetch_details: bool = Field(
        default=False,
        validation_alias=AliasChoices("fetch_details", "fetchDetails"),
    )

    @field_validator("keyword", mode="before")
    @classmethod
    def keyword_or_default(cls, v: Any) -> str:
        text = " ".join(str(v).split()) if v is not None else ""
        return text or DEFAULT_KEYWORD

    @field_validator("location", mode="before")
    @classmethod
    def location_normalized(cls, v: Any) -> str:
        text = normalize_location(str(v)) if v is not None else ""
        return text or DEFAULT_LOCATION

    @field_validator("days", mode="before")
    @classmethod
    def days_positive(cls, v: Any) -> int:
        days = _coerce_int(v, DEFAULT_DAYS)
        return days if days > 0 else DEFAULT_DAYS

    @field_validator("limit", mode="before")
    @classmethod
    def limit_clamped(cls, v: Any) -> int:
        return min(max(_coerce_int(v, DEFAULT_LIMIT), MIN_LIMIT), MAX_LIMIT)

    @field_validator("start", mode="before")
    @classmethod
    def start_non_negative(cls, v: Any) -> int:
        return max(_coerce_int(v, 0), 0)

    @field_validator("require_remote", "require_contract", "fetch_details", mode="before")
    @classmethod
    def flag_from_any(cls, v: Any) -> bool:
        return _coerce_bool(v)

    @classmethod
    def from_query(cls, query: Mapping[str, Any]) -> "SearchParams":
        """Build params from an inbound query mapping, ignoring unknown keys."""
        return cls.model_validate(dict(query))


class UpstreamConfig(BaseModel):
    """Upstream job source endpoint and timeouts."""

    base_url: str = "https://www.linkedin.com"
    search_path: str = "/jobs-guest/jobs/api/seeMoreJobPostings/search"
    timeout_s: float = Field(default=15.0, gt=0)
    detail_timeout_s: float = Field(default=10.0, gt=0)
    detail_concurrency: int = Field(default=1, ge=1, le=8)
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/122.0 Safari/537.36"
    )

    @field_validator("base_url")
    @classmethod
    def base_url_no_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class ClassifierConfig(BaseModel):
    """Token sets used for relevance, remote, and contract classification."""

    title_keywords: list[str] = Field(default_factory=lambda: [
        "it support",
        "help desk",
        "helpdesk",
        "service desk",
        "desktop support",
        "technical support",
        "tech support",
        "support analyst",
        "support specialist",
        "support technician",
        "support engineer",
        "it technician",
        "field technician",
        "system administrator",
        "systems administrator",
    ])
    remote_tokens: list[str] = Field(default_factory=lambda: [
        "remote",
        "wfh",
        "work from home",
        "telecommute",
        "distributed",
        "home based",
        "virtual",
    ])
    contract_tokens: list[str] = Field(default_factory=lambda: [
        "contract",
        "temp",
        "temporary",
        "6 month",
        "12 month",
        "freelance",
        "fixed-term",
        "w2",
    ])

    @field_validator("title_keywords", "remote_tokens", "contract_tokens")
    @classmethod
    def tokens_cleaned(cls, v: list[str]) -> list[str]:
        return [t.strip().lower() for t in v if t.strip()]


class Settings(BaseModel):
    """Top-level settings, optionally loaded from YAML."""

    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    description_snippet_length: int = Field(default=500, ge=1)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
