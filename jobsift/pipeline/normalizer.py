"""Maps upstream records of any known schema onto NormalizedJob.

Each canonical field has an alias tuple; the canonical camelCase name comes
first so that normalizing an already-normalized record returns it unchanged.
"""

import logging
from collections.abc import Mapping
from typing import Any

from jobsift.core.schemas import SALARY_NOT_SPECIFIED, NormalizedJob

logger = logging.getLogger(__name__)

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "position": ("position", "title", "jobTitle", "job_title", "name"),
    "company": ("company", "companyName", "company_name", "employer", "hiringOrganization"),
    "location": ("location", "jobLocation", "job_location", "formattedLocation", "place"),
    "date": ("date", "postedAt", "posted_at", "listedAt", "datePosted", "postedDate", "publishedAt"),
    "salary": ("salary", "salaryRange", "salary_range", "compensation", "pay"),
    "job_url": ("jobUrl", "job_url", "url", "link", "applyUrl", "href"),
    "company_url": ("companyUrl", "company_url", "companyLink", "companyProfileUrl"),
    "company_logo": ("companyLogo", "company_logo", "logo", "logoUrl"),
    "description": ("description", "descriptionSnippet", "snippet", "summary", "jobDescription"),
}

# Keys unwrapped when an alias holds a nested object instead of a string.
NESTED_VALUE_KEYS: tuple[str, ...] = ("name", "url", "text", "value")


def normalize_job(raw: Mapping[str, Any] | NormalizedJob) -> NormalizedJob:
    """Coalesce a raw record into a NormalizedJob. Never raises."""
    if isinstance(raw, NormalizedJob):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        logger.debug("Non-mapping record of type %s normalized to empty job", type(raw).__name__)
        raw = {}

    fields = {name: _coalesce(raw, aliases) for name, aliases in FIELD_ALIASES.items()}
    if not fields["salary"]:
        fields["salary"] = SALARY_NOT_SPECIFIED
    return NormalizedJob(**fields)


def normalize_all(records: list[Mapping[str, Any]]) -> list[NormalizedJob]:
    return [normalize_job(r) for r in records]


def _coalesce(raw: Mapping[str, Any], aliases: tuple[str, ...]) -> str:
    """Return the first present, non-empty alias value as a trimmed string."""
    for alias in aliases:
        text = _as_text(raw.get(alias))
        if text:
            return text
    return ""


def _as_text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, Mapping):
        for key in NESTED_VALUE_KEYS:
            text = _as_text(value.get(key))
            if text:
                return text
        return ""
    if isinstance(value, (list, tuple)):
        return ""
    return " ".join(str(value).split())
