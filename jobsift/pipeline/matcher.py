"""Token classification and the filter chain.

Filter order:
  1. RelevanceFilter      : always, position + company + description
  2. RemoteFilter         : only when remote-only was requested
  3. ContractFilter       : only when contract-only was requested
  4. DeduplicationFilter  : first job per derived identity wins
"""

import logging
import re
from collections.abc import Callable, Iterable
from urllib.parse import parse_qs, parse_qsl, urlencode, urlparse, urlunparse

from jobsift.core.config import ClassifierConfig
from jobsift.core.schemas import ClassifiedJob, NormalizedJob

logger = logging.getLogger(__name__)

# A filter is a callable that takes jobs and returns a subset.
Filter = Callable[[list[ClassifiedJob]], list[ClassifiedJob]]

JOB_VIEW_ID_RE = re.compile(r"/jobs/view/(?:[^/?#]*-)?(\d+)")
JOB_ID_QUERY_PARAMS: tuple[str, ...] = ("currentJobId", "jobId")
TRACKING_QUERY_PARAMS = frozenset({"trk", "refid", "trackingid"})
TRACKING_QUERY_PREFIXES: tuple[str, ...] = ("utm_",)


def contains_any(haystack: str | None, tokens: Iterable[str]) -> bool:
    """Return True if any token is a case-insensitive substring of haystack."""
    if not haystack:
        return False
    text = haystack.lower()
    return any(t.lower() in text for t in tokens if t)


def derive_job_id(job: NormalizedJob) -> str:
    """Derive a deduplication key for a job.

    Priority: numeric job-detail id from the URL, then the normalized URL,
    then ``position|company|location``. The composite fallback
    only merges records that carry no URL at all.
    """
    url = job.job_url.strip()
    if url:
        match = JOB_VIEW_ID_RE.search(url)
        if match:
            return match.group(1)
        query = parse_qs(urlparse(url).query)
        for key in JOB_ID_QUERY_PARAMS:
            values = query.get(key)
            if values and values[0].isdigit():
                return values[0]
        return _normalize_url(url)
    return "|".join(
        part.strip().lower() for part in (job.position, job.company, job.location)
    )


def _is_tracking_param(key: str) -> bool:
    key = key.lower()
    return key in TRACKING_QUERY_PARAMS or key.startswith(TRACKING_QUERY_PREFIXES)


def _normalize_url(url: str) -> str:
    """Lowercase scheme and host, drop fragment, trailing slash and tracking keys.

    The remaining query is sorted so parameter order does not split identities.
    """
    parsed = urlparse(url)
    path = parsed.path.rstrip("/")
    pairs = sorted(
        (k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True)
        if not _is_tracking_param(k)
    )
    return urlunparse(
        (parsed.scheme.lower(), parsed.netloc.lower(), path, "", urlencode(pairs), "")
    )


class JobClassifier:
    """Pure classifier over injected token sets."""

    def __init__(self, config: ClassifierConfig) -> None:
        self._title_keywords = tuple(config.title_keywords)
        self._remote_tokens = tuple(config.remote_tokens)
        self._contract_tokens = tuple(config.contract_tokens)

    def is_relevant(self, job: NormalizedJob) -> bool:
        haystack = " ".join((job.position, job.company, job.description))
        return contains_any(haystack, self._title_keywords)

    def is_remote(self, job: NormalizedJob) -> bool:
        haystack = " ".join(
            (job.position, job.company, job.description, job.location, job.job_url)
        )
        return contains_any(haystack, self._remote_tokens)

    def is_contract(self, job: NormalizedJob) -> bool:
        haystack = " ".join((job.position, job.company, job.description))
        return contains_any(haystack, self._contract_tokens)

    def classify(self, job: NormalizedJob) -> ClassifiedJob:
        return ClassifiedJob(
            job=job,
            job_id=derive_job_id(job),
            is_remote=self.is_remote(job),
            is_contract=self.is_contract(job),
        )

    def classify_all(self, jobs: Iterable[NormalizedJob]) -> list[ClassifiedJob]:
        return [self.classify(j) for j in jobs]


class RelevanceFilter:
    """Keep only jobs matching at least one configured role keyword."""

    def __init__(self, classifier: JobClassifier) -> None:
        self._classifier = classifier

    def __call__(self, jobs: list[ClassifiedJob]) -> list[ClassifiedJob]:
        result = [j for j in jobs if self._classifier.is_relevant(j.job)]
        removed = len(jobs) - len(result)
        if removed:
            logger.debug("RelevanceFilter: removed %d jobs", removed)
        return result


class RemoteFilter:
    """Keep only jobs classified as remote."""

    def __call__(self, jobs: list[ClassifiedJob]) -> list[ClassifiedJob]:
        result = [j for j in jobs if j.is_remote]
        removed = len(jobs) - len(result)
        if removed:
            logger.debug("RemoteFilter: removed %d jobs", removed)
        return result


class ContractFilter:
    """Keep only jobs classified as contract."""

    def __call__(self, jobs: list[ClassifiedJob]) -> list[ClassifiedJob]:
        result = [j for j in jobs if j.is_contract]
        removed = len(jobs) - len(result)
        if removed:
            logger.debug("ContractFilter: removed %d jobs", removed)
        return result


class DeduplicationFilter:
    """Remove duplicates by derived job id, keeping the first occurrence."""

    def __call__(self, jobs: list[ClassifiedJob]) -> list[ClassifiedJob]:
        seen: set[str] = set()
        result: list[ClassifiedJob] = []
        for j in jobs:
            if j.job_id not in seen:
                seen.add(j.job_id)
                result.append(j)
        deduped = len(jobs) - len(result)
        if deduped:
            logger.debug("DeduplicationFilter: removed %d duplicates", deduped)
        return result


def build_filters(
    classifier: JobClassifier,
    *,
    require_remote: bool = False,
    require_contract: bool = False,
) -> list[Filter]:
    """Build the filter chain for one request."""
    filters: list[Filter] = [RelevanceFilter(classifier)]
    if require_remote:
        filters.append(RemoteFilter())
    if require_contract:
        filters.append(ContractFilter())
    filters.append(DeduplicationFilter())
    return filters


def run_filter_chain(
    jobs: list[ClassifiedJob],
    filters: list[Filter],
) -> list[ClassifiedJob]:
    """Apply filters in order, returning the surviving jobs."""
    result = jobs
    for f in filters:
        result = f(result)
    return result
