"""Best-effort detail enrichment for normalized jobs.

Each job with a job URL gets one follow-up fetch bounded by its own timeout.
Fetches are issued through a work queue drained by ``concurrency`` workers;
the default of one worker makes processing strictly sequential. Any failure
leaves that job in its pre-enrichment state and never aborts the batch.
"""

import asyncio
import logging
from typing import Protocol

from bs4 import BeautifulSoup

from jobsift.core.schemas import NormalizedJob
from jobsift.upstream.parser import absolute_url
from jobsift.upstream.selectors import BASE_ORIGIN, COMPANY_LINK_SELECTORS, DESCRIPTION_SELECTORS
from jobsift.upstream.strategies import attr_chain, first_match, text_chain

logger = logging.getLogger(__name__)


class DetailFetcher(Protocol):
    """Anything that can fetch a detail page as text (UpstreamClient in production)."""

    async def fetch_text(self, url: str, *, timeout: float | None = None) -> str: ...


class DetailEnricher:
    """Fills empty description and company_url from each job's detail page."""

    def __init__(
        self,
        fetcher: DetailFetcher,
        *,
        timeout_s: float,
        concurrency: int = 1,
        base_url: str = BASE_ORIGIN,
    ) -> None:
        self._fetcher = fetcher
        self._timeout_s = timeout_s
        self._concurrency = max(concurrency, 1)
        self._base_url = base_url
        self._description_strategies = text_chain(DESCRIPTION_SELECTORS)
        self._company_link_strategies = attr_chain(COMPANY_LINK_SELECTORS, ("href",))

    async def enrich(self, jobs: list[NormalizedJob]) -> list[NormalizedJob]:
        """Return jobs in input order, each enriched where possible."""
        results = list(jobs)
        queue: asyncio.Queue[int] = asyncio.Queue()
        for index, job in enumerate(jobs):
            if job.job_url:
                queue.put_nowait(index)
        if queue.empty():
            return results

        queued = queue.qsize()

        async def worker() -> None:
            while True:
                try:
                    index = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                try:
                    results[index] = await self.enrich_one(results[index])
                finally:
                    queue.task_done()

        workers = min(self._concurrency, queued)
        await asyncio.gather(*(worker() for _ in range(workers)))
        logger.info("Enriched %d jobs with %d worker(s)", queued, workers)
        return results

    async def enrich_one(self, job: NormalizedJob) -> NormalizedJob:
        """Enrich a single job; on any failure return it unchanged."""
        try:
            markup = await asyncio.wait_for(
                self._fetcher.fetch_text(job.job_url, timeout=self._timeout_s),
                timeout=self._timeout_s,
            )
            return self._apply(job, markup)
        except Exception:
            logger.debug("Detail fetch failed for %s, keeping job as-is", job.job_url, exc_info=True)
            return job

    def _apply(self, job: NormalizedJob, markup: str) -> NormalizedJob:
        soup = BeautifulSoup(markup, "html.parser")
        update: dict[str, str] = {}
        if not job.description:
            description = first_match(self._description_strategies, soup)
            if description:
                update["description"] = description
        if not job.company_url:
            company_url = first_match(self._company_link_strategies, soup)
            if company_url:
                update["company_url"] = absolute_url(company_url, self._base_url)
        if not update:
            return job
        return job.model_copy(update=update)
