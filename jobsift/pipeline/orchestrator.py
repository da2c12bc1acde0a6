"""Orchestrator: wires upstream fetch, resolver, normalizer, enrichment, and filters.

Data flow:
  1. Upstream fetch → body of unknown shape
  2. Shape resolver → raw records
  3. Normalizer → NormalizedJob per record
  4. Detail enrichment (opt-in)
  5. Classification → filter chain (relevance, remote, contract, dedup)
  6. Truncate to the requested limit
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from jobsift.core.config import SearchParams, Settings
from jobsift.core.schemas import ErrorBody, SearchResult
from jobsift.pipeline.matcher import JobClassifier, build_filters, run_filter_chain
from jobsift.pipeline.normalizer import normalize_all
from jobsift.upstream.client import UpstreamClient, UpstreamError
from jobsift.upstream.enrichment import DetailEnricher
from jobsift.upstream.parser import HtmlCardExtractor
from jobsift.upstream.payload import resolve_body

logger = logging.getLogger(__name__)

STATUS_OK = 200
STATUS_INTERNAL_ERROR = 500
STATUS_BAD_GATEWAY = 502


async def run_pipeline(
    body: Any,
    params: SearchParams,
    settings: Settings,
    *,
    enricher: DetailEnricher | None = None,
) -> SearchResult:
    """Run everything after the upstream fetch over an already-received body."""
    records = resolve_body(body, HtmlCardExtractor(settings.upstream.base_url))
    logger.info("Raw records: %d", len(records))

    jobs = normalize_all(records)
    if params.fetch_details and enricher is not None:
        jobs = await enricher.enrich(jobs)

    classifier = JobClassifier(settings.classifier)
    filters = build_filters(
        classifier,
        require_remote=params.require_remote,
        require_contract=params.require_contract,
    )
    matched = run_filter_chain(classifier.classify_all(jobs), filters)
    returned = matched[: params.limit]

    logger.info(
        "Search '%s' in '%s': %d fetched, %d matched, %d returned",
        params.keyword, params.location, len(records), len(matched), len(returned),
    )

    return SearchResult(
        total_fetched=len(records),
        total_matched_after_filters=len(matched),
        returned=len(returned),
        params=params,
        jobs=returned,
    )


async def run_search(
    params: SearchParams,
    client: UpstreamClient,
    settings: Settings,
) -> SearchResult:
    """Fetch from the upstream source and run the full pipeline.

    Raises UpstreamError when the upstream source is unreachable.
    """
    body = await client.fetch_search(params)
    enricher = DetailEnricher(
        client,
        timeout_s=settings.upstream.detail_timeout_s,
        concurrency=settings.upstream.detail_concurrency,
        base_url=settings.upstream.base_url,
    )
    return await run_pipeline(body, params, settings, enricher=enricher)


async def handle_search(
    query: Mapping[str, Any],
    settings: Settings,
    *,
    client: UpstreamClient | None = None,
) -> tuple[int, dict[str, Any]]:
    """Request boundary: parse params, run the search, map failures to statuses.

    Returns (status, body). Error bodies never carry partial results.
    """
    try:
        params = SearchParams.from_query(query)
        if client is None:
            async with UpstreamClient(settings.upstream) as owned:
                result = await run_search(params, owned, settings)
        else:
            result = await run_search(params, client, settings)
    except UpstreamError as e:
        logger.error("Upstream failed: %s", e)
        return STATUS_BAD_GATEWAY, ErrorBody(error="upstream_failed", detail=str(e)).model_dump()
    except Exception as e:
        logger.exception("Unhandled error during search")
        return STATUS_INTERNAL_ERROR, ErrorBody(error="internal_error", detail=str(e)).model_dump()

    return STATUS_OK, result.to_response(settings.description_snippet_length)


def export_response_json(body: dict[str, Any]) -> str:
    """Render a response body as a JSON string."""
    return json.dumps(body, indent=2, ensure_ascii=False)
