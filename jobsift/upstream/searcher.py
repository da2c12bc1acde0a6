"""Upstream search URL builder.

Pure functions, no network dependency.
"""

from urllib.parse import quote_plus, urlencode

from jobsift.core.config import SearchParams, UpstreamConfig

SECONDS_PER_DAY = 86400

# Workplace type code for remote-only listings. Advisory: the upstream may
# ignore it, so remote classification is always repeated locally.
REMOTE_WORKPLACE_CODE = "2"


def build_url(params: SearchParams, upstream: UpstreamConfig) -> str:
    """Build the upstream search URL for one request.

    Args:
        params: Parsed search parameters.
        upstream: Endpoint configuration.

    Returns:
        Fully qualified search URL.
    """
    query: dict[str, str] = {
        "keywords": params.keyword,
        "location": params.location,
        "start": str(params.start),
        "count": str(params.limit),
        "f_TPR": f"r{params.days * SECONDS_PER_DAY}",
    }
    if params.require_remote:
        query["f_WT"] = REMOTE_WORKPLACE_CODE

    return f"{upstream.base_url}{upstream.search_path}?{urlencode(query, quote_via=quote_plus)}"
