"""HTTP client for the upstream job source, using httpx.

Single GET per search with a bounded timeout, no retries. Request failures
raise UpstreamError; an error status that still carries a body is passed on
as a normal payload.
"""

import logging
from types import TracebackType
from typing import Any

import httpx

from jobsift.core.config import SearchParams, UpstreamConfig
from jobsift.upstream.searcher import build_url

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """The upstream source could not be reached or returned nothing usable."""

    def __init__(self, url: str, detail: str) -> None:
        super().__init__(f"{detail} ({url})")
        self.url = url
        self.detail = detail


class UpstreamClient:
    """Async context manager that owns one httpx client.

    Usage::

        async with UpstreamClient(config) as client:
            body = await client.fetch_search(params)
    """

    def __init__(
        self,
        config: UpstreamConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """The underlying httpx client. Raises if not entered."""
        if self._client is None:
            msg = "UpstreamClient not entered, use 'async with'"
            raise RuntimeError(msg)
        return self._client

    async def __aenter__(self) -> "UpstreamClient":
        self._client = httpx.AsyncClient(
            timeout=self._config.timeout_s,
            follow_redirects=True,
            headers={
                "User-Agent": self._config.user_agent,
                "Accept": "text/html,application/json;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-US,en;q=0.9",
            },
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_search(self, params: SearchParams) -> Any:
        """Fetch one search page and return the decoded body.

        Returns parsed JSON when the body is JSON, otherwise the raw text.
        """
        url = build_url(params, self._config)
        logger.info("Fetching upstream search: %s", url)
        try:
            response = await self.client.get(url)
        except httpx.RequestError as e:
            raise UpstreamError(url, f"{type(e).__name__}: {e}") from e

        body = response.text
        if response.is_error:
            if not body.strip():
                msg = f"HTTP {response.status_code} with empty body"
                raise UpstreamError(url, msg)
            logger.warning(
                "Upstream returned HTTP %d with %d-byte body, resolving anyway",
                response.status_code, len(body),
            )
        return decode_body(response)

    async def fetch_text(self, url: str, *, timeout: float | None = None) -> str:
        """Fetch a detail page as text. Raises on transport or HTTP errors."""
        response = await self.client.get(
            url, timeout=timeout if timeout is not None else self._config.detail_timeout_s,
        )
        response.raise_for_status()
        return response.text


def decode_body(response: httpx.Response) -> Any:
    """Parse JSON bodies, fall back to text for anything else."""
    text = response.text
    content_type = response.headers.get("content-type", "")
    if "json" in content_type or text.lstrip()[:1] in ("{", "["):
        try:
            return response.json()
        except ValueError:
            logger.debug("Body looked like JSON but failed to parse, using text")
    return text
