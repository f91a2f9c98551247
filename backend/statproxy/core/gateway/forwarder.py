"""
Upstream forwarder: one outbound GET per gateway request, relayed verbatim.

Uses a single httpx.AsyncClient for the lifetime of the app so slow upstreams
never block the event loop and connections are pooled across requests.
Transport failures surface as UpstreamUnreachableError; nothing is retried.
"""

import logging
from dataclasses import dataclass

import httpx

from statproxy.core.errors import UpstreamUnreachableError

logger = logging.getLogger(__name__)

DEFAULT_UPSTREAM_TIMEOUT = 30.0
DEFAULT_CONTENT_TYPE = "application/json"


@dataclass(frozen=True, slots=True)
class UpstreamResponse:
    status_code: int
    content_type: str
    body: bytes


class UpstreamForwarder:
    """Issues GET requests to provider URLs and captures status/content-type/body."""

    __slots__ = ("_client",)

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_UPSTREAM_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def fetch(self, url: str) -> UpstreamResponse:
        """GET url; any status code is a result, transport errors are not."""
        try:
            resp = await self._client.get(url)
        except httpx.HTTPError as e:
            logger.warning("Upstream request failed: %s", type(e).__name__)
            raise UpstreamUnreachableError(str(e) or type(e).__name__) from e
        content_type = resp.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        return UpstreamResponse(
            status_code=resp.status_code,
            content_type=content_type,
            body=resp.content,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
