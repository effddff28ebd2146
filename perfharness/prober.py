"""Timed HTTP probes that always produce a MetricSample."""

import logging
import time
from typing import Optional

import httpx

from perfharness.models import MetricSample, Success, TransportFailure

logger = logging.getLogger(__name__)

VERSION = "0.1.0"
USER_AGENT = f"perf-harness/{VERSION}"

DEFAULT_HEADERS = {
    "Accept": "text/html,application/json,*/*",
    "Cache-Control": "no-cache",
}


class Prober:
    """Issues single timed requests against one base URL.

    Use as an async context manager; the underlying ``httpx.AsyncClient`` is
    opened on enter and closed on exit.

    Args:
        base_url: Target service root. A trailing slash is ignored.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport, e.g. ``httpx.ASGITransport`` or
            ``httpx.MockTransport`` for in-process targets.
        user_agent: Value of the User-Agent header.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        user_agent: str = USER_AGENT,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._headers = {"User-Agent": user_agent, **DEFAULT_HEADERS}
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "Prober":
        self._client = httpx.AsyncClient(
            headers=self._headers,
            timeout=self.timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def probe(self, endpoint: str, method: str = "GET") -> MetricSample:
        """Time one request, including the full response body.

        Transport-level failures (DNS, connect, timeout, TLS, protocol, bad
        address) are recorded as a TransportFailure sample instead of being
        raised.
        """
        if self._client is None:
            raise RuntimeError("Prober must be entered with 'async with' before probing")

        start = time.perf_counter()
        try:
            # Non-streaming request: the body is fully read before this returns.
            response = await self._client.request(method, f"{self.base_url}{endpoint}")
            outcome = Success(
                status_code=response.status_code,
                content_length=len(response.content),
            )
        except (httpx.HTTPError, httpx.InvalidURL, OSError, OverflowError) as exc:
            logger.debug("%s %s failed: %r", method, endpoint, exc)
            outcome = TransportFailure(reason=f"{type(exc).__name__}: {exc}")
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        return MetricSample(
            endpoint=endpoint,
            method=method,
            response_time=elapsed_ms,
            outcome=outcome,
            timestamp=time.time(),
        )
