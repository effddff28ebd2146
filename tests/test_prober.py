"""Tests for the request prober against mock transports and the mock service."""

import httpx
import pytest

from mock_service.app import app
from perfharness.models import Success, TransportFailure
from perfharness.prober import USER_AGENT, Prober


def _mock_transport(handler):
    return httpx.MockTransport(handler)


class TestProbe:
    @pytest.mark.asyncio
    async def test_success_records_status_and_length(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, content=b"hello")

        async with Prober("http://svc.local/", transport=_mock_transport(handler)) as prober:
            sample = await prober.probe("/api/blogs")

        assert sample.outcome == Success(status_code=200, content_length=5)
        assert sample.status_code == 200
        assert sample.content_length == 5
        assert sample.is_success
        assert sample.endpoint == "/api/blogs"
        assert sample.method == "GET"
        assert sample.response_time >= 0
        assert sample.timestamp > 0
        assert str(seen[0].url) == "http://svc.local/api/blogs"

    @pytest.mark.asyncio
    async def test_request_headers(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(204)

        async with Prober("http://svc.local", transport=_mock_transport(handler)) as prober:
            await prober.probe("/", "HEAD")

        request = seen[0]
        assert request.method == "HEAD"
        assert request.headers["User-Agent"] == USER_AGENT
        assert request.headers["Accept"] == "text/html,application/json,*/*"
        assert request.headers["Cache-Control"] == "no-cache"
        assert request.content == b""

    @pytest.mark.asyncio
    async def test_http_error_status_is_a_sample(self):
        def handler(request):
            return httpx.Response(500, text="boom")

        async with Prober("http://svc.local", transport=_mock_transport(handler)) as prober:
            sample = await prober.probe("/health")

        assert sample.status_code == 500
        assert not sample.is_success

    @pytest.mark.asyncio
    async def test_connect_error_becomes_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with Prober("http://svc.local", transport=_mock_transport(handler)) as prober:
            sample = await prober.probe("/health")

        assert isinstance(sample.outcome, TransportFailure)
        assert "ConnectError" in sample.outcome.reason
        assert sample.status_code == 0
        assert sample.content_length == 0
        assert not sample.is_success
        assert sample.response_time >= 0

    @pytest.mark.asyncio
    async def test_timeout_becomes_transport_failure(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with Prober("http://svc.local", transport=_mock_transport(handler)) as prober:
            sample = await prober.probe("/slow")

        assert sample.status_code == 0
        assert "ReadTimeout" in sample.outcome.reason

    @pytest.mark.asyncio
    async def test_os_error_becomes_transport_failure(self):
        def handler(request):
            raise OSError("network is unreachable")

        async with Prober("http://svc.local", transport=_mock_transport(handler)) as prober:
            sample = await prober.probe("/health")

        assert sample.status_code == 0
        assert sample.outcome.reason.startswith("OSError")

    @pytest.mark.asyncio
    async def test_out_of_range_port_becomes_transport_failure(self):
        async with Prober("http://127.0.0.1:99999") as prober:
            sample = await prober.probe("/health")

        assert isinstance(sample.outcome, TransportFailure)
        assert sample.status_code == 0
        assert sample.content_length == 0

    @pytest.mark.asyncio
    async def test_probe_requires_open_client(self):
        prober = Prober("http://svc.local")
        with pytest.raises(RuntimeError, match="async with"):
            await prober.probe("/")


class TestProbeMockService:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path,method,status",
        [
            ("/", "GET", 200),
            ("/health", "GET", 200),
            ("/api/analytics", "GET", 200),
            ("/api/dashboard", "GET", 401),
            ("/api/contact", "GET", 401),
            ("/api/ai-assistant", "GET", 405),
            ("/api/ai-assistant", "POST", 200),
            ("/favicon.ico", "GET", 404),
        ],
    )
    async def test_catalog_endpoint_statuses(self, path, method, status):
        transport = httpx.ASGITransport(app=app)
        async with Prober("http://test", transport=transport) as prober:
            sample = await prober.probe(path, method)
        assert sample.status_code == status
        assert sample.content_length > 0
