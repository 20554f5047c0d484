"""Tests for NginxStatusCollector.fetch / collect."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from collectors import nginx_collector
from collectors.base import BaseCollector
from collectors.config import Configuration
from collectors.errors import NonOkStatus, ParseFailure, TransportError
from collectors.nginx_collector import NginxStatusCollector
from collectors.stub_status import StatusSample
from conftest import NGINX_BODY, mock_transport


def _collector(transport: httpx.AsyncBaseTransport, **raw) -> NginxStatusCollector:
    return NginxStatusCollector(Configuration.from_mapping(raw), transport=transport)


class TestFetch:
    def test_returns_body_on_200(self) -> None:
        body = asyncio.run(_collector(mock_transport(200, NGINX_BODY)).fetch())
        assert body == NGINX_BODY

    def test_requests_configured_url(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, text=NGINX_BODY)

        collector = _collector(httpx.MockTransport(handler), host="web1", port=8080, path="/status")
        asyncio.run(collector.fetch())
        assert seen == ["http://web1:8080/status"]

    def test_503_is_non_ok_status(self) -> None:
        result = asyncio.run(_collector(mock_transport(503, NGINX_BODY)).fetch())
        assert isinstance(result, NonOkStatus)
        assert result.code == 503
        assert "code=503" in result.describe()

    def test_redirect_is_not_followed(self) -> None:
        result = asyncio.run(_collector(mock_transport(301, "")).fetch())
        assert result == NonOkStatus(url="http://localhost:80/nginx_status", code=301)

    @pytest.mark.parametrize(
        "exc",
        [httpx.ConnectError("connection refused"), httpx.ReadTimeout("timed out")],
    )
    def test_network_error_is_transport_error(self, exc: Exception) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc

        result = asyncio.run(_collector(httpx.MockTransport(handler)).fetch())
        assert isinstance(result, TransportError)
        assert result.cause is exc
        assert type(exc).__name__ in result.describe()


class TestTlsVerification:
    @pytest.fixture
    def client_kwargs(self, monkeypatch: pytest.MonkeyPatch) -> list[dict]:
        captured: list[dict] = []
        real_client = httpx.AsyncClient

        def recording_client(**kwargs):
            captured.append(kwargs)
            return real_client(**kwargs)

        monkeypatch.setattr(nginx_collector.httpx, "AsyncClient", recording_client)
        return captured

    def test_verification_disabled_on_443(self, client_kwargs) -> None:
        collector = _collector(mock_transport(), port=443)
        assert collector.url.startswith("https://")
        asyncio.run(collector.fetch())
        assert client_kwargs[0]["verify"] is False

    def test_plain_http_elsewhere(self, client_kwargs) -> None:
        collector = _collector(mock_transport(), port=80)
        assert collector.url.startswith("http://")
        asyncio.run(collector.fetch())
        assert client_kwargs[0]["verify"] is True


class TestCollectorShape:
    def test_base_collector_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            BaseCollector()  # type: ignore[abstract]

    def test_target_comes_from_configuration(self) -> None:
        cfg = Configuration.from_mapping({"host": "web1", "port": 8080})
        collector = NginxStatusCollector(cfg)
        assert isinstance(collector, BaseCollector)
        assert collector.config is cfg
        assert collector.url == "http://web1:8080/nginx_status"
        assert not hasattr(collector, "poll_every")


class TestCollect:
    def test_sample_on_success(self) -> None:
        result = asyncio.run(_collector(mock_transport()).collect())
        assert result == StatusSample(2, 4, 4, 11, 0, 1, 1)

    def test_fetch_failure_short_circuits(self) -> None:
        result = asyncio.run(_collector(mock_transport(500, NGINX_BODY)).collect())
        assert isinstance(result, NonOkStatus)

    def test_parse_failure(self) -> None:
        result = asyncio.run(_collector(mock_transport(200, "It works!")).collect())
        assert isinstance(result, ParseFailure)
