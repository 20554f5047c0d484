"""Collector for the nginx stub_status page served over HTTP(S)."""

from __future__ import annotations

import httpx

from .base import BaseCollector
from .config import TLS_PORT, Configuration
from .errors import FetchFailure, NonOkStatus, ParseFailure, TransportError
from .stub_status import StatusSample, parse

FETCH_TIMEOUT = 5.0


class NginxStatusCollector(BaseCollector):
    def __init__(
        self,
        config: Configuration,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.url = config.url
        self._transport = transport

    async def fetch(self) -> str | FetchFailure:
        """GET the status page once; a non-200 reply or network error is returned, not raised."""
        # Certificate checks are skipped on 443: the page is normally a local endpoint.
        verify = self.config.port != TLS_PORT
        try:
            async with httpx.AsyncClient(
                timeout=FETCH_TIMEOUT, verify=verify, transport=self._transport
            ) as client:
                resp = await client.get(self.url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return TransportError(url=self.url, cause=e)

        if resp.status_code != 200:
            return NonOkStatus(url=self.url, code=resp.status_code)
        return resp.text

    async def collect(self) -> StatusSample | FetchFailure | ParseFailure:
        body = await self.fetch()
        if isinstance(body, FetchFailure):
            return body
        return parse(body)
