"""Default transport built on httpx.

Example:
    >>> transport = HttpxTransport(verify_ssl=True)
    >>> raw = await transport.send(TransportRequest("GET", "https://example.com"))
    >>> raw.status
    200
    >>> await transport.aclose()
"""

from __future__ import annotations

import logging

import httpx

from .base import RawResponse, TransportRequest

logger = logging.getLogger("reqkit.transport")


class HttpxTransport:
    """Transport backed by lazily created ``httpx.AsyncClient`` instances.

    One client is kept per distinct proxy URL (``None`` for direct
    connections). httpx exceptions propagate unchanged.

    Args:
        verify_ssl: Verify TLS certificates
        follow_redirects: Follow 3xx responses
        transport: Optional httpx transport (e.g. ``httpx.MockTransport``) used
            for every client, mainly for tests
    """

    def __init__(
        self,
        *,
        verify_ssl: bool = True,
        follow_redirects: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._verify = verify_ssl
        self._follow_redirects = follow_redirects
        self._transport = transport
        self._clients: dict[str | None, httpx.AsyncClient] = {}

    def _get_client(self, proxy_url: str | None) -> httpx.AsyncClient:
        """Get or create the client for a proxy URL.

        No await between lookup and insert, so concurrent callers on one
        event loop never create duplicates.
        """
        if (client := self._clients.get(proxy_url)) is None:
            if proxy_url is not None:
                logger.debug("creating proxied client")
            client = httpx.AsyncClient(
                verify=self._verify,
                follow_redirects=self._follow_redirects,
                proxy=proxy_url if self._transport is None else None,
                transport=self._transport,
            )
            self._clients[proxy_url] = client
        return client

    async def send(self, request: TransportRequest) -> RawResponse:
        client = self._get_client(request.proxy.url if request.proxy is not None else None)
        response = await client.request(
            method=request.method,
            url=request.url,
            headers=request.headers,
            content=request.content,
            timeout=request.timeout,
        )
        return RawResponse(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers),
            body=response.text,
        )

    async def aclose(self) -> None:
        """Close every client."""
        clients, self._clients = list(self._clients.values()), {}
        for client in clients:
            await client.aclose()
