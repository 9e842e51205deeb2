"""
HTTP transport for GraphQL documents.

The client talks to a transport through ``send`` (blocking) or ``send_async``.
Any object with those methods can be injected; AiohttpTransport is the
default and performs one POST per call.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

import aiohttp

from .exceptions import TransportErrorHandler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Status code, raw body and headers of one HTTP exchange."""

    status_code: int
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class Transport:
    """Interface of the HTTP boundary used by GraphQLClient."""

    def send(self, url: str, body: str, headers: Mapping[str, str]) -> TransportResponse:
        raise NotImplementedError

    async def send_async(
        self, url: str, body: str, headers: Mapping[str, str]
    ) -> TransportResponse:
        raise NotImplementedError

    async def close(self) -> None:
        return None


class AiohttpTransport(Transport):
    """
    Transport backed by aiohttp.

    ``send`` runs the request on a private event loop and therefore must not
    be called from a coroutine; coroutines use ``send_async``, which reuses
    one ClientSession until ``close`` is awaited.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize transport.

        Args:
            timeout: Total request timeout in seconds
            session: Externally managed session for send_async
        """
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    def send(self, url: str, body: str, headers: Mapping[str, str]) -> TransportResponse:
        """POST ``body`` to ``url`` and block until the response is read."""
        return asyncio.run(self._post_once(url, body, headers))

    async def send_async(
        self, url: str, body: str, headers: Mapping[str, str]
    ) -> TransportResponse:
        """POST ``body`` to ``url`` on the shared session."""
        if self._session is None or self._session.closed:
            self._session = self._create_session()
            self._owns_session = True
        return await self._post(self._session, url, body, headers)

    async def close(self) -> None:
        """Close the shared session if this transport created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _create_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            raise_for_status=False,  # Handle status codes manually
        )

    async def _post_once(
        self, url: str, body: str, headers: Mapping[str, str]
    ) -> TransportResponse:
        async with self._create_session() as session:
            return await self._post(session, url, body, headers)

    async def _post(
        self,
        session: aiohttp.ClientSession,
        url: str,
        body: str,
        headers: Mapping[str, str],
    ) -> TransportResponse:
        start_time = time.time()
        try:
            async with session.post(url, data=body.encode("utf-8"), headers=dict(headers)) as response:
                payload = await response.read()
                result = TransportResponse(
                    status_code=response.status,
                    body=payload,
                    headers=dict(response.headers),
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(
                "GraphQL request to %s failed: %s", url, e,
                extra={"url": url, "duration": time.time() - start_time},
            )
            raise TransportErrorHandler.from_aiohttp_error(
                e, url=url, timeout_value=self.timeout
            ) from e

        duration = time.time() - start_time
        logger.debug(
            "POST %s -> %d (%d bytes in %.3fs)",
            url, result.status_code, len(payload), duration,
            extra={"url": url, "status_code": result.status_code, "duration": duration},
        )
        return result

