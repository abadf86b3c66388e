"""
Resource Loader

Fetches audio resources over HTTP(S) with httpx, or from the local
filesystem, and hands the bytes to a decoder.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol
from urllib.parse import unquote, urlparse

import httpx

from playlist_player.application.interfaces.resource_loader import DecodedBuffer, ResourceLoader
from playlist_player.config.settings import LoaderSettings
from playlist_player.domain.shared.exceptions import FetchError
from playlist_player.domain.shared.messages import ErrorMessages, LogTemplates
from playlist_player.infrastructure.audio.wav_decoder import WavDecoder

logger = logging.getLogger(__name__)

_HTTP_SCHEMES = frozenset({"http", "https"})


class AudioDecoder(Protocol):
    def decode(self, data: bytes, resource_ref: str) -> DecodedBuffer: ...


class HttpResourceLoader(ResourceLoader):
    """ResourceLoader backed by httpx for URLs and pathlib for local files.

    A client passed in is borrowed and left open by :meth:`aclose`; a client
    created here is owned and closed with the loader.
    """

    def __init__(
        self,
        settings: LoaderSettings | None = None,
        decoder: AudioDecoder | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or LoaderSettings()
        self._decoder = decoder or WavDecoder()
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> HttpResourceLoader:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def fetch_and_decode(self, resource_ref: str) -> DecodedBuffer:
        data = await self._fetch(resource_ref)
        return self._decoder.decode(data, resource_ref)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.debug(LogTemplates.LOADER_CLOSED)

    async def _fetch(self, resource_ref: str) -> bytes:
        parsed = urlparse(resource_ref)
        if parsed.scheme in _HTTP_SCHEMES:
            return await self._fetch_http(resource_ref)
        if parsed.scheme == "file":
            return await self._read_file(resource_ref, Path(unquote(parsed.path)))
        return await self._read_file(resource_ref, Path(resource_ref))

    async def _fetch_http(self, resource_ref: str) -> bytes:
        logger.debug(LogTemplates.LOADER_FETCHING, resource_ref)
        client = self._get_client()
        try:
            async with client.stream("GET", resource_ref) as response:
                response.raise_for_status()
                return await self._read_body(resource_ref, response)
        except httpx.HTTPStatusError as e:
            raise FetchError(
                resource_ref,
                ErrorMessages.FETCH_HTTP_STATUS.format(status=e.response.status_code),
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(resource_ref, repr(e), cause=e) from e

    async def _read_body(self, resource_ref: str, response: httpx.Response) -> bytes:
        declared = response.headers.get("Content-Length")
        if declared is not None and declared.isdigit():
            self._check_size(resource_ref, int(declared))

        chunks: list[bytes] = []
        received = 0
        async for chunk in response.aiter_bytes():
            received += len(chunk)
            self._check_size(resource_ref, received)
            chunks.append(chunk)
        return b"".join(chunks)

    async def _read_file(self, resource_ref: str, path: Path) -> bytes:
        logger.debug(LogTemplates.LOADER_READING_FILE, path)
        try:
            size = await asyncio.to_thread(lambda: path.stat().st_size)
            self._check_size(resource_ref, size)
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as e:
            raise FetchError(
                resource_ref, ErrorMessages.FETCH_FILE_MISSING.format(path=path), cause=e
            ) from e
        except OSError as e:
            raise FetchError(resource_ref, repr(e), cause=e) from e

    def _check_size(self, resource_ref: str, size: int) -> None:
        if size > self._settings.max_bytes:
            raise FetchError(
                resource_ref,
                ErrorMessages.FETCH_TOO_LARGE.format(max_bytes=self._settings.max_bytes),
            )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._settings.timeout_seconds,
                follow_redirects=self._settings.follow_redirects,
                headers={"User-Agent": self._settings.user_agent},
            )
        return self._client
