from __future__ import annotations

import asyncio
from typing import Mapping

import httpx
from pydantic import ValidationError

from version_watch.core.errors import FetchError
from version_watch.schemas.info import ServerInfo

_DEFAULT_TIMEOUT = httpx.Timeout(5.0)
_DEFAULT_HEADERS: Mapping[str, str] = {
    "User-Agent": "version-watch-client/1.0",
    "Accept": "application/json",
}


def _coerce_timeout(value: httpx.Timeout | float | int | None) -> httpx.Timeout:
    if isinstance(value, httpx.Timeout):
        return value
    if isinstance(value, (int, float)):
        return httpx.Timeout(value)
    return _DEFAULT_TIMEOUT


def _trim(text: str | None, *, limit: int = 200) -> str | None:
    if text is None:
        return None
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


class InfoClient:
    """Async client for a server's ``/info`` endpoint.

    Every failure mode (connection, timeout, non-200 status, malformed body)
    surfaces as :class:`FetchError` so the poller only has one error to handle.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: httpx.Timeout | float | int | None = None,
        headers: Mapping[str, str] | None = None,
        verify: bool | str = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not url:
            raise ValueError("url is required")
        self._url = url
        self._timeout = _coerce_timeout(timeout)
        merged = dict(_DEFAULT_HEADERS)
        if headers:
            merged.update(headers)
        self._headers = merged
        self._verify = verify
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def url(self) -> str:
        return self._url

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            async with self._client_lock:
                if self._client is None:
                    self._client = httpx.AsyncClient(
                        timeout=self._timeout,
                        headers=self._headers,
                        verify=self._verify,
                        transport=self._transport,
                    )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "InfoClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def fetch_info(self) -> ServerInfo:
        client = await self._get_client()
        try:
            response = await client.get(self._url)
        except httpx.TimeoutException as exc:
            raise FetchError(f"HTTP request timed out: {exc!r}", url=self._url) from exc
        except httpx.RequestError as exc:
            raise FetchError(f"HTTP request failed: {exc}", url=self._url) from exc

        if response.status_code != httpx.codes.OK:
            detail = _trim(response.text)
            message = f"server returned status code {response.status_code}"
            if detail:
                message = f"{message}: {detail}"
            raise FetchError(message, url=self._url, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchError(f"failed to parse JSON: {exc}", url=self._url, status_code=response.status_code) from exc
        try:
            return ServerInfo.model_validate(payload)
        except ValidationError as exc:
            raise FetchError(
                f"malformed info payload: {_trim(str(payload))}",
                url=self._url,
                status_code=response.status_code,
            ) from exc

    async def fetch_version(self) -> str:
        info = await self.fetch_info()
        return info.version
