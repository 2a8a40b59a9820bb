from __future__ import annotations

import abc
import asyncio
import datetime as dt
from dataclasses import dataclass, field
from typing import Generic, Mapping, Optional, TypeVar

import requests

T = TypeVar("T")


class SourceError(RuntimeError):
    """Raised when an upstream page cannot be fetched."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.status_code = status_code


@dataclass(frozen=True)
class RawPage:
    """Body of one upstream response, kept as text for the parser."""

    url: str
    body: str
    status_code: int = 200
    content_type: str = "text/html"
    fetched_at: dt.datetime = field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))


def http_get(
    url: str,
    timeout_seconds: float,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, str]] = None,
) -> RawPage:
    try:
        resp = requests.get(url, params=params, headers=dict(headers or {}), timeout=timeout_seconds)
    except requests.RequestException as exc:
        raise SourceError(url, f"request failed: {exc}") from exc
    if not resp.ok:
        raise SourceError(url, f"HTTP {resp.status_code}", status_code=resp.status_code)
    if resp.encoding is None or resp.encoding.lower() == "iso-8859-1":
        # Thai pages are routinely served without a charset.
        resp.encoding = resp.apparent_encoding or "utf-8"
    return RawPage(
        url=url,
        body=resp.text,
        status_code=resp.status_code,
        content_type=resp.headers.get("Content-Type", ""),
    )


class ResultSource(abc.ABC, Generic[T]):
    """One external page behind a narrow fetch/parse interface.

    ``fetch_raw`` does the I/O and ``parse`` is pure, so parsers can be
    exercised against fixture text without touching the network.
    """

    url: str

    @abc.abstractmethod
    async def fetch_raw(self) -> RawPage:
        """Download the page. Raise `SourceError` on network or HTTP failure."""

    @abc.abstractmethod
    def parse(self, page: RawPage) -> T:
        """Turn a raw page into a (possibly partial) payload."""

    async def fetch(self) -> T:
        page = await self.fetch_raw()
        return self.parse(page)

    async def close(self) -> None:
        """Optional hook for connectors that require cleanup."""
        return None


class HttpSource(ResultSource[T]):
    """Source fetched with a single GET; no retries."""

    def __init__(self, url: str, timeout_seconds: float = 10, user_agent: Optional[str] = None) -> None:
        self.url = url
        self._timeout_seconds = timeout_seconds
        self._headers = {"User-Agent": user_agent} if user_agent else {}

    async def fetch_raw(self) -> RawPage:
        return await asyncio.to_thread(http_get, self.url, self._timeout_seconds, self._headers)
