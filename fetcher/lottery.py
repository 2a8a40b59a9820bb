from __future__ import annotations

import dataclasses
import logging
from typing import Dict, Optional, Tuple

from .cache import SingleFlight, TwoTierCache
from .config import LotterySettings
from .sources import GloHomePageSource, RayriffyLatestSource, ResultSource
from .types import LOTTERY_FIELDS, LotteryResult, utc_now_iso

CACHE_KEY = "lottery_latest"


class ResultUnavailable(RuntimeError):
    """Every live source failed and nothing usable was cached."""


def _present(value) -> bool:
    return value is not None and value != "" and value != ()


def merge_results(primary: LotteryResult, fallback: LotteryResult) -> Tuple[LotteryResult, Dict[str, str]]:
    """Merge two extractions field by field, primary first.

    Returns the merged payload and a map of field name to the URL that
    supplied it. ``source`` is the fallback URL as soon as the fallback
    contributed any field, otherwise the primary URL.
    """
    values = {}
    provenance: Dict[str, str] = {}
    for name in LOTTERY_FIELDS:
        mine = getattr(primary, name)
        theirs = getattr(fallback, name)
        if _present(mine):
            values[name] = mine
            provenance[name] = primary.source
        elif _present(theirs):
            values[name] = theirs
            provenance[name] = fallback.source
        else:
            values[name] = mine
    used_fallback = fallback.source in provenance.values()
    merged = dataclasses.replace(
        primary,
        source=fallback.source if used_fallback else primary.source,
        fetched_at=utc_now_iso(),
        **values,
    )
    return merged, provenance


class LotteryService:
    """Latest GLO draw: primary scrape, fallback API, merge, gate, cache.

    Each cache miss attempts every source at most once. Only payloads that
    pass ``LotteryResult.is_complete`` are cached; an incomplete payload is
    returned for that request only.
    """

    def __init__(
        self,
        primary: ResultSource[LotteryResult],
        fallback: Optional[ResultSource[LotteryResult]],
        cache: TwoTierCache,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._primary = primary
        self._fallback = fallback
        self._cache = cache
        self._flight: SingleFlight[LotteryResult] = SingleFlight()
        self._logger = logger or logging.getLogger("udnews.fetcher.lottery")

    @classmethod
    def from_settings(cls, settings: LotterySettings, user_agent: Optional[str] = None) -> "LotteryService":
        return cls(
            primary=GloHomePageSource(
                settings.source_url, timeout_seconds=settings.timeout_seconds, user_agent=user_agent
            ),
            fallback=RayriffyLatestSource(
                settings.fallback_url,
                timeout_seconds=settings.fallback_timeout_seconds,
                user_agent=user_agent,
            ),
            cache=TwoTierCache(settings.fresh_ttl_seconds, settings.stale_ttl_seconds),
        )

    @property
    def cache(self) -> TwoTierCache:
        return self._cache

    async def get_latest(self) -> LotteryResult:
        cached = self._cache.get(CACHE_KEY)
        if cached is not None:
            self._logger.debug("Serving lottery result from fresh cache")
            return cached
        return await self._flight.do(CACHE_KEY, self._refresh)

    async def _refresh(self) -> LotteryResult:
        try:
            result = await self._fetch_live()
        except ResultUnavailable as exc:
            stale = self._cache.get_stale(CACHE_KEY)
            if stale is not None:
                self._logger.warning("All lottery sources failed, serving stale result: %s", exc)
                return stale
            raise

        if result.is_complete():
            self._cache.set(CACHE_KEY, result)
        else:
            self._logger.warning("Lottery result incomplete; returning without caching")
        return result

    async def _fetch_live(self) -> LotteryResult:
        primary_result: Optional[LotteryResult] = None
        primary_error: Optional[Exception] = None
        try:
            primary_result = await self._primary.fetch()
        except Exception as exc:
            primary_error = exc
            self._logger.warning("Primary lottery source %s failed: %s", self._primary.url, exc)

        if primary_result is not None and primary_result.is_complete():
            return primary_result
        if self._fallback is None:
            if primary_result is not None:
                return primary_result
            raise ResultUnavailable(f"Lottery source failed: {primary_error}") from primary_error

        self._logger.info("Trying fallback lottery source %s", self._fallback.url)
        try:
            fallback_result = await self._fallback.fetch()
        except Exception as exc:
            self._logger.warning("Fallback lottery source %s failed: %s", self._fallback.url, exc)
            if primary_result is not None:
                return primary_result
            raise ResultUnavailable(
                f"All lottery sources failed: primary: {primary_error}; fallback: {exc}"
            ) from exc

        if primary_result is None:
            return fallback_result
        merged, provenance = merge_results(primary_result, fallback_result)
        self._logger.debug("Merged lottery fields: %s", provenance)
        return merged

    async def close(self) -> None:
        await self._primary.close()
        if self._fallback is not None:
            await self._fallback.close()
