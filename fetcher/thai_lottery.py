from __future__ import annotations

import asyncio
import datetime as dt
import json
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence
from urllib.parse import quote

from .cache import SingleFlight, TwoTierCache
from .config import ThaiLotterySettings
from .lottery import ResultUnavailable
from .sources.base import SourceError, http_get
from .types import PrizeMatch, ThaiLotteryDraw, ThaiLotteryPrizes

_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

FIRST = "รางวัลที่ 1"
NEAR_FIRST = "รางวัลข้างเคียงรางวัลที่ 1"
SECOND = "รางวัลที่ 2"
THIRD = "รางวัลที่ 3"
FOURTH = "รางวัลที่ 4"
FIFTH = "รางวัลที่ 5"
FRONT3 = "เลขหน้า 3 ตัว"
LAST3 = "เลขท้าย 3 ตัว"
LAST2 = "เลขท้าย 2 ตัว"


def _rewards(section: Any) -> tuple:
    if not isinstance(section, Mapping):
        return ()
    values = section.get("rewards") or []
    return tuple(str(v) for v in values)


def normalize_draw(payload: Any) -> ThaiLotteryDraw:
    """Map the community API payload onto the structure the client renders."""
    response = payload.get("response") if isinstance(payload, Mapping) else None
    response = response if isinstance(response, Mapping) else {}
    date = response.get("date") if isinstance(response.get("date"), Mapping) else {}
    rewards = response.get("rewards") if isinstance(response.get("rewards"), Mapping) else {}
    return ThaiLotteryDraw(
        date=date.get("th") or date.get("en") or "",
        draw_date=date.get("en") or "",
        government_id=str(response.get("governmentID") or ""),
        prizes=ThaiLotteryPrizes(
            first=_rewards(rewards.get("first")),
            near_first=_rewards(rewards.get("near1st")),
            last2=_rewards(rewards.get("last2")),
            first3=_rewards(rewards.get("first3")),
            last3=_rewards(rewards.get("last3")),
            second=_rewards(rewards.get("second")),
            third=_rewards(rewards.get("third")),
            fourth=_rewards(rewards.get("fourth")),
            fifth=_rewards(rewards.get("fifth")),
        ),
    )


def check_number(number: str, prizes: ThaiLotteryPrizes) -> List[PrizeMatch]:
    n = (number or "").strip()
    matches: List[PrizeMatch] = []

    for prize in prizes.first:
        if prize == n:
            matches.append(PrizeMatch(FIRST, prize))
        if prize.isdigit():
            value = int(prize)
            if n in (f"{value - 1:06d}", f"{value + 1:06d}"):
                matches.append(PrizeMatch(NEAR_FIRST, n))

    for label, tier in ((SECOND, prizes.second), (THIRD, prizes.third), (FOURTH, prizes.fourth), (FIFTH, prizes.fifth)):
        matches.extend(PrizeMatch(label, prize) for prize in tier if prize == n)

    matches.extend(PrizeMatch(LAST3, prize) for prize in prizes.last3 if prize == n[-3:])
    matches.extend(PrizeMatch(FRONT3, prize) for prize in prizes.first3 if prize == n[:3])
    matches.extend(PrizeMatch(LAST2, prize) for prize in prizes.last2 if prize == n[-2:])
    return matches


def validate_draw_date(value: str) -> str:
    value = (value or "").strip()
    if not _ISO_DATE.fullmatch(value):
        raise ValueError("date must be YYYY-MM-DD")
    try:
        dt.date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError("date must be YYYY-MM-DD") from exc
    return value


class ThaiLotteryClient:
    """Community lottery API with fresh and stale caching per path."""

    def __init__(
        self,
        api_base: str,
        cache: TwoTierCache,
        timeout_seconds: float = 10,
        user_agent: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._api_base = api_base.rstrip("/")
        self._cache = cache
        self._timeout_seconds = timeout_seconds
        self._headers = {"Accept": "application/json"}
        if user_agent:
            self._headers["User-Agent"] = user_agent
        self._flight: SingleFlight[Any] = SingleFlight()
        self._logger = logger or logging.getLogger("udnews.fetcher.thai_lottery")

    @classmethod
    def from_settings(cls, settings: ThaiLotterySettings, user_agent: Optional[str] = None) -> "ThaiLotteryClient":
        return cls(
            settings.api_base,
            TwoTierCache(settings.fresh_ttl_seconds, settings.stale_ttl_seconds),
            timeout_seconds=settings.timeout_seconds,
            user_agent=user_agent,
        )

    async def latest(self) -> ThaiLotteryDraw:
        return normalize_draw(await self.get_json("/lottery/latest"))

    async def draw(self, date: str) -> ThaiLotteryDraw:
        date = validate_draw_date(date)
        return normalize_draw(await self.get_json(f"/lottery/{quote(date)}"))

    async def check_numbers(self, numbers: Sequence[str]) -> Dict[str, Any]:
        draw = await self.latest()
        results = [
            {"number": str(number), "matches": [m.to_dict() for m in check_number(str(number), draw.prizes)]}
            for number in numbers
        ]
        return {"draw": draw.to_dict(), "results": results}

    async def get_json(self, path: str) -> Any:
        key = f"lottery:{path}"
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        return await self._flight.do(key, lambda: self._refresh(key, path))

    async def _refresh(self, key: str, path: str) -> Any:
        url = f"{self._api_base}{path}"
        try:
            page = await asyncio.to_thread(http_get, url, self._timeout_seconds, self._headers)
            data = json.loads(page.body)
        except (SourceError, json.JSONDecodeError) as exc:
            stale = self._cache.get_stale(key)
            if stale is not None:
                self._logger.warning("Lottery API %s failed, serving stale copy: %s", url, exc)
                return stale
            raise ResultUnavailable(f"Lottery API error: {exc}") from exc
        self._cache.set(key, data)
        return data
