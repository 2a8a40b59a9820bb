from __future__ import annotations

import json
from typing import Any, Iterable, List, Mapping, Optional

from ..config import RAYRIFFY_LATEST_URL
from ..types import LotteryResult
from .base import HttpSource, RawPage, SourceError

# The community API has shipped both keyed objects and id-tagged lists.
_PRIZE_IDS = {
    "first": ("prizeFirst", "first"),
    "near": ("prizeFirstNear", "nearby", "nearFirst", "near1st"),
    "second": ("prizeSecond", "second", "prize2"),
    "third": ("prizeThird", "third", "prize3"),
    "fourth": ("prizeForth", "prizeFourth", "forth", "fourth", "prize4"),
    "fifth": ("prizeFifth", "fifth", "prize5"),
}

_RUNNING_IDS = {
    "front3": ("runningNumberFrontThree", "frontThree", "front3"),
    "last3": ("runningNumberBackThree", "backThree", "last3"),
    "last2": ("runningNumberBackTwo", "backTwo", "last2"),
}


def _numbers(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        for key in ("number", "numbers", "rewards"):
            if key in value:
                return _numbers(value[key])
        return []
    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for item in value:
            out.extend(_numbers(item))
        return out
    text = str(value).strip()
    return [text] if text else []


def _lookup(section: Any, ids: Iterable[str]) -> List[str]:
    ids = tuple(ids)
    if isinstance(section, Mapping):
        for key in ids:
            if key in section:
                return _numbers(section[key])
        return []
    if isinstance(section, list):
        for entry in section:
            if isinstance(entry, Mapping) and entry.get("id") in ids:
                return _numbers(entry)
    return []


def _optional(values: List[str]) -> Optional[tuple]:
    return tuple(values) if values else None


def parse_rayriffy_latest(payload: Any, source: str) -> LotteryResult:
    if not isinstance(payload, Mapping):
        raise ValueError("lottery API returned non-object payload")
    resp = payload.get("response") or payload.get("data") or payload
    if not isinstance(resp, Mapping):
        raise ValueError("lottery API response is not an object")

    prizes = resp.get("prizes") or {}
    running = resp.get("runningNumbers") or resp.get("running") or {}

    first = _lookup(prizes, _PRIZE_IDS["first"])
    last2 = _lookup(running, _RUNNING_IDS["last2"])
    date = resp.get("date") or resp.get("draw")
    return LotteryResult(
        source=source,
        date=str(date) if date else None,
        first_prize=first[0] if first else None,
        near_first_prize=_optional(_lookup(prizes, _PRIZE_IDS["near"])[:2]),
        front3=tuple(_lookup(running, _RUNNING_IDS["front3"])[:2]),
        last3=tuple(_lookup(running, _RUNNING_IDS["last3"])[:2]),
        last2=last2[0] if last2 else None,
        prize2=_optional(_lookup(prizes, _PRIZE_IDS["second"])[:5]),
        prize3=_optional(_lookup(prizes, _PRIZE_IDS["third"])[:10]),
        prize4=_optional(_lookup(prizes, _PRIZE_IDS["fourth"])[:50]),
        prize5=_optional(_lookup(prizes, _PRIZE_IDS["fifth"])[:100]),
    )


class RayriffyLatestSource(HttpSource[LotteryResult]):
    """Fallback for the GLO scraper: the community lottery JSON API."""

    def __init__(
        self,
        url: str = RAYRIFFY_LATEST_URL,
        timeout_seconds: float = 10,
        user_agent: Optional[str] = None,
    ) -> None:
        super().__init__(url, timeout_seconds=timeout_seconds, user_agent=user_agent)

    def parse(self, page: RawPage) -> LotteryResult:
        try:
            payload = json.loads(page.body)
        except json.JSONDecodeError as exc:
            raise SourceError(page.url, "response is not JSON") from exc
        try:
            return parse_rayriffy_latest(payload, source=page.url)
        except ValueError as exc:
            raise SourceError(page.url, str(exc)) from exc
