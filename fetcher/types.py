from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple


def utc_now_iso() -> str:
    now = dt.datetime.now(dt.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def as_tuple(values: Optional[Sequence[Any]]) -> Optional[Tuple[str, ...]]:
    if values is None:
        return None
    return tuple(str(v) for v in values)


def _as_list(values: Optional[Sequence[str]]) -> Optional[List[str]]:
    return list(values) if values is not None else None


# Optional fields that take part in the field-by-field merge, in payload order.
LOTTERY_FIELDS = (
    "date",
    "first_prize",
    "near_first_prize",
    "front3",
    "last3",
    "last2",
    "prize2",
    "prize3",
    "prize4",
    "prize5",
)


@dataclass(frozen=True)
class LotteryResult:
    """Latest GLO draw as extracted from one or more sources.

    Every prize field is optional: ``None`` (or an empty tuple for the
    front/last three digit sets) means the extractor did not find it.
    """

    source: str
    fetched_at: str = field(default_factory=utc_now_iso)
    date: Optional[str] = None
    first_prize: Optional[str] = None
    near_first_prize: Optional[Tuple[str, ...]] = None
    front3: Tuple[str, ...] = ()
    last3: Tuple[str, ...] = ()
    last2: Optional[str] = None
    prize2: Optional[Tuple[str, ...]] = None
    prize3: Optional[Tuple[str, ...]] = None
    prize4: Optional[Tuple[str, ...]] = None
    prize5: Optional[Tuple[str, ...]] = None

    def is_complete(self) -> bool:
        """Whether the draw is trustworthy enough to cache and serve as fresh."""
        return bool(self.first_prize and self.front3 and self.last3 and self.last2)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "firstPrize": self.first_prize,
            "nearFirstPrize": _as_list(self.near_first_prize),
            "front3": list(self.front3),
            "last3": list(self.last3),
            "last2": self.last2,
            "prize2": _as_list(self.prize2),
            "prize3": _as_list(self.prize3),
            "prize4": _as_list(self.prize4),
            "prize5": _as_list(self.prize5),
            "source": self.source,
            "fetchedAt": self.fetched_at,
        }


@dataclass(frozen=True)
class WeatherSummary:
    temp: int
    high: int
    low: int
    condition: str
    condition_thai: str
    icon: str
    humidity: int
    wind: int
    rain_chance: int
    rain_status: str
    city: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "temp": self.temp,
            "high": self.high,
            "low": self.low,
            "condition": self.condition,
            "conditionThai": self.condition_thai,
            "icon": self.icon,
            "humidity": self.humidity,
            "wind": self.wind,
            "rainChance": self.rain_chance,
            "rainStatus": self.rain_status,
            "city": self.city,
        }


@dataclass(frozen=True)
class WeatherForecast:
    yesterday: WeatherSummary
    today: WeatherSummary
    tomorrow: WeatherSummary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "yesterday": self.yesterday.to_dict(),
            "today": self.today.to_dict(),
            "tomorrow": self.tomorrow.to_dict(),
        }


@dataclass(frozen=True)
class ThaiLotteryPrizes:
    first: Tuple[str, ...] = ()
    near_first: Tuple[str, ...] = ()
    last2: Tuple[str, ...] = ()
    first3: Tuple[str, ...] = ()
    last3: Tuple[str, ...] = ()
    second: Tuple[str, ...] = ()
    third: Tuple[str, ...] = ()
    fourth: Tuple[str, ...] = ()
    fifth: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "first": list(self.first),
            "nearFirst": list(self.near_first),
            "last2": list(self.last2),
            "first3": list(self.first3),
            "last3": list(self.last3),
            "second": list(self.second),
            "third": list(self.third),
            "fourth": list(self.fourth),
            "fifth": list(self.fifth),
        }


@dataclass(frozen=True)
class ThaiLotteryDraw:
    """Community lottery API draw, normalised for the client."""

    date: str
    draw_date: str
    government_id: str
    prizes: ThaiLotteryPrizes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "drawDate": self.draw_date,
            "governmentId": self.government_id,
            "prizes": self.prizes.to_dict(),
        }


@dataclass(frozen=True)
class PrizeMatch:
    prize: str
    match: str

    def to_dict(self) -> Dict[str, str]:
        return {"prize": self.prize, "match": self.match}
