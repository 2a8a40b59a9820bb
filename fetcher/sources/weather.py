from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..config import WEATHER_PAGE_URL
from ..extract import first_match, to_ascii_digits
from ..text import normalize_html
from .base import HttpSource, RawPage

_NUM = r"(-?[0-9]{1,3}(?:\.[0-9]+)?)"

TEMP_PATTERNS = (
    re.compile(r"อุณหภูมิ(?:ปัจจุบัน)?\s*:?\s*" + _NUM + r"\s*(?:°|องศา)"),
    re.compile(r"(?i)temperature\s*:?\s*" + _NUM),
    re.compile(_NUM + r"\s*°\s*C"),
)
HIGH_PATTERNS = (
    re.compile(r"(?:อุณหภูมิ)?สูงสุด\s*:?\s*" + _NUM),
    re.compile(r"(?i)\b(?:max|high)\s*:?\s*" + _NUM),
)
LOW_PATTERNS = (
    re.compile(r"(?:อุณหภูมิ)?ต่ำสุด\s*:?\s*" + _NUM),
    re.compile(r"(?i)\b(?:min|low)\s*:?\s*" + _NUM),
)
HUMIDITY_PATTERNS = (
    re.compile(r"ความชื้น(?:สัมพัทธ์)?\s*:?\s*" + _NUM + r"\s*%"),
    re.compile(r"(?i)humidity\s*:?\s*" + _NUM),
)
WIND_PATTERNS = (
    re.compile(r"(?:ความเร็ว)?ลม\s*:?\s*" + _NUM + r"\s*(?:กม\.?/ชม\.?|km/h)"),
    re.compile(r"(?i)wind\s*(?:speed)?\s*:?\s*" + _NUM),
)
RAIN_PATTERNS = (
    re.compile(r"(?:โอกาส(?:เกิด)?ฝน|ฝนตก)\s*:?\s*" + _NUM + r"\s*%"),
    re.compile(r"ร้อยละ\s*" + _NUM + r"\s*ของพื้นที่"),
    re.compile(r"(?i)(?:chance\s*of\s*rain|rain\s*probability)\s*:?\s*" + _NUM),
)

# Ordered: the first keyword found in the page decides the raw condition.
CONDITION_KEYWORDS: Sequence[Tuple[str, str]] = (
    ("ฝนฟ้าคะนอง", "thunderstorm"),
    ("thunderstorm", "thunderstorm"),
    ("ฝนตกหนัก", "heavy rain"),
    ("heavy rain", "heavy rain"),
    ("ฝนปรอย", "shower rain"),
    ("shower", "shower rain"),
    ("drizzle", "drizzle"),
    ("ฝน", "rain"),
    ("rain", "rain"),
    ("เมฆครึ้ม", "overcast clouds"),
    ("overcast", "overcast clouds"),
    ("เมฆมาก", "broken clouds"),
    ("broken clouds", "broken clouds"),
    ("เมฆเป็นส่วนมาก", "broken clouds"),
    ("เมฆกระจาย", "scattered clouds"),
    ("scattered clouds", "scattered clouds"),
    ("เมฆบางส่วน", "few clouds"),
    ("few clouds", "few clouds"),
    ("หมอก", "mist"),
    ("mist", "mist"),
    ("แจ่มใส", "clear sky"),
    ("clear", "clear sky"),
)


@dataclass(frozen=True)
class WeatherReading:
    """Whatever the weather page yielded; gaps are filled by the service."""

    temp: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    humidity: Optional[float] = None
    wind: Optional[float] = None
    rain_chance: Optional[float] = None
    condition: Optional[str] = None


def _number(text: str, patterns) -> Optional[float]:
    value = first_match(text, patterns)
    return float(value) if value is not None else None


_RAIN_CHANCE_LABEL = re.compile(r"(?i)โอกาส(?:เกิด)?ฝน|chance\s*of\s*rain|rain\s*probability")


def detect_condition(text: str) -> Optional[str]:
    lowered = _RAIN_CHANCE_LABEL.sub(" ", text).lower()
    for keyword, condition in CONDITION_KEYWORDS:
        if keyword in lowered:
            return condition
    return None


def parse_weather_text(text: str) -> WeatherReading:
    text = to_ascii_digits(text)
    return WeatherReading(
        temp=_number(text, TEMP_PATTERNS),
        high=_number(text, HIGH_PATTERNS),
        low=_number(text, LOW_PATTERNS),
        humidity=_number(text, HUMIDITY_PATTERNS),
        wind=_number(text, WIND_PATTERNS),
        rain_chance=_number(text, RAIN_PATTERNS),
        condition=detect_condition(text),
    )


class WeatherPageSource(HttpSource[WeatherReading]):
    """Scrape current conditions for one province from a weather page."""

    def __init__(
        self,
        url: str = WEATHER_PAGE_URL,
        timeout_seconds: float = 10,
        user_agent: Optional[str] = None,
    ) -> None:
        super().__init__(url, timeout_seconds=timeout_seconds, user_agent=user_agent)

    def parse(self, page: RawPage) -> WeatherReading:
        return parse_weather_text(normalize_html(page.body))
