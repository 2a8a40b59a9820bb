from __future__ import annotations

import dataclasses
import logging
from typing import Dict, Optional, Tuple

from .cache import SingleFlight, TTLCache
from .config import WeatherSettings
from .sources import ResultSource, WeatherPageSource, WeatherReading
from .types import WeatherForecast, WeatherSummary

CONDITIONS: Dict[str, Tuple[str, str]] = {
    "clear sky": ("แจ่มใส", "☀️"),
    "few clouds": ("เมฆบางส่วน", "🌤️"),
    "scattered clouds": ("เมฆกระจาย", "⛅"),
    "broken clouds": ("เมฆมาก", "☁️"),
    "overcast clouds": ("เมฆครึ้ม", "☁️"),
    "drizzle": ("ฝนปรอยๆ", "🌦️"),
    "shower rain": ("ฝนปรอยๆ", "🌦️"),
    "rain": ("ฝน", "🌧️"),
    "heavy rain": ("ฝนตกหนัก", "🌧️"),
    "thunderstorm": ("พายุฝนฟ้าคะนอง", "⛈️"),
    "snow": ("หิมะ", "🌨️"),
    "mist": ("หมอก", "🌫️"),
}
UNKNOWN_CONDITION = ("ไม่ระบุ", "🌡️")

# Checked in order; the first keyword contained in the condition wins.
RAIN_BASE: Tuple[Tuple[str, int], ...] = (
    ("thunderstorm", 85),
    ("heavy rain", 80),
    ("shower", 70),
    ("drizzle", 55),
    ("rain", 70),
    ("overcast", 35),
    ("broken clouds", 30),
    ("scattered clouds", 20),
    ("mist", 15),
    ("few clouds", 10),
    ("clear", 5),
)
UNKNOWN_RAIN_BASE = 10

THUNDERSTORM_STATUS = "ฝนฟ้าคะนอง"
RAIN_STATUS_BANDS: Tuple[Tuple[int, str], ...] = (
    (80, "ฝนตกแน่นอน"),
    (60, "มีแนวโน้มฝนตก"),
    (40, "อาจมีฝน"),
    (20, "โอกาสฝนน้อย"),
)
NO_RAIN_STATUS = "ไม่มีฝน"


def describe_condition(condition: str) -> Tuple[str, str]:
    return CONDITIONS.get((condition or "").strip().lower(), UNKNOWN_CONDITION)


def humidity_adjustment(humidity: float) -> int:
    if humidity > 85:
        return 15
    if humidity > 75:
        return 10
    if humidity > 65:
        return 5
    if humidity < 40:
        return -10
    return 0


def estimate_rain_chance(condition: str, humidity: float) -> int:
    """Heuristic rain probability from the condition text and humidity."""
    lowered = (condition or "").lower()
    base = next((score for keyword, score in RAIN_BASE if keyword in lowered), UNKNOWN_RAIN_BASE)
    return max(0, min(100, base + humidity_adjustment(humidity)))


def rain_status(chance: int, condition: str = "") -> str:
    if "thunderstorm" in (condition or "").lower():
        return THUNDERSTORM_STATUS
    for threshold, label in RAIN_STATUS_BANDS:
        if chance >= threshold:
            return label
    return NO_RAIN_STATUS


def build_summary(
    city: str,
    temp: int,
    high: int,
    low: int,
    condition: str,
    humidity: int,
    wind: int,
    rain_chance: Optional[int] = None,
) -> WeatherSummary:
    thai, icon = describe_condition(condition)
    if rain_chance is None:
        rain_chance = estimate_rain_chance(condition, humidity)
    rain_chance = max(0, min(100, int(rain_chance)))
    return WeatherSummary(
        temp=temp,
        high=high,
        low=low,
        condition=condition,
        condition_thai=thai,
        icon=icon,
        humidity=humidity,
        wind=wind,
        rain_chance=rain_chance,
        rain_status=rain_status(rain_chance, condition),
        city=city,
    )


def default_forecast(city: str) -> WeatherForecast:
    return WeatherForecast(
        yesterday=build_summary(city, 30, 33, 24, "few clouds", 72, 8),
        today=build_summary(city, 32, 35, 26, "clear sky", 65, 12),
        tomorrow=build_summary(city, 28, 31, 23, "overcast clouds", 78, 15),
    )


def summary_from_reading(reading: WeatherReading, city: str) -> WeatherSummary:
    """Fill gaps in a scraped reading; numeric defaults mirror the fallback day."""
    temp = round(reading.temp) if reading.temp is not None else 32
    high = round(reading.high) if reading.high is not None else temp + 3
    low = round(reading.low) if reading.low is not None else temp - 5
    humidity = round(reading.humidity) if reading.humidity is not None else 65
    wind = round(reading.wind) if reading.wind is not None else 12
    rain = round(reading.rain_chance) if reading.rain_chance is not None else None
    return build_summary(city, temp, high, low, reading.condition or "clear sky", humidity, wind, rain)


def derive_forecast(today: WeatherSummary) -> WeatherForecast:
    """Yesterday and tomorrow are approximations around today's reading."""
    yesterday = dataclasses.replace(
        today,
        temp=today.temp - 2,
        high=today.high - 1,
        low=today.low - 1,
        humidity=max(30, today.humidity - 3),
    )
    tomorrow_humidity = min(90, today.humidity + 3)
    tomorrow = build_summary(
        today.city,
        today.temp + 1,
        today.high + 1,
        today.low,
        today.condition,
        tomorrow_humidity,
        today.wind,
    )
    return WeatherForecast(yesterday=yesterday, today=today, tomorrow=tomorrow)


class WeatherService:
    """Weather summary triple with a short cache and hard-coded defaults.

    Weather tolerates approximation: a failed fetch never raises, it falls
    back to the default forecast, which is not cached.
    """

    def __init__(
        self,
        source: ResultSource[WeatherReading],
        city: str,
        lat: float,
        lon: float,
        cache: TTLCache,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._source = source
        self._city = city
        self._cache_key = f"tmd-forecast-{lat},{lon}"
        self._cache = cache
        self._flight: SingleFlight[WeatherForecast] = SingleFlight()
        self._logger = logger or logging.getLogger("udnews.fetcher.weather")

    @classmethod
    def from_settings(cls, settings: WeatherSettings, user_agent: Optional[str] = None) -> "WeatherService":
        return cls(
            WeatherPageSource(settings.url, timeout_seconds=settings.timeout_seconds, user_agent=user_agent),
            city=settings.city,
            lat=settings.lat,
            lon=settings.lon,
            cache=TTLCache(settings.ttl_seconds),
        )

    @property
    def cache_key(self) -> str:
        return self._cache_key

    async def get_forecast(self) -> WeatherForecast:
        cached = self._cache.get(self._cache_key)
        if cached is not None:
            return cached
        return await self._flight.do(self._cache_key, self._refresh)

    async def _refresh(self) -> WeatherForecast:
        try:
            reading = await self._source.fetch()
        except Exception as exc:
            self._logger.error("Weather fetch failed, using defaults: %s", exc)
            return default_forecast(self._city)
        forecast = derive_forecast(summary_from_reading(reading, self._city))
        self._cache.set(self._cache_key, forecast)
        return forecast

    async def close(self) -> None:
        await self._source.close()
