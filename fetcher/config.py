from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

GLO_HOME_PAGE_URL = "https://www.glo.or.th/home-page"
RAYRIFFY_LATEST_URL = "https://lotto.api.rayriffy.com/latest"
RAYRIFFY_API_BASE = "https://api.rayriffy.com/api"
WEATHER_PAGE_URL = "https://www.tmd.go.th/forecast/province/อุดรธานี"


def _int_from_env(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    return int(value)


def _float_from_env(value: Optional[str], default: float) -> float:
    if value is None or value == "":
        return default
    return float(value)


@dataclass(frozen=True)
class LotterySettings:
    source_url: str = GLO_HOME_PAGE_URL
    fallback_url: str = RAYRIFFY_LATEST_URL
    fresh_ttl_seconds: int = 15 * 60
    stale_ttl_seconds: int = 24 * 60 * 60
    timeout_seconds: int = 15
    fallback_timeout_seconds: int = 10


@dataclass(frozen=True)
class ThaiLotterySettings:
    api_base: str = RAYRIFFY_API_BASE
    fresh_ttl_seconds: int = 5 * 60
    stale_ttl_seconds: int = 24 * 60 * 60
    timeout_seconds: int = 10


@dataclass(frozen=True)
class WeatherSettings:
    url: str = WEATHER_PAGE_URL
    lat: float = 17.4138
    lon: float = 102.7872
    city: str = "อุดรธานี"
    ttl_seconds: int = 5 * 60
    timeout_seconds: int = 10


@dataclass(frozen=True)
class FetcherSettings:
    user_agent: str = "UD-News-Update/1.0"
    lottery: LotterySettings = field(default_factory=LotterySettings)
    thai_lottery: ThaiLotterySettings = field(default_factory=ThaiLotterySettings)
    weather: WeatherSettings = field(default_factory=WeatherSettings)


def load_from_environment() -> FetcherSettings:
    lottery = LotterySettings(
        source_url=os.getenv("GLO_SOURCE_URL", GLO_HOME_PAGE_URL),
        fallback_url=os.getenv("LOTTERY_FALLBACK_URL", RAYRIFFY_LATEST_URL),
        fresh_ttl_seconds=_int_from_env(os.getenv("LOTTERY__FRESH_TTL_SECONDS"), 15 * 60),
        stale_ttl_seconds=_int_from_env(os.getenv("LOTTERY__STALE_TTL_SECONDS"), 24 * 60 * 60),
        timeout_seconds=_int_from_env(os.getenv("LOTTERY__TIMEOUT_SECONDS"), 15),
        fallback_timeout_seconds=_int_from_env(os.getenv("LOTTERY__FALLBACK_TIMEOUT_SECONDS"), 10),
    )

    thai_lottery = ThaiLotterySettings(
        api_base=os.getenv("LOTTERY_API_BASE", RAYRIFFY_API_BASE).rstrip("/"),
        fresh_ttl_seconds=_int_from_env(os.getenv("THAI_LOTTERY__FRESH_TTL_SECONDS"), 5 * 60),
        stale_ttl_seconds=_int_from_env(os.getenv("THAI_LOTTERY__STALE_TTL_SECONDS"), 24 * 60 * 60),
        timeout_seconds=_int_from_env(os.getenv("THAI_LOTTERY__TIMEOUT_SECONDS"), 10),
    )

    weather = WeatherSettings(
        url=os.getenv("WEATHER__URL", WEATHER_PAGE_URL),
        lat=_float_from_env(os.getenv("WEATHER__LAT"), 17.4138),
        lon=_float_from_env(os.getenv("WEATHER__LON"), 102.7872),
        city=os.getenv("WEATHER__CITY", "อุดรธานี"),
        ttl_seconds=_int_from_env(os.getenv("WEATHER__TTL_SECONDS"), 5 * 60),
        timeout_seconds=_int_from_env(os.getenv("WEATHER__TIMEOUT_SECONDS"), 10),
    )

    return FetcherSettings(
        user_agent=os.getenv("FETCHER_USER_AGENT", "UD-News-Update/1.0"),
        lottery=lottery,
        thai_lottery=thai_lottery,
        weather=weather,
    )


@lru_cache(maxsize=1)
def load_config(dotenv_path: Optional[str] = None) -> FetcherSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        default_path = pathlib.Path(".env")
        if default_path.exists():
            load_dotenv(default_path)
    return load_from_environment()
