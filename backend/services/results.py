from __future__ import annotations

from functools import lru_cache

from fetcher.lottery import LotteryService
from fetcher.thai_lottery import ThaiLotteryClient
from fetcher.weather import WeatherService

from ..config import load_settings


@lru_cache(maxsize=1)
def get_lottery_service() -> LotteryService:
    settings = load_settings().fetcher
    return LotteryService.from_settings(settings.lottery, user_agent=settings.user_agent)


@lru_cache(maxsize=1)
def get_thai_lottery_client() -> ThaiLotteryClient:
    settings = load_settings().fetcher
    return ThaiLotteryClient.from_settings(settings.thai_lottery, user_agent=settings.user_agent)


@lru_cache(maxsize=1)
def get_weather_service() -> WeatherService:
    settings = load_settings().fetcher
    return WeatherService.from_settings(settings.weather, user_agent=settings.user_agent)


def reset_services() -> None:
    get_lottery_service.cache_clear()
    get_thai_lottery_client.cache_clear()
    get_weather_service.cache_clear()
