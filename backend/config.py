from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from fetcher.config import FetcherSettings, load_from_environment


@dataclass(frozen=True)
class FlaskSettings:
    secret_key: str = "udnews-dev-secret"
    debug: bool = True


@dataclass(frozen=True)
class HttpCacheSettings:
    lottery_max_age: int = 600
    weather_max_age: int = 300


@dataclass(frozen=True)
class AppSettings:
    flask: FlaskSettings
    http_cache: HttpCacheSettings
    fetcher: FetcherSettings


def _int_env(key: str, default: int) -> int:
    value = os.getenv(key)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {key} must be an integer, got {value!r}") from exc


@lru_cache(maxsize=1)
def load_settings(dotenv_path: Optional[str] = None) -> AppSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        load_dotenv()

    flask_settings = FlaskSettings(
        secret_key=os.getenv("FLASK_SECRET_KEY", "udnews-dev-secret"),
        debug=os.getenv("FLASK_DEBUG", "1") == "1",
    )

    http_cache = HttpCacheSettings(
        lottery_max_age=_int_env("LOTTERY_HTTP_MAX_AGE", 600),
        weather_max_age=_int_env("WEATHER_HTTP_MAX_AGE", 300),
    )

    return AppSettings(
        flask=flask_settings,
        http_cache=http_cache,
        fetcher=load_from_environment(),
    )
