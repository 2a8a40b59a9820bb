from .base import HttpSource, RawPage, ResultSource, SourceError
from .glo import GloHomePageSource
from .rayriffy import RayriffyLatestSource
from .weather import WeatherPageSource, WeatherReading

__all__ = [
    "HttpSource",
    "RawPage",
    "ResultSource",
    "SourceError",
    "GloHomePageSource",
    "RayriffyLatestSource",
    "WeatherPageSource",
    "WeatherReading",
]
