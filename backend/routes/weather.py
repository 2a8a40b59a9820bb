from __future__ import annotations

import asyncio

from flask import Blueprint, jsonify

from ..config import load_settings
from ..services.results import get_weather_service

bp = Blueprint("weather", __name__)


@bp.get("/forecast")
def weather_forecast():
    forecast = asyncio.run(get_weather_service().get_forecast())
    response = jsonify(forecast.to_dict())
    max_age = load_settings().http_cache.weather_max_age
    response.headers["Cache-Control"] = f"public, max-age={max_age}"
    return response
