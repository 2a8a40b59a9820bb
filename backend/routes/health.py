from __future__ import annotations

import time

from flask import Blueprint, jsonify

from fetcher.types import utc_now_iso

from ..schemas import HealthResponse
from ..services.results import get_lottery_service

bp = Blueprint("health", __name__)

_STARTED_AT = time.monotonic()


@bp.get("/api/health")
def health():
    response = HealthResponse(
        status="healthy",
        timestamp=utc_now_iso(),
        services={
            "api": "running",
            "cache": "active",
            "lotteryCache": get_lottery_service().cache.stats(),
        },
        uptime=int(time.monotonic() - _STARTED_AT),
    )
    return jsonify(response.model_dump())
