from __future__ import annotations

import asyncio

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from fetcher.lottery import ResultUnavailable

from ..config import load_settings
from ..schemas import LotteryResultResponse, NumberCheckRequest, NumberCheckResult
from ..services.results import get_lottery_service, get_thai_lottery_client

bp = Blueprint("lottery", __name__)


@bp.get("/latest")
def latest_results():
    try:
        result = asyncio.run(get_lottery_service().get_latest())
    except ResultUnavailable as exc:
        current_app.logger.error("Lottery results unavailable: %s", exc)
        return jsonify({"error": str(exc)}), 500

    response = jsonify(LotteryResultResponse(**result.to_dict()).model_dump())
    max_age = load_settings().http_cache.lottery_max_age
    response.headers["Cache-Control"] = f"public, max-age={max_age}"
    return response


@bp.get("/thai/latest")
def thai_latest():
    try:
        draw = asyncio.run(get_thai_lottery_client().latest())
    except ResultUnavailable as exc:
        return jsonify({"error": str(exc) or "Failed to fetch latest lottery"}), 500
    return jsonify(draw.to_dict())


@bp.get("/thai/draws")
def thai_draw_by_date():
    date = (request.args.get("date") or "").strip()
    if not date:
        return jsonify({"error": "date is required (YYYY-MM-DD)"}), 400
    try:
        draw = asyncio.run(get_thai_lottery_client().draw(date))
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    except ResultUnavailable as exc:
        return jsonify({"error": str(exc) or "Failed to fetch lottery draw"}), 500
    return jsonify(draw.to_dict())


@bp.post("/thai/check")
def thai_check_numbers():
    payload = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict):
        payload = {}
    try:
        data = NumberCheckRequest(**payload)
    except ValidationError:
        return jsonify({"error": "numbers[] is required"}), 400

    try:
        checked = asyncio.run(get_thai_lottery_client().check_numbers(data.numbers))
    except ResultUnavailable as exc:
        return jsonify({"error": str(exc) or "Failed to check numbers"}), 500

    results = [NumberCheckResult(**item).model_dump() for item in checked["results"]]
    return jsonify({"draw": checked["draw"], "results": results})
