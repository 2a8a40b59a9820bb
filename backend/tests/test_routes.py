import json
import os
import unittest
from unittest import mock

import backend.config as config_module
from backend.app import create_app
from backend.services.results import reset_services
from fetcher.cache import TwoTierCache
from fetcher.lottery import LotteryService, ResultUnavailable
from fetcher.sources.base import RawPage, ResultSource, SourceError
from fetcher.thai_lottery import FIRST
from fetcher.types import LotteryResult, ThaiLotteryDraw, ThaiLotteryPrizes
from fetcher.weather import default_forecast

LATEST_KEYS = {
    "date",
    "firstPrize",
    "nearFirstPrize",
    "front3",
    "last3",
    "last2",
    "prize2",
    "prize3",
    "prize4",
    "prize5",
    "source",
    "fetchedAt",
}


class FailingSource(ResultSource[LotteryResult]):
    def __init__(self, url: str) -> None:
        self.url = url

    async def fetch_raw(self) -> RawPage:
        raise SourceError(self.url, "HTTP 503", status_code=503)

    def parse(self, page: RawPage) -> LotteryResult:
        raise AssertionError("parse should not be reached")


def _draw() -> ThaiLotteryDraw:
    return ThaiLotteryDraw(
        date="1 ตุลาคม 2568",
        draw_date="2025-10-01",
        government_id="68-019",
        prizes=ThaiLotteryPrizes(first=("123456",), last2=("78",)),
    )


class ResultRoutesTests(unittest.TestCase):
    def setUp(self) -> None:
        os.environ.pop("LOTTERY_HTTP_MAX_AGE", None)
        os.environ.pop("WEATHER_HTTP_MAX_AGE", None)
        config_module.load_settings.cache_clear()
        self.app = create_app()
        self.client = self.app.test_client()

    def tearDown(self) -> None:
        config_module.load_settings.cache_clear()
        reset_services()

    @mock.patch("backend.routes.lottery.get_lottery_service")
    def test_latest_results(self, service_factory):
        service = mock.AsyncMock()
        service.get_latest.return_value = LotteryResult(
            source="https://glo.test/home-page",
            date="16 สิงหาคม 2568",
            first_prize="123456",
            front3=("789", "012"),
            last3=("456", "321"),
            last2="78",
        )
        service_factory.return_value = service

        response = self.client.get("/api/lottery/latest")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["Cache-Control"], "public, max-age=600")
        payload = response.get_json()
        self.assertEqual(set(payload), LATEST_KEYS)
        self.assertEqual(payload["firstPrize"], "123456")
        self.assertEqual(payload["front3"], ["789", "012"])
        self.assertIsNone(payload["prize5"])

    @mock.patch("backend.routes.lottery.get_lottery_service")
    def test_latest_results_unavailable(self, service_factory):
        service = mock.AsyncMock()
        service.get_latest.side_effect = ResultUnavailable("all sources failed")
        service_factory.return_value = service

        response = self.client.get("/api/lottery/latest")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json(), {"error": "all sources failed"})

    @mock.patch("backend.routes.lottery.get_lottery_service")
    def test_latest_results_when_every_source_is_down(self, service_factory):
        service_factory.return_value = LotteryService(
            FailingSource("https://glo.test/home-page"),
            FailingSource("https://lotto.test/latest"),
            TwoTierCache(fresh_ttl=900, stale_ttl=86400),
        )

        response = self.client.get("/api/lottery/latest")

        self.assertEqual(response.status_code, 500)
        self.assertIn("error", response.get_json())

    @mock.patch("backend.routes.lottery.get_thai_lottery_client")
    def test_thai_latest(self, client_factory):
        client = mock.AsyncMock()
        client.latest.return_value = _draw()
        client_factory.return_value = client

        response = self.client.get("/api/lottery/thai/latest")

        self.assertEqual(response.status_code, 200)
        payload = response.get_json()
        self.assertEqual(payload["governmentId"], "68-019")
        self.assertEqual(payload["prizes"]["first"], ["123456"])

    def test_thai_draw_requires_date(self):
        response = self.client.get("/api/lottery/thai/draws")

        self.assertEqual(response.status_code, 400)
        self.assertIn("date", response.get_json()["error"])

    @mock.patch("backend.routes.lottery.get_thai_lottery_client")
    def test_thai_draw_rejects_bad_date(self, client_factory):
        client = mock.AsyncMock()
        client.draw.side_effect = ValueError("date must be YYYY-MM-DD")
        client_factory.return_value = client

        response = self.client.get("/api/lottery/thai/draws?date=01-10-2025")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json(), {"error": "date must be YYYY-MM-DD"})

    @mock.patch("backend.routes.lottery.get_thai_lottery_client")
    def test_thai_draw_upstream_failure(self, client_factory):
        client = mock.AsyncMock()
        client.draw.side_effect = ResultUnavailable("Lottery API error: HTTP 404")
        client_factory.return_value = client

        response = self.client.get("/api/lottery/thai/draws?date=2025-10-01")

        self.assertEqual(response.status_code, 500)
        client.draw.assert_awaited_once_with("2025-10-01")

    def test_check_numbers_requires_numbers(self):
        for body in ({}, {"numbers": []}, {"numbers": "123456"}, ["123456"]):
            response = self.client.post(
                "/api/lottery/thai/check",
                data=json.dumps(body),
                content_type="application/json",
            )
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.get_json(), {"error": "numbers[] is required"})

    @mock.patch("backend.routes.lottery.get_thai_lottery_client")
    def test_check_numbers(self, client_factory):
        client = mock.AsyncMock()
        client.check_numbers.return_value = {
            "draw": _draw().to_dict(),
            "results": [
                {"number": "123456", "matches": [{"prize": FIRST, "match": "123456"}]},
                {"number": "000001", "matches": []},
            ],
        }
        client_factory.return_value = client

        response = self.client.post(
            "/api/lottery/thai/check",
            data=json.dumps({"numbers": [123456, " 000001 "]}),
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 200)
        client.check_numbers.assert_awaited_once_with(["123456", "000001"])
        payload = response.get_json()
        self.assertEqual(payload["draw"]["drawDate"], "2025-10-01")
        self.assertEqual(payload["results"][0]["matches"], [{"prize": FIRST, "match": "123456"}])

    @mock.patch("backend.routes.weather.get_weather_service")
    def test_weather_forecast(self, service_factory):
        service = mock.AsyncMock()
        service.get_forecast.return_value = default_forecast("อุดรธานี")
        service_factory.return_value = service

        response = self.client.get("/api/weather/forecast")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["Cache-Control"], "public, max-age=300")
        payload = response.get_json()
        self.assertEqual(set(payload), {"yesterday", "today", "tomorrow"})
        self.assertEqual(payload["today"]["city"], "อุดรธานี")
        self.assertIn("rainChance", payload["today"])

    @mock.patch("backend.routes.health.get_lottery_service")
    def test_health(self, service_factory):
        service_factory.return_value = LotteryService(
            FailingSource("https://glo.test/home-page"),
            FailingSource("https://lotto.test/latest"),
            TwoTierCache(fresh_ttl=900, stale_ttl=86400),
        )

        response = self.client.get("/api/health")

        self.assertEqual(response.status_code, 200)
        payload = response.get_json()
        self.assertEqual(payload["status"], "healthy")
        self.assertEqual(payload["services"]["api"], "running")
        self.assertIn("fresh", payload["services"]["lotteryCache"])

    def test_unknown_route_returns_json_error(self):
        response = self.client.get("/api/unknown")

        self.assertEqual(response.status_code, 404)
        self.assertIn("error", response.get_json())


if __name__ == "__main__":
    unittest.main()
