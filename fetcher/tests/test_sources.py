import asyncio
import unittest
from unittest import mock

import requests

from fetcher.sources.base import RawPage, SourceError, http_get
from fetcher.sources.rayriffy import RayriffyLatestSource
from fetcher.sources.weather import WeatherPageSource


def _response(status_code: int = 200, text: str = "", encoding: str = "utf-8"):
    resp = mock.Mock()
    resp.ok = 200 <= status_code < 400
    resp.status_code = status_code
    resp.text = text
    resp.encoding = encoding
    resp.apparent_encoding = "utf-8"
    resp.headers = {"Content-Type": "text/html; charset=utf-8"}
    return resp


class HttpGetTests(unittest.TestCase):
    @mock.patch("fetcher.sources.base.requests.get")
    def test_returns_raw_page(self, get) -> None:
        get.return_value = _response(text="<p>รางวัลที่ 1</p>")

        page = http_get("https://glo.test", 15, {"User-Agent": "test"})

        self.assertEqual(page.body, "<p>รางวัลที่ 1</p>")
        self.assertEqual(page.status_code, 200)
        get.assert_called_once_with(
            "https://glo.test", params=None, headers={"User-Agent": "test"}, timeout=15
        )

    @mock.patch("fetcher.sources.base.requests.get")
    def test_non_2xx_raises_source_error(self, get) -> None:
        get.return_value = _response(status_code=503)

        with self.assertRaises(SourceError) as ctx:
            http_get("https://glo.test", 15)
        self.assertEqual(ctx.exception.status_code, 503)

    @mock.patch("fetcher.sources.base.requests.get")
    def test_network_error_raises_source_error(self, get) -> None:
        get.side_effect = requests.ConnectionError("dns failure")

        with self.assertRaises(SourceError) as ctx:
            http_get("https://glo.test", 15)
        self.assertIsNone(ctx.exception.status_code)
        self.assertIn("dns failure", str(ctx.exception))

    @mock.patch("fetcher.sources.base.requests.get")
    def test_missing_charset_is_guessed(self, get) -> None:
        resp = _response(text="ok", encoding="ISO-8859-1")
        get.return_value = resp

        http_get("https://glo.test", 15)
        self.assertEqual(resp.encoding, "utf-8")


class SourceAdapterTests(unittest.TestCase):
    def test_fallback_rejects_non_json_body(self) -> None:
        source = RayriffyLatestSource(url="https://lotto.test/latest")
        with self.assertRaises(SourceError):
            source.parse(RawPage(url=source.url, body="<html>maintenance</html>"))

    @mock.patch("fetcher.sources.base.requests.get")
    def test_weather_source_fetches_and_parses(self, get) -> None:
        get.return_value = _response(text="<div>อุณหภูมิ 29 °C ความชื้น 70 % เมฆมาก</div>")
        source = WeatherPageSource(url="https://weather.test/udon", timeout_seconds=10, user_agent="ud")

        reading = asyncio.run(source.fetch())

        self.assertEqual(reading.temp, 29.0)
        self.assertEqual(reading.humidity, 70.0)
        self.assertEqual(reading.condition, "broken clouds")
        self.assertEqual(get.call_args.kwargs["headers"], {"User-Agent": "ud"})
        self.assertEqual(get.call_args.kwargs["timeout"], 10)


if __name__ == "__main__":
    unittest.main()
