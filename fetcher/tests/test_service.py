import asyncio
import io
import json
import unittest
from contextlib import redirect_stdout
from unittest import mock

from fetcher.config import FetcherSettings
from fetcher.lottery import ResultUnavailable
from fetcher.service import fetch, parse_args, run
from fetcher.types import LotteryResult


class FetchCommandTests(unittest.TestCase):
    def test_parse_args(self) -> None:
        args = parse_args(["thai", "--date", "2025-10-01", "--verbose"])

        self.assertEqual(args.kind, "thai")
        self.assertEqual(args.date, "2025-10-01")
        self.assertTrue(args.verbose)
        self.assertIsNone(args.env_file)

    def test_unknown_kind_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            asyncio.run(fetch("horoscope", FetcherSettings()))

    @mock.patch("fetcher.service.load_config", return_value=FetcherSettings())
    @mock.patch("fetcher.service.LotteryService")
    def test_run_prints_latest_result(self, service_cls, _load_config) -> None:
        service = mock.AsyncMock()
        service.get_latest.return_value = LotteryResult(source="https://glo.test", first_prize="123456")
        service_cls.from_settings.return_value = service

        out = io.StringIO()
        with redirect_stdout(out):
            code = asyncio.run(run(parse_args(["lottery"])))

        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out.getvalue())["firstPrize"], "123456")
        service.close.assert_awaited_once()

    @mock.patch("fetcher.service.load_config", return_value=FetcherSettings())
    @mock.patch("fetcher.service.LotteryService")
    def test_run_returns_error_code_when_unavailable(self, service_cls, _load_config) -> None:
        service = mock.AsyncMock()
        service.get_latest.side_effect = ResultUnavailable("all sources failed")
        service_cls.from_settings.return_value = service

        code = asyncio.run(run(parse_args(["lottery"])))

        self.assertEqual(code, 1)
        service.close.assert_awaited_once()


if __name__ == "__main__":
    unittest.main()
