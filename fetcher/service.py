from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional

from .config import FetcherSettings, load_config
from .lottery import LotteryService, ResultUnavailable
from .thai_lottery import ThaiLotteryClient
from .weather import WeatherService


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )


async def fetch(kind: str, settings: FetcherSettings, date: Optional[str] = None) -> Dict[str, Any]:
    if kind == "lottery":
        service = LotteryService.from_settings(settings.lottery, user_agent=settings.user_agent)
        try:
            return (await service.get_latest()).to_dict()
        finally:
            await service.close()
    if kind == "thai":
        client = ThaiLotteryClient.from_settings(settings.thai_lottery, user_agent=settings.user_agent)
        draw = await client.draw(date) if date else await client.latest()
        return draw.to_dict()
    if kind == "weather":
        weather = WeatherService.from_settings(settings.weather, user_agent=settings.user_agent)
        try:
            return (await weather.get_forecast()).to_dict()
        finally:
            await weather.close()
    raise ValueError(f"Unknown result kind: {kind}")


async def run(args: argparse.Namespace) -> int:
    settings = load_config(args.env_file)
    configure_logging(args.verbose)
    logger = logging.getLogger("udnews.fetcher")

    try:
        payload = await fetch(args.kind, settings, date=args.date)
    except (ResultUnavailable, ValueError) as exc:
        logger.error("Unable to fetch %s results: %s", args.kind, exc)
        return 1

    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch lottery and weather results once")
    parser.add_argument("kind", choices=("lottery", "thai", "weather"), help="Which result to fetch.")
    parser.add_argument("--date", type=str, default=None, help="Draw date (YYYY-MM-DD) for 'thai'.")
    parser.add_argument("--env-file", type=str, default=None, help="Path to .env file with overrides")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging (default INFO)."
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    try:
        code = asyncio.run(run(args))
    except KeyboardInterrupt:
        print("Fetch interrupted by user.", file=sys.stderr)
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
