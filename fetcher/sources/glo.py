from __future__ import annotations

from typing import Optional

from ..config import GLO_HOME_PAGE_URL
from ..extract import extract_lottery_fields
from ..text import normalize_html
from ..types import LotteryResult, as_tuple
from .base import HttpSource, RawPage


class GloHomePageSource(HttpSource[LotteryResult]):
    """Scrape the latest draw from the Government Lottery Office home page."""

    def __init__(
        self,
        url: str = GLO_HOME_PAGE_URL,
        timeout_seconds: float = 15,
        user_agent: Optional[str] = None,
    ) -> None:
        super().__init__(url, timeout_seconds=timeout_seconds, user_agent=user_agent)

    def parse(self, page: RawPage) -> LotteryResult:
        return parse_lottery_text(normalize_html(page.body), source=page.url)


def parse_lottery_text(text: str, source: str) -> LotteryResult:
    fields = extract_lottery_fields(text)
    return LotteryResult(
        source=source,
        date=fields["date"],
        first_prize=fields["first_prize"],
        near_first_prize=as_tuple(fields["near_first_prize"]),
        front3=tuple(fields["front3"]),
        last3=tuple(fields["last3"]),
        last2=fields["last2"],
        prize2=as_tuple(fields["prize2"]),
        prize3=as_tuple(fields["prize3"]),
        prize4=as_tuple(fields["prize4"]),
        prize5=as_tuple(fields["prize5"]),
    )
