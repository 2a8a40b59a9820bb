"""Regex field extraction over normalised page text.

Each field has an ordered list of candidate patterns. Group 1 of a pattern
captures either a single value or a run of values following a label; the
run is split with the field's item pattern. The first pattern that yields
anything wins, and repeated fields stop collecting at a hard cap.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional, Pattern, Sequence, Union

PatternLike = Union[str, Pattern[str]]

THAI_DIGITS = str.maketrans("๐๑๒๓๔๕๖๗๘๙", "0123456789")

# Skips filler between a label and its numbers, e.g. "รางวัลละ 6,000,000 บาท".
_GAP = r"[^0-9]*?(?:[0-9][0-9,.]*\s*(?:บาท|รางวัล)[^0-9]*?)*"


def _digits(count: int) -> str:
    return r"[0-9]{%d}(?![0-9])" % count


def _run(count: int) -> str:
    return r"((?:%s\s*)+)" % _digits(count)


def _labelled(label: str, count: int) -> Pattern[str]:
    return re.compile(label + _GAP + _run(count))


def _compile(pattern: PatternLike) -> Pattern[str]:
    return pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)


def to_ascii_digits(text: str) -> str:
    return text.translate(THAI_DIGITS)


def first_match(text: str, patterns: Iterable[PatternLike]) -> Optional[str]:
    for pattern in patterns:
        match = _compile(pattern).search(text)
        if match:
            return match.group(1).strip()
    return None


def find_all(
    text: str,
    patterns: Iterable[PatternLike],
    cap: int,
    item: PatternLike = r"[0-9]+",
) -> List[str]:
    item_re = _compile(item)
    for pattern in patterns:
        found: List[str] = []
        for match in _compile(pattern).finditer(text):
            found.extend(item_re.findall(match.group(1)))
            if len(found) >= cap:
                break
        if found:
            return found[:cap]
    return []


def first_item(text: str, patterns: Iterable[PatternLike], item: PatternLike) -> Optional[str]:
    run = first_match(text, patterns)
    if run is None:
        return None
    items = _compile(item).findall(run)
    return items[0] if items else None


ONE = r"(?:1|หนึ่ง)(?![0-9])"
TWO = r"(?:2|สอง)(?![0-9])"
THREE = r"(?:3|สาม)(?![0-9])"
FOUR = r"(?:4|สี่)(?![0-9])"
FIVE = r"(?:5|ห้า)(?![0-9])"

DATE_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"งวดวันที่\s*([0-9]{1,2}[^0-9]{1,10}[0-9]{4})"),
    re.compile(r"งวดวันที่\s*([0-9]{1,2}/[0-9]{1,2}/[0-9]{4})"),
    re.compile(r"ผลสลากกินแบ่งรัฐบาล\s*(?:งวด)?\s*([0-9]{1,2}\s*[ก-๙.]+\s*[0-9]{4})"),
)

FIRST_PRIZE_PATTERNS = (
    _labelled(r"(?<!ข้างเคียง)รางวัลที่\s*" + ONE, 6),
    _labelled(r"(?i)first\s*prize", 6),
)

NEAR_FIRST_PATTERNS = (
    _labelled(r"รางวัลข้างเคียงรางวัลที่\s*" + ONE, 6),
    _labelled(r"(?i)prizes?\s*adjacent\s*to\s*the\s*first\s*prize", 6),
)

FRONT3_PATTERNS = (
    _labelled(r"เลขหน้า\s*" + THREE + r"\s*ตัว", 3),
    _labelled(r"(?i)3\s*front\s*digits", 3),
)

LAST3_PATTERNS = (
    _labelled(r"เลขท้าย\s*" + THREE + r"\s*ตัว", 3),
    _labelled(r"(?i)3\s*last\s*digits", 3),
)

LAST2_PATTERNS = (
    _labelled(r"เลขท้าย\s*" + TWO + r"\s*ตัว", 2),
    _labelled(r"(?i)2\s*last\s*digits", 2),
)

PRIZE_TIER_PATTERNS = {
    "prize2": ((_labelled(r"รางวัลที่\s*" + TWO, 6),), 5),
    "prize3": ((_labelled(r"รางวัลที่\s*" + THREE, 6),), 10),
    "prize4": ((_labelled(r"รางวัลที่\s*" + FOUR, 6),), 50),
    "prize5": ((_labelled(r"รางวัลที่\s*" + FIVE, 6),), 100),
}

NEAR_FIRST_CAP = 2
FRONT_LAST3_CAP = 2


def extract_lottery_fields(text: str) -> Dict[str, Any]:
    """Pull GLO draw fields out of flattened page text.

    Missing fields are ``None``; front3/last3 are always lists (maybe empty).
    """
    text = to_ascii_digits(text)
    six, three, two = _digits(6), _digits(3), _digits(2)

    near_first = find_all(text, NEAR_FIRST_PATTERNS, NEAR_FIRST_CAP, item=six)
    fields: Dict[str, Any] = {
        "date": first_match(text, DATE_PATTERNS),
        "first_prize": first_item(text, FIRST_PRIZE_PATTERNS, six),
        "near_first_prize": near_first or None,
        "front3": find_all(text, FRONT3_PATTERNS, FRONT_LAST3_CAP, item=three),
        "last3": find_all(text, LAST3_PATTERNS, FRONT_LAST3_CAP, item=three),
        "last2": first_item(text, LAST2_PATTERNS, two),
    }
    for name, (patterns, cap) in PRIZE_TIER_PATTERNS.items():
        fields[name] = find_all(text, patterns, cap, item=six) or None
    return fields
