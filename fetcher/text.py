from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup

logger = logging.getLogger("udnews.fetcher.text")

_TAG_RE = re.compile(r"<[^>]*>")
_SCRIPT_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_WS_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def strip_tags(html: str) -> str:
    """Crude regex flattening used when the HTML parser gives up."""
    without_scripts = _SCRIPT_RE.sub(" ", html)
    return collapse_whitespace(_TAG_RE.sub(" ", without_scripts))


def normalize_html(html: str) -> str:
    """Flatten an HTML page into one whitespace-collapsed line of text.

    Scripts and styles are dropped. Malformed markup never raises: when
    BeautifulSoup fails the raw string is flattened with regexes instead.
    """
    if not html:
        return ""
    try:
        soup = BeautifulSoup(html, "html.parser")
        for node in soup(["script", "style", "noscript"]):
            node.decompose()
        text = soup.get_text(" ")
    except Exception as exc:
        logger.warning("HTML parse failed, using regex flattening: %s", exc)
        return strip_tags(html)
    return collapse_whitespace(text)
