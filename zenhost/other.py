"""Search suggestions gathered from several search engines."""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import quote_plus

import requests

logger = logging.getLogger(__name__)

_SUGGESTION_PATHS = {
    "bing": "1",
    "google": "0.#.0",
    "baidu": "g.#.q",
    "duckduckgo": "1",
    "startpage": "suggestions.#.text",
}
_GOOGLE_PREFIX = ")]}'"


@dataclass
class SearchEngine:
    """A search engine and the suggestions it returned."""

    name: str
    icon: str
    search_url: str
    reco_url: str
    data: list[str] = field(default_factory=list)


def default_engines() -> list[SearchEngine]:
    """The engines asked for suggestions, in the order they are reported."""
    return [
        SearchEngine(
            name="bing",
            icon="https://files.codelife.cc/itab/search/bing.svg",
            search_url="https://www.bing.com/search?q=",
            reco_url="https://www.bing.com/osjson.aspx?query=",
        ),
        SearchEngine(
            name="google",
            icon="https://files.codelife.cc/itab/search/google.svg",
            search_url="https://www.google.com/search?q=",
            reco_url=(
                "https://www.google.com/complete/search?client=gws-wiz&xssi=t"
                "&hl=en-US&authuser=0&dpr=1&q="
            ),
        ),
        SearchEngine(
            name="baidu",
            icon="https://files.codelife.cc/itab/search/baidu.svg",
            search_url="https://www.baidu.com/s?wd=",
            reco_url="https://www.baidu.com/sugrec?json=1&prod=pc&wd=",
        ),
        SearchEngine(
            name="duckduckgo",
            icon="https://files.codelife.cc/itab/search/duckduckgo.svg",
            search_url="https://duckduckgo.com/?q=",
            reco_url="https://duckduckgo.com/ac/?type=list&q=",
        ),
        SearchEngine(
            name="startpage",
            icon="https://www.startpage.com/sp/cdn/favicons/apple-touch-icon-60x60--default.png",
            search_url="https://www.startpage.com/do/search?q=",
            reco_url=(
                "https://www.startpage.com/suggestions?segment=startpage.udog"
                "&lui=english&q="
            ),
        ),
    ]


def _child(value: Any, key: str) -> Any:
    if isinstance(value, dict):
        return value.get(key)
    if isinstance(value, list) and key.isdigit():
        index = int(key)
        return value[index] if index < len(value) else None
    return None


def _walk(value: Any, parts: list[str]) -> Any:
    if value is None or not parts:
        return value
    head, *rest = parts
    if head == "#":
        if not isinstance(value, list):
            return None
        found = (_walk(item, rest) for item in value)
        return [item for item in found if item is not None]
    return _walk(_child(value, head), rest)


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return json.dumps(value, ensure_ascii=False)


def parse_suggestions(name: str, body: str) -> list[str]:
    """Extract the suggestion strings from an engine's response body."""
    path = _SUGGESTION_PATHS.get(name)
    if path is None:
        return []
    if name == "google":
        body = body.replace(_GOOGLE_PREFIX, "", 1)
    try:
        document = json.loads(body)
    except (TypeError, ValueError):
        return []
    found = _walk(document, path.split("."))
    if found is None:
        return []
    values = found if isinstance(found, list) else [found]
    suggestions = [_text(value) for value in values]
    if name == "google":
        suggestions = [item.replace("<b>", " ").replace("</b>", "") for item in suggestions]
    return suggestions


class OtherService:
    """Asks search engines for suggestions and fetches pages on request."""

    def __init__(self, timeout: float = 3.0):
        self.timeout = timeout

    def _fill(self, engine: SearchEngine, key: str) -> None:
        url = engine.reco_url + quote_plus(key)
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as error:
            logger.error("cannot get search result from %s (%s): %s", engine.name, url, error)
            return
        engine.data = parse_suggestions(engine.name, response.text)

    def search(self, key: str) -> list[SearchEngine]:
        """Every engine with the suggestions it gave for ``key``.

        An engine that cannot be reached is reported with no suggestions.
        """
        engines = default_engines()
        with ThreadPoolExecutor(max_workers=len(engines)) as pool:
            list(pool.map(lambda engine: self._fill(engine, key), engines))
        return engines

    def agent_search(self, url: str) -> bytes:
        """Fetch ``url`` and return the response body.

        Raises requests.RequestException when the request fails.
        """
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as error:
            logger.error("cannot get search result (%s): %s", url, error)
            raise
        return response.content