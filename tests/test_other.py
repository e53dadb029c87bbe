import re

import pytest
import requests
import responses

from zenhost.other import OtherService, default_engines, parse_suggestions

ENGINE_NAMES = ["bing", "google", "baidu", "duckduckgo", "startpage"]

BODIES = {
    "bing": '["test",["test one","test two"]]',
    "google": ')]}\'\n[[["te<b>st</b> case",0,[512]]],{"q":"x"}]',
    "baidu": '{"q":"test","g":[{"type":"sug","q":"test baidu"}]}',
    "duckduckgo": '["test",["test duck"]]',
    "startpage": '{"suggestions":[{"text":"test start"}]}',
}


def _pattern(reco_url: str) -> re.Pattern:
    return re.compile(re.escape(reco_url.split("?")[0]) + ".*")


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_default_engines_order_and_fresh_data():
    engines = default_engines()
    assert [engine.name for engine in engines] == ENGINE_NAMES
    assert all(engine.data == [] for engine in engines)
    engines[0].data.append("x")
    assert default_engines()[0].data == []


@pytest.mark.parametrize(
    "name,expected",
    [
        ("bing", ["test one", "test two"]),
        ("google", ["te st case"]),
        ("baidu", ["test baidu"]),
        ("duckduckgo", ["test duck"]),
        ("startpage", ["test start"]),
    ],
)
def test_parse_suggestions(name, expected):
    assert parse_suggestions(name, BODIES[name]) == expected


def test_parse_suggestions_invalid_and_unknown():
    assert parse_suggestions("bing", "not json") == []
    assert parse_suggestions("nosuch", BODIES["bing"]) == []
    assert parse_suggestions("baidu", '{"other":1}') == []


def test_search_fills_every_engine(mocked):
    for engine in default_engines():
        mocked.add(responses.GET, _pattern(engine.reco_url), body=BODIES[engine.name])
    engines = OtherService().search("test")
    assert [engine.name for engine in engines] == ENGINE_NAMES
    assert {engine.name: engine.data for engine in engines} == {
        "bing": ["test one", "test two"],
        "google": ["te st case"],
        "baidu": ["test baidu"],
        "duckduckgo": ["test duck"],
        "startpage": ["test start"],
    }


def test_search_escapes_key(mocked):
    for engine in default_engines():
        mocked.add(responses.GET, _pattern(engine.reco_url), body=BODIES[engine.name])
    engines = OtherService().search("a b")
    assert engines[0].data == ["test one", "test two"]
    bing_calls = [call for call in mocked.calls if "bing" in call.request.url]
    assert len(bing_calls) == 1
    assert bing_calls[0].request.url.endswith("query=a+b")


def test_search_unreachable_engine_has_no_data(mocked):
    bing = default_engines()[0]
    mocked.add(responses.GET, _pattern(bing.reco_url), body=BODIES["bing"])
    engines = OtherService().search("test")
    assert engines[0].data == ["test one", "test two"]
    assert all(engine.data == [] for engine in engines[1:])


def test_agent_search_returns_body(mocked):
    mocked.add(responses.GET, "http://localhost/suggest", body=b"raw bytes")
    assert OtherService().agent_search("http://localhost/suggest") == b"raw bytes"


def test_agent_search_error_raises(mocked):
    with pytest.raises(requests.ConnectionError):
        OtherService().agent_search("http://localhost/missing")