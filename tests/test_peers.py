import sqlite3

import pytest

from zenhost.models import PeerDrive, create_schema
from zenhost.peer import PeerService
from zenhost.peers import get_ip, get_name, get_name_by_db, get_peer_id, parse_user_agent

WINDOWS_CHROME = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
WINDOWS_EDGE = WINDOWS_CHROME + " Edg/120.0.0.0"
IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
IPAD = (
    "Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
ANDROID = (
    "Mozilla/5.0 (Linux; Android 13; Pixel 7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
)


@pytest.fixture
def peers():
    connection = sqlite3.connect(":memory:")
    create_schema(connection)
    yield PeerService(connection)
    connection.close()


def test_parse_desktop_chrome():
    agent = parse_user_agent(WINDOWS_CHROME)
    assert (agent.os, agent.name) == ("Windows", "Chrome")
    assert agent.device == ""
    assert not agent.mobile and not agent.tablet


def test_parse_edge_before_chrome():
    assert parse_user_agent(WINDOWS_EDGE).name == "Edge"


def test_parse_iphone():
    agent = parse_user_agent(IPHONE)
    assert agent.device == "iPhone"
    assert agent.mobile and not agent.tablet


def test_parse_android_model():
    agent = parse_user_agent(ANDROID)
    assert agent.device == "Pixel 7"
    assert agent.mobile


def test_get_peer_id():
    assert get_peer_id({"peerid": "abc"}, "fallback") == "abc"
    assert get_peer_id({"peerid": ""}, "fallback") == "fallback"
    assert get_peer_id({}, "fallback") == "fallback"


def test_get_ip_prefers_forwarded_header():
    assert get_ip({"X-Forwarded-For": "10.0.0.5,10.0.0.6"}, "10.0.0.9:5000") == "10.0.0.5"


def test_get_ip_uses_remote_addr():
    assert get_ip({}, "10.0.0.9:5000") == "10.0.0.9:5000"


@pytest.mark.parametrize("address", ["::1", "::ffff:127.0.0.1"])
def test_get_ip_maps_loopback(address):
    assert get_ip({}, address) == "127.0.0.1"


def test_get_name_desktop(peers):
    agent = parse_user_agent(WINDOWS_CHROME)
    name = get_name(WINDOWS_CHROME, peers)
    assert name.model == "desktop"
    assert name.display_name == f"{agent.os} {agent.name}"
    assert name.device_name == agent.name


def test_get_name_mobile_and_tablet(peers):
    assert get_name(IPHONE, peers).model == "mobile"
    assert get_name(IPAD, peers).model == "tablet"


def test_get_name_with_device(peers):
    agent = parse_user_agent(IPHONE)
    name = get_name(IPHONE, peers)
    assert name.display_name == f"{agent.device} {agent.name}"
    assert name.device_name == agent.device


def test_get_name_adds_suffix_for_taken_names(peers):
    base = get_name(WINDOWS_CHROME, peers).display_name
    peers.create_peer(PeerDrive(id="p1", display_name=base))
    assert get_name(WINDOWS_CHROME, peers).display_name == base + "_1"
    peers.create_peer(PeerDrive(id="p2", display_name=base + "_1"))
    assert get_name(WINDOWS_CHROME, peers).display_name == base + "_2"


def test_get_name_by_db_falls_back_to_browser():
    peer = PeerDrive(id="p", browser="b", model="m", os="o", display_name="d")
    name = get_name_by_db(peer)
    assert name.device_name == "b"
    assert name.to_dict() == {
        "model": "m", "os": "o", "browser": "b", "deviceName": "b", "displayName": "d",
    }


def test_get_name_by_db_keeps_device_name():
    peer = PeerDrive(id="p", browser="b", device_name="dev")
    assert get_name_by_db(peer).device_name == "dev"