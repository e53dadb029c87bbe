"""Identification of browsers and devices that connect as peers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol

from zenhost.models import PeerDrive

_LOOPBACK_ALIASES = ("::1", "::ffff:127.0.0.1")
_ANDROID_MODEL = re.compile(r"Android[^;)]*;\s*([^;)]+?)(?:\s+Build/[^;)]*)?\)")

_BROWSERS = (
    (("Edg/", "Edge/", "EdgA/", "EdgiOS/"), "Edge"),
    (("OPR/", "Opera"), "Opera"),
    (("SamsungBrowser",), "Samsung Browser"),
    (("Firefox/", "FxiOS"), "Firefox"),
    (("CriOS", "Chrome/"), "Chrome"),
    (("MSIE", "Trident/"), "Internet Explorer"),
    (("Safari/",), "Safari"),
)


@dataclass
class UserAgent:
    """What a User-Agent header says about the client."""

    name: str = ""
    os: str = ""
    device: str = ""
    mobile: bool = False
    tablet: bool = False


@dataclass
class DeviceName:
    """How a peer is presented to other peers."""

    model: str
    os: str
    browser: str
    device_name: str
    display_name: str

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "os": self.os,
            "browser": self.browser,
            "deviceName": self.device_name,
            "displayName": self.display_name,
        }


class _PeerLookup(Protocol):
    def get_peer_by_name(self, name: str) -> Optional[PeerDrive]: ...


def _detect_os(header: str) -> str:
    if "Windows" in header:
        return "Windows"
    if any(token in header for token in ("iPhone", "iPad", "iPod")):
        return "iOS"
    if "Android" in header:
        return "Android"
    if "CrOS" in header:
        return "ChromeOS"
    if "Macintosh" in header or "Mac OS X" in header:
        return "macOS"
    if "Linux" in header:
        return "Linux"
    return ""


def _detect_browser(header: str) -> str:
    for tokens, name in _BROWSERS:
        if any(token in header for token in tokens):
            return name
    return ""


def _detect_device(header: str) -> str:
    for apple in ("iPhone", "iPad", "iPod"):
        if apple in header:
            return apple
    if "Android" in header:
        match = _ANDROID_MODEL.search(header)
        if match and match.group(1).strip() not in ("K", "U", "wv"):
            return match.group(1).strip()
    return ""


def parse_user_agent(header: str) -> UserAgent:
    """Read browser, system, device and form factor from a User-Agent header."""
    header = header or ""
    android = "Android" in header
    tablet = "iPad" in header or "Tablet" in header or (android and "Mobile" not in header)
    mobile = not tablet and (
        "Mobile" in header or "iPhone" in header or "iPod" in header
    )
    return UserAgent(
        name=_detect_browser(header),
        os=_detect_os(header),
        device=_detect_device(header),
        mobile=mobile,
        tablet=tablet,
    )


def get_peer_id(cookies: Mapping[str, str], default: str) -> str:
    """Return the peer id cookie when it is set, else ``default``."""
    value = cookies.get("peerid")
    return value if value else default


def get_ip(headers: Mapping[str, str], remote_addr: str) -> str:
    """Return the client address, preferring the first X-Forwarded-For entry."""
    forwarded = next(
        (value for key, value in headers.items() if key.lower() == "x-forwarded-for"), ""
    )
    ip = forwarded.split(",")[0] if forwarded else remote_addr
    return "127.0.0.1" if ip in _LOOPBACK_ALIASES else ip


def _taken(peers: _PeerLookup, name: str) -> bool:
    peer = peers.get_peer_by_name(name)
    return peer is not None and bool(peer.id)


def get_name(user_agent: str, peers: _PeerLookup) -> DeviceName:
    """Name a new peer from its User-Agent, keeping display names unique."""
    agent = parse_user_agent(user_agent)
    device = agent.device or agent.name
    if agent.device:
        display = f"{agent.device} {agent.name}"
    else:
        display = f"{agent.os} {agent.name}"
    model = "desktop"
    if agent.mobile:
        model = "mobile"
    if agent.tablet:
        model = "tablet"
    if _taken(peers, display):
        suffix = 1
        while _taken(peers, f"{display}_{suffix}"):
            suffix += 1
        display = f"{display}_{suffix}"
    return DeviceName(
        model=model,
        os=agent.os,
        browser=agent.name,
        device_name=device,
        display_name=display,
    )


def get_name_by_db(peer: PeerDrive) -> DeviceName:
    """Present a stored peer, naming its device after its browser if unknown."""
    return DeviceName(
        model=peer.model,
        os=peer.os,
        browser=peer.browser,
        device_name=peer.device_name or peer.browser,
        display_name=peer.display_name,
    )