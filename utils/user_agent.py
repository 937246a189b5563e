from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class ClientInfo:
    os: str
    browser: str
    device_type: str


# Reihenfolge ist relevant: die erste passende Regel gewinnt.
# iOS vor macOS, weil iPhone-UAs "like Mac OS X" enthalten.
_OS_RULES = (
    (re.compile(r"Windows", re.I), "Windows", None),
    (re.compile(r"iPhone|iPad|iPod", re.I), "iOS", "mobile"),
    (re.compile(r"Macintosh|Mac OS X", re.I), "OS X", None),
    (re.compile(r"Android", re.I), "AndroidOS", "mobile"),
    (re.compile(r"Linux", re.I), "Linux", None),
    (re.compile(r"CrOS", re.I), "Chrome OS", None),
)

_TABLET_RE = re.compile(r"iPad|Android(?!.*Mobile)", re.I)
_CHROME_RE = re.compile(r"Chrome", re.I)

_BROWSER_RULES = (
    (re.compile(r"Edg", re.I), "Edge"),
    (_CHROME_RE, "Chrome"),
    (re.compile(r"Safari", re.I), "Safari"),
    (re.compile(r"Firefox", re.I), "Firefox"),
    (re.compile(r"Opera|OPR", re.I), "Opera"),
    (re.compile(r"MSIE|Trident", re.I), "IE"),
)


def parse_user_agent(user_agent: str | None) -> ClientInfo:
    """Leitet Betriebssystem, Browser und Gerätetyp aus dem User-Agent ab."""
    ua = user_agent or ""
    os_name = "Unknown"
    device_type = "desktop"

    for pattern, name, device in _OS_RULES:
        if pattern.search(ua):
            os_name = name
            if device:
                device_type = device
            break

    if _TABLET_RE.search(ua):
        device_type = "tablet"

    browser = "Unknown"
    for pattern, name in _BROWSER_RULES:
        if pattern.search(ua):
            # Chrome-UAs enthalten auch "Safari"
            if name == "Safari" and _CHROME_RE.search(ua):
                continue
            browser = name
            break

    return ClientInfo(os=os_name, browser=browser, device_type=device_type)
