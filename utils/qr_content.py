"""
utils/qr_content.py
────────────────────────────────────────────
QR-Inhalt als explizite, getaggte Variante.

In der Datenbank liegt 'content' entweder als einfacher String (alte
Datensätze) oder als Objekt {encoded, raw, originalUrl}:
- encoded:     was das gedruckte QR-Bild tatsächlich kodiert
- raw:         Formularfelder des Typs (url, ssid, phone, ...)
- originalUrl: echtes Weiterleitungsziel dynamischer Codes
────────────────────────────────────────────
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Union
from urllib.parse import urlsplit


# Reihenfolge, in der raw-Felder als Ziel-URL gelten
RAW_URL_KEYS = ("url", "link", "website")


@dataclass(frozen=True)
class PlainContent:
    text: str


@dataclass(frozen=True)
class StructuredContent:
    encoded: str = ""
    raw: Dict[str, str] = field(default_factory=dict)
    original_url: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"encoded": self.encoded, "raw": dict(self.raw)}
        if self.original_url:
            data["originalUrl"] = self.original_url
        return data


QRContent = Union[PlainContent, StructuredContent]


def parse_content(value: Any) -> QRContent:
    """Wandelt den gespeicherten JSON-Wert in die getaggte Variante um."""
    if value is None:
        return PlainContent("")
    if isinstance(value, str):
        return PlainContent(value)
    if isinstance(value, dict):
        raw = value.get("raw")
        if not isinstance(raw, dict):
            raw = {}
        return StructuredContent(
            encoded=str(value.get("encoded") or ""),
            raw={str(k): "" if v is None else str(v) for k, v in raw.items()},
            original_url=value.get("originalUrl") or None,
        )
    return PlainContent(str(value))


def _is_self_redirect(url: str, own_paths: Iterable[str], own_host: Optional[str] = None) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    # absolute URLs auf fremde Hosts sind nie die eigene Route
    if own_host and parts.netloc and parts.netloc.lower() != own_host.lower():
        return False
    return parts.path.rstrip("/") in {p.rstrip("/") for p in own_paths}


def extract_target_url(
    content: QRContent,
    own_paths: Iterable[str] = (),
    own_host: Optional[str] = None,
) -> Optional[str]:
    """
    Ermittelt das Weiterleitungsziel.
    Priorität: originalUrl > raw.url|link|website > encoded.
    Ein einfacher String oder 'encoded' zählt nicht, wenn er auf die eigene
    Redirect-Route dieses Codes zeigt (sonst leitet der Code auf sich selbst
    weiter).
    """
    own_paths = tuple(own_paths)

    if isinstance(content, PlainContent):
        if content.text and not _is_self_redirect(content.text, own_paths, own_host):
            return content.text
        return None

    if content.original_url:
        return content.original_url

    for key in RAW_URL_KEYS:
        value = content.raw.get(key)
        if value:
            return value

    if content.encoded and not _is_self_redirect(content.encoded, own_paths, own_host):
        return content.encoded

    return None


def is_http_url(url: Optional[str]) -> bool:
    return bool(url) and (url.startswith("http://") or url.startswith("https://"))


def content_as_text(content: QRContent) -> str:
    """Textdarstellung für die Inhaltsseite (wenn es kein Link ist)."""
    if isinstance(content, PlainContent):
        return content.text
    if content.encoded:
        return content.encoded
    if content.raw:
        return json.dumps(content.raw, indent=2, ensure_ascii=False)
    return json.dumps(content.to_json(), indent=2, ensure_ascii=False)
