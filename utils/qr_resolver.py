"""
utils/qr_resolver.py
────────────────────────────────────────────
Zustandsmaschine des Scan-Resolvers:

    Start → Lookup → NotFound | Inactive | Expired | Usable
    Usable → Ziel berechnen → Redirect | ContentPage

Lookup: UUID-förmige IDs zuerst über die ID, danach (oder bei allen
anderen Werten ausschließlich) über den short_code.
────────────────────────────────────────────
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from urllib.parse import urlsplit

from sqlalchemy.orm import Session

import config
from models.qrcode import QRCode
from utils.qr_content import extract_target_url, is_http_url

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)

# Typen mit eigener Landingpage
LANDING_ROUTES = {
    "app": "/app/{id}",
    "vcard": "/v/{id}",
    "html": "/html/{id}",
}

REDIRECT_ROUTE = "/r/{id}"

# Host der eigenen Redirect-Route (aus SITE_URL)
SITE_HOST = urlsplit(config.SITE_URL).netloc


class ScanState(str, enum.Enum):
    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    USABLE = "usable"


@dataclass(frozen=True)
class Resolution:
    state: ScanState
    qr: Optional[QRCode] = None


@dataclass(frozen=True)
class Destination:
    redirect_url: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect_url is not None


def is_uuid(value: str) -> bool:
    return bool(UUID_RE.match(value or ""))


def find_qr_code(db: Session, identifier: str) -> Optional[QRCode]:
    qr: Optional[QRCode] = None
    if is_uuid(identifier):
        qr = db.query(QRCode).filter(QRCode.id == identifier).first()
    if qr is None:
        qr = db.query(QRCode).filter(QRCode.short_code == identifier).first()
    return qr


def classify(qr: Optional[QRCode], now: Optional[datetime] = None) -> ScanState:
    if qr is None:
        return ScanState.NOT_FOUND
    # Inaktiv wird vor Ablauf geprüft
    if not qr.is_active:
        return ScanState.INACTIVE
    if qr.is_expired(now):
        return ScanState.EXPIRED
    return ScanState.USABLE


def resolve_qr(db: Session, identifier: str, now: Optional[datetime] = None) -> Resolution:
    qr = find_qr_code(db, identifier)
    return Resolution(state=classify(qr, now), qr=qr)


def own_redirect_paths(qr: QRCode) -> list[str]:
    paths = [REDIRECT_ROUTE.format(id=qr.id)]
    if qr.short_code:
        paths.append(REDIRECT_ROUTE.format(id=qr.short_code))
    return paths


def compute_destination(qr: QRCode) -> Destination:
    qr_type = (qr.type or "").lower()
    landing = LANDING_ROUTES.get(qr_type)
    if landing:
        return Destination(landing.format(id=qr.id))

    target = extract_target_url(qr.get_content(), own_redirect_paths(qr), SITE_HOST)
    if is_http_url(target):
        return Destination(target)
    return Destination(None)
