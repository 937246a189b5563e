# =============================================================================
# 📊 Dashboard-Daten (QR Code Shine)
# -----------------------------------------------------------------------------
#   GET /api/featured-qr  → öffentliche Showcase-Liste der Startseite
#   GET /api/analytics    → Scan-Statistiken der eigenen QR-Codes (12 Monate)
# =============================================================================

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from datetime import timedelta
from typing import Any, Iterable, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from auth_utils import require_user
from database import get_db
from models.qr_scan import QRScan
from models.qrcode import QRCode, as_utc, utc_now
from models.user import User

router = APIRouter(prefix="/api", tags=["Dashboard"])

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 12
MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
UNKNOWN = "Unknown"


# -------------------------------------------------------------------------
# ⭐ Featured
# -------------------------------------------------------------------------
@router.get("/featured-qr")
def featured_qr_codes(db: Session = Depends(get_db)):
    try:
        rows = (
            db.query(QRCode)
            .filter(
                QRCode.is_featured == True,  # noqa: E712
                QRCode.is_active == True,  # noqa: E712
                or_(QRCode.expires_at.is_(None), QRCode.expires_at > utc_now()),
            )
            .order_by(QRCode.scan_count.desc())
            .limit(FEATURED_LIMIT)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Featured-QR-Abfrage fehlgeschlagen")
        return {"qrCodes": []}

    return {
        "qrCodes": [
            {
                "id": qr.id,
                "name": qr.name,
                "type": qr.type,
                "content": qr.content,
                "settings": qr.settings or {},
                "short_code": qr.short_code,
                "scan_count": qr.scan_count,
                "created_at": qr.created_at.isoformat() if qr.created_at else None,
                "profile": {"full_name": qr.user.full_name, "plan": qr.user.plan} if qr.user else None,
            }
            for qr in rows
        ]
    }


# -------------------------------------------------------------------------
# 📈 Analytics
# -------------------------------------------------------------------------
def format_month(key: str) -> str:
    """'2024-01' → "Jan '24" """
    year, month = key.split("-")
    return f"{MONTHS[int(month) - 1]} '{year[2:]}"


def _percent(count: int, total: int) -> str:
    return f"{count / total * 100:.2f}"


def _ranked(counter: Counter, label: str, total: int, limit: int) -> list[dict[str, Any]]:
    return [
        {label: key, "count": count, "percent": _percent(count, total)}
        for key, count in counter.most_common(limit)
    ]


def _known_ip(ip: Optional[str]) -> bool:
    return bool(ip) and ip != UNKNOWN


def summarize_scans(scans: Iterable[QRScan]) -> dict[str, Any]:
    scans = list(scans)
    total = len(scans)
    if not total:
        return {
            "totalScans": 0,
            "uniqueScans": 0,
            "timeData": [],
            "osData": [],
            "countryData": [],
            "cityData": [],
        }

    unique_ips = {s.ip_address for s in scans if _known_ip(s.ip_address)}

    months: dict[str, dict[str, Any]] = defaultdict(lambda: {"total": 0, "unique": set()})
    for scan in scans:
        scanned_at = as_utc(scan.scanned_at)
        key = f"{scanned_at.year}-{scanned_at.month:02d}"
        months[key]["total"] += 1
        if _known_ip(scan.ip_address):
            months[key]["unique"].add(scan.ip_address)

    time_data = [
        {"month": key, "label": format_month(key), "total": v["total"], "unique": len(v["unique"])}
        for key, v in sorted(months.items())
    ]

    os_counter = Counter(s.os or UNKNOWN for s in scans)
    country_counter = Counter(s.country for s in scans if s.country and s.country != UNKNOWN)
    city_counter = Counter(s.city for s in scans if s.city and s.city != UNKNOWN)

    return {
        "totalScans": total,
        "uniqueScans": len(unique_ips),
        "timeData": time_data,
        "osData": _ranked(os_counter, "os", total, 5),
        "countryData": _ranked(country_counter, "country", total, 6),
        "cityData": _ranked(city_counter, "city", total, 6),
    }


@router.get("/analytics")
def analytics(
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    since = utc_now() - timedelta(days=365)
    scans = (
        db.query(QRScan)
        .join(QRCode, QRCode.id == QRScan.qr_code_id)
        .filter(QRCode.user_id == user.id, QRScan.scanned_at >= since)
        .order_by(QRScan.scanned_at.asc())
        .all()
    )
    return summarize_scans(scans)
