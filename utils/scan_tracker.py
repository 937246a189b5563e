# utils/scan_tracker.py
# =============================================================================
# 📊 Scan-Tracking für dynamische QR-Codes
# - IP aus Proxy-Headern
# - User-Agent → OS / Browser / Gerät
# - IP → Land / Stadt
# - ein QRScan-Datensatz pro Scan
# Tracking darf den Scan nie scheitern lassen: alle Fehler werden geloggt.
# =============================================================================

from __future__ import annotations

import asyncio
import ipaddress
import logging
from typing import Callable, Mapping

from sqlalchemy import update
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from models.qr_scan import QRScan, USER_AGENT_MAX_LENGTH
from models.qrcode import QRCode
from utils.geolocation import GeoResolver, GeoLocation, UNKNOWN, UNKNOWN_LOCATION
from utils.user_agent import parse_user_agent

logger = logging.getLogger("scan_tracker")

SessionFactory = Callable[[], Session]

# Header, die für das Tracking gebraucht werden
TRACKED_HEADERS = ("user-agent", "x-forwarded-for", "x-real-ip")


def snapshot_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Kopiert die relevanten Header, bevor der Request endet."""
    return {name: headers[name] for name in TRACKED_HEADERS if headers.get(name)}


def extract_client_ip(headers: Mapping[str, str]) -> str:
    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    real_ip = (headers.get("x-real-ip") or "").strip()
    if real_ip:
        return real_ip
    return UNKNOWN


def is_public_ip(ip: str) -> bool:
    """Nur öffentlich routbare Adressen werden geolokalisiert."""
    try:
        return ipaddress.ip_address(ip).is_global
    except ValueError:
        return False


def _insert_scan(session_factory: SessionFactory, scan: QRScan) -> None:
    with session_factory() as db:
        db.add(scan)
        db.commit()


def increment_scan_count(session_factory: SessionFactory, qr_code_id: str) -> None:
    """Atomarer Zähler: UPDATE qr_codes SET scan_count = scan_count + 1."""
    with session_factory() as db:
        db.execute(
            update(QRCode)
            .where(QRCode.id == qr_code_id)
            .values(scan_count=QRCode.scan_count + 1)
        )
        db.commit()


async def track_scan(
    session_factory: SessionFactory,
    geo: GeoResolver,
    qr_code_id: str,
    headers: Mapping[str, str],
) -> None:
    """Legt einen QRScan-Datensatz an. Wirft nie."""
    try:
        user_agent = headers.get("user-agent") or ""
        ip_address = extract_client_ip(headers)
        client = parse_user_agent(user_agent)

        location: GeoLocation = UNKNOWN_LOCATION
        if is_public_ip(ip_address):
            location = await geo.locate(ip_address)

        scan = QRScan(
            qr_code_id=qr_code_id,
            ip_address=ip_address,
            user_agent=user_agent[:USER_AGENT_MAX_LENGTH],
            country=location.country,
            city=location.city,
            device_type=client.device_type,
            browser=client.browser,
            os=client.os,
        )
        await run_in_threadpool(_insert_scan, session_factory, scan)
    except Exception:
        logger.exception("Scan-Tracking fehlgeschlagen (qr=%s)", qr_code_id)


async def _safe_increment(session_factory: SessionFactory, qr_code_id: str) -> None:
    try:
        await run_in_threadpool(increment_scan_count, session_factory, qr_code_id)
    except Exception:
        logger.exception("Scan-Zähler konnte nicht erhöht werden (qr=%s)", qr_code_id)


async def record_scan(
    session_factory: SessionFactory,
    geo: GeoResolver,
    qr_code_id: str,
    headers: Mapping[str, str],
) -> None:
    """
    Hintergrundjob nach einem gültigen Scan:
    Zähler erhöhen und Scan speichern laufen parallel und unabhängig.
    """
    await asyncio.gather(
        _safe_increment(session_factory, qr_code_id),
        track_scan(session_factory, geo, qr_code_id, headers),
    )
