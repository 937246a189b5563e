# utils/qr_save.py
# =============================================================================
# ✅ Einheitliche Speicherlogik für ALLE QR-Codes
# - Validierung (Typ, short_code)
# - Tarif-Limits (Anzahl, Laufzeit)
# - Update: gedrucktes 'encoded' bleibt immer unverändert
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import config
from models.plan import Plan
from models.qrcode import QRCode, QR_TYPES
from models.user import User

logger = logging.getLogger("qr_save")


class QRLimitReached(Exception):
    """Der Tarif des Benutzers erlaubt keine weiteren QR-Codes."""


class ShortCodeTaken(Exception):
    """Der gewünschte short_code ist bereits vergeben."""


# =============================================================================
# ✅ Tarif
# =============================================================================
def get_user_plan(db: Session, user: User) -> Optional[Plan]:
    subscription = user.subscription
    if subscription is not None and subscription.is_active and subscription.plan is not None:
        return subscription.plan
    return db.query(Plan).filter(Plan.slug == (user.plan or config.DEFAULT_PLAN)).first()


def check_qr_limit(db: Session, user: User, plan: Optional[Plan]) -> None:
    count = db.query(QRCode).filter(QRCode.user_id == user.id).count()
    allowed = plan.allows_more_qr_codes(count) if plan else count < config.DEFAULT_QR_LIMIT
    if not allowed:
        raise QRLimitReached("QR code limit reached. Please upgrade your plan.")


# =============================================================================
# ✅ Validierung
# =============================================================================
def validate_qr_type(qr_type: str) -> str:
    normalized = (qr_type or "").strip().lower()
    if normalized not in QR_TYPES:
        raise ValueError(f"Unbekannter QR-Typ '{qr_type}'")
    return normalized


# =============================================================================
# ✅ SPEICHERN
# =============================================================================
def save_qr(
    db: Session,
    user: User,
    qr_type: str,
    name: str,
    content: Any,
    settings: Optional[Dict[str, Any]] = None,
    short_code: Optional[str] = None,
    is_dynamic: bool = True,
) -> QRCode:

    qr_type = validate_qr_type(qr_type)
    plan = get_user_plan(db, user)
    check_qr_limit(db, user, plan)

    expires_at = None
    if plan is not None and plan.qr_duration_days:
        expires_at = datetime.now(timezone.utc) + timedelta(days=plan.qr_duration_days)

    logger.info(f"📦 Speichere QR: type={qr_type}, user={user.id}, name={name}")

    qr = QRCode(
        user_id=user.id,
        type=qr_type,
        name=name,
        short_code=short_code or None,
        content=content,
        settings=settings or {},
        is_dynamic=is_dynamic,
        is_active=True,
        expires_at=expires_at,
        scan_count=0,
    )
    db.add(qr)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ShortCodeTaken(short_code) from exc
    db.refresh(qr)

    logger.info(f"✅ QR-Code gespeichert (ID {qr.id}, short_code={qr.short_code})")
    return qr


# =============================================================================
# ✅ UPDATE
# =============================================================================
def build_updated_content(
    qr: QRCode,
    target_url: Optional[str] = None,
    raw_content: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Neuer Inhalt nach einer Bearbeitung. 'encoded' (die gedruckte
    Redirect-URL) ändert sich nie, nur Ziel und Rohdaten.
    """
    existing = qr.content if isinstance(qr.content, dict) else {}
    encoded = existing.get("encoded")
    if encoded is None and isinstance(qr.content, str):
        encoded = qr.content

    if qr.type == "app" and raw_content:
        return {
            "encoded": encoded,
            "raw": raw_content,
            "originalUrl": existing.get("originalUrl"),
        }

    return {
        "encoded": encoded,
        "raw": raw_content or existing.get("raw") or {},
        "originalUrl": target_url or existing.get("originalUrl"),
    }


def update_qr(
    db: Session,
    qr: QRCode,
    name: Optional[str] = None,
    is_active: Optional[bool] = None,
    settings: Optional[Dict[str, Any]] = None,
    target_url: Optional[str] = None,
    raw_content: Optional[Dict[str, str]] = None,
) -> QRCode:
    if name is not None:
        qr.name = name
    if is_active is not None:
        qr.is_active = is_active
    if settings is not None:
        qr.settings = settings
    if target_url is not None or raw_content is not None:
        qr.content = build_updated_content(qr, target_url, raw_content)

    db.commit()
    db.refresh(qr)

    logger.info(f"✏️ QR-Code aktualisiert (ID {qr.id})")
    return qr
