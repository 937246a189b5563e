# =============================================================================
# 🛡️ Admin-API (QR Code Shine)
# -----------------------------------------------------------------------------
# Nur für Benutzer mit role == "admin":
#   PATCH  /api/admin/qr/{id}/featured   → Startseiten-Showcase an/aus
#   DELETE /api/admin/qr/{id}            → QR-Code löschen
#   DELETE /api/admin/users/{id}         → Benutzer inkl. aller QR-Codes löschen
#   GET    /api/admin/plan-limits        → Tarif-Limits lesen
#   PUT    /api/admin/plan-limits/{slug} → Tarif-Limits ändern
# =============================================================================

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from auth_utils import require_admin
from database import get_db
from models.plan import Plan
from models.qrcode import QRCode, utc_now
from models.user import User
from routes.api import serialize_qr

router = APIRouter(prefix="/api/admin", tags=["Admin"])

logger = logging.getLogger(__name__)


class FeaturedIn(BaseModel):
    is_featured: Optional[bool] = None


class PlanLimitsIn(BaseModel):
    max_qr_codes: Optional[int] = None
    max_scans_per_month: Optional[int] = None
    qr_duration_days: Optional[int] = None
    can_use_logo: Optional[bool] = None
    can_use_frames: Optional[bool] = None
    can_use_analytics: Optional[bool] = None


@router.patch("/qr/{qr_id}/featured")
def toggle_featured(
    qr_id: str,
    payload: Optional[FeaturedIn] = Body(None),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    qr = db.query(QRCode).filter(QRCode.id == qr_id).first()
    if not qr:
        raise HTTPException(404, "QR kod bulunamadı")

    requested = payload.is_featured if payload else None
    qr.is_featured = (not qr.is_featured) if requested is None else requested
    qr.updated_at = utc_now()
    db.commit()
    db.refresh(qr)

    logger.info("Featured-Status geändert (qr=%s, featured=%s, admin=%s)", qr.id, qr.is_featured, admin.id)
    return {"success": True, "qrCode": serialize_qr(qr)}


@router.delete("/qr/{qr_id}")
def admin_delete_qr(qr_id: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    qr = db.query(QRCode).filter(QRCode.id == qr_id).first()
    if not qr:
        raise HTTPException(404, "QR kod bulunamadı")
    db.delete(qr)
    db.commit()
    logger.info("QR-Code durch Admin gelöscht (qr=%s, admin=%s)", qr_id, admin.id)
    return {"success": True}


@router.delete("/users/{user_id}")
def admin_delete_user(user_id: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    if user_id == admin.id:
        raise HTTPException(400, "Kendi hesabınızı buradan silemezsiniz")
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(404, "Kullanıcı bulunamadı")
    # QR-Codes, Scans und Abo werden per Cascade mitgelöscht
    db.delete(user)
    db.commit()
    logger.info("Benutzer gelöscht (user=%s, admin=%s)", user_id, admin.id)
    return {"success": True}


@router.get("/plan-limits")
def get_plan_limits(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    plans = db.query(Plan).order_by(Plan.sort_order).all()
    return {"planLimits": [p.to_limits() for p in plans]}


@router.put("/plan-limits/{slug}")
def update_plan_limits(
    slug: str,
    payload: PlanLimitsIn,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    plan = db.query(Plan).filter(Plan.slug == slug).first()
    if not plan:
        raise HTTPException(404, "Plan bulunamadı")

    changes = payload.model_dump(exclude_unset=True)
    if "max_scans_per_month" in changes:
        plan.scan_limit = changes.pop("max_scans_per_month")
    for key, value in changes.items():
        setattr(plan, key, value)
    db.commit()
    db.refresh(plan)
    return {"success": True, "planLimits": plan.to_limits()}
