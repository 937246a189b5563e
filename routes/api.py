from __future__ import annotations

import logging
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from auth_utils import require_user
from database import get_db
from models.qrcode import QRCode
from models.user import User
from utils.qr_generator import generate_qr_data_url, generate_qr_svg
from utils.qr_save import QRLimitReached, ShortCodeTaken, save_qr, update_qr

router = APIRouter(prefix="/api/qr", tags=["QR API"])

logger = logging.getLogger(__name__)


class CreateQRIn(BaseModel):
    name: str = Field(..., min_length=1)
    type: str = Field(..., description="QR type")
    content: Any = Field(...)
    settings: Dict[str, Any] = Field(default_factory=dict)
    short_code: Optional[str] = None
    is_dynamic: bool = True


class UpdateQRIn(BaseModel):
    name: Optional[str] = None
    # neues Weiterleitungsziel (originalUrl)
    content: Optional[str] = None
    raw_content: Optional[Dict[str, str]] = None
    settings: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class GenerateQRIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str = ""
    type: str = "text"
    foreground: str = "#000000"
    background: str = "#ffffff"
    size: int = Field(256, ge=32, le=2048)
    error_correction: Literal["L", "M", "Q", "H"] = Field("M", alias="errorCorrection")
    format: Literal["png", "svg"] = "png"


def serialize_qr(qr: QRCode) -> dict[str, Any]:
    return {
        "id": qr.id,
        "short_code": qr.short_code,
        "name": qr.name,
        "type": qr.type,
        "content": qr.content,
        "settings": qr.settings or {},
        "is_active": qr.is_active,
        "is_dynamic": qr.is_dynamic,
        "is_featured": qr.is_featured,
        "expires_at": qr.expires_at.isoformat() if qr.expires_at else None,
        "scan_count": qr.scan_count,
        "created_at": qr.created_at.isoformat() if qr.created_at else None,
    }


def get_owned_qr(db: Session, qr_id: str, user: User) -> QRCode:
    qr = db.query(QRCode).filter(QRCode.id == qr_id).first()
    if not qr:
        raise HTTPException(404, "QR kod bulunamadı")
    if qr.user_id != user.id:
        raise HTTPException(403, "Bu QR kod üzerinde yetkiniz yok")
    return qr


@router.get("")
def list_qr_codes(db: Session = Depends(get_db), user: User = Depends(require_user)):
    rows = (
        db.query(QRCode)
        .filter(QRCode.user_id == user.id)
        .order_by(QRCode.created_at.desc())
        .all()
    )
    return {"qrCodes": [serialize_qr(qr) for qr in rows]}


@router.post("", status_code=201)
def create_qr(
    payload: CreateQRIn,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    try:
        qr = save_qr(
            db,
            user,
            qr_type=payload.type,
            name=payload.name,
            content=payload.content,
            settings=payload.settings,
            short_code=payload.short_code,
            is_dynamic=payload.is_dynamic,
        )
    except ValueError as exc:
        raise HTTPException(400, str(exc))
    except QRLimitReached as exc:
        raise HTTPException(403, str(exc))
    except ShortCodeTaken:
        raise HTTPException(409, "short_code bereits vergeben")
    return {"message": "QR code saved successfully", "qrCode": serialize_qr(qr)}


@router.put("/{qr_id}")
def update_qr_code(
    qr_id: str,
    payload: UpdateQRIn,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    qr = get_owned_qr(db, qr_id, user)
    try:
        qr = update_qr(
            db,
            qr,
            name=payload.name,
            is_active=payload.is_active,
            settings=payload.settings,
            target_url=payload.content,
            raw_content=payload.raw_content,
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("QR-Update fehlgeschlagen (id=%s)", qr_id)
        raise HTTPException(500, "Güncelleme başarısız")
    return {"success": True, "qrCode": serialize_qr(qr)}


@router.patch("/{qr_id}/toggle")
def toggle_qr_code(qr_id: str, db: Session = Depends(get_db), user: User = Depends(require_user)):
    qr = get_owned_qr(db, qr_id, user)
    qr = update_qr(db, qr, is_active=not qr.is_active)
    return {"success": True, "is_active": qr.is_active}


@router.delete("/{qr_id}")
def delete_qr_code(qr_id: str, db: Session = Depends(get_db), user: User = Depends(require_user)):
    qr = get_owned_qr(db, qr_id, user)
    db.delete(qr)
    db.commit()
    logger.info("QR-Code gelöscht (id=%s, user=%s)", qr_id, user.id)
    return {"success": True}


# -------------------------------------------------------------------------
# 🖼️ Bild-Vorschau (ohne Speichern, ohne Login)
# -------------------------------------------------------------------------
@router.post("/generate", response_model=None)
def generate_qr_image(payload: GenerateQRIn) -> Any:
    if not payload.content:
        raise HTTPException(400, "Content is required")

    options = {
        "size": payload.size,
        "foreground": payload.foreground,
        "background": payload.background,
        "error_correction": payload.error_correction,
    }
    try:
        if payload.format == "svg":
            svg = generate_qr_svg(payload.content, **options)
            return Response(content=svg, media_type="image/svg+xml")
        data_url = generate_qr_data_url(payload.content, **options)
    except ValueError as exc:
        # ungültige Farbe oder Inhalt zu lang für einen QR-Code
        raise HTTPException(400, str(exc))

    return {"dataUrl": data_url, "type": payload.type, "content": payload.content}
