# =============================================================================
# 👤 Konto-API (QR Code Shine)
# -----------------------------------------------------------------------------
#   DELETE /api/account → eigenes Konto löschen
# QR-Codes, Scans und Abo werden per Cascade mitgelöscht, danach wird die
# Session geleert.
# =============================================================================

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from auth_utils import require_user
from database import get_db
from models.user import User

router = APIRouter(prefix="/api/account", tags=["Konto"])

logger = logging.getLogger(__name__)


@router.delete("")
def delete_account(request: Request, db: Session = Depends(get_db), user: User = Depends(require_user)):
    user_id = user.id
    try:
        db.delete(user)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Konto konnte nicht gelöscht werden (user=%s)", user_id)
        raise HTTPException(500, "Profil silinemedi")

    request.session.clear()
    logger.info("Konto gelöscht (user=%s)", user_id)
    return {"success": True}
