# auth_utils.py
# =============================================================================
# 👤 Aktueller Benutzer
# - Supabase (falls konfiguriert): Zugriffstoken aus Cookie / Authorization
# - sonst: user_id aus der Session + lokale users-Tabelle
# =============================================================================

from __future__ import annotations

import logging
import os
from typing import Any, Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from supabase import create_client

import config  # noqa: F401  (lädt .env)
from database import get_db
from models.user import User

logger = logging.getLogger(__name__)

SUPABASE_URL: Optional[str] = os.getenv("SUPABASE_URL")
SUPABASE_KEY: Optional[str] = os.getenv("SUPABASE_KEY")
SUPABASE_TOKEN_COOKIE: str = os.getenv("SUPABASE_TOKEN_COOKIE", "sb-access-token")


def get_auth_client(request: Request) -> Any:
    """
    Supabase-Client aus dem App-State (im Lifespan angelegt) oder None,
    wenn die App im lokalen Session-Modus läuft.
    """
    return getattr(request.app.state, "supabase", None)


def create_auth_client() -> Any:
    if not (SUPABASE_URL and SUPABASE_KEY):
        logger.info("Supabase wird nicht verwendet (Session-Modus aktiv).")
        return None
    client = create_client(SUPABASE_URL, SUPABASE_KEY)
    logger.info("Supabase-Client initialisiert.")
    return client


def _access_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization") or ""
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return request.cookies.get(SUPABASE_TOKEN_COOKIE)


def _supabase_user_id(client: Any, request: Request) -> Optional[str]:
    token = _access_token(request)
    if not token:
        return None
    try:
        res = client.auth.get_user(token)
    except Exception as exc:
        logger.warning("Supabase-Fehler beim Lesen des Benutzers: %s", exc)
        return None
    user = getattr(res, "user", None)
    return str(user.id) if user is not None else None


def current_user(
    request: Request,
    db: Session = Depends(get_db),
    auth_client: Any = Depends(get_auth_client),
) -> Optional[User]:
    """
    Liefert den aktuell eingeloggten Benutzer oder None.
    """
    if auth_client is not None:
        uid = _supabase_user_id(auth_client, request)
    else:
        uid = request.session.get("user_id")
    if not uid:
        return None
    return db.query(User).filter(User.id == str(uid)).first()


def require_user(user: Optional[User] = Depends(current_user)) -> User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Yetkisiz erişim – lütfen giriş yapın",
        )
    return user


def require_admin(user: Optional[User] = Depends(current_user)) -> User:
    if user is None or not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Yetkisiz erişim")
    return user
