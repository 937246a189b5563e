# =============================================================================
# 🚀 QR Code Shine – Hauptapplikation (main.py)
# =============================================================================

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Dict, List

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.middleware.sessions import SessionMiddleware

# -------------------------------------------------------------------------
# 1️⃣ Konfiguration (.env wird in config geladen)
# -------------------------------------------------------------------------
import config
from auth_utils import create_auth_client
from database import get_db
from models.plan import Plan
from utils.geolocation import GeoResolver
from utils.locale import LocaleMiddleware

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("main")


# -------------------------------------------------------------------------
# 2️⃣ Lifespan: externe Clients anlegen und wieder schließen
# -------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    client = httpx.AsyncClient(timeout=config.GEO_TIMEOUT)
    app.state.geo_resolver = GeoResolver(client)
    app.state.supabase = create_auth_client()
    logger.info("🚀 QR Code Shine gestartet (Geolocation: %s)", config.GEO_API_URL)
    try:
        yield
    finally:
        await client.aclose()
        logger.info("🛑 QR Code Shine beendet")


app = FastAPI(title="QR Code Shine", version="1.0", lifespan=lifespan)

# -------------------------------------------------------------------------
# 3️⃣ Middleware
# -------------------------------------------------------------------------
app.add_middleware(LocaleMiddleware)
app.add_middleware(
    SessionMiddleware,
    secret_key=config.SESSION_SECRET,
    max_age=60 * 60 * 24 * 7,
    session_cookie=config.SESSION_COOKIE_NAME,
    same_site=config.SESSION_SAME_SITE,
    https_only=config.SESSION_HTTPS_ONLY,
)

# -------------------------------------------------------------------------
# 4️⃣ Routen
# -------------------------------------------------------------------------
from routes import account  # noqa: E402
from routes import admin  # noqa: E402
from routes import api  # noqa: E402
from routes import dashboard  # noqa: E402
from routes import landing  # noqa: E402
from routes import qr_resolve  # noqa: E402

# zentraler Resolver + Landingpages
app.include_router(qr_resolve.router)
app.include_router(landing.router)

# JSON-API
app.include_router(api.router)
app.include_router(dashboard.router)
app.include_router(account.router)
app.include_router(admin.router)


# -------------------------------------------------------------------------
# 5️⃣ Home
# -------------------------------------------------------------------------
def _fallback_home_plans() -> List[Dict[str, object]]:
    return [
        {"slug": "free", "name": "Free", "price": 0.0, "max_qr_codes": 5},
        {"slug": "pro", "name": "Pro", "price": 9.99, "max_qr_codes": 50},
        {"slug": "enterprise", "name": "Enterprise", "price": 29.99, "max_qr_codes": -1},
    ]


@app.get("/", response_class=HTMLResponse)
def home(request: Request, db: Session = Depends(get_db)):
    plans: List[object]
    try:
        plans = db.query(Plan).order_by(Plan.sort_order).all() or _fallback_home_plans()
    except SQLAlchemyError:
        logger.exception("Tarife konnten nicht geladen werden")
        plans = _fallback_home_plans()

    return qr_resolve.templates.TemplateResponse(request, "index.html", {"plans": plans})
