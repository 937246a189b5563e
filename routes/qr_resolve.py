# =============================================================================
# 🔄 Scan-Resolver für QR-Codes (QR Code Shine)
# -----------------------------------------------------------------------------
# Eine einzige Route:
#       GET /r/{identifier}
#
# identifier = UUID des QR-Codes oder dessen short_code.
# Ergebnis: Weiterleitung (3xx), Landingpage-Redirect (app / vcard / html),
# Inhaltsseite oder eine der Statusseiten (nicht gefunden / inaktiv /
# abgelaufen). Nur gültige Scans werden gezählt und getrackt.
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import config
from database import get_db, get_session_factory
from models.qrcode import as_utc
from utils.geolocation import GeoResolver, get_geo_resolver
from utils.qr_content import content_as_text
from utils.qr_resolver import ScanState, compute_destination, resolve_qr
from utils.scan_tracker import record_scan, snapshot_headers

router = APIRouter(tags=["QR-Resolver"])
templates = Jinja2Templates(directory=str(config.BASE_DIR / "templates"))

logger = logging.getLogger(__name__)

ResponseType = Union[RedirectResponse, HTMLResponse]


# -------------------------------------------------------------------------
# 📄 Statusseiten (zweisprachig)
# -------------------------------------------------------------------------
STATUS_PAGES: Dict[ScanState, Dict[str, Any]] = {
    ScanState.NOT_FOUND: {
        "status_code": 404,
        "title": "QR Kod Bulunamadı",
        "title_en": "QR Code Not Found",
        "message": "Bu QR kod artık mevcut değil veya silinmiş olabilir.",
        "message_en": "This QR code no longer exists or may have been deleted.",
    },
    ScanState.INACTIVE: {
        "status_code": 403,
        "title": "QR Kod Pasif",
        "title_en": "QR Code Inactive",
        "message": "Bu QR kod şu anda pasif durumda ve kullanılamıyor.",
        "message_en": "This QR code is currently inactive and cannot be used.",
    },
    ScanState.EXPIRED: {
        "status_code": 410,
        "title": "QR Kod Süresi Dolmuş",
        "title_en": "QR Code Expired",
        "message": "Bu QR kodun süresi {date_tr} tarihinde dolmuştur.",
        "message_en": "This QR code expired on {date_en}.",
    },
}


def _format_dates(expires_at: Optional[datetime]) -> Dict[str, str]:
    value = as_utc(expires_at)
    if value is None:
        return {"date_tr": "", "date_en": ""}
    return {
        "date_tr": value.strftime("%d.%m.%Y"),
        "date_en": f"{value.month}/{value.day}/{value.year}",
    }


def render_status_page(
    request: Request,
    state: ScanState,
    qr_name: Optional[str] = None,
    expires_at: Optional[datetime] = None,
) -> HTMLResponse:
    page_config = STATUS_PAGES[state]
    dates = _format_dates(expires_at)
    page = {
        "title": page_config["title"],
        "title_en": page_config["title_en"],
        "message": page_config["message"].format(**dates),
        "message_en": page_config["message_en"].format(**dates),
    }
    return templates.TemplateResponse(
        request,
        "qr_status.html",
        {"state": state.value, "page": page, "qr_name": qr_name},
        status_code=page_config["status_code"],
    )


# =============================================================================
# ✅ Resolver
# =============================================================================
@router.get("/r/{identifier}", response_model=None)
def resolve(
    identifier: str,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    geo: GeoResolver = Depends(get_geo_resolver),
) -> ResponseType:
    """
    Zentraler Resolver für gescannte QR-Codes.
    Fehler der Datenbank werden wie "nicht gefunden" behandelt.
    """

    # --- QR-Code finden -------------------------------------------------------
    try:
        resolution = resolve_qr(db, identifier)
    except SQLAlchemyError:
        logger.exception("QR-Lookup fehlgeschlagen (identifier=%s)", identifier)
        return render_status_page(request, ScanState.NOT_FOUND)

    qr = resolution.qr
    if resolution.state is ScanState.NOT_FOUND or qr is None:
        return render_status_page(request, ScanState.NOT_FOUND)

    if resolution.state is ScanState.INACTIVE:
        return render_status_page(request, ScanState.INACTIVE, qr_name=qr.name)

    if resolution.state is ScanState.EXPIRED:
        return render_status_page(
            request, ScanState.EXPIRED, qr_name=qr.name, expires_at=qr.expires_at
        )

    # --- Scan zählen + tracken (nach der Antwort) -----------------------------
    background_tasks.add_task(
        record_scan,
        session_factory,
        geo,
        qr.id,
        snapshot_headers(request.headers),
    )

    # --- Ziel bestimmen -------------------------------------------------------
    destination = compute_destination(qr)
    if destination.is_redirect:
        return RedirectResponse(destination.redirect_url)

    return templates.TemplateResponse(
        request,
        "qr_content.html",
        {"qr": qr, "content_text": content_as_text(qr.get_content())},
    )
