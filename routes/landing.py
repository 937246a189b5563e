# =============================================================================
# 🪪 Öffentliche Landingpages (QR Code Shine)
# -----------------------------------------------------------------------------
#   GET /v/{id}     → vCard-Ansicht (?download=1 → .vcf)
#   GET /app/{id}   → App-Landingpage mit Store-Links
#   GET /html/{id}  → gespeicherte HTML-Seite
#   GET /menu/{id}  → Speisekarte
#
# Der Scan wurde bereits von /r/{id} gezählt – hier wird nichts gezählt.
# =============================================================================

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.orm import Session

from database import get_db
from models.qrcode import QRCode
from routes.qr_resolve import render_status_page, templates
from utils.qr_content import PlainContent, StructuredContent
from utils.qr_resolver import ScanState, resolve_qr

router = APIRouter(tags=["Landing Pages"])

ResponseType = Union[HTMLResponse, Response]


def _usable_or_status(request: Request, db: Session, identifier: str, qr_type: str):
    resolution = resolve_qr(db, identifier)
    qr = resolution.qr
    if resolution.state is ScanState.USABLE and qr is not None and qr.type == qr_type:
        return qr, None
    if qr is None or qr.type != qr_type:
        return None, render_status_page(request, ScanState.NOT_FOUND)
    return None, render_status_page(
        request, resolution.state, qr_name=qr.name, expires_at=qr.expires_at
    )


def _raw_data(qr: QRCode) -> Dict[str, Any]:
    """raw-Felder; ältere Datensätze haben JSON direkt in 'encoded'."""
    content = qr.get_content()
    if isinstance(content, StructuredContent):
        if content.raw:
            return dict(content.raw)
        text = content.encoded
    else:
        text = content.text
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


# -------------------------------------------------------------------------
# 🪪 vCard
# -------------------------------------------------------------------------
def decode_vcard_data(encoded: str) -> Dict[str, str]:
    """Statische vCards tragen ihre Daten als URL-sicheres Base64-JSON in der URL."""
    padded = encoded + "=" * (-len(encoded) % 4)
    try:
        data = json.loads(base64.urlsafe_b64decode(padded).decode("utf-8"))
    except (binascii.Error, ValueError, UnicodeDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def build_vcard_text(data: Dict[str, Any]) -> str:
    first_name = data.get("firstName", "")
    last_name = data.get("lastName", "")
    address = ";".join(
        data.get(key, "") for key in ("street", "city", "state", "zip", "country")
    )
    return (
        "BEGIN:VCARD\n"
        "VERSION:3.0\n"
        f"N:{last_name};{first_name};;;\n"
        f"FN:{first_name} {last_name}\n"
        f"ORG:{data.get('company', '')}\n"
        f"TITLE:{data.get('title', '')}\n"
        f"TEL;TYPE=WORK,VOICE:{data.get('workPhone', '')}\n"
        f"TEL;TYPE=CELL,VOICE:{data.get('mobile', '')}\n"
        f"EMAIL:{data.get('email', '')}\n"
        f"URL:{data.get('website', '')}\n"
        f"ADR;TYPE=WORK:;;{address}\n"
        f"NOTE:{data.get('note', '')}\n"
        "END:VCARD"
    )


def _card_context(data: Dict[str, Any]) -> Dict[str, Any]:
    card = dict(data)
    card["full_name"] = f"{data.get('firstName', '')} {data.get('lastName', '')}".strip() or "Contact"
    card["address"] = ", ".join(
        str(data[key]) for key in ("street", "city", "state", "zip", "country") if data.get(key)
    )
    return card


@router.get("/v/{identifier}", response_model=None)
def vcard_page(
    identifier: str,
    request: Request,
    download: bool = False,
    db: Session = Depends(get_db),
) -> ResponseType:
    data: Optional[Dict[str, Any]] = None
    qr, status_page = _usable_or_status(request, db, identifier, "vcard")
    if qr is not None:
        data = _raw_data(qr)
    elif status_page.status_code == 404:
        data = decode_vcard_data(identifier) or None
    if data is None:
        return status_page

    if download:
        filename = f"{data.get('firstName') or 'contact'}.vcf"
        return Response(
            build_vcard_text(data),
            media_type="text/vcard; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return templates.TemplateResponse(
        request,
        "vcard.html",
        {"qr": qr, "card": _card_context(data), "download_url": f"/v/{identifier}?download=1"},
    )


# -------------------------------------------------------------------------
# 📱 App
# -------------------------------------------------------------------------
@router.get("/app/{identifier}", response_model=None)
def app_page(identifier: str, request: Request, db: Session = Depends(get_db)) -> ResponseType:
    qr, status_page = _usable_or_status(request, db, identifier, "app")
    if qr is None:
        return status_page
    return templates.TemplateResponse(request, "app_landing.html", {"qr": qr, "app": _raw_data(qr)})


# -------------------------------------------------------------------------
# 🧾 HTML
# -------------------------------------------------------------------------
@router.get("/html/{identifier}", response_model=None)
def html_page(identifier: str, request: Request, db: Session = Depends(get_db)) -> ResponseType:
    qr, status_page = _usable_or_status(request, db, identifier, "html")
    if qr is None:
        return status_page

    content = qr.get_content()
    if isinstance(content, PlainContent):
        body = content.text
    else:
        body = content.raw.get("html") or content.encoded
    return templates.TemplateResponse(request, "html_page.html", {"qr": qr, "html_body": body})


# -------------------------------------------------------------------------
# 🍽️ Menü
# -------------------------------------------------------------------------
def _menu_items(raw_items: Any) -> list[Dict[str, Any]]:
    if isinstance(raw_items, str):
        try:
            raw_items = json.loads(raw_items)
        except ValueError:
            return []
    if not isinstance(raw_items, list):
        return []
    return [item for item in raw_items if isinstance(item, dict) and item.get("url")]


@router.get("/menu/{identifier}", response_model=None)
def menu_page(identifier: str, request: Request, db: Session = Depends(get_db)) -> ResponseType:
    qr, status_page = _usable_or_status(request, db, identifier, "menu")
    if qr is None:
        return status_page
    menu = _raw_data(qr)
    return templates.TemplateResponse(
        request,
        "menu.html",
        {"qr": qr, "menu": menu, "menu_items": _menu_items(menu.get("items"))},
    )
