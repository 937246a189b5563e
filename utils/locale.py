# =============================================================================
# 🌍 Locale-Middleware (QR Code Shine)
# -----------------------------------------------------------------------------
# - Türkische URLs (/fiyatlandirma, /panel/analitik …) werden intern auf die
#   englischen Routen umgeschrieben, die URL im Browser bleibt türkisch.
# - Blog-Slugs leiten auf die Variante der Cookie-Sprache um.
# - x-pathname Header für Layout/Admin-Erkennung.
# =============================================================================

import logging
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse, Response

import config

logger = logging.getLogger(__name__)

# Exakte Treffer zuerst, danach der längste passende Präfix
TURKISH_PATHS = {
    "/ozellikler": "/features",
    "/fiyatlandirma": "/pricing",
    "/iletisim": "/contact",
    "/hakkimizda": "/about",
    "/gizlilik": "/privacy",
    "/kullanim-kosullari": "/terms",
    "/qr-olusturucu": "/qr-generator",
    "/panel": "/dashboard",
    "/panel/analitik": "/dashboard/analytics",
    "/panel/abonelik": "/dashboard/subscription",
    "/ayarlar": "/settings",
    "/giris": "/auth/login",
    "/kayit": "/auth/register",
}

QR_TYPE_SLUGS = {
    "arac-park": "parking",
}

BLOG_SLUGS = {
    "url-qr-kod-nasil-olusturulur": "how-to-create-url-qr-code",
    "wifi-qr-kod-olusturma": "wifi-qr-code-generator",
    "vcard-qr-kod-dijital-kartvizit": "vcard-qr-code-digital-business-card",
    "whatsapp-qr-kod-isletmeler-icin": "whatsapp-qr-code-for-business",
    "instagram-qr-kod-takipci-kazanma": "instagram-qr-code-gain-followers",
    "etkinlik-qr-kod-event-yonetimi": "event-qr-code-calendar-integration",
    "konum-qr-kod-google-maps": "location-qr-code-google-maps",
}

PREFIXES_LONGEST_FIRST = sorted(TURKISH_PATHS.items(), key=lambda item: len(item[0]), reverse=True)

LANDING_PREFIXES = ("/app/", "/r/", "/v/", "/menu/")


def is_turkish_url(path: str) -> bool:
    return any(path == tr or path.startswith(tr + "/") for tr in TURKISH_PATHS)


def translate_path(path: str) -> str:
    """'/qr-olusturucu/arac-park' → '/qr-generator/parking'"""
    if path in TURKISH_PATHS:
        return TURKISH_PATHS[path]

    for tr_path, en_path in PREFIXES_LONGEST_FIRST:
        if path.startswith(tr_path + "/"):
            translated = en_path + path[len(tr_path):]
            if en_path == "/qr-generator":
                slug = translated[len("/qr-generator/"):]
                if slug in QR_TYPE_SLUGS:
                    translated = f"/qr-generator/{QR_TYPE_SLUGS[slug]}"
            return translated

    return path


def blog_slug_for_locale(slug: str, locale: str) -> Optional[str]:
    """Zielslug in der gewünschten Sprache oder None, wenn der Slug unbekannt ist."""
    for tr_slug, en_slug in BLOG_SLUGS.items():
        if slug in (tr_slug, en_slug):
            return tr_slug if locale == "tr" else en_slug
    return None


def cookie_locale(request: Request) -> str:
    value = request.cookies.get(config.LOCALE_COOKIE)
    return value if value in config.LOCALES else config.DEFAULT_LOCALE


def _is_passthrough(path: str) -> bool:
    return path.startswith("/_next") or path.startswith("/api") or "." in path


class LocaleMiddleware(BaseHTTPMiddleware):
    """
    Sprach-Routing vor den eigentlichen Routen.

    - /api, statische Dateien → unverändert
    - /app/, /r/, /v/, /menu/ → nur x-pathname
    - /blog/<slug>           → Redirect auf den Slug der Cookie-Sprache
    - türkische Pfade         → interner Rewrite + x-url-locale: tr
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path

        if _is_passthrough(path):
            return await call_next(request)

        if path.startswith(LANDING_PREFIXES):
            response = await call_next(request)
            response.headers["x-pathname"] = path
            return response

        if path.startswith("/blog/"):
            slug = path[len("/blog/"):]
            target = blog_slug_for_locale(slug, cookie_locale(request))
            if target is not None and target != slug:
                url = request.url.replace(path=f"/blog/{target}")
                return RedirectResponse(str(url), status_code=307)
            response = await call_next(request)
            response.headers["x-pathname"] = path
            return response

        if is_turkish_url(path):
            request.state.locale = "tr"
            translated = translate_path(path)
            if translated != path:
                logger.debug("Locale-Rewrite %s → %s", path, translated)
                request.scope["path"] = translated
                request.scope["raw_path"] = translated.encode("utf-8")
                response = await call_next(request)
                response.headers["x-pathname"] = path
                response.headers["x-url-locale"] = "tr"
                return response
        else:
            request.state.locale = cookie_locale(request)

        response = await call_next(request)
        response.headers["x-pathname"] = path
        return response
