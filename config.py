# =============================================================================
# ⚙️ config.py
# -----------------------------------------------------------------------------
# Zentrale Konfiguration für QR Code Shine.
# Alle Werte kommen aus Umgebungsvariablen (.env wird hier geladen).
# =============================================================================

import os
from pathlib import Path

from dotenv import load_dotenv

# 🔹 .env laden (muss vor allen getenv-Aufrufen passieren)
BASE_DIR = Path(__file__).resolve().parent
load_dotenv(dotenv_path=BASE_DIR / ".env")


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


# -------------------------------------------------------------------------
# 🌐 Seite
# -------------------------------------------------------------------------
SITE_URL: str = os.getenv("SITE_URL", "https://qrcodeshine.com").rstrip("/")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# -------------------------------------------------------------------------
# 🍪 Session
# -------------------------------------------------------------------------
SESSION_SECRET: str = os.getenv("SESSION_SECRET", "qrshine-secret-key")
SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "qrshine_session")
SESSION_SAME_SITE: str = os.getenv("SESSION_SAME_SITE", "lax")
SESSION_HTTPS_ONLY: bool = _flag("SESSION_HTTPS_ONLY")

# -------------------------------------------------------------------------
# 📍 IP-Geolocation (ip-api.com, Free-Tier: 45 Anfragen/Minute)
# -------------------------------------------------------------------------
GEO_API_URL: str = os.getenv("GEO_API_URL", "http://ip-api.com/json").rstrip("/")
GEO_TIMEOUT: float = float(os.getenv("GEO_TIMEOUT", "3.0"))
GEO_CACHE_TTL: int = int(os.getenv("GEO_CACHE_TTL", "3600"))
GEO_CACHE_SIZE: int = int(os.getenv("GEO_CACHE_SIZE", "1024"))

# -------------------------------------------------------------------------
# 🌍 Sprachen
# -------------------------------------------------------------------------
LOCALES = ("tr", "en")
DEFAULT_LOCALE: str = os.getenv("DEFAULT_LOCALE", "tr")
LOCALE_COOKIE: str = "NEXT_LOCALE"

# -------------------------------------------------------------------------
# 💼 Tarife
# -------------------------------------------------------------------------
DEFAULT_PLAN: str = "free"
DEFAULT_QR_LIMIT: int = int(os.getenv("DEFAULT_QR_LIMIT", "5"))
