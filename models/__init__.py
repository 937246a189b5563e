# =============================================================================
# 📦 models/__init__.py
# -----------------------------------------------------------------------------
# Minimal & korrekt für Alembic
# =============================================================================

from .user import User
from .plan import Plan
from .subscription import Subscription
from .qrcode import QRCode
from .qr_scan import QRScan

__all__ = [
    "User",
    "Plan",
    "Subscription",
    "QRCode",
    "QRScan",
]
