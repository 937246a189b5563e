# =============================================================================
# 📦 QRCode Model – zentrales QR-Datenmodell (SQLAlchemy 2.0)
# =============================================================================

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Optional, TYPE_CHECKING, Dict

from sqlalchemy import (
    String, Boolean, Integer, DateTime, JSON,
    ForeignKey, func, event
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base
from utils.qr_content import QRContent, parse_content

if TYPE_CHECKING:
    from models.qr_scan import QRScan
    from models.user import User


# Alle QR-Typen, die der Generator anbietet
QR_TYPES = (
    "url", "wifi", "vcard", "email", "phone", "sms", "whatsapp", "text",
    "instagram", "twitter", "linkedin", "youtube", "facebook", "event",
    "location", "bitcoin", "app", "pdf", "image", "html", "menu",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite liefert naive Zeitstempel – diese gelten als UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# =============================================================================
# 🧩 QRCode-Datenmodell
# =============================================================================
class QRCode(Base):
    """
    Zentrales QR-Code Modell.
    Der Inhalt liegt als JSON in 'content': entweder ein einfacher String
    oder ein Objekt {encoded, raw, originalUrl}. Gelesen wird er immer über
    get_content(), das die getaggte Variante liefert.
    """
    __tablename__ = "qr_codes"

    # ---------------------------------------------------------------------
    # 🧾 Basisattribute
    # ---------------------------------------------------------------------
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    short_code: Mapped[Optional[str]] = mapped_column(
        String(50), unique=True, nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(255), default="")
    type: Mapped[str] = mapped_column(String(30), nullable=False)  # url, vcard, wifi, ...

    # ---------------------------------------------------------------------
    # 🔗 Beziehungen
    # ---------------------------------------------------------------------
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    user: Mapped["User"] = relationship("User", back_populates="qrcodes")

    scans: Mapped[list["QRScan"]] = relationship(
        "QRScan",
        back_populates="qr",
        cascade="all, delete-orphan",
        lazy="select",
    )

    # ---------------------------------------------------------------------
    # 📄 Inhalt & Darstellung
    # ---------------------------------------------------------------------
    content: Mapped[Any] = mapped_column(JSON, nullable=True)
    settings: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    # ---------------------------------------------------------------------
    # 🚦 Status
    # ---------------------------------------------------------------------
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_dynamic: Mapped[bool] = mapped_column(Boolean, default=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    scan_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # ---------------------------------------------------------------------
    # 🕒 Zeitstempel
    # ---------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=utc_now
    )

    # ---------------------------------------------------------------------
    # 🔎 Hilfsmethoden
    # ---------------------------------------------------------------------
    def get_content(self) -> QRContent:
        return parse_content(self.content)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        expires_at = as_utc(self.expires_at)
        if expires_at is None:
            return False
        return expires_at < (now or utc_now())

    def __repr__(self) -> str:
        return (
            f"<QRCode(id='{self.id}', type='{self.type}', short_code='{self.short_code}', "
            f"active={self.is_active}, scans={self.scan_count})>"
        )


# =============================================================================
# ⚙️ Event: Typ normalisieren
# =============================================================================

@event.listens_for(QRCode, "before_insert")  # type: ignore[misc]
def normalize_type(mapper: Any, connection: Any, target: QRCode) -> None:
    """
    Alte Datensätze kamen mit Großbuchstaben ('APP', 'VCARD') –
    gespeichert wird der Typ immer klein.
    """
    if target.type:
        target.type = target.type.lower()
