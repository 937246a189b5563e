# =============================================================================
# 👤 models/user.py
# Benutzer / Profil (moderne SQLAlchemy 2.0 Architektur)
# =============================================================================

from __future__ import annotations
import uuid
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base

if TYPE_CHECKING:
    from models.qrcode import QRCode
    from models.subscription import Subscription


class User(Base):
    __tablename__ = "users"

    # =========================================================================
    # 🧩 Basisinformationen
    # =========================================================================
    # Die ID stammt vom Auth-Anbieter (Supabase) und ist ein UUID-String
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    email: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(200))

    # =========================================================================
    # 💼 Tarif / Rolle
    # =========================================================================
    plan: Mapped[str] = mapped_column(String(30), default="free")  # free / pro / enterprise
    role: Mapped[str] = mapped_column(String(20), default="user")  # user / admin

    # =========================================================================
    # 🕒 Zeitstempel
    # =========================================================================
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

    # =========================================================================
    # 🔗 Beziehungen
    # =========================================================================
    qrcodes: Mapped[List["QRCode"]] = relationship(
        "QRCode",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select"
    )

    subscription: Mapped[Optional["Subscription"]] = relationship(
        "Subscription",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
    )

    @property
    def is_admin(self) -> bool:
        return (self.role or "").lower() == "admin"

    def __repr__(self) -> str:
        return (
            f"<User(id='{self.id}', email='{self.email}', "
            f"plan='{self.plan}', role='{self.role}')>"
        )
