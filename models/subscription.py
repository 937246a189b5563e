# models/subscription.py
from __future__ import annotations

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base

if TYPE_CHECKING:
    from models.plan import Plan
    from models.user import User


class Subscription(Base):
    """
    Aktives Abonnement eines Benutzers (höchstens eines pro Benutzer).
    """
    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True
    )
    plan_slug: Mapped[str] = mapped_column(ForeignKey("pricing_plans.slug"))
    status: Mapped[str] = mapped_column(String(20), default="active")  # active / cancelled
    current_period_end: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    user: Mapped["User"] = relationship("User", back_populates="subscription")
    plan: Mapped["Plan"] = relationship("Plan", back_populates="subscriptions", lazy="joined")

    @property
    def is_active(self) -> bool:
        return self.status == "active"
