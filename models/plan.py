# =============================================================================
# 📦 models/plan.py
# -----------------------------------------------------------------------------
# Datenmodell für Tarifpläne (Pricing Plans) in QR Code Shine.
# Enthält Limits (QR-Anzahl, Scans, Laufzeit) und Feature-Flags.
# -1 bedeutet bei allen Limits "unbegrenzt".
# =============================================================================

from sqlalchemy import Column, Integer, String, Float, Boolean, Text
from sqlalchemy.orm import relationship
from database import Base


UNLIMITED = -1


class Plan(Base):
    """
    Repräsentiert ein Tarifmodell (free, pro, enterprise).
    Der Slug ist gleichzeitig der Wert in users.plan.
    """
    __tablename__ = "pricing_plans"

    # 🔹 Primärschlüssel (Slug)
    slug = Column(String(30), primary_key=True)

    name = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)

    # 🔹 Preis
    price = Column(Float, nullable=False, default=0.0)
    currency = Column(String(3), nullable=False, default="USD")

    # 🔹 Limits
    max_qr_codes = Column(Integer, nullable=False, default=5)
    scan_limit = Column(Integer, nullable=False, default=UNLIMITED)
    qr_duration_days = Column(Integer, nullable=True)  # None = unbegrenzte Laufzeit

    # 🔹 Features
    dynamic_qr = Column(Boolean, default=False)
    can_use_logo = Column(Boolean, default=True)
    can_use_frames = Column(Boolean, default=True)
    can_use_analytics = Column(Boolean, default=False)
    api_access = Column(Boolean, default=False)

    sort_order = Column(Integer, default=0)

    # -------------------------------------------------------------------------
    # 🔗 Beziehung zu Abonnements
    # -------------------------------------------------------------------------
    subscriptions = relationship("Subscription", back_populates="plan")

    def allows_more_qr_codes(self, current_count: int) -> bool:
        if self.max_qr_codes == UNLIMITED:
            return True
        return current_count < self.max_qr_codes

    def to_limits(self) -> dict:
        return {
            "plan": self.slug,
            "max_qr_codes": self.max_qr_codes,
            "max_scans_per_month": self.scan_limit,
            "qr_duration_days": self.qr_duration_days,
            "can_use_logo": self.can_use_logo,
            "can_use_frames": self.can_use_frames,
            "can_use_analytics": self.can_use_analytics,
        }

    def __repr__(self):
        return (
            f"<Plan(slug='{self.slug}', "
            f"limit={self.max_qr_codes}, "
            f"price={self.price:.2f} {self.currency})>"
        )
