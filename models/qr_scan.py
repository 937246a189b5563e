# =============================================================================
# 📊 models/qr_scan.py
# -----------------------------------------------------------------------------
# Enthält das SQLAlchemy-Modell für QR-Code-Scans.
# Jeder Datensatz entspricht einem einzelnen Scan (inkl. Gerät, Zeit, Standort).
# Scans werden nur angelegt, nie geändert.
# =============================================================================

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.qrcode import utc_now


# Maximale Länge des gespeicherten User-Agents
USER_AGENT_MAX_LENGTH = 500


class QRScan(Base):
    __tablename__ = "qr_scans"
    __table_args__ = {
        "mysql_engine": "InnoDB",
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci"
    }

    # ---------------------------------------------------------------------
    # 🔹 Primär- & Fremdschlüssel
    # ---------------------------------------------------------------------
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    qr_code_id = Column(
        String(36), ForeignKey("qr_codes.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # ---------------------------------------------------------------------
    # 🔹 Scan-Informationen
    # ---------------------------------------------------------------------
    ip_address = Column(String(64), nullable=False, default="Unknown")
    user_agent = Column(String(USER_AGENT_MAX_LENGTH), nullable=True)
    country = Column(String(100), nullable=False, default="Unknown")
    city = Column(String(100), nullable=False, default="Unknown")
    device_type = Column(String(20), nullable=False, default="desktop")  # desktop / mobile / tablet
    browser = Column(String(50), nullable=False, default="Unknown")
    os = Column(String(50), nullable=False, default="Unknown")

    # ---------------------------------------------------------------------
    # 🔹 Zeitstempel (UTC-aware)
    # ---------------------------------------------------------------------
    scanned_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)

    # ---------------------------------------------------------------------
    # 🔹 Beziehungen
    # ---------------------------------------------------------------------
    qr = relationship("QRCode", back_populates="scans")

    def __repr__(self):
        return (
            f"<QRScan(id={self.id}, qr_code_id='{self.qr_code_id}', device='{self.device_type}', "
            f"country='{self.country}', scanned_at={self.scanned_at})>"
        )
