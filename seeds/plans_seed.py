# =============================================================================
# 🌍 seeds/plans_seed.py
# -----------------------------------------------------------------------------
# Initialisiert die Standard-Tarifpläne (free / pro / enterprise).
# Bestehende Tarife werden über den Slug aktualisiert (Upsert).
# =============================================================================

from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import SessionLocal
from models.plan import Plan, UNLIMITED

DEFAULT_PLANS: List[Dict[str, Any]] = [
    {
        "slug": "free",
        "name": "Free",
        "description": "Basic QR code generation",
        "price": 0.0,
        "max_qr_codes": 5,
        "scan_limit": 100,
        "dynamic_qr": False,
        "can_use_analytics": False,
        "api_access": False,
        "sort_order": 1,
    },
    {
        "slug": "pro",
        "name": "Pro",
        "description": "Advanced features for professionals",
        "price": 9.99,
        "max_qr_codes": 50,
        "scan_limit": 10000,
        "dynamic_qr": True,
        "can_use_analytics": True,
        "api_access": False,
        "sort_order": 2,
    },
    {
        "slug": "enterprise",
        "name": "Enterprise",
        "description": "Unlimited access for businesses",
        "price": 29.99,
        "max_qr_codes": UNLIMITED,
        "scan_limit": UNLIMITED,
        "dynamic_qr": True,
        "can_use_analytics": True,
        "api_access": True,
        "sort_order": 3,
    },
]


def seed_plans(db: Session) -> int:
    """Legt fehlende Tarife an und aktualisiert vorhandene. Gibt die Anzahl neuer Tarife zurück."""
    created = 0
    for data in DEFAULT_PLANS:
        plan = db.query(Plan).filter(Plan.slug == data["slug"]).first()
        if plan is None:
            db.add(Plan(currency="USD", **data))
            created += 1
        else:
            for key, value in data.items():
                setattr(plan, key, value)
    db.commit()
    return created


# -----------------------------------------------------------------------------
# 🏁 Direkter Startpunkt
# -----------------------------------------------------------------------------
if __name__ == "__main__":
    print("🚀 Starte Tarif-Initialisierung ...")
    session = SessionLocal()
    try:
        print(f"✅ {seed_plans(session)} neue Tarife angelegt.")
    except SQLAlchemyError as e:
        session.rollback()
        print(f"❌ Fehler beim Initialisieren der Tarife: {e}")
    finally:
        session.close()
    print("🏁 Fertig.")
